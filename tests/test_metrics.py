# test_metrics.py

import numpy as np
import pytest

import kmeans2d.metrics as metrics
from kmeans2d.models import CentroidSet, ClusteringResult, PointSet


def test_euclidean_distance_3_4_5():
    assert metrics.euclidean_distance(0.0, 0.0, 3.0, 4.0) == 5.0
    assert metrics.euclidean_distance(1.5, -2.0, 1.5, -2.0) == 0.0


def test_pairwise_distances_shape_and_nan():
    xy = np.array([[0.0, 0.0], [3.0, 4.0]])
    cents = np.array([[0.0, 0.0], [np.nan, np.nan]])
    d = metrics.pairwise_distances(xy, cents)
    assert d.shape == (2, 2)
    assert d[1, 0] == 5.0
    assert np.isnan(d[:, 1]).all()


def test_wcss_per_cluster_and_unbalanced():
    X = np.array([[0,0],[1,1],[10,10],[11,11]])
    labels = np.array([0,0,1,1])
    cents  = np.array([[0.5,0.5],[10.5,10.5]])
    wcss = metrics.compute_wcss_per_cluster(X, labels, cents)
    # two points per cluster, each 0.25 + 0.25 away in squared distance
    assert pytest.approx(wcss[0]) == 1.0
    assert pytest.approx(wcss[1]) == 1.0
    assert pytest.approx(metrics.compute_inertia(X, labels, cents)) == 2.0

    ub1 = metrics.compute_unbalanced_factor(np.array([0,0,1]))
    # largest cluster=2, smallest=1 → factor=2.0
    assert pytest.approx(ub1) == 2.0
    # single cluster → nan
    ub2 = metrics.compute_unbalanced_factor(np.array([0,0,0]))
    assert np.isnan(ub2)


def test_population_counts_empty_clusters():
    pop = metrics.cluster_population_distribution(np.array([0, 2, 2]), 4)
    assert pop == {0: 1, 1: 0, 2: 2, 3: 0}


def test_average_distance_nan_for_empty_cluster():
    X = np.array([[0.0, 0.0], [0.0, 2.0]])
    labels = np.array([0, 0])
    cents = np.array([[0.0, 1.0], [5.0, 5.0]])
    avg = metrics.average_distance_to_centroids(X, labels, cents)
    assert avg[0] == 1.0
    assert np.isnan(avg[1])


def test_summarize_clusters_one_row_per_cluster():
    points = PointSet([(0, 0), (0, 2), (10, 10)], [0, 0, 1])
    result = ClusteringResult(
        points=points,
        centroids=CentroidSet([(0, 1), (10, 10)]),
        iterations=2,
        elapsed_ms=0.5,
        converged=True,
    )
    df = metrics.summarize_clusters(result)

    assert list(df.columns) == ["x", "y", "population", "avg_distance", "wcss"]
    assert df.index.name == "cluster"
    assert df["population"].tolist() == [2, 1]
    assert df.loc[0, "wcss"] == pytest.approx(2.0)
    assert df.loc[1, "avg_distance"] == 0.0


def test_wcss_and_unbalanced_with_empty_cluster():
    X = np.array([[0.0, 0.0], [2.0, 0.0], [5.0, 5.0]])
    labels = np.array([0, 0, 2])
    cents = np.array([[1.0, 0.0], [np.nan, np.nan], [5.0, 5.0]])

    assert metrics.compute_wcss_per_cluster(X, labels, cents) == {0: 2.0, 1: 0.0, 2: 0.0}
    # the empty cluster is not the smallest one
    assert metrics.compute_unbalanced_factor(labels) == 2.0
