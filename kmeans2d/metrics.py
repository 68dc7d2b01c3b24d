import math

import numpy as np
import pandas as pd
from scipy.spatial.distance import cdist


def euclidean_distance(x1, y1, x2, y2):
    """Straight-line distance between (x1, y1) and (x2, y2)."""
    dx = x1 - x2
    dy = y1 - y2
    return math.sqrt(dx * dx + dy * dy)


def pairwise_distances(xy, centroids):
    """
    Euclidean distance of every point to every centroid.

    Returns an (n_points, n_centroids) array. NaN centroids give NaN
    distances.
    """
    return cdist(np.asarray(xy, dtype=float), np.asarray(centroids, dtype=float), "euclidean")


def cluster_population_distribution(labels, k):
    counts = np.bincount(np.asarray(labels), minlength=k)
    return {idx: int(c) for idx, c in enumerate(counts)}


def average_distance_to_centroids(X, labels, centroids):
    distances = {}
    for idx, center in enumerate(centroids):
        pts = X[labels == idx]
        if len(pts) > 0:
            distances[idx] = float(np.mean(np.linalg.norm(pts - center, axis=1)))
        else:
            distances[idx] = np.nan
    return distances


def compute_wcss_per_cluster(X, labels, centroids):
    """Squared distances of the members to their centroid, summed per cluster index (0.0 when empty)."""
    X = np.asarray(X, dtype=float)
    labels = np.asarray(labels)
    centroids = np.asarray(centroids, dtype=float)
    sq = np.sum((X - centroids[labels]) ** 2, axis=1)
    totals = np.bincount(labels, weights=sq, minlength=len(centroids))
    return {idx: float(t) for idx, t in enumerate(totals)}


def compute_inertia(X, labels, centroids):
    return float(sum(compute_wcss_per_cluster(X, labels, centroids).values()))


def compute_unbalanced_factor(labels):
    """Population of the largest cluster over the smallest non-empty one; NaN below two clusters."""
    counts = np.bincount(np.asarray(labels))
    counts = counts[counts > 0]
    if len(counts) < 2:
        return float("nan")
    return float(counts.max() / counts.min())


def compute_all_metrics(X, labels, centroids):
    k = len(centroids)
    return {
        "inertia": compute_inertia(X, labels, centroids),
        "population": cluster_population_distribution(labels, k),
        "avg_distance": average_distance_to_centroids(X, labels, centroids),
        "wcss": compute_wcss_per_cluster(X, labels, centroids),
        "unbalanced_factor": compute_unbalanced_factor(labels),
    }


def summarize_clusters(result):
    """
    One row per cluster of a ClusteringResult: centroid position,
    population, mean distance to the centroid and WCSS.
    """
    X = result.points.xy
    labels = result.points.cluster
    cents = result.centroids.xy
    m = compute_all_metrics(X, labels, cents)

    df = result.centroids.to_frame()
    df["population"] = [m["population"][i] for i in range(len(cents))]
    df["avg_distance"] = [m["avg_distance"][i] for i in range(len(cents))]
    df["wcss"] = [m["wcss"][i] for i in range(len(cents))]
    return df
