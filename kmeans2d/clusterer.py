import logging
import time

import numpy as np
import pandas as pd
from sklearn.utils import check_random_state

from kmeans2d.metrics import compute_all_metrics, pairwise_distances
from kmeans2d.models import CentroidSet, ClusteringResult, PointSet

logger = logging.getLogger(__name__)

# Substituted for an iteration limit of 0 so every run terminates.
DEFAULT_ITERATION_LIMIT = 10000

_EMPTY_CLUSTER_POLICIES = ("nan", "keep")


def shuffle_indices(n, random_state=None):
    """
    Fisher-Yates shuffle of range(n): walk i from n-1 down to 1 and swap
    position i with a uniformly drawn j in [0, i].
    """
    rs = check_random_state(random_state)
    idx = np.arange(n)
    i = n - 1
    while i > 0:
        j = rs.randint(i + 1)
        idx[i], idx[j] = idx[j], idx[i]
        i -= 1
    return idx


def assign_clusters(xy, centroids, previous=None):
    """
    Label each point with its nearest centroid.

    Scans centroids in index order and only moves on a strict improvement,
    so ties go to the lowest index. NaN distances never win; a point with
    no finite distance keeps its previous label.
    """
    d = pairwise_distances(xy, centroids)
    d = np.where(np.isnan(d), np.inf, d)
    nearest = d.argmin(axis=1)
    found = d[np.arange(len(d)), nearest] < np.finfo(float).max

    if previous is None:
        previous = np.zeros(len(d), dtype=np.intp)
    return np.where(found, nearest, previous).astype(np.intp)


def update_centroids(xy, labels, k):
    """
    Mean position of the members of each cluster, summed in point order.
    An empty cluster has mean 0/0 = NaN.
    """
    counts = np.bincount(labels, minlength=k)
    sum_x = np.bincount(labels, weights=xy[:, 0], minlength=k)
    sum_y = np.bincount(labels, weights=xy[:, 1], minlength=k)
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.column_stack([sum_x / counts, sum_y / counts])


def centroid_moved(new, old, tol=0.0):
    """
    Element-wise "changed" test for centroid coordinates.

    With tol=0 this is exact floating-point inequality; with tol>0 a
    coordinate only counts as changed when it moved by more than tol.
    NaN always counts as changed.
    """
    with np.errstate(invalid="ignore"):
        return (new != old) & ~(np.abs(new - old) <= tol)


def _as_point_set(points):
    if isinstance(points, PointSet):
        return points
    if isinstance(points, pd.DataFrame):
        cols = ["x", "y"] if {"x", "y"} <= set(points.columns) else list(points.columns[:2])
        return PointSet(points[cols].to_numpy(dtype=float))
    return PointSet(np.asarray(points, dtype=float))


def _init_centroids(xy, k, init, random_state):
    if isinstance(init, str):
        if init != "shuffle":
            raise ValueError(f"Unknown initialization method: {init!r}")
        idx = shuffle_indices(len(xy), random_state)[:k]
        return xy[idx].copy()

    centroids = np.array(init, dtype=float)
    if centroids.shape != (k, 2):
        raise ValueError(f"init must have shape ({k}, 2), got {centroids.shape}")
    return centroids


def run_kmeans(
    points,
    k,
    iteration_limit=0,
    *,
    random_state=None,
    init="shuffle",
    tol=0.0,
    empty_cluster="nan",
):
    """
    Lloyd's K-means on 2D points.

    Args:
      points          : PointSet, (n, 2) array or DataFrame. A PointSet
                        has its `cluster` labels rewritten in place.
      k               : number of clusters, 1 <= k <= n (ValueError otherwise)
      iteration_limit : maximum iterations; 0 means DEFAULT_ITERATION_LIMIT
      random_state    : None, int seed or RandomState used for seeding
      init            : "shuffle" (first k points of a Fisher-Yates
                        shuffle) or an explicit (k, 2) array
      tol             : convergence tolerance, 0.0 for exact equality
      empty_cluster   : "nan" lets an empty cluster's centroid become NaN,
                        "keep" leaves it where it was

    Returns:
      ClusteringResult with final labels, centroids, iteration count and
      elapsed milliseconds. Hitting the limit is not an error; the result
      then has converged=False.
    """
    points = _as_point_set(points)
    if k < 1:
        raise ValueError("k must be >= 1")
    if k > len(points):
        raise ValueError(f"Need at least k points (n={len(points)}, k={k})")
    if iteration_limit < 0:
        raise ValueError("iteration_limit must be >= 0")
    if empty_cluster not in _EMPTY_CLUSTER_POLICIES:
        raise ValueError(f"Unknown empty_cluster policy: {empty_cluster!r}")

    start = time.perf_counter()
    limit = iteration_limit or DEFAULT_ITERATION_LIMIT
    xy = points.xy
    logger.debug("Running k-means on %d points, k=%d, limit=%d", len(xy), k, limit)

    centroids = _init_centroids(xy, k, init, random_state)
    labels = assign_clusters(xy, centroids, points.cluster)

    changed = True
    iterations = 0
    while changed and iterations < limit:
        new = update_centroids(xy, labels, k)

        empty = np.bincount(labels, minlength=k) == 0
        if empty.any():
            logger.debug("Iteration %d: empty clusters %s", iterations, np.flatnonzero(empty).tolist())
            if empty_cluster == "keep":
                new[empty] = centroids[empty]

        moved = centroid_moved(new, centroids, tol)
        changed = bool(moved.any())
        centroids = np.where(moved, new, centroids)

        if changed:
            labels = assign_clusters(xy, centroids, labels)

        iterations += 1

    points.cluster = labels
    elapsed_ms = (time.perf_counter() - start) * 1000.0
    converged = not changed

    logger.info(
        "k-means finished after %d iterations (%.3f ms, converged=%s)",
        iterations, elapsed_ms, converged,
    )
    return ClusteringResult(
        points=points,
        centroids=CentroidSet(centroids),
        iterations=iterations,
        elapsed_ms=elapsed_ms,
        converged=converged,
    )


class LloydKMeans:
    def __init__(
        self,
        n_clusters=2,
        max_iter=0,
        init="shuffle",
        tol=0.0,
        empty_cluster="nan",
        random_state=None,
    ):
        self.n_clusters = n_clusters
        self.max_iter = max_iter
        self.init = init
        self.tol = tol
        self.empty_cluster = empty_cluster
        self.random_state = random_state

    def _validate_input(self, X):
        if isinstance(X, PointSet):
            return X
        if isinstance(X, (pd.DataFrame, np.ndarray)):
            return _as_point_set(X)
        raise ValueError("Input must be PointSet, numpy array or pandas DataFrame")

    def fit(self, X):
        points = self._validate_input(X)
        self.result_ = run_kmeans(
            points,
            self.n_clusters,
            self.max_iter,
            random_state=self.random_state,
            init=self.init,
            tol=self.tol,
            empty_cluster=self.empty_cluster,
        )
        self.X_ = points.xy
        self.labels_ = self.result_.points.cluster
        self.centroids_ = self.result_.centroids.xy
        self.n_iter_ = self.result_.iterations
        self.elapsed_ms_ = self.result_.elapsed_ms
        self.converged_ = self.result_.converged
        return self

    def fit_predict(self, X):
        return self.fit(X).labels_

    def get_virtual_centroids(self):
        """Centroid positions as computed by the last fit (may hold NaN)."""
        return np.array(self.centroids_)

    def get_real_centroids(self):
        """
        Map each virtual centroid to the nearest actual data point.
        A NaN centroid maps to a NaN row.
        """
        real = []
        for vc in self.get_virtual_centroids():
            if np.isnan(vc).any():
                real.append(np.full(2, np.nan))
                continue
            dists = np.linalg.norm(self.X_ - vc, axis=1)
            real.append(self.X_[np.argmin(dists)])
        return np.vstack(real)

    def get_labels(self):
        return self.labels_

    def get_metrics(self):
        return compute_all_metrics(self.X_, self.labels_, self.centroids_)
