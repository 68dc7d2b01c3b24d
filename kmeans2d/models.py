from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass
class Point:
    x: float
    y: float
    cluster: int = 0


@dataclass
class Centroid:
    x: float
    y: float
    id: int


class PointSet:
    """
    Ordered 2D points stored column-wise.

    `xy` has shape (n, 2); `cluster` holds the label of every point and is
    rewritten in place by the clustering engine.
    """

    def __init__(self, xy, cluster=None):
        xy = np.asarray(xy, dtype=np.float64)
        if xy.size == 0:
            xy = xy.reshape(0, 2)
        if xy.ndim != 2 or xy.shape[1] != 2:
            raise ValueError(f"xy must have shape (n, 2), got {xy.shape}")
        self.xy = xy
        if cluster is None:
            cluster = np.zeros(len(xy), dtype=np.intp)
        self.cluster = np.asarray(cluster, dtype=np.intp)
        if self.cluster.shape != (len(xy),):
            raise ValueError("cluster must hold one label per point")

    @classmethod
    def from_points(cls, points) -> "PointSet":
        points = list(points)
        xy = [(p.x, p.y) for p in points]
        return cls(xy, [p.cluster for p in points])

    @property
    def x(self) -> np.ndarray:
        return self.xy[:, 0]

    @property
    def y(self) -> np.ndarray:
        return self.xy[:, 1]

    def __len__(self) -> int:
        return len(self.xy)

    def __getitem__(self, i: int) -> Point:
        return Point(float(self.xy[i, 0]), float(self.xy[i, 1]), int(self.cluster[i]))

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    def copy(self) -> "PointSet":
        return PointSet(self.xy.copy(), self.cluster.copy())

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"x": self.x, "y": self.y, "cluster": self.cluster})


class CentroidSet:
    """k centroids; the id of each centroid is its row index."""

    def __init__(self, xy):
        xy = np.asarray(xy, dtype=np.float64)
        if xy.ndim != 2 or xy.shape[1] != 2:
            raise ValueError(f"xy must have shape (k, 2), got {xy.shape}")
        self.xy = xy

    @property
    def ids(self) -> np.ndarray:
        return np.arange(len(self.xy))

    def __len__(self) -> int:
        return len(self.xy)

    def __getitem__(self, i: int) -> Centroid:
        return Centroid(float(self.xy[i, 0]), float(self.xy[i, 1]), int(i))

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(self.xy, columns=["x", "y"])
        df.index.name = "cluster"
        return df


@dataclass(frozen=True)
class ClusteringResult:
    points: PointSet
    centroids: CentroidSet
    iterations: int
    elapsed_ms: float
    converged: bool

    @property
    def k(self) -> int:
        return len(self.centroids)
