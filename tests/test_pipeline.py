import logging
import re

import numpy as np
import pytest

from kmeans2d.config import RunConfig
from kmeans2d.models import CentroidSet, ClusteringResult, PointSet
from kmeans2d.pipeline import (
    K_TOO_LARGE_MESSAGE,
    cluster_request,
    format_summary,
    generate_points,
    run_request,
)

SUMMARY = re.compile(r"^<p>Found solution after <b>(\d+) iterations \((\d+\.\d{3}) milliseconds\)</b></p>")


@pytest.mark.parametrize("k,points", [(0, 100), (5, 0), (0, 0), (-1, 10)])
def test_incomplete_request_is_noop(k, points):
    assert run_request(RunConfig(k=k, points=points)) == ""


def test_k_larger_than_points_is_rejected():
    out = run_request(RunConfig(k=11, points=10))
    assert out == K_TOO_LARGE_MESSAGE
    assert "K needs to be <= number of points" in out


def test_valid_request_returns_summary_and_svg():
    out = run_request(RunConfig(k=5, points=100, seed=1))

    m = SUMMARY.match(out)
    assert m is not None
    assert 1 <= int(m.group(1)) <= 10000
    svg = out[m.end():]
    assert svg.startswith("<svg")
    assert svg.count('id="point-') == 100
    assert svg.count('id="centroid-') == 5


def test_iteration_limit_is_respected():
    out = run_request(RunConfig(k=5, points=200, limit=1, seed=2))
    assert SUMMARY.match(out).group(1) == "1"


def test_format_summary():
    result = ClusteringResult(
        points=PointSet([(0, 0)]),
        centroids=CentroidSet([(0, 0)]),
        iterations=3,
        elapsed_ms=1.23456,
        converged=True,
    )
    assert format_summary(result) == "<p>Found solution after <b>3 iterations (1.235 milliseconds)</b></p>"


def test_generate_points_picks_distribution():
    uniform = generate_points(RunConfig(k=1, points=2000), random_state=0)
    assert (uniform.xy >= 0).all() and (uniform.xy < 70).all()

    normal_cfg = RunConfig(k=1, points=2000, devx=1, devy=1, meanx=500, meany=-500)
    normal = generate_points(normal_cfg, random_state=0)
    assert pytest.approx(normal.x.mean(), abs=0.2) == 500
    assert pytest.approx(normal.y.mean(), abs=0.2) == -500


def test_cluster_request_seeded_runs_match():
    cfg = RunConfig(k=4, points=120, seed=17)
    a, _ = cluster_request(cfg)
    b, _ = cluster_request(cfg)

    assert np.array_equal(a.points.xy, b.points.xy)
    assert np.array_equal(a.points.cluster, b.points.cluster)
    assert a.iterations == b.iterations


def test_stats_are_logged(caplog):
    with caplog.at_level(logging.INFO, logger="kmeans2d.pipeline"):
        run_request(RunConfig(k=3, points=30, seed=3), stats=True)
    assert any("Cluster summary" in r.getMessage() for r in caplog.records)
