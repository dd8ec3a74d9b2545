# File: backend/tests/test_metrics.py
# Version: v0.1.0
"""
Tests for the angular distance metrics.
"""

from __future__ import annotations

import math

import pytest

from backend.app.core.models.conformation import Conformation
from backend.app.core.neighborhood import metrics as mt


def conf(*angles: float) -> Conformation:
    return Conformation.from_angles(angles)


def test_angle_difference_wraps_around_circle():
    assert math.isclose(mt.angle_difference(0.1, 2 * math.pi - 0.1), 0.2, abs_tol=1e-12)
    assert math.isclose(mt.angle_difference(-math.pi + 0.05, math.pi - 0.05), 0.1, abs_tol=1e-12)
    assert math.isclose(mt.angle_difference(0.0, math.pi), math.pi)
    assert mt.angle_difference(1.0, 1.0) == 0.0


@pytest.mark.parametrize("metric", [mt.AngleDifferenceMetric(), mt.RmsdAngleDifferenceMetric()])
def test_distance_to_self_is_zero(metric):
    a = conf(0.3, -2.0, 3.1, 1.5)
    assert metric.distance(a, a) == 0.0
    assert mt.minimum_distance(metric, a) == 0.0
    assert metric.maximum_distance(a) == math.pi


def test_mean_and_rmsd_values():
    a = conf(0.0, 0.0, 0.0)
    b = conf(0.3, 0.0, 0.0)
    assert math.isclose(mt.AngleDifferenceMetric().distance(a, b), 0.1, rel_tol=1e-12)
    assert math.isclose(mt.RmsdAngleDifferenceMetric().distance(a, b), math.sqrt(0.09 / 3), rel_tol=1e-12)


def test_rmsd_not_below_mean():
    mean_m = mt.AngleDifferenceMetric()
    rmsd_m = mt.RmsdAngleDifferenceMetric()
    pairs = [
        (conf(0.1, 2.0, -1.0, 3.0), conf(0.4, -2.5, -1.2, 0.0)),
        (conf(1.0, 1.0), conf(1.5, 3.0)),
        (conf(-3.0, 0.0, 0.5), conf(3.0, 0.2, 0.1)),
    ]
    for a, b in pairs:
        assert rmsd_m.distance(a, b) >= mean_m.distance(a, b) - 1e-12


def test_rmsd_equals_mean_when_differences_equal():
    a = conf(0.0, 1.0, -1.0)
    b = conf(0.25, 1.25, -0.75)
    assert math.isclose(
        mt.RmsdAngleDifferenceMetric().distance(a, b),
        mt.AngleDifferenceMetric().distance(a, b),
        rel_tol=1e-12,
    )


def test_rmsd_penalizes_one_large_difference():
    base = conf(0.0, 0.0, 0.0, 0.0)
    one_large = conf(0.8, 0.0, 0.0, 0.0)
    many_small = conf(0.2, 0.2, 0.2, 0.2)
    mean_m = mt.AngleDifferenceMetric()
    rmsd_m = mt.RmsdAngleDifferenceMetric()
    assert math.isclose(mean_m.distance(base, one_large), mean_m.distance(base, many_small))
    assert rmsd_m.distance(base, one_large) > rmsd_m.distance(base, many_small)


def test_distance_bounded_by_pi():
    metric = mt.AngleDifferenceMetric()
    a = conf(0.0, -math.pi / 2)
    b = conf(math.pi, math.pi / 2)
    assert math.isclose(metric.distance(a, b), math.pi)


def test_buffers_reused_and_resized():
    metric = mt.AngleDifferenceMetric()
    assert metric.distance(conf(0.0, 0.0), conf(0.2, 0.2)) == pytest.approx(0.2)
    # Different size resizes the scratch buffers
    assert metric.distance(conf(0.0, 0.0, 0.0), conf(0.3, 0.0, 0.0)) == pytest.approx(0.1)
    # Inputs are never written to
    a = conf(1.0, 2.0)
    metric.distance(a, conf(0.0, 0.0))
    assert list(a.angles) == [1.0, 2.0]


def test_mismatched_sizes_rejected():
    with pytest.raises(ValueError):
        mt.AngleDifferenceMetric().distance(conf(0.0), conf(0.0, 1.0))


def test_is_neighbors_inclusive_threshold():
    metric = mt.AngleDifferenceMetric()
    a = conf(0.0, 0.0)
    b = conf(0.5, 0.0)
    assert mt.is_neighbors(metric, a, b, 0.25)
    assert not mt.is_neighbors(metric, a, b, 0.2)


def test_get_metric_registry():
    assert isinstance(mt.get_metric("mean"), mt.AngleDifferenceMetric)
    assert isinstance(mt.get_metric("RMSD"), mt.RmsdAngleDifferenceMetric)
    assert mt.get_metric("angle_difference", maximum=1.0).maximum_distance(conf(0.0)) == 1.0
    with pytest.raises(ValueError):
        mt.get_metric("euclidean")
