# File: backend/app/core/neighborhood/metrics.py
# Version: v0.2.0

"""
Distance metrics between conformations, defined on torsion angles.

Both metrics share the same primitive: the minimal difference of two angles on
the circle, a value in [0, pi]. They differ in how the per-angle differences are
aggregated:

- AngleDifferenceMetric: arithmetic mean.
- RmsdAngleDifferenceMetric: root mean square. One angle off by 30 degrees is
  more distant than thirty angles off by one degree each.

For the same pair, RMSD >= mean (power-mean inequality), with equality iff all
per-angle differences are equal.

Each metric instance owns two fixed-size numpy buffers that are reused across
calls; they are only reallocated when the conformation size changes. Instances
are therefore not safe to share between threads.

v0.2.0
- Metrics are plain classes satisfying the `DistanceMetric` protocol; the
  all-pairs loop lives in `neighbors.py` and only depends on that protocol.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Protocol

import numpy as np

from backend.app.core.models.conformation import Conformation

TWO_PI = 2.0 * math.pi


class DistanceMetric(Protocol):
    name: str

    def distance(self, first: Conformation, second: Conformation) -> float:
        ...

    def maximum_distance(self, conformation: Conformation) -> float:
        ...


def angle_difference(a: float, b: float) -> float:
    """Minimal difference between two angles (radians), in [0, pi]."""
    diff = abs(a - b) % TWO_PI
    if diff > math.pi:
        diff = TWO_PI - diff
    return diff


def minimum_distance(metric: DistanceMetric, conformation: Conformation) -> float:
    """Two conformations at distance 0 are identical under any metric."""
    return 0.0


def is_neighbors(
    metric: DistanceMetric,
    first: Conformation,
    second: Conformation,
    max_distance: float,
) -> bool:
    return metric.distance(first, second) <= max_distance


class AngleDifferenceBuffers:
    """
    Two scratch arrays holding per-angle circular differences.
    """

    def __init__(self) -> None:
        self._diff = np.empty(0, dtype="float64")
        self._scratch = np.empty(0, dtype="float64")

    def differences(self, first: Conformation, second: Conformation) -> np.ndarray:
        n = first.size()
        if second.size() != n:
            raise ValueError(f"conformation sizes differ: {n} vs {second.size()}")
        if self._diff.shape[0] != n:
            self._diff = np.empty(n, dtype="float64")
            self._scratch = np.empty(n, dtype="float64")

        diff, scratch = self._diff, self._scratch
        np.subtract(first.angles, second.angles, out=diff)
        np.abs(diff, out=diff)
        np.mod(diff, TWO_PI, out=diff)
        np.subtract(TWO_PI, diff, out=scratch)
        np.minimum(diff, scratch, out=diff)
        return diff


class AngleDifferenceMetric:
    """Mean of the per-angle differences."""

    name = "angle_difference"

    def __init__(self, maximum: float = math.pi) -> None:
        self._maximum = float(maximum)
        self._buffers = AngleDifferenceBuffers()

    def distance(self, first: Conformation, second: Conformation) -> float:
        diff = self._buffers.differences(first, second)
        if diff.size == 0:
            return 0.0
        return float(diff.mean())

    def maximum_distance(self, conformation: Conformation) -> float:
        return self._maximum


class RmsdAngleDifferenceMetric:
    """Root mean square of the per-angle differences."""

    name = "rmsd_angle_difference"

    def __init__(self, maximum: float = math.pi) -> None:
        self._maximum = float(maximum)
        self._buffers = AngleDifferenceBuffers()

    def distance(self, first: Conformation, second: Conformation) -> float:
        diff = self._buffers.differences(first, second)
        if diff.size == 0:
            return 0.0
        np.multiply(diff, diff, out=diff)
        return math.sqrt(float(diff.mean()))

    def maximum_distance(self, conformation: Conformation) -> float:
        return self._maximum


# --------------------------
# Registry
# --------------------------

METRICS: Dict[str, Callable[..., DistanceMetric]] = {
    AngleDifferenceMetric.name: AngleDifferenceMetric,
    RmsdAngleDifferenceMetric.name: RmsdAngleDifferenceMetric,
}

_ALIASES = {
    "mean": AngleDifferenceMetric.name,
    "rmsd": RmsdAngleDifferenceMetric.name,
}


def get_metric(name: str, *, maximum: float = math.pi) -> DistanceMetric:
    """
    Instantiate a metric by name ("angle_difference", "rmsd_angle_difference",
    or the short aliases "mean" / "rmsd").
    """
    key = _ALIASES.get(name.strip().lower(), name.strip().lower())
    try:
        factory = METRICS[key]
    except KeyError:
        raise ValueError(f"Unknown distance metric: {name!r} (known: {', '.join(sorted(METRICS))})") from None
    return factory(maximum=maximum)


__all__ = [
    "DistanceMetric",
    "angle_difference",
    "minimum_distance",
    "is_neighbors",
    "AngleDifferenceBuffers",
    "AngleDifferenceMetric",
    "RmsdAngleDifferenceMetric",
    "METRICS",
    "get_metric",
]
