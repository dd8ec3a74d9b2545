# File: backend/app/core/neighborhood/neighbors.py
# Version: v0.2.0

"""
All-pairs neighbor graph over sampled conformations.

Every unordered pair (i < j) is evaluated exactly once. Because i grows in the
outer loop and j grows in the inner loop, both append sources of a list are
increasing, so every neighbor list comes out ascending without sorting.

Large runs (>= 2.5M pairs by default) log progress every ~5% of pairs plus a
completion line. Logging is observational only.

v0.2.0
- `neighbor_measures` reports the true minimum neighbor count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from backend.app.core.models.conformation import Conformation
from backend.app.core.neighborhood.metrics import DistanceMetric

logger = logging.getLogger(__name__)

PROGRESS_MIN_PAIRS = 2_500_000
PROGRESS_STEPS = 20


def calculate_neighbors(
    conformations: Sequence[Conformation],
    metric: DistanceMetric,
    max_distance: float,
    *,
    progress_min_pairs: int = PROGRESS_MIN_PAIRS,
) -> List[List[int]]:
    """
    Return, for every index i, the ascending indices j != i with
    distance(i, j) <= max_distance.
    """
    n = len(conformations)
    neighbors: List[List[int]] = [[] for _ in range(n)]
    if n < 2:
        return neighbors

    total = n * (n - 1) // 2
    report = total >= progress_min_pairs
    step = max(1, total // PROGRESS_STEPS)
    next_milestone = step
    done = 0

    if report:
        logger.info("Neighbors: %d conformations, %d pairs (max_distance=%.4f)…", n, total, max_distance)

    for i in range(n - 1):
        first = conformations[i]
        row = neighbors[i]
        for j in range(i + 1, n):
            if metric.distance(first, conformations[j]) <= max_distance:
                row.append(j)
                neighbors[j].append(i)

        if report:
            done += n - 1 - i
            if done >= next_milestone:
                logger.info("  neighbors progress: %d/%d pairs (%.0f%%)", done, total, 100.0 * done / total)
                while next_milestone <= done:
                    next_milestone += step

    if report:
        edges = sum(len(r) for r in neighbors) // 2
        logger.info("Neighbors done: %d pairs evaluated, %d edges", total, edges)
    return neighbors


# --------------------------
# Summary statistics
# --------------------------

@dataclass(frozen=True)
class NeighborMeasures:
    models: int
    minimum: int
    maximum: int
    average: float
    minimum_percent: float
    maximum_percent: float
    average_percent: float


def neighbor_measures(neighbors: Sequence[Sequence[int]]) -> NeighborMeasures:
    """
    Min / max / average neighbor count, also as a percentage of the N-1
    possible neighbors per model.
    """
    n = len(neighbors)
    if n == 0:
        return NeighborMeasures(0, 0, 0, 0.0, 0.0, 0.0, 0.0)

    counts = [len(r) for r in neighbors]
    minimum = min(counts)
    maximum = max(counts)
    average = sum(counts) / n
    # Single model: nothing to compare against, percentages use base 1.
    base = (n - 1) / 100.0 if n > 1 else 1.0

    return NeighborMeasures(
        models=n,
        minimum=minimum,
        maximum=maximum,
        average=average,
        minimum_percent=minimum / base,
        maximum_percent=maximum / base,
        average_percent=average / base,
    )


__all__ = [
    "PROGRESS_MIN_PAIRS",
    "calculate_neighbors",
    "NeighborMeasures",
    "neighbor_measures",
]
