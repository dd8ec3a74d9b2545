# File: backend/tests/test_neighbors.py
# Version: v0.1.0
"""
Tests for the all-pairs neighbor graph and its count statistics.
"""

from __future__ import annotations

import logging
import math
import random

from backend.app.core.models.conformation import Conformation
from backend.app.core.neighborhood.metrics import AngleDifferenceMetric, RmsdAngleDifferenceMetric
from backend.app.core.neighborhood.neighbors import calculate_neighbors, neighbor_measures


class TableMetric:
    """Distance looked up from a table keyed by conformation identity."""
    name = "table"

    def __init__(self, confs, table, default):
        self._index = {id(c): i for i, c in enumerate(confs)}
        self._table = table
        self._default = default
        self.calls = 0

    def distance(self, first, second):
        self.calls += 1
        i, j = sorted((self._index[id(first)], self._index[id(second)]))
        return self._table.get((i, j), self._default)

    def maximum_distance(self, conformation):
        return math.pi


def _confs(n: int, n_angles: int = 6, seed: int = 7):
    rnd = random.Random(seed)
    return [
        Conformation.from_angles(rnd.uniform(-math.pi, math.pi) for _ in range(n_angles))
        for _ in range(n)
    ]


def test_example_two_clusters():
    confs = _confs(4)
    metric = TableMetric(confs, {(0, 1): 0.05, (2, 3): 0.05}, default=1.0)
    assert calculate_neighbors(confs, metric, 0.1) == [[1], [0], [3], [2]]
    assert metric.calls == 6


def test_empty_and_single_input_do_not_call_metric():
    metric = TableMetric([], {}, default=0.0)
    assert calculate_neighbors([], metric, 1.0) == []
    one = _confs(1)
    metric = TableMetric(one, {}, default=0.0)
    assert calculate_neighbors(one, metric, 1.0) == [[]]
    assert metric.calls == 0


def test_symmetric_ascending_no_self_loops():
    confs = _confs(40, seed=11)
    for metric in (AngleDifferenceMetric(), RmsdAngleDifferenceMetric()):
        nb = calculate_neighbors(confs, metric, 1.4)
        assert len(nb) == len(confs)
        for i, row in enumerate(nb):
            assert i not in row
            assert row == sorted(set(row))
            for j in row:
                assert i in nb[j]


def test_threshold_is_inclusive():
    a = Conformation.from_angles([0.0, 0.0])
    b = Conformation.from_angles([0.5, 0.0])
    assert calculate_neighbors([a, b], AngleDifferenceMetric(), 0.25) == [[1], [0]]


def test_progress_logged_only_for_large_runs(caplog):
    confs = _confs(30)
    metric = AngleDifferenceMetric()
    with caplog.at_level(logging.INFO, logger="backend.app.core.neighborhood.neighbors"):
        quiet = calculate_neighbors(confs, metric, 1.0)
    assert not caplog.records

    with caplog.at_level(logging.INFO, logger="backend.app.core.neighborhood.neighbors"):
        loud = calculate_neighbors(confs, metric, 1.0, progress_min_pairs=100)
    messages = [r.getMessage() for r in caplog.records]
    progress = [m for m in messages if "progress" in m]
    assert 10 <= len(progress) <= 21
    assert "Neighbors done" in messages[-1]
    # Reporting never changes the result
    assert loud == quiet


def test_measures_degenerate_cases():
    m0 = neighbor_measures([])
    assert (m0.models, m0.minimum, m0.maximum, m0.average) == (0, 0, 0, 0.0)

    m1 = neighbor_measures([[]])
    assert m1.minimum == m1.maximum == 0
    assert m1.average == 0.0
    assert m1.average_percent == 0.0


def test_measures_report_true_minimum():
    # Max grows on every row, so the minimum must still track row 0.
    nb = [[1], [0, 2], [1, 3, 4], [2, 4], [2, 3]]
    m = neighbor_measures(nb)
    assert m.models == 5
    assert m.minimum == 1
    assert m.maximum == 3
    assert math.isclose(m.average, 10 / 5)
    assert math.isclose(m.minimum_percent, 25.0)
    assert math.isclose(m.maximum_percent, 75.0)
    assert math.isclose(m.average_percent, 50.0)
