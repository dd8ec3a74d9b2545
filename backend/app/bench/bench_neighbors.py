# File: backend/app/bench/bench_neighbors.py
# Version: v0.1.0

"""
Micro-benchmarks for the neighbor graph hot path.

Usage:
    PYTHONPATH=$(pwd) python backend/app/bench/bench_neighbors.py

What it measures:
- Single metric evaluations (mean / RMSD) on one pair
- The all-pairs pass over N random conformations for both metrics

Tune N and the number of angles to your real workloads.
"""

from __future__ import annotations

import math
import random
import time
from statistics import mean

from backend.app.core.models.conformation import Conformation
from backend.app.core.neighborhood.metrics import AngleDifferenceMetric, RmsdAngleDifferenceMetric
from backend.app.core.neighborhood.neighbors import calculate_neighbors, neighbor_measures


def rand_conformation(n_angles: int) -> Conformation:
    return Conformation.from_angles(random.uniform(-math.pi, math.pi) for _ in range(n_angles))


def timeit(fn, repeat=5):
    times = []
    for _ in range(repeat):
        t0 = time.perf_counter()
        fn()
        times.append(time.perf_counter() - t0)
    return min(times), mean(times)


def bench_metric(metric, n_angles=40, calls=20000):
    a = rand_conformation(n_angles)
    b = rand_conformation(n_angles)
    def run():
        for _ in range(calls):
            _ = metric.distance(a, b)
    return timeit(run)


def bench_all_pairs(metric, n_conformations=400, n_angles=40, max_distance=1.2):
    confs = [rand_conformation(n_angles) for _ in range(n_conformations)]
    def run():
        _ = calculate_neighbors(confs, metric, max_distance)
    best, avg = timeit(run, repeat=3)
    m = neighbor_measures(calculate_neighbors(confs, metric, max_distance))
    return best, avg, m


def main():
    random.seed(1337)
    print("== neighbor graph micro-bench ==")
    for metric in (AngleDifferenceMetric(), RmsdAngleDifferenceMetric()):
        best, avg = bench_metric(metric)
        print(f"{metric.name:<22} 20k calls: best {best:.3f}s, avg {avg:.3f}s")
        best, avg, m = bench_all_pairs(metric)
        print(f"{metric.name:<22} all pairs: best {best:.3f}s, avg {avg:.3f}s "
              f"(neighbors min/avg/max {m.minimum}/{m.average:.1f}/{m.maximum})")


if __name__ == "__main__":
    main()
