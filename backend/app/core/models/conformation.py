# File: backend/app/core/models/conformation.py
# Version: v0.1.0

"""
A sampled conformation: a fixed-length sequence of torsion angles (radians).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np


@dataclass(frozen=True, eq=False)
class Conformation:
    """
    Read-only view over the torsion angles of one sampled model.
    """
    angles: np.ndarray

    @classmethod
    def from_angles(cls, values: Iterable[float]) -> "Conformation":
        arr = np.array(list(values), dtype="float64")
        if arr.ndim != 1:
            raise ValueError("a conformation is a flat sequence of angles")
        arr.setflags(write=False)
        return cls(angles=arr)

    def size(self) -> int:
        return int(self.angles.shape[0])

    def angle_at(self, i: int) -> float:
        return float(self.angles[i])

    def __len__(self) -> int:
        return self.size()
