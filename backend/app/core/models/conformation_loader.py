# File: backend/app/core/models/conformation_loader.py
# Version: v0.1.0

"""
Load sampled conformations from disk.

Two input shapes are accepted:
- JSON: {"conformations": [[a0, a1, ...], ...]} or a bare JSON array of arrays.
- Plain text: one conformation per line, whitespace-separated angles in radians.
  Blank lines and lines starting with '#' are skipped.
"""

import json
from pathlib import Path
from typing import Any, List, Sequence

from backend.app.core.models.conformation import Conformation


def _rows_from_json(data: Any) -> List[Sequence[float]]:
    if isinstance(data, dict) and isinstance(data.get("conformations"), list):
        return data["conformations"]
    if isinstance(data, list):
        return data
    raise ValueError("conformations JSON must be an array or an object with a 'conformations' array.")


def conformations_from_rows(rows: Sequence[Sequence[float]]) -> List[Conformation]:
    """
    Build conformations and check they all have the same number of angles.
    """
    out: List[Conformation] = []
    expected = None
    for idx, row in enumerate(rows):
        conf = Conformation.from_angles(float(v) for v in row)
        if expected is None:
            expected = conf.size()
        elif conf.size() != expected:
            raise ValueError(
                f"conformation {idx} has {conf.size()} angles, expected {expected}"
            )
        out.append(conf)
    return out


def load_conformations(path: Path) -> List[Conformation]:
    """
    Read conformations from a .json file or a whitespace-separated text file.
    """
    text = Path(path).read_text(encoding="utf-8")
    if Path(path).suffix.lower() == ".json":
        return conformations_from_rows(_rows_from_json(json.loads(text)))

    rows: List[List[float]] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        rows.append([float(tok) for tok in line.split()])
    return conformations_from_rows(rows)
