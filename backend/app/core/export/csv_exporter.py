# File: backend/app/core/export/csv_exporter.py
# Version: v0.3.0
"""
CSV exporter: one row per barrier forest node (after layout).
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, List

from backend.app.core.models.barrier_forest import BarrierForest, Node

FIELDS = [
    "tree", "node_id", "kind", "value", "weight", "additional",
    "parent_id", "left_id", "right_id", "x", "y", "color",
]


def _row(n: Node, tree_index: int) -> Dict[str, str]:
    return {
        "tree": str(tree_index),
        "node_id": str(n.node_id),
        "kind": "leaf" if n.is_leaf() else "barrier",
        "value": f"{n.value:.6f}",
        "weight": str(n.weight),
        "additional": str(n.additional_count),
        "parent_id": str(n.parent.node_id) if n.parent is not None else "",
        "left_id": str(n.left.node_id) if n.left is not None else "",
        "right_id": str(n.right.node_id) if n.right is not None else "",
        "x": str(n.x),
        "y": str(n.y),
        "color": " ".join(f"{c:.3f}" for c in n.color),
    }


def export_nodes_to_csv(forest: BarrierForest, csv_path: Path) -> Path:
    """Write nodes.csv-style output (pre-order per tree). Returns the path."""
    rows: List[Dict[str, str]] = []
    for idx, tree in enumerate(forest.trees):
        for n in tree.iter_nodes():
            rows.append(_row(n, idx))

    csv_path = Path(csv_path)
    with csv_path.open("w", newline="", encoding="utf-8") as fh:
        w = csv.DictWriter(fh, fieldnames=FIELDS)
        w.writeheader()
        w.writerows(rows)
    return csv_path
