# File: backend/app/core/export/analysis_exporter.py
# Version: v0.2.0
"""
Analyze a barrier forest: forest statistics, per-tree statistics and, when a
neighbor graph is supplied, neighbor-count statistics.
Outputs a JSON report suitable for programmatic use.

Per tree:
- leaves, lowest leaf (id/value), lowest and highest barrier (id/value)
- total barrier value, total connection value (relative to the forest minimum)

Aggregates:
- the forest measures (same numbers the EPS header shows)
- depth of the deepest tree
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from backend.app.core.models.barrier_forest import BarrierForest, BarrierTree, Node
from backend.app.core.neighborhood.neighbors import neighbor_measures


@dataclass
class TreeInfo:
    index: int
    root_id: int
    leaves: int
    depth: int
    minimum_id: int
    minimum_value: float
    minimum_barrier_id: int
    minimum_barrier_value: float
    maximum_barrier_id: int
    maximum_barrier_value: float
    total_barrier_value: float
    total_connection_value: float


def tree_depth(root: Node) -> int:
    """Number of edges on the longest root-to-leaf path."""
    deepest = 0
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if node.is_leaf():
            deepest = max(deepest, depth)
            continue
        stack.append((node.left, depth + 1))
        stack.append((node.right, depth + 1))
    return deepest


def _tree_info(index: int, tree: BarrierTree, forest_minimum: float) -> TreeInfo:
    m = tree.measures()
    return TreeInfo(
        index=index,
        root_id=tree.root.node_id,
        leaves=m.leaves,
        depth=tree_depth(tree.root),
        minimum_id=m.minimum.node_id,
        minimum_value=m.minimum.value,
        minimum_barrier_id=m.minimum_barrier.node_id,
        minimum_barrier_value=m.minimum_barrier.value,
        maximum_barrier_id=m.maximum_barrier.node_id,
        maximum_barrier_value=m.maximum_barrier.value,
        total_barrier_value=m.total_barrier_value,
        total_connection_value=tree.total_connection_value(forest_minimum),
    )


def analyze_forest(
    forest: BarrierForest,
    neighbors: Optional[Sequence[Sequence[int]]] = None,
) -> Dict[str, Any]:
    """Build the analysis payload without writing it anywhere."""
    fm = forest.measures()
    trees: List[TreeInfo] = [
        _tree_info(i, t, fm.minimum_value) for i, t in enumerate(forest.trees)
    ]

    payload: Dict[str, Any] = {
        "analysis_generated": True,
        "pruning_threshold": forest.pruning_threshold,
        "neighbor_threshold": forest.neighbor_threshold,
        "forest": asdict(fm),
        "trees": [asdict(t) for t in trees],
        "global": {
            "max_depth": max((t.depth for t in trees), default=0),
            "largest_tree_leaves": max((t.leaves for t in trees), default=0),
        },
    }
    if neighbors is not None:
        payload["neighbors"] = asdict(neighbor_measures(neighbors))
    return payload


def analyze_forest_to_json(
    forest: BarrierForest,
    out_path: Path,
    neighbors: Optional[Sequence[Sequence[int]]] = None,
) -> Dict[str, Any]:
    """
    Build the analysis JSON for the forest and write it to a file.

    Returns the JSON payload as a Python dict as well.
    """
    payload = analyze_forest(forest, neighbors)
    Path(out_path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return payload
