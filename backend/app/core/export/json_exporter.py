# File: backend/app/core/export/json_exporter.py
# Version: v0.4.0

"""
Export a barrier forest (and neighbor adjacency) to clean JSON.

The forest shape is the one `forest_loader.load_forest_from_dict` reads, plus
layout/measure fields that the loader ignores, so an exported forest can be
reloaded.

v0.4.0
- Barrier forest export with positions, colors and measures.
- Neighbor adjacency export.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from backend.app.core.models.barrier_forest import BarrierForest, Node
from backend.app.core.neighborhood.neighbors import neighbor_measures


def serialize_node(root: Node) -> Dict[str, Any]:
    """
    Serialize a node and its subtree (children listed left, right).
    """
    done: Dict[int, Dict[str, Any]] = {}
    stack: List[Tuple[Node, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if node.is_internal() and not expanded:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
            continue

        entry: Dict[str, Any] = {
            "id":         node.node_id,
            "value":      node.value,
            "weight":     node.weight,
            "additional": node.additional_count,
            "color":      list(node.color),
            "x":          node.x,
            "y":          node.y,
        }
        if node.is_internal():
            entry["children"] = [done.pop(id(node.left)), done.pop(id(node.right))]
        done[id(node)] = entry
    return done[id(root)]


def serialize_forest(forest: BarrierForest) -> Dict[str, Any]:
    m = forest.measures()
    return {
        "pruning_threshold":  forest.pruning_threshold,
        "neighbor_threshold": forest.neighbor_threshold,
        "measures": {
            "trees":                  m.trees,
            "leaves":                 m.leaves,
            "minimum_value":          m.minimum_value,
            "minimum_barrier_value":  m.minimum_barrier_value,
            "maximum_barrier_value":  m.maximum_barrier_value,
            "total_barrier_value":    m.total_barrier_value,
            "total_connection_value": m.total_connection_value,
        },
        "trees": [serialize_node(tree.root) for tree in forest.trees],
    }


def export_forest_to_json(forest: BarrierForest, json_path: Path) -> None:
    """
    Export the whole forest to JSON for reloading or downstream analysis.
    """
    Path(json_path).write_text(json.dumps(serialize_forest(forest), indent=2), encoding="utf-8")


def serialize_neighbors(
    neighbors: Sequence[Sequence[int]],
    *,
    metric: Optional[str] = None,
    max_distance: Optional[float] = None,
) -> Dict[str, Any]:
    m = neighbor_measures(neighbors)
    return {
        "metric":       metric,
        "max_distance": max_distance,
        "models":       m.models,
        "measures": {
            "minimum":         m.minimum,
            "maximum":         m.maximum,
            "average":         m.average,
            "minimum_percent": m.minimum_percent,
            "maximum_percent": m.maximum_percent,
            "average_percent": m.average_percent,
        },
        "neighbors": [list(row) for row in neighbors],
    }


def export_neighbors_to_json(
    neighbors: Sequence[Sequence[int]],
    json_path: Path,
    *,
    metric: Optional[str] = None,
    max_distance: Optional[float] = None,
) -> None:
    data = serialize_neighbors(neighbors, metric=metric, max_distance=max_distance)
    Path(json_path).write_text(json.dumps(data, indent=2), encoding="utf-8")
