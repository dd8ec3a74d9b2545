# File: backend/app/core/models/forest_loader.py
# Version: v0.3.1

"""
Load a barrier forest from JSON produced by the external forest constructor
(or by `export_forest_to_json`).

Shape:
    {
      "pruning_threshold": 0.5,
      "neighbor_threshold": 0.1,
      "trees": [
        {"id": 7, "value": 3.2, "additional": 0,
         "children": [{"id": 1, "value": -4.0}, {"id": 2, "value": -2.5}]},
        ...
      ]
    }

A tree entry may also be wrapped as {"root": {...}}. Node colors ("color": [r, g, b]
in 0..1) are optional. Nodes are built bottom-up with an explicit stack, so
arbitrarily deep trees load without recursion.

v0.3.1
- Non-finite values, non-numeric thresholds and non-array children are rejected.
v0.3.0
- Non-recursive builder; malformed input raises ForestConstructionError.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Tuple

from backend.app.core.errors import ForestConstructionError
from backend.app.core.models.barrier_forest import RGB, BarrierForest, BarrierTree, Node


def _parse_color(raw: Any, node_id: int) -> RGB:
    try:
        r, g, b = (float(c) for c in raw)
    except (TypeError, ValueError):
        raise ForestConstructionError(f"node {node_id}: color must be three numbers") from None
    for c in (r, g, b):
        if not 0.0 <= c <= 1.0:
            raise ForestConstructionError(f"node {node_id}: color components must be in [0, 1]")
    return (r, g, b)


def _parse_float(raw: Any, what: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ForestConstructionError(f"{what} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ForestConstructionError(f"{what} must be finite, got {raw!r}")
    return value


def _children_of(item: Dict[str, Any]) -> List[Any]:
    children = item.get("children") or []
    if not isinstance(children, list):
        raise ForestConstructionError(f"node {item.get('id')}: 'children' must be an array")
    if children and len(children) != 2:
        raise ForestConstructionError(
            f"node {item.get('id')}: expected 2 children, got {len(children)}"
        )
    return children


def _make_node(data: Dict[str, Any], children: List[Node]) -> Node:
    try:
        node_id = int(data["id"])
        raw_value = data["value"]
    except KeyError as ke:
        raise ForestConstructionError(f"Missing required key in node entry: {ke!s}") from None
    except (TypeError, ValueError) as exc:
        raise ForestConstructionError(f"Invalid node entry {data!r}: {exc}") from None
    value = _parse_float(raw_value, f"node {node_id}: value")

    try:
        additional = int(data.get("additional", 0) or 0)
    except (TypeError, ValueError):
        raise ForestConstructionError(
            f"node {node_id}: 'additional' must be an integer, got {data.get('additional')!r}"
        ) from None
    if children:
        node = Node.internal(node_id, value, children[0], children[1], additional_count=additional)
    else:
        node = Node.leaf(node_id, value, additional_count=additional)

    if data.get("color") is not None:
        node.color = _parse_color(data["color"], node_id)
    return node


def load_node_from_dict(data: Dict[str, Any]) -> Node:
    """
    Reconstruct a node and its subtree from a (nested) dictionary.
    """
    if not isinstance(data, dict):
        raise ForestConstructionError("a node entry must be a JSON object")

    built: Dict[int, Node] = {}
    stack: List[Tuple[Dict[str, Any], bool]] = [(data, False)]

    while stack:
        item, expanded = stack.pop()
        if not isinstance(item, dict):
            raise ForestConstructionError("a node entry must be a JSON object")
        children = _children_of(item)
        if children and not expanded:
            stack.append((item, True))
            stack.append((children[1], False))
            stack.append((children[0], False))
            continue
        built[id(item)] = _make_node(item, [built.pop(id(c)) for c in children])

    return built[id(data)]


def load_forest_from_dict(data: Any) -> BarrierForest:
    """
    Build a BarrierForest from the JSON structure documented above.
    A bare array is read as the list of trees.
    """
    if isinstance(data, list):
        data = {"trees": data}
    if not isinstance(data, dict) or not isinstance(data.get("trees"), list):
        raise ForestConstructionError("forest JSON must be an array or an object with a 'trees' array.")

    trees: List[BarrierTree] = []
    for entry in data["trees"]:
        root_data = entry.get("root", entry) if isinstance(entry, dict) else entry
        trees.append(BarrierTree(load_node_from_dict(root_data)))

    return BarrierForest(
        trees,
        pruning_threshold=_parse_float(data.get("pruning_threshold", -1.0), "pruning_threshold"),
        neighbor_threshold=_parse_float(data.get("neighbor_threshold", -1.0), "neighbor_threshold"),
    )


def load_forest_from_json(json_path: Path) -> BarrierForest:
    """
    Load a BarrierForest from a JSON file.
    """
    with Path(json_path).open("r", encoding="utf-8") as f:
        data = json.load(f)
    return load_forest_from_dict(data)
