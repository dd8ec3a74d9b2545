# File: backend/app/core/structuring/structurer.py
# Version: v0.2.0

"""
Canonical left/right ordering of barrier tree children.

A policy decides, for one internal node, whether its children should be
swapped (`should_swap`). The walk over a tree or forest is a fixed routine
shared by all policies and uses an explicit stack.

Policies:
- WeightStructurer ("weight"): lighter subtree on the left, so
  weight(right) >= weight(left) afterwards.
- ValueStructurer ("value"): lower child value on the left.

Both only look at the node's immediate children, whose keys never change during
a pass, so one pass reaches a fixed point: a second pass swaps nothing.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Protocol

from backend.app.core.errors import PreconditionError
from backend.app.core.models.barrier_forest import BarrierForest, BarrierTree, Node

logger = logging.getLogger(__name__)


class Structurer(Protocol):
    name: str

    def should_swap(self, node: Node) -> bool:
        ...


class WeightStructurer:
    name = "weight"

    def should_swap(self, node: Node) -> bool:
        return node.left.weight > node.right.weight


class ValueStructurer:
    name = "value"

    def should_swap(self, node: Node) -> bool:
        return node.left.value > node.right.value


DEFAULT_STRUCTURER = WeightStructurer()


def structure_node(node: Node, structurer: Structurer = DEFAULT_STRUCTURER) -> bool:
    """
    Apply the policy to one node. Returns True when the children were swapped.
    Leaves are left unchanged.
    """
    if node is None:
        raise PreconditionError("structure_node: node is None")
    if node.is_leaf():
        return False
    if structurer.should_swap(node):
        node.swap_children()
        return True
    return False


def structure_tree(tree: BarrierTree, structurer: Structurer = DEFAULT_STRUCTURER) -> int:
    """Structure every node of `tree` once. Returns the number of swaps."""
    if tree is None:
        raise PreconditionError("structure_tree: tree is None")

    swaps = 0
    stack: List[Node] = [tree.root]
    while stack:
        node = stack.pop()
        if node.is_leaf():
            continue
        if structure_node(node, structurer):
            swaps += 1
        stack.append(node.left)
        stack.append(node.right)
    return swaps


def structure_forest(forest: BarrierForest, structurer: Structurer = DEFAULT_STRUCTURER) -> int:
    """Structure every tree of `forest`. Returns the total number of swaps."""
    if forest is None:
        raise PreconditionError("structure_forest: forest is None")

    swaps = sum(structure_tree(tree, structurer) for tree in forest.trees)
    logger.debug("structure_forest[%s]: %d trees, %d swaps", structurer.name, forest.number_of_trees(), swaps)
    return swaps


# --------------------------
# Registry
# --------------------------

STRUCTURERS: Dict[str, Callable[[], Structurer]] = {
    WeightStructurer.name: WeightStructurer,
    ValueStructurer.name: ValueStructurer,
}


def get_structurer(name: str) -> Structurer:
    key = name.strip().lower()
    try:
        return STRUCTURERS[key]()
    except KeyError:
        raise ValueError(f"Unknown structurer: {name!r} (known: {', '.join(sorted(STRUCTURERS))})") from None


__all__ = [
    "Structurer",
    "WeightStructurer",
    "ValueStructurer",
    "structure_node",
    "structure_tree",
    "structure_forest",
    "STRUCTURERS",
    "get_structurer",
]
