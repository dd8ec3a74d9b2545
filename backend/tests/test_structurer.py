# File: backend/tests/test_structurer.py
# Version: v0.1.0
"""
Tests for child-order structuring (weight and value policies).
"""

from __future__ import annotations

import random

import pytest

from backend.app.core.errors import PreconditionError
from backend.app.core.models.barrier_forest import BarrierForest, BarrierTree, Node
from backend.app.core.structuring.structurer import (
    ValueStructurer,
    WeightStructurer,
    get_structurer,
    structure_forest,
    structure_node,
    structure_tree,
)


class _Ids:
    def __init__(self) -> None:
        self.n = 0

    def __call__(self) -> int:
        self.n += 1
        return self.n


def chain(ids: _Ids, leaves: int, value: float = 1.0) -> Node:
    """Left-leaning caterpillar with `leaves` leaves."""
    node = Node.leaf(ids(), 0.0)
    for _ in range(leaves - 1):
        node = Node.internal(ids(), value, node, Node.leaf(ids(), 0.0))
    return node


def random_tree(rnd: random.Random, ids: _Ids, leaves: int) -> Node:
    nodes = [Node.leaf(ids(), rnd.uniform(-5.0, 0.0)) for _ in range(leaves)]
    while len(nodes) > 1:
        i, j = sorted(rnd.sample(range(len(nodes)), 2))
        right = nodes.pop(j)
        left = nodes.pop(i)
        value = max(left.value, right.value) + rnd.uniform(0.0, 2.0)
        nodes.append(Node.internal(ids(), value, left, right))
    return nodes[0]


def test_heavier_left_child_is_swapped():
    ids = _Ids()
    heavy = chain(ids, 5)
    light = chain(ids, 2)
    node = Node.internal(ids(), 2.0, heavy, light)

    assert structure_node(node) is True
    assert node.left is light and node.right is heavy
    assert node.left.weight == 2 and node.right.weight == 5


def test_leaf_untouched():
    leaf = Node.leaf(1, 0.0)
    assert structure_node(leaf) is False
    assert leaf.left is None


def test_forest_postcondition_and_idempotence():
    rnd = random.Random(3)
    ids = _Ids()
    forest = BarrierForest([BarrierTree(random_tree(rnd, ids, n)) for n in (1, 2, 7, 30, 64)])

    first = structure_forest(forest)
    assert first > 0
    for node in forest.iter_nodes():
        if node.is_internal():
            assert node.right.weight >= node.left.weight
    assert structure_forest(forest) == 0


def test_structuring_preserves_weights_and_leaf_set():
    rnd = random.Random(5)
    tree = BarrierTree(random_tree(rnd, _Ids(), 25))
    before = sorted(n.node_id for n in tree.iter_nodes() if n.is_leaf())
    structure_tree(tree)
    after = sorted(n.node_id for n in tree.iter_nodes() if n.is_leaf())
    assert before == after
    for node in tree.iter_nodes():
        if node.is_internal():
            assert node.weight == node.left.weight + node.right.weight


def test_deep_tree_structures_without_recursion():
    ids = _Ids()
    tree = BarrierTree(chain(ids, 20000))
    swaps = structure_tree(tree)
    assert swaps == 20000 - 2  # every internal node except the bottom one (1 vs 1)
    assert structure_tree(tree) == 0


def test_value_structurer_idempotent():
    rnd = random.Random(9)
    forest = BarrierForest([BarrierTree(random_tree(rnd, _Ids(), 40))])
    structure_forest(forest, ValueStructurer())
    for node in forest.iter_nodes():
        if node.is_internal():
            assert node.left.value <= node.right.value
    assert structure_forest(forest, ValueStructurer()) == 0


def test_none_rejected():
    with pytest.raises(PreconditionError):
        structure_node(None)
    with pytest.raises(PreconditionError):
        structure_tree(None)
    with pytest.raises(PreconditionError):
        structure_forest(None)


def test_get_structurer():
    assert isinstance(get_structurer("weight"), WeightStructurer)
    assert isinstance(get_structurer(" Value "), ValueStructurer)
    with pytest.raises(ValueError):
        get_structurer("random")
