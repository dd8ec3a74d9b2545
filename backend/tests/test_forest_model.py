# File: backend/tests/test_forest_model.py
# Version: v0.1.1
"""
Tests for the barrier tree / forest model and its measures.
"""

from __future__ import annotations

import math

import pytest

from backend.app.core.errors import ForestConstructionError
from backend.app.core.models.barrier_forest import BarrierForest, BarrierTree, Node


def balanced_tree() -> BarrierTree:
    """Root 10 over two barriers at 5, leaves at 0, 1, 2, 3."""
    a = Node.internal(5, 5.0, Node.leaf(1, 0.0), Node.leaf(2, 1.0))
    b = Node.internal(6, 5.0, Node.leaf(3, 2.0), Node.leaf(4, 3.0, additional_count=2))
    return BarrierTree(Node.internal(7, 10.0, a, b))


def test_weights_and_tree_measures():
    tree = balanced_tree()
    root = tree.root
    assert root.weight == 4
    assert root.left.weight == 2 and root.right.weight == 2
    assert tree.number_of_leaves() == 4

    m = tree.measures()
    assert m.leaves == 4
    assert m.minimum.node_id == 1
    assert m.minimum_barrier.node_id == 5  # first of the two barriers at 5
    assert m.maximum_barrier is root
    assert m.total_barrier_value == 20.0


def test_single_leaf_tree():
    tree = BarrierTree(Node.leaf(1, -2.0))
    m = tree.measures()
    assert m.leaves == 1
    assert m.minimum is tree.root
    assert m.minimum_barrier is tree.root
    assert m.total_barrier_value == 0.0
    assert tree.total_connection_value(-2.0) == 0.0


def test_forest_measures():
    small = BarrierTree(Node.internal(9, 4.0, Node.leaf(8, -1.0), Node.leaf(10, 2.0)))
    forest = BarrierForest([balanced_tree(), small], pruning_threshold=0.5, neighbor_threshold=0.1)
    m = forest.measures()
    assert m.trees == 2
    assert m.leaves == 6
    assert forest.number_of_leaves() == 6
    assert m.minimum_value == -1.0
    assert m.minimum_barrier_value == 4.0
    assert m.maximum_barrier_value == 10.0
    assert m.total_barrier_value == 24.0
    # (10+1)*2*2 + (5+1)*1*1 + (5+1)*1*1 + (4+1)*1*1
    assert math.isclose(m.total_connection_value, 44.0 + 6.0 + 6.0 + 5.0)
    assert forest.pruning_threshold == 0.5
    assert forest.neighbor_threshold == 0.1


def test_empty_forest_measures_are_zero():
    forest = BarrierForest([])
    m = forest.measures()
    assert (m.trees, m.leaves, m.minimum_value, m.maximum_barrier_value) == (0, 0, 0.0, 0.0)
    assert forest.pruning_threshold == -1.0


def test_find_nodes():
    forest = BarrierForest([balanced_tree()])
    assert forest.find(4).additional_count == 2
    assert forest.find(4).has_additional()
    assert forest.find(99) is None


def test_swap_children_keeps_weight():
    tree = balanced_tree()
    root = tree.root
    left, right = root.left, root.right
    root.swap_children()
    assert root.left is right and root.right is left
    assert root.weight == 4
    with pytest.raises(ForestConstructionError):
        root.left.left.swap_children()


def test_barrier_below_child_rejected():
    with pytest.raises(ForestConstructionError):
        Node.internal(3, 1.0, Node.leaf(1, 0.0), Node.leaf(2, 2.0))


def test_child_cannot_have_two_parents():
    shared = Node.leaf(1, 0.0)
    Node.internal(3, 1.0, shared, Node.leaf(2, 0.0))
    with pytest.raises(ForestConstructionError):
        Node.internal(4, 1.0, shared, Node.leaf(5, 0.0))


def test_same_child_twice_rejected():
    leaf = Node.leaf(1, 0.0)
    with pytest.raises(ForestConstructionError):
        Node.internal(2, 1.0, leaf, leaf)


def test_non_root_tree_rejected():
    leaf = Node.leaf(1, 0.0)
    Node.internal(3, 1.0, leaf, Node.leaf(2, 0.0))
    with pytest.raises(ForestConstructionError):
        BarrierTree(leaf)


def test_inconsistent_weight_detected():
    root = Node.internal(3, 1.0, Node.leaf(1, 0.0), Node.leaf(2, 0.0))
    root.weight = 5
    with pytest.raises(ForestConstructionError):
        BarrierTree(root)


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_value_rejected(value):
    with pytest.raises(ForestConstructionError):
        Node.leaf(1, value)
    with pytest.raises(ForestConstructionError):
        Node.internal(3, value, Node.leaf(1, 0.0), Node.leaf(2, 0.0))
