# File: backend/app/core/models/barrier_forest.py
# Version: v0.2.1

"""
Barrier tree / forest data model.

A barrier tree is a binary tree: leaves are local minima (sampled conformations),
internal nodes are the lowest barrier merging two clusters of minima. A forest is
an ordered collection of such trees plus aggregate statistics.

Topology is fixed once a tree is built. Later stages only touch:
- the left/right order of an internal node's children (structuring),
- `color` (coloring),
- `x` / `y` (layout).

Every walk over a tree uses an explicit stack, so deep (unbalanced) trees never
hit the interpreter recursion limit.

v0.2.1
- Node values must be finite.
v0.2.0
- Exclusive ownership: a node can be adopted by at most one parent.
- Lazily cached tree / forest measures (leaves, minima, barrier totals,
  connection value).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from backend.app.core.errors import ForestConstructionError

RGB = Tuple[float, float, float]
BLACK: RGB = (0.0, 0.0, 0.0)

# Tolerance for value comparisons (barrier heights are sums of float energies)
VALUE_EPSILON = 1e-9


@dataclass(eq=False)
class Node:
    """
    One node of a barrier tree; a leaf when it has no children.
    """
    node_id:          int
    value:            float                 # energy (leaf) or barrier height (internal)
    left:             Optional["Node"] = None
    right:            Optional["Node"] = None
    additional_count: int = 0               # conformations merged into this node
    color:            RGB = BLACK
    x:                int = 0
    y:                int = 0
    weight:           int = field(init=False, default=1)
    parent:           Optional["Node"] = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        if not math.isfinite(self.value):
            raise ForestConstructionError(f"node {self.node_id}: value must be finite, got {self.value}")
        if (self.left is None) != (self.right is None):
            raise ForestConstructionError(
                f"node {self.node_id}: an internal node needs exactly two children"
            )
        if self.additional_count < 0:
            raise ForestConstructionError(f"node {self.node_id}: additional_count < 0")
        if self.left is None:
            self.weight = 1
            return

        left, right = self.left, self.right
        if left is right:
            raise ForestConstructionError(f"node {self.node_id}: left and right child are the same node")
        for child in (left, right):
            if child is self:
                raise ForestConstructionError(f"node {self.node_id}: a node cannot be its own child")
            if child.parent is not None:
                raise ForestConstructionError(
                    f"node {child.node_id} already belongs to node {child.parent.node_id}"
                )
            if child.value > self.value + VALUE_EPSILON:
                raise ForestConstructionError(
                    f"barrier {self.node_id} (value {self.value}) is below child "
                    f"{child.node_id} (value {child.value})"
                )
        left.parent = self
        right.parent = self
        self.weight = left.weight + right.weight

    @classmethod
    def leaf(cls, node_id: int, value: float, *, additional_count: int = 0) -> "Node":
        return cls(node_id=node_id, value=float(value), additional_count=additional_count)

    @classmethod
    def internal(
        cls,
        node_id: int,
        value: float,
        left: "Node",
        right: "Node",
        *,
        additional_count: int = 0,
    ) -> "Node":
        if left is None or right is None:
            raise ForestConstructionError(f"node {node_id}: missing child")
        return cls(
            node_id=node_id,
            value=float(value),
            left=left,
            right=right,
            additional_count=additional_count,
        )

    def is_leaf(self) -> bool:
        return self.left is None

    def is_internal(self) -> bool:
        return self.left is not None

    def has_additional(self) -> bool:
        return self.additional_count > 0

    def swap_children(self) -> None:
        """Exchange left and right as a unit. Weight is unaffected."""
        if self.left is None:
            raise ForestConstructionError(f"node {self.node_id}: a leaf has no children to swap")
        self.left, self.right = self.right, self.left

    def __repr__(self) -> str:
        return f"{self.node_id}/{self.weight}/{self.value}"


def iter_preorder(root: Node) -> Iterator[Node]:
    """Yield every node under `root` once, parent before children, left before right."""
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        if node.left is not None:
            stack.append(node.right)
            stack.append(node.left)


# --------------------------
# Tree
# --------------------------

@dataclass(frozen=True)
class TreeMeasures:
    leaves: int
    minimum: Node            # lowest leaf
    minimum_barrier: Node    # lowest internal node (root when the tree is one leaf)
    maximum_barrier: Node    # the root
    total_barrier_value: float


class BarrierTree:
    """A single root plus cached statistics."""

    def __init__(self, root: Node) -> None:
        if root is None:
            raise ForestConstructionError("root is None")
        if root.parent is not None:
            raise ForestConstructionError(f"node {root.node_id} is not a root")
        self._root = root
        self._measures: Optional[TreeMeasures] = None
        # Cache the leaf count now; a mismatch means the tree is malformed.
        self._leaves = self.measures().leaves

    @property
    def root(self) -> Node:
        return self._root

    def number_of_leaves(self) -> int:
        return self._leaves

    def iter_nodes(self) -> Iterator[Node]:
        return iter_preorder(self._root)

    def measures(self) -> TreeMeasures:
        if self._measures is not None:
            return self._measures

        leaves = 0
        minimum: Optional[Node] = None
        min_barrier: Optional[Node] = None
        total_barrier = 0.0

        for node in self.iter_nodes():
            if node.is_leaf():
                leaves += 1
                if minimum is None or node.value < minimum.value - VALUE_EPSILON:
                    minimum = node
                continue
            if node.weight != node.left.weight + node.right.weight:
                raise ForestConstructionError(f"node {node.node_id}: inconsistent weight {node.weight}")
            total_barrier += node.value
            if min_barrier is None or node.value < min_barrier.value - VALUE_EPSILON:
                min_barrier = node

        if self._root.weight != leaves:
            raise ForestConstructionError(
                f"root weight {self._root.weight} != number of leaves {leaves}"
            )

        self._measures = TreeMeasures(
            leaves=leaves,
            minimum=minimum,
            minimum_barrier=min_barrier if min_barrier is not None else self._root,
            maximum_barrier=self._root,
            total_barrier_value=total_barrier,
        )
        return self._measures

    def total_connection_value(self, minimum_value: float) -> float:
        """
        Sum over barriers of (barrier - minimum_value) * weight(left) * weight(right).

        `minimum_value` is the forest-wide minimum, so this is recomputed per forest.
        """
        total = 0.0
        for node in self.iter_nodes():
            if node.is_internal():
                total += (node.value - minimum_value) * node.left.weight * node.right.weight
        return total

    def find(self, node_id: int) -> Optional[Node]:
        for node in self.iter_nodes():
            if node.node_id == node_id:
                return node
        return None


# --------------------------
# Forest
# --------------------------

@dataclass(frozen=True)
class ForestMeasures:
    trees: int
    leaves: int
    minimum_value: float
    minimum_barrier_value: float
    maximum_barrier_value: float
    total_barrier_value: float
    total_connection_value: float


class BarrierForest:
    """
    Ordered trees (order drives the horizontal layout) plus forest statistics.
    """

    def __init__(
        self,
        trees: Sequence[BarrierTree],
        *,
        pruning_threshold: float = -1.0,
        neighbor_threshold: float = -1.0,
    ) -> None:
        if trees is None:
            raise ForestConstructionError("trees is None")
        for i, tree in enumerate(trees):
            if tree is None:
                raise ForestConstructionError(f"trees[{i}] is None")
        self._trees: Tuple[BarrierTree, ...] = tuple(trees)
        self.pruning_threshold = float(pruning_threshold)
        self.neighbor_threshold = float(neighbor_threshold)
        self._measures: Optional[ForestMeasures] = None

    @property
    def trees(self) -> Tuple[BarrierTree, ...]:
        return self._trees

    def number_of_trees(self) -> int:
        return len(self._trees)

    def get_tree(self, index: int) -> BarrierTree:
        return self._trees[index]

    def iter_nodes(self) -> Iterator[Node]:
        for tree in self._trees:
            yield from tree.iter_nodes()

    def measures(self) -> ForestMeasures:
        if self._measures is not None:
            return self._measures

        if not self._trees:
            self._measures = ForestMeasures(0, 0, 0.0, 0.0, 0.0, 0.0, 0.0)
            return self._measures

        per_tree = [t.measures() for t in self._trees]
        minimum_value = min(m.minimum.value for m in per_tree)
        connection = sum(t.total_connection_value(minimum_value) for t in self._trees)

        self._measures = ForestMeasures(
            trees=len(self._trees),
            leaves=sum(m.leaves for m in per_tree),
            minimum_value=minimum_value,
            minimum_barrier_value=min(m.minimum_barrier.value for m in per_tree),
            maximum_barrier_value=max(m.maximum_barrier.value for m in per_tree),
            total_barrier_value=sum(m.total_barrier_value for m in per_tree),
            total_connection_value=connection,
        )
        return self._measures

    def number_of_leaves(self) -> int:
        return self.measures().leaves

    @property
    def minimum_value(self) -> float:
        return self.measures().minimum_value

    @property
    def minimum_barrier_value(self) -> float:
        return self.measures().minimum_barrier_value

    @property
    def maximum_barrier_value(self) -> float:
        return self.measures().maximum_barrier_value

    @property
    def total_barrier_value(self) -> float:
        return self.measures().total_barrier_value

    @property
    def total_connection_value(self) -> float:
        return self.measures().total_connection_value

    def find(self, node_id: int) -> Optional[Node]:
        for tree in self._trees:
            node = tree.find(node_id)
            if node is not None:
                return node
        return None


__all__ = [
    "RGB",
    "BLACK",
    "Node",
    "iter_preorder",
    "TreeMeasures",
    "BarrierTree",
    "ForestMeasures",
    "BarrierForest",
]
