# File: backend/app/core/visualization/layout.py
# Version: v0.2.0

"""
Dendrogram layout for a barrier forest on a fixed EPS page.

Vertical: node value is mapped linearly from [forest minimum value, forest
maximum barrier] onto [y_min, y_max - header]. PostScript y grows upwards, so a
higher value means a higher position on the page.

Horizontal, two levels:
1) Each tree gets a column whose width is proportional to its leaf count. The
   column boundaries come from the running leaf total, so the integer widths
   always add up to the drawable width.
2) Inside a tree, a node's [from, to] interval is split between its children
   in proportion to the left child's weight; the right child gets the exact
   remainder. Leaves sit at the center of their interval, internal nodes at the
   midpoint of their two children.

Layout writes only `Node.x` / `Node.y`.

v0.2.0
- Iterative (explicit stack) placement; right child receives [from + margin, to].
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from backend.app.core.models.barrier_forest import VALUE_EPSILON, BarrierForest, BarrierTree, Node

Interval = Tuple[int, int]


@dataclass(frozen=True)
class PageGeometry:
    """
    Page contract shared with downstream print/view tooling. Do not change the
    defaults without bumping the document format.
    """
    x_min: int = 87
    x_max: int = 587
    y_min: int = 50
    y_max: int = 742
    header_block: int = 90
    add_header: bool = True
    tick_intervals: int = 18
    page_width: int = 612
    page_height: int = 767

    @property
    def header_height(self) -> int:
        return self.header_block if self.add_header else 0

    @property
    def top(self) -> int:
        return self.y_max - self.header_height

    @property
    def width(self) -> int:
        return self.x_max - self.x_min

    @property
    def height(self) -> int:
        return self.top - self.y_min

    @property
    def bounding_box(self) -> Tuple[int, int, int, int]:
        return (0, 0, self.page_width, self.page_height)


@dataclass(frozen=True)
class ValueScale:
    """Linear map between node values and page y coordinates."""
    minimum: float
    maximum: float
    bottom: int
    top: int

    @property
    def span(self) -> int:
        return self.top - self.bottom

    @property
    def value_per_pixel(self) -> float:
        if self.span <= 0:
            return 0.0
        return (self.maximum - self.minimum) / self.span

    def y_for(self, value: float) -> int:
        # Zero value range: everything sits on the bottom line.
        if self.maximum - self.minimum <= VALUE_EPSILON or self.span <= 0:
            return self.bottom
        fraction = (value - self.minimum) / (self.maximum - self.minimum)
        y = self.bottom + int(fraction * self.span + VALUE_EPSILON)
        return min(max(y, self.bottom), self.top)

    def value_for(self, y: int) -> float:
        return self.minimum + (y - self.bottom) * self.value_per_pixel


@dataclass(frozen=True)
class ForestLayout:
    scale: ValueScale
    columns: List[Interval]


def value_scale(forest: BarrierForest, geometry: PageGeometry) -> ValueScale:
    return ValueScale(
        minimum=forest.minimum_value,
        maximum=forest.maximum_barrier_value,
        bottom=geometry.y_min,
        top=geometry.top,
    )


def tree_columns(forest: BarrierForest, geometry: PageGeometry) -> List[Interval]:
    """
    One [from, to] column per tree, left to right in forest order. Adjacent
    columns share their boundary; the last one ends exactly at x_max.
    """
    total = forest.number_of_leaves()
    columns: List[Interval] = []
    if total <= 0:
        return columns

    cumulative = 0
    left = geometry.x_min
    for tree in forest.trees:
        cumulative += tree.number_of_leaves()
        right = geometry.x_min + (geometry.width * cumulative) // total
        columns.append((left, right))
        left = right
    return columns


def split_interval(from_x: int, to_x: int, left_weight: int, weight: int) -> Tuple[Interval, Interval]:
    """
    Split [from_x, to_x] between two children; the left child gets
    left_weight/weight of the width, the right child the remainder.
    """
    margin = ((to_x - from_x) * left_weight) // weight
    return (from_x, from_x + margin), (from_x + margin, to_x)


def layout_tree(tree: BarrierTree, from_x: int, to_x: int, scale: ValueScale) -> None:
    """Assign x / y to every node of `tree` inside the column [from_x, to_x]."""
    # (node, from, to, children_done)
    stack: List[Tuple[Node, int, int, bool]] = [(tree.root, from_x, to_x, False)]
    while stack:
        node, lo, hi, children_done = stack.pop()
        if node.is_leaf():
            node.x = lo + (hi - lo) // 2
            node.y = scale.y_for(node.value)
            continue
        if children_done:
            node.x = node.left.x + (node.right.x - node.left.x) // 2
            node.y = scale.y_for(node.value)
            continue

        (l_lo, l_hi), (r_lo, r_hi) = split_interval(lo, hi, node.left.weight, node.weight)
        stack.append((node, lo, hi, True))
        stack.append((node.right, r_lo, r_hi, False))
        stack.append((node.left, l_lo, l_hi, False))


def layout_forest(forest: BarrierForest, geometry: PageGeometry) -> ForestLayout:
    """Position every node of the forest on the page."""
    scale = value_scale(forest, geometry)
    columns = tree_columns(forest, geometry)
    for tree, (lo, hi) in zip(forest.trees, columns):
        layout_tree(tree, lo, hi, scale)
    return ForestLayout(scale=scale, columns=columns)


__all__ = [
    "PageGeometry",
    "ValueScale",
    "ForestLayout",
    "value_scale",
    "tree_columns",
    "split_interval",
    "layout_tree",
    "layout_forest",
]
