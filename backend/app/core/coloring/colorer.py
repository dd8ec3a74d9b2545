# File: backend/app/core/coloring/colorer.py
# Version: v0.1.0

"""
Node coloring. Choosing meaningful colors is up to the caller; this module only
defines the interface, the forest walk and a single-color default.
"""

from __future__ import annotations

from typing import Callable, Dict, Protocol

from backend.app.core.errors import PreconditionError
from backend.app.core.models.barrier_forest import BLACK, RGB, BarrierForest, BarrierTree, Node


class Colorer(Protocol):
    name: str

    def color_node(self, node: Node) -> None:
        ...


class FixedColorer:
    """Paint every node with the same RGB color (components in 0..1)."""

    name = "fixed"

    def __init__(self, color: RGB = BLACK) -> None:
        r, g, b = (float(c) for c in color)
        for c in (r, g, b):
            if not 0.0 <= c <= 1.0:
                raise ValueError(f"color components must be in [0, 1], got {color!r}")
        self.color: RGB = (r, g, b)

    def color_node(self, node: Node) -> None:
        node.color = self.color


def color_tree(tree: BarrierTree, colorer: Colorer) -> None:
    if tree is None:
        raise PreconditionError("color_tree: tree is None")
    for node in tree.iter_nodes():
        colorer.color_node(node)


def color_forest(forest: BarrierForest, colorer: Colorer) -> None:
    if forest is None:
        raise PreconditionError("color_forest: forest is None")
    for tree in forest.trees:
        color_tree(tree, colorer)


COLORERS: Dict[str, Callable[..., Colorer]] = {
    FixedColorer.name: FixedColorer,
}


def get_colorer(name: str, **kwargs) -> Colorer:
    key = name.strip().lower()
    try:
        factory = COLORERS[key]
    except KeyError:
        raise ValueError(f"Unknown colorer: {name!r} (known: {', '.join(sorted(COLORERS))})") from None
    return factory(**kwargs)


__all__ = ["Colorer", "FixedColorer", "color_tree", "color_forest", "COLORERS", "get_colorer"]
