# File: backend/app/core/visualization/postscript.py
# Version: v0.2.0

"""
EPS rendering of a positioned barrier forest.

Document layout (in order):
1) prologue (EPSF header + bounding box),
2) optional 6-line header with forest statistics,
3) the trees, one subtree at a time in pre-order,
4) the value scale: a vertical line with 18 intervals / 19 labeled ticks, the
   last tick exactly at the top of the drawable range,
5) `showpage`.

Output depends only on the forest, the page geometry and the given timestamp,
so identical input renders byte-identical text.

v0.2.0
- Tick loop emits exactly `tick_intervals` steps plus the top tick.
- Text is escaped for PostScript string literals.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from backend.app.core.coloring.colorer import Colorer, color_forest
from backend.app.core.models.barrier_forest import BLACK, RGB, BarrierForest, Node, iter_preorder
from backend.app.core.structuring.structurer import Structurer, structure_forest
from backend.app.core.visualization.layout import PageGeometry, ValueScale, layout_forest

logger = logging.getLogger(__name__)

FONT_NAME = "Times-Roman"
HEADER_FONT = 10
LEAF_FONT = 8
BARRIER_FONT = 6
SCALE_FONT = 8


def format_value(value: float) -> str:
    return f"{value:,.3f}"


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


class PostScriptWriter:
    """Append-only builder for the handful of EPS operators we use."""

    def __init__(self) -> None:
        self._parts: List[str] = []

    def begin(self, geometry: PageGeometry) -> None:
        x0, y0, x1, y1 = geometry.bounding_box
        self._parts.append("%!PS-Adobe-3.0 EPSF-3.0\n")
        self._parts.append(f"%%BoundingBox: {x0} {y0} {x1} {y1}\n")
        self._parts.append("%%EndComments\n")

    def end(self) -> None:
        self._parts.append("showpage\n")

    def set_font(self, size: int) -> None:
        self._parts.append(f"/{FONT_NAME} findfont\n{size} scalefont\nsetfont\n")

    def set_color(self, color: RGB) -> None:
        r, g, b = color
        self._parts.append("%f %f %f setrgbcolor\n" % (r, g, b))

    def text(self, x: int, y: int, text: str, color: RGB = BLACK) -> None:
        self._parts.append(f"{x} {y} moveto\n")
        self.set_color(color)
        self._parts.append(f"({_escape(text)}) show\n")

    def line(self, x1: int, y1: int, x2: int, y2: int, color: RGB = BLACK) -> None:
        self._parts.append("newpath\n")
        self._parts.append(f"{x1} {y1} moveto\n")
        self._parts.append(f"{x2} {y2} lineto\n")
        self._parts.append("closepath\n")
        self.set_color(color)
        self._parts.append("stroke\n")

    def getvalue(self) -> str:
        return "".join(self._parts)


# --------------------------
# Sections
# --------------------------

def _add_header(
    ps: PostScriptWriter,
    forest: BarrierForest,
    geometry: PageGeometry,
    structurer_name: str,
    colorer_name: str,
    generated_at: datetime,
) -> None:
    lines = [
        f"Barrier forest generated {generated_at.isoformat(sep=' ', timespec='seconds')}",
        "Pruning threshold: %f, Neighbor threshold: %f"
        % (forest.pruning_threshold, forest.neighbor_threshold),
        "Number of trees: %d, Number of leaves: %d, Minimum value: %s"
        % (forest.number_of_trees(), forest.number_of_leaves(), format_value(forest.minimum_value)),
        "Minimum barrier value: %s, Maximum barrier value: %s"
        % (format_value(forest.minimum_barrier_value), format_value(forest.maximum_barrier_value)),
        "Total barrier value: %s, Total connection value: %s"
        % (format_value(forest.total_barrier_value), format_value(forest.total_connection_value)),
        f"Structurer: {structurer_name}, Colorer: {colorer_name}",
    ]
    ps.set_font(HEADER_FONT)
    for k, text in enumerate(lines):
        ps.text(geometry.x_min, geometry.y_max - 15 * k, text)


def _add_tree(ps: PostScriptWriter, root: Node) -> None:
    for node in iter_preorder(root):
        if node.is_leaf():
            ps.set_font(LEAF_FONT)
            # Id below the drop line, merged count below the id.
            ps.text(node.x - 2, node.y - 9, str(node.node_id))
            if node.has_additional():
                ps.text(node.x - 2, node.y - 18, f"({node.additional_count})")
            continue

        left, right = node.left, node.right
        ps.line(left.x, node.y, right.x, node.y, node.color)

        label = str(node.node_id)
        if node.has_additional():
            label += f" ({node.additional_count})"
        ps.set_font(BARRIER_FONT)
        ps.text(right.x + 2, node.y, label)

        ps.line(left.x, node.y, left.x, left.y, left.color)
        ps.line(right.x, node.y, right.x, right.y, right.color)


def _add_scale(ps: PostScriptWriter, geometry: PageGeometry, scale: ValueScale) -> None:
    axis_x = geometry.x_min - 12
    tick_x = geometry.x_min - 3
    label_x = geometry.x_min - 52
    step = geometry.height // geometry.tick_intervals

    ps.set_font(SCALE_FONT)
    ps.line(axis_x, geometry.y_min, axis_x, geometry.top)

    for k in range(geometry.tick_intervals):
        y = geometry.y_min + k * step
        ps.line(axis_x, y, tick_x, y)
        ps.text(label_x, y - 2, format_value(scale.value_for(y)))

    # Top tick sits on the exact top; integer step division would fall short.
    top = geometry.top
    ps.line(axis_x, top, tick_x, top)
    ps.text(label_x, top - 2, format_value(scale.value_for(top)))


# --------------------------
# Entry points
# --------------------------

def render_forest(
    forest: BarrierForest,
    *,
    geometry: Optional[PageGeometry] = None,
    structurer_name: str = "Unknown",
    colorer_name: str = "Unknown",
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Lay out `forest` and return the EPS document as text. The forest is expected
    to be structured and colored already.
    """
    geometry = geometry or PageGeometry()
    generated_at = generated_at or datetime.now()

    layout = layout_forest(forest, geometry)

    ps = PostScriptWriter()
    ps.begin(geometry)
    if geometry.add_header:
        _add_header(ps, forest, geometry, structurer_name, colorer_name, generated_at)
    for tree in forest.trees:
        _add_tree(ps, tree.root)
    _add_scale(ps, geometry, layout.scale)
    ps.end()

    logger.debug(
        "render_forest: %d trees, %d leaves, scale=[%.3f, %.3f]",
        forest.number_of_trees(), forest.number_of_leaves(), layout.scale.minimum, layout.scale.maximum,
    )
    return ps.getvalue()


def barrier_forest_to_postscript(
    forest: BarrierForest,
    structurer: Optional[Structurer] = None,
    colorer: Optional[Colorer] = None,
    *,
    geometry: Optional[PageGeometry] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Structure (optional) → color (optional) → layout → render.
    """
    if structurer is not None:
        structure_forest(forest, structurer)
    if colorer is not None:
        color_forest(forest, colorer)

    return render_forest(
        forest,
        geometry=geometry,
        structurer_name=type(structurer).__name__ if structurer is not None else "Unknown",
        colorer_name=type(colorer).__name__ if colorer is not None else "Unknown",
        generated_at=generated_at,
    )


__all__ = [
    "format_value",
    "PostScriptWriter",
    "render_forest",
    "barrier_forest_to_postscript",
]
