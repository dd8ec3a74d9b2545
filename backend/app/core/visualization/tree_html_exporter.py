# File: backend/app/core/visualization/tree_html_exporter.py
# Version: v0.2.0

"""
HTML nested-list exporter for a barrier forest.
"""

from html import escape
from pathlib import Path
from typing import List, Tuple

from backend.app.core.models.barrier_forest import BarrierForest, Node


def _label(n: Node) -> str:
    kind = "Minimum" if n.is_leaf() else "Barrier"
    extra = f", +{n.additional_count} merged" if n.has_additional() else ""
    return f"{kind} {n.node_id}: value {n.value:,.3f} (weight {n.weight}{extra})"


def render_tree_html(root: Node) -> str:
    """
    Nested <li>/<ul> markup for one tree, children listed left then right.
    """
    parts: List[str] = []
    # (node, closing): closing entries emit the end tags of an internal node
    stack: List[Tuple[Node, bool]] = [(root, False)]
    while stack:
        n, closing = stack.pop()
        if closing:
            parts.append("</ul></li>")
            continue
        parts.append(f"<li><strong>{escape(_label(n))}</strong>")
        if n.is_leaf():
            parts.append("</li>")
            continue
        parts.append("<ul>")
        stack.append((n, True))
        stack.append((n.right, False))
        stack.append((n.left, False))
    return "".join(parts)


def export_forest_to_html(forest: BarrierForest, html_path: Path, title: str = "Barrier Forest") -> None:
    """
    Render a simple nested-list HTML of the forest's trees.
    """
    m = forest.measures()
    html: List[str] = [
        "<html><head><meta charset='UTF-8'><title>Barrier Forest</title></head><body>",
        f"<h1>{escape(title)}</h1>",
        f"<p>{m.trees} trees, {m.leaves} leaves, minimum value {m.minimum_value:,.3f}, "
        f"barriers {m.minimum_barrier_value:,.3f} to {m.maximum_barrier_value:,.3f}</p>",
    ]
    for idx, tree in enumerate(forest.trees):
        html.append(f"<h2>Tree {idx}</h2>")
        html.append("<ul>")
        html.append(render_tree_html(tree.root))
        html.append("</ul>")
    html.append("</body></html>")
    Path(html_path).write_text("\n".join(html), encoding="utf-8")
