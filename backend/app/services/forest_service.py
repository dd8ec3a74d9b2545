# File: backend/app/services/forest_service.py
# Version: v0.1.0
"""
Service helpers shared by the forest routes: build a forest from request JSON
and run the structure → color stages on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from backend.app.core.coloring.colorer import Colorer, color_forest, get_colorer
from backend.app.core.models.barrier_forest import BarrierForest
from backend.app.core.models.forest_loader import load_forest_from_dict
from backend.app.core.structuring.structurer import Structurer, get_structurer, structure_forest


@dataclass
class PreparedForest:
    forest: BarrierForest
    structurer: Structurer
    colorer: Colorer
    swaps: int


def prepare_forest(
    data: Dict[str, Any],
    *,
    structurer_name: str,
    colorer_name: str,
    color: Tuple[float, float, float],
) -> PreparedForest:
    """
    Raises ForestConstructionError for malformed forests and ValueError for
    unknown strategy names or invalid colors.
    """
    structurer = get_structurer(structurer_name)
    colorer = get_colorer(colorer_name, color=color)
    forest = load_forest_from_dict(data)
    swaps = structure_forest(forest, structurer)
    color_forest(forest, colorer)
    return PreparedForest(forest=forest, structurer=structurer, colorer=colorer, swaps=swaps)
