# File: backend/app/schemas/forest.py
# Version: v0.1.0
"""
Pydantic schemas for the barrier forest endpoints (render / layout / analysis).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class ForestRequest(BaseModel):
    """A forest (loader JSON shape) plus the strategies to apply before layout."""
    forest: Dict[str, Any] = Field(
        ...,
        description="Forest JSON: {pruning_threshold, neighbor_threshold, trees: [node...]}.",
    )
    structurer: str = Field("weight", description="weight | value")
    colorer: str = Field("fixed", description="Only 'fixed' ships with the service.")
    color: Tuple[float, float, float] = Field(
        (0.0, 0.0, 0.0), description="RGB components in [0, 1] for the fixed colorer."
    )
    add_header: bool = Field(True, description="Include the 6-line statistics header.")
    generated_at: Optional[datetime] = Field(
        None, description="Timestamp printed in the header; server time when omitted."
    )


class ScaleModel(BaseModel):
    minimum: float
    maximum: float
    bottom: int
    top: int
    value_per_pixel: float


class LayoutResponse(BaseModel):
    """Positioned forest: node x/y are filled in, children are ordered left/right."""
    scale: ScaleModel
    columns: List[Tuple[int, int]] = Field(default_factory=list)
    swaps: int = Field(0, ge=0, description="Child swaps performed by the structurer.")
    forest: Dict[str, Any]
