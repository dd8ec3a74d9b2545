# File: backend/app/schemas/neighbors.py
# Version: v0.1.1
"""
Pydantic schemas for the neighbor graph endpoint.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class NeighborsRequest(BaseModel):
    """Request payload: sampled conformations as torsion angles (radians)."""
    conformations: List[List[float]] = Field(
        ...,
        description="One list of torsion angles per conformation; all lists must have the same length.",
        examples=[[[0.0, 1.0], [0.05, 1.0], [3.0, -2.0]]],
    )
    metric: Optional[str] = Field(
        None,
        description="angle_difference | rmsd_angle_difference (default from analysis config).",
    )
    max_distance: Optional[float] = Field(
        None,
        ge=0.0,
        description="Neighbor threshold in radians (default from analysis config).",
    )
    metric_maximum: Optional[float] = Field(
        None,
        gt=0.0,
        description="Upper bound reported by the metric (default from analysis config).",
    )


class NeighborMeasuresModel(BaseModel):
    models: int
    minimum: int
    maximum: int
    average: float
    minimum_percent: float
    maximum_percent: float
    average_percent: float


class NeighborsResponse(BaseModel):
    """Symmetric adjacency: neighbors[i] is the ascending list of neighbors of i."""
    metric: str
    max_distance: float
    metric_maximum: float
    neighbors: List[List[int]] = Field(default_factory=list)
    measures: NeighborMeasuresModel
