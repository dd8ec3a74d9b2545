# File: backend/app/api/v1/neighbors.py
# Version: v0.1.1
"""
API router for the neighbor graph over sampled conformations.

POST /api/neighbors
  - Body: NeighborsRequest
  - Returns: NeighborsResponse (ascending, symmetric adjacency + count statistics)
"""

from fastapi import APIRouter, HTTPException

from ...config.config_global import load_analysis_config
from ...core.config import settings
from ...core.models.conformation_loader import conformations_from_rows
from ...core.neighborhood.metrics import get_metric
from ...core.neighborhood.neighbors import calculate_neighbors, neighbor_measures
from ...schemas.neighbors import NeighborMeasuresModel, NeighborsRequest, NeighborsResponse

router = APIRouter(tags=["neighbors"])


@router.post("/neighbors", response_model=NeighborsResponse)
def neighbors_endpoint(payload: NeighborsRequest) -> NeighborsResponse:
    """
    Build the neighbor graph. Metric, its upper bound and the threshold default to the analysis
    config when the request leaves them out.
    """
    if len(payload.conformations) > settings.MAX_CONFORMATIONS:
        raise HTTPException(
            status_code=413,
            detail=f"Too many conformations ({len(payload.conformations)} > {settings.MAX_CONFORMATIONS})",
        )

    nb = load_analysis_config(str(settings.ANALYSIS_CONFIG_PATH)).neighborhood
    try:
        metric_maximum = payload.metric_maximum or nb.metric_maximum
        metric = get_metric(payload.metric or nb.metric, maximum=metric_maximum)
        conformations = conformations_from_rows(payload.conformations)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    max_distance = nb.max_distance if payload.max_distance is None else payload.max_distance
    neighbors = calculate_neighbors(
        conformations, metric, max_distance, progress_min_pairs=nb.progress_min_pairs,
    )
    m = neighbor_measures(neighbors)
    return NeighborsResponse(
        metric=metric.name,
        max_distance=max_distance,
        metric_maximum=metric_maximum,
        neighbors=neighbors,
        measures=NeighborMeasuresModel(
            models=m.models,
            minimum=m.minimum,
            maximum=m.maximum,
            average=m.average,
            minimum_percent=m.minimum_percent,
            maximum_percent=m.maximum_percent,
            average_percent=m.average_percent,
        ),
    )
