# File: backend/app/api/v1/forest.py
# Version: v0.1.0
"""
API router for barrier forest rendering.

Endpoints (all take a ForestRequest body):
- POST /api/forest/render   -> EPS document (application/postscript)
- POST /api/forest/layout   -> positioned forest JSON (LayoutResponse)
- POST /api/forest/analysis -> analysis JSON (forest + per-tree statistics)

Malformed forests and unknown strategy names are reported as 422.
"""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from ...core.errors import BarrierError
from ...core.export.analysis_exporter import analyze_forest
from ...core.export.json_exporter import serialize_forest
from ...core.visualization.layout import PageGeometry, layout_forest
from ...core.visualization.postscript import render_forest
from ...schemas.forest import ForestRequest, LayoutResponse, ScaleModel
from ...services.forest_service import PreparedForest, prepare_forest

router = APIRouter(prefix="/forest", tags=["forest"])


def _prepare(payload: ForestRequest) -> PreparedForest:
    try:
        return prepare_forest(
            payload.forest,
            structurer_name=payload.structurer,
            colorer_name=payload.colorer,
            color=payload.color,
        )
    except (BarrierError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.post("/render")
def render_endpoint(payload: ForestRequest) -> Response:
    prepared = _prepare(payload)
    eps = render_forest(
        prepared.forest,
        geometry=PageGeometry(add_header=payload.add_header),
        structurer_name=type(prepared.structurer).__name__,
        colorer_name=type(prepared.colorer).__name__,
        generated_at=payload.generated_at,
    )
    return Response(content=eps, media_type="application/postscript")


@router.post("/layout", response_model=LayoutResponse)
def layout_endpoint(payload: ForestRequest) -> LayoutResponse:
    prepared = _prepare(payload)
    layout = layout_forest(prepared.forest, PageGeometry(add_header=payload.add_header))
    scale = layout.scale
    return LayoutResponse(
        scale=ScaleModel(
            minimum=scale.minimum,
            maximum=scale.maximum,
            bottom=scale.bottom,
            top=scale.top,
            value_per_pixel=scale.value_per_pixel,
        ),
        columns=layout.columns,
        swaps=prepared.swaps,
        forest=serialize_forest(prepared.forest),
    )


@router.post("/analysis")
def analysis_endpoint(payload: ForestRequest) -> Dict[str, Any]:
    prepared = _prepare(payload)
    return analyze_forest(prepared.forest)
