# File: backend/app/api/v1/api.py
# Version: v0.8.0
"""
v1 API aggregator.

Routers included under /api:
- health
- neighbors (all-pairs neighbor graph over conformations)
- forest (render / layout / analysis of a barrier forest)
- params (analysis defaults)
"""
from __future__ import annotations

from fastapi import APIRouter

from . import health as health_router
from . import neighbors as neighbors_router
from . import forest as forest_router
from . import params as params_router

# All v1 JSON APIs live under /api via api_router
api_router = APIRouter()
api_router.include_router(health_router.router)
api_router.include_router(neighbors_router.router)
api_router.include_router(forest_router.router)
api_router.include_router(params_router.router)
