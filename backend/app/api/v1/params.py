# File: backend/app/api/v1/params.py
# Version: v0.2.0
"""
Parameters API for analysis defaults.

Endpoints:
- GET /params/defaults -> { analysis: {...} }

Notes:
- Reads the file at `settings.ANALYSIS_CONFIG_PATH` and returns it resolved
  (missing keys filled with defaults) plus the known strategy names.
"""
from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from ...config.config_global import load_analysis_config
from ...core.config import settings

router = APIRouter(prefix="/params", tags=["params"])


@router.get("/defaults")
def get_defaults() -> Dict[str, Any]:
    """Return the default analysis config as loaded from JSON."""
    try:
        cfg = load_analysis_config(str(settings.ANALYSIS_CONFIG_PATH))
    except FileNotFoundError as e:
        raise HTTPException(status_code=500, detail=f"Defaults file missing: {e}")
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=500, detail=f"Invalid defaults JSON: {e}")
    except (KeyError, ValueError) as e:
        raise HTTPException(status_code=500, detail=f"Invalid defaults: {e}")

    return {"analysis": cfg.to_dict()}
