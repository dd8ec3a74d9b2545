# File: backend/app/config/config_global.py
# Version: v0.4.0

"""
Analysis configuration loader (attribute-access "view" objects).

Example JSON (see analysis_default.json):

{
  "neighborhood": {
    "metric": "angle_difference",
    "max_distance": 0.1,
    "metric_maximum": 3.141592653589793,
    "progress_min_pairs": 2500000
  },
  "structurer": "weight",
  "coloring": {"colorer": "fixed", "color": [0.0, 0.0, 0.0]},
  "render": {"add_header": true}
}

Every key is optional; missing keys fall back to the defaults below.

v0.4.0
- Views for neighborhood / coloring / render; metric and threshold are
  configuration, not constants.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from backend.app.core.coloring.colorer import COLORERS
from backend.app.core.neighborhood.metrics import METRICS, get_metric
from backend.app.core.structuring.structurer import STRUCTURERS


# --------------------------
# Neighborhood (attribute view)
# --------------------------

@dataclass(frozen=True)
class NeighborhoodView:
    metric: str
    max_distance: float
    metric_maximum: float
    progress_min_pairs: int

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "NeighborhoodView":
        metric = str(d.get("metric", "angle_difference"))
        # Resolve aliases early so a typo fails at load time.
        metric = get_metric(metric).name
        max_distance = float(d.get("max_distance", 0.1))
        metric_maximum = float(d.get("metric_maximum", math.pi))
        if max_distance < 0:
            raise ValueError(f"neighborhood.max_distance must be >= 0, got {max_distance}")
        if metric_maximum <= 0:
            raise ValueError(f"neighborhood.metric_maximum must be > 0, got {metric_maximum}")
        return cls(
            metric=metric,
            max_distance=max_distance,
            metric_maximum=metric_maximum,
            progress_min_pairs=max(0, int(d.get("progress_min_pairs", 2_500_000))),
        )


@dataclass(frozen=True)
class ColoringView:
    colorer: str
    color: Tuple[float, float, float]

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ColoringView":
        colorer = str(d.get("colorer", "fixed")).strip().lower()
        if colorer not in COLORERS:
            raise ValueError(f"Unknown colorer: {colorer!r}")
        raw = d.get("color", [0.0, 0.0, 0.0])
        if len(raw) != 3:
            raise ValueError("coloring.color must have three components")
        r, g, b = (float(c) for c in raw)
        return cls(colorer=colorer, color=(r, g, b))


@dataclass(frozen=True)
class RenderView:
    add_header: bool

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RenderView":
        return cls(add_header=bool(d.get("add_header", True)))


# --------------------------
# Top-level analysis config
# --------------------------

@dataclass(frozen=True)
class AnalysisConfig:
    neighborhood: NeighborhoodView
    structurer: str
    coloring: ColoringView
    render: RenderView

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisConfig":
        structurer = str(data.get("structurer", "weight")).strip().lower()
        if structurer not in STRUCTURERS:
            raise ValueError(f"Unknown structurer: {structurer!r} (known: {', '.join(sorted(STRUCTURERS))})")
        return cls(
            neighborhood=NeighborhoodView.from_dict(dict(data.get("neighborhood", {}))),
            structurer=structurer,
            coloring=ColoringView.from_dict(dict(data.get("coloring", {}))),
            render=RenderView.from_dict(dict(data.get("render", {}))),
        )

    @classmethod
    def from_json_file(cls, path: str) -> "AnalysisConfig":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "neighborhood": {
                "metric": self.neighborhood.metric,
                "max_distance": self.neighborhood.max_distance,
                "metric_maximum": self.neighborhood.metric_maximum,
                "progress_min_pairs": self.neighborhood.progress_min_pairs,
            },
            "structurer": self.structurer,
            "coloring": {"colorer": self.coloring.colorer, "color": list(self.coloring.color)},
            "render": {"add_header": self.render.add_header},
            "known": {
                "metrics": sorted(METRICS),
                "structurers": sorted(STRUCTURERS),
                "colorers": sorted(COLORERS),
            },
        }


def load_analysis_config(path: str) -> AnalysisConfig:
    """
    Helper used by the CLIs and the pipeline runner.
    """
    return AnalysisConfig.from_json_file(path)


__all__ = [
    "NeighborhoodView",
    "ColoringView",
    "RenderView",
    "AnalysisConfig",
    "load_analysis_config",
]
