# File: backend/app/core/pipeline/py_runner.py
# Version: v0.4.0
"""
In-process barrier forest pipeline runner.

v0.4.0
------
- Steps: load config → load forest → (optional) neighbor graph over sampled
  conformations → structure → color → layout + EPS render → JSON / CSV / HTML /
  analysis exports, all into `outdir`.
- Emit stable log lines callers can rely on:
    * "RESULT: <outdir>/forest.eps"
    * "EXIT: <code>"
- Core module log records (e.g. neighbor progress) are forwarded to `emit_log`
  while the pipeline runs.
"""
from __future__ import annotations

import logging
import traceback
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from backend.app.config.config_global import AnalysisConfig, load_analysis_config
from backend.app.core.coloring.colorer import color_forest, get_colorer
from backend.app.core.errors import BarrierError
from backend.app.core.export.analysis_exporter import analyze_forest_to_json
from backend.app.core.export.csv_exporter import export_nodes_to_csv
from backend.app.core.export.json_exporter import export_forest_to_json, export_neighbors_to_json
from backend.app.core.models.conformation_loader import load_conformations
from backend.app.core.models.forest_loader import load_forest_from_json
from backend.app.core.neighborhood.metrics import get_metric
from backend.app.core.neighborhood.neighbors import calculate_neighbors, neighbor_measures
from backend.app.core.structuring.structurer import get_structurer, structure_forest
from backend.app.core.visualization.layout import PageGeometry
from backend.app.core.visualization.postscript import render_forest
from backend.app.core.visualization.tree_html_exporter import export_forest_to_html

CORE_LOGGER = "backend.app.core"


class _EmitLogHandler(logging.Handler):
    """Forward log records to a simple callable (e.g. a log stream)."""
    def __init__(self, emit_fn: Callable[[str], None]) -> None:
        super().__init__()
        self._emit = emit_fn

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except (TypeError, ValueError):
            msg = record.getMessage()
        self._emit(msg)


def execute_pipeline(
    *,
    outdir: Path,
    forest_path: Path,
    job_id: str = "forest",
    config_path: Optional[Path] = None,
    conformations_path: Optional[Path] = None,
    generated_at: Optional[datetime] = None,
    emit_log: Optional[Callable[[str], None]] = None,
) -> int:
    """
    Run the barrier forest pipeline for a single forest.

    Parameters
    ----------
    outdir : Path
        Output directory for all artifacts (created if missing).
    forest_path : Path
        Forest JSON produced by the external forest constructor.
    job_id : str
        Identifier used for the logger name and the HTML title.
    config_path : Optional[Path]
        Analysis config JSON; defaults apply when None.
    conformations_path : Optional[Path]
        Sampled conformations; when given, the neighbor graph is built and
        exported, and neighbor statistics are added to the analysis.
    generated_at : Optional[datetime]
        Timestamp printed in the EPS header (now, if None).
    emit_log : Optional[Callable[[str], None]]
        Callback receiving every log line. If None, lines go to the logger only.

    Returns
    -------
    int
        0 on success; non-zero on failure.
    """
    logger = logging.getLogger(f"barrierforest.job.{job_id}")
    logger.setLevel(logging.INFO)
    core_logger = logging.getLogger(CORE_LOGGER)
    core_level = core_logger.level
    handler: Optional[_EmitLogHandler] = None
    if emit_log is not None:
        handler = _EmitLogHandler(emit_log)
        handler.setFormatter(logging.Formatter("%(message)s"))
        core_logger.addHandler(handler)
        core_logger.setLevel(logging.INFO)

    def _log(msg: str) -> None:
        if emit_log:
            emit_log(msg)
        else:
            logger.info(msg)

    rc = 1  # assume failure until the end
    eps_path = outdir / "forest.eps"

    try:
        outdir.mkdir(parents=True, exist_ok=True)

        # --- Configuration ---
        cfg = load_analysis_config(str(config_path)) if config_path else AnalysisConfig.from_dict({})
        _log(f"Loaded analysis config (structurer={cfg.structurer}, colorer={cfg.coloring.colorer})")

        # --- Forest ---
        forest = load_forest_from_json(forest_path)
        _log(f"Loaded forest: {forest.number_of_trees()} trees, {forest.number_of_leaves()} leaves")

        # --- Neighbor graph (optional) ---
        neighbors = None
        if conformations_path is not None:
            nb = cfg.neighborhood
            conformations = load_conformations(conformations_path)
            metric = get_metric(nb.metric, maximum=nb.metric_maximum)
            neighbors = calculate_neighbors(
                conformations, metric, nb.max_distance, progress_min_pairs=nb.progress_min_pairs,
            )
            export_neighbors_to_json(
                neighbors, outdir / "neighbors.json", metric=metric.name, max_distance=nb.max_distance,
            )
            m = neighbor_measures(neighbors)
            _log(
                f"Neighbors: {m.models} models, min={m.minimum} max={m.maximum} avg={m.average:.2f} "
                f"({m.average_percent:.2f}%)"
            )

        # --- Structure / color ---
        structurer = get_structurer(cfg.structurer)
        swaps = structure_forest(forest, structurer)
        colorer = get_colorer(cfg.coloring.colorer, color=cfg.coloring.color)
        color_forest(forest, colorer)
        _log(f"Structured forest ({swaps} swaps) and colored nodes")

        # --- Layout + EPS ---
        eps = render_forest(
            forest,
            geometry=PageGeometry(add_header=cfg.render.add_header),
            structurer_name=type(structurer).__name__,
            colorer_name=type(colorer).__name__,
            generated_at=generated_at,
        )
        eps_path.write_text(eps, encoding="utf-8")
        _log(f"Rendered {eps_path.name}")

        # --- Companion artifacts (positions are set now) ---
        export_forest_to_json(forest, outdir / "forest.json")
        export_nodes_to_csv(forest, outdir / "nodes.csv")
        export_forest_to_html(forest, outdir / "forest.html", title=f"Barrier Forest: {job_id}")
        analyze_forest_to_json(forest, outdir / "analysis.json", neighbors)
        _log("Exported forest.json, nodes.csv, forest.html and analysis.json")

        rc = 0

    except (BarrierError, ValueError, KeyError, OSError):
        _log("ERROR: pipeline failed")
        _log(traceback.format_exc())
        rc = 1

    finally:
        if handler is not None:
            core_logger.removeHandler(handler)
            core_logger.setLevel(core_level)
        _log(f"RESULT: {eps_path}" if rc == 0 else "RESULT: (none)")
        _log(f"EXIT: {rc}")

    return rc
