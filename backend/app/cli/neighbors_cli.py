# File: backend/app/cli/neighbors_cli.py
# Version: v0.2.0

"""
Command-line interface for the neighbor graph over sampled conformations.

v0.2.0:
- Metric / threshold come from the analysis config and can be overridden with
  --metric / --max-distance.
- Backward compatible logging flag: accept both --log-level and legacy --log.
"""

import argparse
import logging
import sys
from pathlib import Path

from backend.app.config.config_global import AnalysisConfig, load_analysis_config
from backend.app.core.export.json_exporter import export_neighbors_to_json
from backend.app.core.models.conformation_loader import load_conformations
from backend.app.core.neighborhood.metrics import get_metric
from backend.app.core.neighborhood.neighbors import calculate_neighbors, neighbor_measures


def main() -> None:
    p = argparse.ArgumentParser(description="Neighbor graph CLI")
    p.add_argument("--conformations", required=True, type=Path,
                   help="Conformations (.json, or text with one conformation per line)")
    p.add_argument("--out", required=True, type=Path, help="Output neighbors JSON")
    p.add_argument("--config", required=False, type=Path, help="analysis config JSON")
    p.add_argument("--metric", default=None,
                   help="angle_difference | rmsd_angle_difference (overrides config)")
    p.add_argument("--max-distance", dest="max_distance", type=float, default=None,
                   help="Neighbor threshold in radians (overrides config)")
    p.add_argument("--log-level", dest="log_level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging level (default: INFO)")
    p.add_argument("--log", dest="log_level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help=argparse.SUPPRESS)
    args = p.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level))
    log = logging.getLogger("neighbors_cli")

    try:
        cfg = load_analysis_config(str(args.config)) if args.config else AnalysisConfig.from_dict({})
        nb = cfg.neighborhood
        metric = get_metric(args.metric or nb.metric, maximum=nb.metric_maximum)
        max_distance = nb.max_distance if args.max_distance is None else float(args.max_distance)
        conformations = load_conformations(args.conformations)
    except (OSError, ValueError, KeyError) as ex:
        print(f"[ERROR] {ex}", file=sys.stderr)
        sys.exit(2)

    log.info("=== neighbors ===")
    log.info("CONFORMATIONS=%s (%d) | METRIC=%s | MAX_DISTANCE=%.4f | OUT=%s",
             str(args.conformations), len(conformations), metric.name, max_distance, str(args.out))

    neighbors = calculate_neighbors(
        conformations, metric, max_distance, progress_min_pairs=nb.progress_min_pairs,
    )
    args.out.parent.mkdir(parents=True, exist_ok=True)
    export_neighbors_to_json(neighbors, args.out, metric=metric.name, max_distance=max_distance)

    m = neighbor_measures(neighbors)
    log.info("Neighbors per model: min=%d (%.2f%%) max=%d (%.2f%%) avg=%.2f (%.2f%%)",
             m.minimum, m.minimum_percent, m.maximum, m.maximum_percent, m.average, m.average_percent)
    print(f"[OK] Wrote {args.out}")
    raise SystemExit(0)


if __name__ == "__main__":
    main()
