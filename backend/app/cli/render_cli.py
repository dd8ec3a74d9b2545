# File: backend/app/cli/render_cli.py
# Version: v0.2.1

"""
Command-line interface for rendering a barrier forest.

Reads a forest JSON, structures and colors it, writes the EPS diagram and the
companion artifacts (forest.json, nodes.csv, forest.html, analysis.json).

v0.2.1:
- --outdir defaults to OUTPUT_DIR/<name> from settings.

v0.2.0:
- Optional --conformations adds the neighbor graph and its statistics.
- Backward compatible logging flag: accept both --log-level and legacy --log.
"""

import argparse
import logging
from pathlib import Path

from backend.app.core.config import settings
from backend.app.core.pipeline.py_runner import execute_pipeline


def main() -> None:
    p = argparse.ArgumentParser(description="Barrier forest render CLI")
    p.add_argument("--forest", required=True, type=Path, help="Forest JSON")
    p.add_argument("--outdir", required=False, type=Path,
                   help="Output directory (default: OUTPUT_DIR/<name> from settings)")
    p.add_argument("--config", required=False, type=Path, help="analysis config JSON")
    p.add_argument("--conformations", required=False, type=Path,
                   help="Sampled conformations; enables the neighbor graph export")
    p.add_argument("--name", default=None, help="Job name (default: forest file stem)")
    p.add_argument("--log-level", dest="log_level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging level (default: INFO)")
    p.add_argument("--log", dest="log_level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help=argparse.SUPPRESS)
    args = p.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level))
    log = logging.getLogger("render_cli")

    if not args.forest.is_file():
        log.error("Forest file not found: %s", args.forest)
        raise SystemExit(2)

    job_id = args.name or args.forest.stem
    outdir = args.outdir or Path(settings.OUTPUT_DIR) / job_id
    log.info("=== render ===")
    log.info("FOREST=%s | CONFIG=%s | CONFORMATIONS=%s | OUTDIR=%s | LOG=%s",
             str(args.forest), str(args.config) if args.config else "None",
             str(args.conformations) if args.conformations else "None",
             str(outdir), args.log_level)

    rc = execute_pipeline(
        outdir=outdir,
        forest_path=args.forest,
        job_id=job_id,
        config_path=args.config,
        conformations_path=args.conformations,
    )

    if rc == 0:
        eps = (outdir / "forest.eps").resolve()
        print("")
        print("Diagram:")
        print(f"  • {eps}")
        print(f"    file://{eps.as_posix()}")
        print("")
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
