"""
cone_racer.main_batch

Batch entry point: markers in, racing line and lap statistics out.

Architecture
------------
- Pipeline recreated per run.
- No shared mutable state.
- Deterministic given seed.
- Mode comparison is parallel-safe.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from cone_racer.core.markers import BoundaryMarker, parse_markers
from cone_racer.core.track_factory import TrackFactory
from cone_racer.core.vehicle_factory import DEFAULT_VEHICLE, VehicleFactory
from cone_racer.planning.optimizer_factory import OptimizerMode
from cone_racer.profile.metadata import TrackMetadata
from cone_racer.simulation.pipeline import (
    PipelineConfig,
    PipelineResult,
    TrajectoryPipeline,
    compute_modes,
)
from cone_racer.utils.export import write_csv
from cone_racer.utils.logger import TrajectoryLogger

_logger = logging.getLogger(__name__)


# ================================================================
# ARGUMENTS
# ================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cone-racer",
        description="Compute a racing line and speed profile from cone markers",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--csv", type=Path, help="Marker file (tag,x,y per line)")
    source.add_argument(
        "--preset",
        default="oval",
        choices=TrackFactory.available(),
        help="Synthetic layout used when no marker file is given",
    )

    parser.add_argument(
        "--mode",
        default=OptimizerMode.HYBRID.value,
        choices=[m.value for m in OptimizerMode],
        help="Race mode for the racing line",
    )
    parser.add_argument(
        "--vehicle",
        default=DEFAULT_VEHICLE,
        choices=VehicleFactory.available(),
        help="Vehicle preset",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for randomized modes")
    parser.add_argument("--ghost", action="store_true", help="Also compute the ghost line")
    parser.add_argument("--export", type=Path, help="Write the racing line as CSV")
    parser.add_argument("--log", type=Path, help="Write a JSON-lines run log")
    parser.add_argument("--compare", action="store_true", help="Compute every race mode")
    parser.add_argument("--view", action="store_true", help="Open the pygame viewer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


# ================================================================
# HELPERS
# ================================================================


def load_markers(csv_path: Optional[Path], preset: str) -> List[BoundaryMarker]:
    if csv_path is not None:
        return parse_markers(csv_path.read_text(encoding="utf-8"))
    return TrackFactory.create(preset)


def format_metadata(mode: OptimizerMode, meta: TrackMetadata) -> str:
    return (
        f"{mode.value:<20} length {meta.total_length:8.1f} m  "
        f"lap {meta.est_lap_time:7.2f} s  avg {meta.avg_speed:6.2f} m/s  "
        f"lat {meta.max_lat_g:5.2f} g  long {meta.min_long_g:5.2f}/{meta.max_long_g:4.2f} g"
    )


# ================================================================
# MAIN
# ================================================================


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the pipeline once, or once per race mode with ``--compare``.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    markers = load_markers(args.csv, args.preset)
    _logger.info("Loaded %d markers", len(markers))

    config = PipelineConfig(
        physics=VehicleFactory.create_params(args.vehicle),
        seed=args.seed,
    )

    if args.compare:
        modes = [OptimizerMode.NONE] + [m for m in OptimizerMode if m is not OptimizerMode.NONE]
        results = compute_modes(markers, modes, config, parallel=True)
    else:
        pipeline = TrajectoryPipeline(config)
        result = pipeline.run(markers, args.mode, ghost=args.ghost)
        results = {result.mode: result}

    print("=== Trajectory Computation Complete ===")
    for mode, res in results.items():
        print(format_metadata(mode, res.metadata))

    selected: PipelineResult = results.get(OptimizerMode(args.mode)) or next(iter(results.values()))

    if args.export is not None:
        write_csv(selected.racing_path, args.export)
        _logger.info("Racing line written to %s", args.export)

    if args.log is not None:
        with TrajectoryLogger(args.log) as run_log:
            for mode, res in results.items():
                run_log.log_trajectory(mode=mode.value, seed=args.seed, metadata=res.metadata)

    if args.view:
        from cone_racer.gui.app import App

        App(markers, selected).run()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
