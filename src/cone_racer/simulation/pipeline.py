"""
cone_racer.simulation.pipeline

Full trajectory recompute for a marker set.

SIMULATION Layer
----------------
Markers -> centerline -> optimizer -> sampler/solver -> metadata.

Every run recomputes everything from scratch. Runs share no mutable state,
so several race modes can be computed side by side in worker processes.
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from cone_racer.core.centerline import CenterlineParams, CenterlinePoint, build_centerline
from cone_racer.core.markers import BoundaryMarker
from cone_racer.core.path import PathProfile
from cone_racer.core.vehicle_model import PhysicsParams
from cone_racer.planning.optimizer_factory import GHOST_MODE, OptimizerFactory, OptimizerMode
from cone_racer.profile.metadata import TrackMetadata, compute_metadata
from cone_racer.profile.sampler import PathSampler, SamplerConfig

_logger = logging.getLogger(__name__)


# ================================================================
# CONFIGURATION
# ================================================================


@dataclass(frozen=True)
class PipelineConfig:
    """
    Pipeline configuration container.

    Parameters
    ----------
    physics : PhysicsParams
        Vehicle constants.
    centerline : CenterlineParams
        Centerline reconstruction thresholds.
    sampler : SamplerConfig
        Curve sampling and solver settings.
    seed : int | None
        Seed for randomized optimizers. None draws fresh entropy.
    track_name : str
        Name reported in the lap metadata.
    """

    physics: PhysicsParams = field(default_factory=PhysicsParams)
    centerline: CenterlineParams = field(default_factory=CenterlineParams)
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    seed: Optional[int] = None
    track_name: str = "Custom Circuit"


# ================================================================
# RESULT CONTAINER
# ================================================================


@dataclass(frozen=True)
class PipelineResult:
    """
    Outputs of a single recompute.

    Parameters
    ----------
    mode : OptimizerMode
        Race mode of the racing line.
    centerline : list[CenterlinePoint]
        Ordered centerline.
    control_points : list[CenterlinePoint]
        Racing-line control points (the centerline for ``NONE``).
    road_path : PathProfile
        Sampled centerline.
    racing_path : PathProfile
        Sampled racing line.
    ghost_path : PathProfile | None
        Sampled search+refine line, when requested.
    metadata : TrackMetadata
        Statistics of the racing line.
    """

    mode: OptimizerMode
    centerline: List[CenterlinePoint]
    control_points: List[CenterlinePoint]
    road_path: PathProfile
    racing_path: PathProfile
    ghost_path: Optional[PathProfile]
    metadata: TrackMetadata


# ================================================================
# PIPELINE
# ================================================================


class TrajectoryPipeline:
    """
    Synchronous trajectory recompute.

    Parameters
    ----------
    config : PipelineConfig
        Pipeline configuration.
    """

    def __init__(self, config: PipelineConfig | None = None) -> None:
        self._config: PipelineConfig = config or PipelineConfig()
        self._sampler: PathSampler = PathSampler(self._config.physics, self._config.sampler)

    # ------------------------------------------------------------

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def sampler(self) -> PathSampler:
        return self._sampler

    # ------------------------------------------------------------

    def optimize(
        self,
        centerline: Sequence[CenterlinePoint],
        mode: OptimizerMode | str,
    ) -> List[CenterlinePoint]:
        """
        Run the optimizer of a race mode on a centerline.

        ``NONE`` returns a copy of the centerline. Randomized optimizers get
        a generator seeded from the configuration, so the same seed always
        gives the same line.
        """
        mode = OptimizerMode(mode)
        if mode is OptimizerMode.NONE:
            return list(centerline)

        rng = np.random.default_rng(self._config.seed)
        optimizer = OptimizerFactory.create(mode, rng=rng)
        return optimizer.optimize(centerline)

    # ------------------------------------------------------------

    def run(
        self,
        markers: Sequence[BoundaryMarker],
        mode: OptimizerMode | str = OptimizerMode.NONE,
        ghost: bool = False,
    ) -> PipelineResult:
        """
        Recompute all paths for a marker set.

        Parameters
        ----------
        markers : Sequence[BoundaryMarker]
            Current markers.
        mode : OptimizerMode | str
            Race mode for the racing line.
        ghost : bool
            Also compute the search+refine ghost line.

        Returns
        -------
        PipelineResult
            Empty paths when no centerline can be built.
        """
        mode = OptimizerMode(mode)
        centerline = build_centerline(markers, self._config.centerline)
        road_path = self._sampler.sample(centerline)

        ghost_points: Optional[List[CenterlinePoint]] = None
        if ghost or mode is GHOST_MODE:
            ghost_points = self.optimize(centerline, GHOST_MODE)

        if mode is OptimizerMode.NONE:
            control_points = list(centerline)
            racing_path = road_path
        elif mode is GHOST_MODE and ghost_points is not None:
            control_points = ghost_points
            racing_path = self._sampler.sample(control_points)
        else:
            control_points = self.optimize(centerline, mode)
            racing_path = self._sampler.sample(control_points)

        ghost_path: Optional[PathProfile] = None
        if ghost and ghost_points is not None:
            ghost_path = racing_path if mode is GHOST_MODE else self._sampler.sample(ghost_points)

        metadata = compute_metadata(racing_path, self._config.physics, self._config.track_name)
        _logger.info(
            "Mode %s: %d centerline points, lap %.2f s over %.1f m",
            mode.value,
            len(centerline),
            metadata.est_lap_time,
            metadata.total_length,
        )

        return PipelineResult(
            mode=mode,
            centerline=centerline,
            control_points=control_points,
            road_path=road_path,
            racing_path=racing_path,
            ghost_path=ghost_path,
            metadata=metadata,
        )


# ================================================================
# MULTI-MODE
# ================================================================


def _run_mode(
    task: Tuple[Tuple[BoundaryMarker, ...], OptimizerMode, PipelineConfig],
) -> PipelineResult:
    markers, mode, config = task
    return TrajectoryPipeline(config).run(markers, mode)


def compute_modes(
    markers: Sequence[BoundaryMarker],
    modes: Iterable[OptimizerMode | str],
    config: PipelineConfig | None = None,
    *,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> Dict[OptimizerMode, PipelineResult]:
    """
    Compute several race modes for the same markers.

    Parameters
    ----------
    markers : Sequence[BoundaryMarker]
        Current markers; every task gets its own copy.
    modes : Iterable[OptimizerMode | str]
        Modes to compute.
    config : PipelineConfig | None
        Shared configuration (including the seed).
    parallel : bool
        Fan out over a ProcessPoolExecutor.
    max_workers : int | None
        Worker count for the pool.

    Returns
    -------
    dict[OptimizerMode, PipelineResult]
        Results in the order the modes were given.
    """
    config = config or PipelineConfig()
    mode_list = [OptimizerMode(m) for m in modes]
    tasks = [(tuple(markers), mode, config) for mode in mode_list]

    if parallel and len(tasks) > 1:
        with ProcessPoolExecutor(max_workers=max_workers) as ex:
            results = list(ex.map(_run_mode, tasks))
    else:
        results = [_run_mode(task) for task in tasks]

    return dict(zip(mode_list, results))
