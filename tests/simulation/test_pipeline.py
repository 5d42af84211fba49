"""
test_pipeline.py

End-to-end tests for TrajectoryPipeline and compute_modes.

These tests verify:
- Full recompute from markers to metadata
- Determinism given a seed
- Ghost line handling
- Empty results for unusable marker sets
"""

from __future__ import annotations

from typing import List

import numpy as np
import pytest

from cone_racer.core.centerline import CenterlineParams
from cone_racer.core.markers import BoundaryMarker, ConeType, markers_of_type, moved_marker
from cone_racer.core.track_factory import TrackFactory
from cone_racer.planning.optimizer_factory import GHOST_MODE, OptimizerMode
from cone_racer.profile.metadata import EMPTY_METADATA
from cone_racer.simulation.pipeline import PipelineConfig, TrajectoryPipeline, compute_modes


@pytest.fixture(scope="module")
def oval_markers() -> List[BoundaryMarker]:
    return TrackFactory.create("oval")


def test_raw_centerline_mode(oval_markers: List[BoundaryMarker]) -> None:
    result = TrajectoryPipeline().run(oval_markers)

    assert result.mode is OptimizerMode.NONE
    assert result.racing_path is result.road_path
    assert result.control_points == result.centerline
    assert result.ghost_path is None
    assert result.metadata.est_lap_time > 0.0
    assert result.metadata.total_length == pytest.approx(result.racing_path.total_length)


def test_optimized_line_is_shorter(oval_markers: List[BoundaryMarker]) -> None:
    pipeline = TrajectoryPipeline()
    raw = pipeline.run(oval_markers, OptimizerMode.NONE)
    smooth = pipeline.run(oval_markers, OptimizerMode.LAPLACIAN)

    assert smooth.metadata.total_length < raw.metadata.total_length


def test_seeded_runs_identical(oval_markers: List[BoundaryMarker]) -> None:
    config = PipelineConfig(seed=42)
    a = TrajectoryPipeline(config).run(oval_markers, OptimizerMode.SHORTCUT)
    b = TrajectoryPipeline(config).run(oval_markers, "shortcut")

    assert a.control_points == b.control_points
    np.testing.assert_array_equal(a.racing_path.velocity, b.racing_path.velocity)
    assert a.metadata == b.metadata


def test_ghost_line(oval_markers: List[BoundaryMarker]) -> None:
    pipeline = TrajectoryPipeline(PipelineConfig(seed=1))

    with_ghost = pipeline.run(oval_markers, OptimizerMode.HYBRID, ghost=True)
    assert with_ghost.ghost_path is not None
    assert len(with_ghost.ghost_path) == len(with_ghost.racing_path)

    ghost_mode = pipeline.run(oval_markers, GHOST_MODE, ghost=True)
    assert ghost_mode.ghost_path is ghost_mode.racing_path


def test_straight_rows_end_to_end() -> None:
    markers = TrackFactory.create("straight_rows")
    config = PipelineConfig(centerline=CenterlineParams(min_spacing=0.5))

    result = TrajectoryPipeline(config).run(markers)

    assert [p.x for p in result.centerline] == pytest.approx([0.0, 1.0, 2.0, 3.0, 4.0])
    assert all(p.y == 1.5 for p in result.centerline)
    assert len(result.racing_path) == 201


def test_unusable_markers_give_empty_result() -> None:
    blues = [BoundaryMarker.create(float(i), 0.0, ConeType.BLUE) for i in range(10)]

    result = TrajectoryPipeline().run(blues, OptimizerMode.HYBRID, ghost=True)

    assert result.centerline == []
    assert result.racing_path.is_empty
    assert result.road_path.is_empty
    assert result.metadata is EMPTY_METADATA


def test_moving_a_marker_changes_result(oval_markers: List[BoundaryMarker]) -> None:
    pipeline = TrajectoryPipeline()
    cone = markers_of_type(oval_markers, ConeType.YELLOW)[5]

    before = pipeline.run(oval_markers)
    after = pipeline.run(moved_marker(oval_markers, cone.id, cone.x + 1.0, cone.y + 1.0))

    assert after.centerline != before.centerline
    assert len(after.centerline) == len(before.centerline)


def test_compute_modes_sequential(oval_markers: List[BoundaryMarker]) -> None:
    modes = [OptimizerMode.NONE, OptimizerMode.LAPLACIAN, "biharmonic"]
    results = compute_modes(oval_markers, modes, PipelineConfig(seed=0))

    assert list(results) == [OptimizerMode.NONE, OptimizerMode.LAPLACIAN, OptimizerMode.BIHARMONIC]
    assert all(r.mode is m for m, r in results.items())

    single = TrajectoryPipeline(PipelineConfig(seed=0)).run(oval_markers, OptimizerMode.LAPLACIAN)
    assert results[OptimizerMode.LAPLACIAN].metadata == single.metadata


def test_invalid_mode(oval_markers: List[BoundaryMarker]) -> None:
    with pytest.raises(ValueError):
        TrajectoryPipeline().run(oval_markers, "warp")


def test_compute_modes_parallel_matches_sequential(oval_markers: List[BoundaryMarker]) -> None:
    modes = [OptimizerMode.NONE, OptimizerMode.LAPLACIAN]
    config = PipelineConfig(seed=3)

    pooled = compute_modes(oval_markers, modes, config, parallel=True, max_workers=2)
    serial = compute_modes(oval_markers, modes, config)

    assert list(pooled) == modes
    for mode in modes:
        assert pooled[mode].mode is mode
        assert pooled[mode].metadata == serial[mode].metadata
        np.testing.assert_array_equal(pooled[mode].racing_path.velocity, serial[mode].racing_path.velocity)
