"""
test_centerline.py

Unit tests for centerline reconstruction.

These tests verify:
- Straight rows produce the exact midline in marker order
- Pairing distance bound
- Overlap filtering
- Ordering starts near the start marker
- Empty output for unusable marker sets
"""

from __future__ import annotations

from typing import List

import numpy as np
import pytest

from cone_racer.core.centerline import (
    CenterlineParams,
    CenterlinePoint,
    build_centerline,
    from_array,
    to_array,
)
from cone_racer.core.markers import BoundaryMarker, ConeType
from cone_racer.core.track_factory import TrackFactory


@pytest.fixture
def straight_rows() -> List[BoundaryMarker]:
    return TrackFactory.create("straight_rows")


def test_straight_rows_midline(straight_rows: List[BoundaryMarker]) -> None:
    centerline = build_centerline(straight_rows, CenterlineParams(min_spacing=0.5))

    assert len(centerline) == 5
    assert [p.x for p in centerline] == pytest.approx([0.0, 1.0, 2.0, 3.0, 4.0])
    assert all(p.y == 1.5 for p in centerline)
    assert all(p.half_width == pytest.approx(1.5) for p in centerline)


def test_min_spacing_drops_close_pairs(straight_rows: List[BoundaryMarker]) -> None:
    centerline = build_centerline(straight_rows, CenterlineParams(min_spacing=2.0))

    assert [p.x for p in centerline] == pytest.approx([0.0, 2.0, 4.0])


def test_default_spacing_leaves_too_few_points(straight_rows: List[BoundaryMarker]) -> None:
    assert build_centerline(straight_rows) == []


def test_pairs_wider_than_limit_rejected() -> None:
    markers = [
        BoundaryMarker.create(x, 0.0, ConeType.BLUE) for x in (0.0, 5.0, 10.0)
    ] + [
        BoundaryMarker.create(x, 4.0, ConeType.YELLOW) for x in (0.0, 5.0, 10.0)
    ]

    assert build_centerline(markers, CenterlineParams(max_track_width=3.0)) == []
    assert len(build_centerline(markers, CenterlineParams(max_track_width=5.0))) == 3


def test_missing_boundary_colour_gives_empty() -> None:
    blues = [BoundaryMarker.create(x, 0.0, ConeType.BLUE) for x in range(10)]
    assert build_centerline(blues) == []
    assert build_centerline([]) == []


def test_too_few_points_gives_empty() -> None:
    markers = [
        BoundaryMarker.create(0.0, 0.0, ConeType.BLUE),
        BoundaryMarker.create(0.0, 3.0, ConeType.YELLOW),
        BoundaryMarker.create(5.0, 0.0, ConeType.BLUE),
        BoundaryMarker.create(5.0, 3.0, ConeType.YELLOW),
    ]
    assert build_centerline(markers) == []


def test_half_widths_within_pairing_bound() -> None:
    params = CenterlineParams()
    centerline = build_centerline(TrackFactory.create("kidney"), params)

    assert len(centerline) > 10
    assert all(0.0 < p.half_width < params.max_track_width / 2.0 for p in centerline)


def test_oval_ordering_starts_at_start_marker() -> None:
    markers = TrackFactory.create("oval")
    start = next(m for m in markers if m.type == ConeType.CAR_START)

    centerline = build_centerline(markers)
    first = centerline[0]

    assert np.hypot(first.x - start.x, first.y - start.y) < 2.5
    # consecutive points stay close, so the walk follows the loop
    pts = to_array(centerline)[:, :2]
    steps = np.linalg.norm(np.diff(pts, axis=0), axis=1)
    assert np.all(steps < 10.0)


def test_oval_ordering_visits_every_pair() -> None:
    markers = TrackFactory.create("oval")
    yellows = [m for m in markers if m.type == ConeType.YELLOW]

    centerline = build_centerline(markers)
    assert len(centerline) == len(yellows)
    assert len({(p.x, p.y) for p in centerline}) == len(centerline)


def test_array_round_trip() -> None:
    points = [CenterlinePoint(0.0, 1.0, 2.0), CenterlinePoint(3.0, 4.0, 5.0)]
    arr = to_array(points)

    assert arr.shape == (2, 3)
    assert from_array(arr[:, :2], arr[:, 2]) == points
    assert to_array([]).shape == (0, 3)


def test_params_validation() -> None:
    with pytest.raises(ValueError):
        CenterlineParams(max_track_width=0.0)
    with pytest.raises(ValueError):
        CenterlineParams(min_spacing=-1.0)


@pytest.mark.parametrize("name", ["oval", "rounded_rectangle", "kidney", "straight_rows"])
def test_point_count_bounded_by_yellow_markers(name: str) -> None:
    markers = TrackFactory.create(name)
    yellows = [m for m in markers if m.type == ConeType.YELLOW]

    assert len(build_centerline(markers, CenterlineParams(min_spacing=0.5))) <= len(yellows)
