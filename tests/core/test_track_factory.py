"""
test_track_factory.py

Unit tests for the synthetic cone layouts.
"""

from __future__ import annotations

import numpy as np
import pytest

from cone_racer.core.markers import ConeType, markers_of_type
from cone_racer.core.track_factory import TrackFactory


@pytest.mark.parametrize("name", ["oval", "rounded_rectangle", "kidney"])
def test_closed_layout_structure(name: str) -> None:
    markers = TrackFactory.create(name)

    blues = markers_of_type(markers, ConeType.BLUE)
    yellows = markers_of_type(markers, ConeType.YELLOW)

    assert len(blues) == len(yellows) > 10
    assert len(markers_of_type(markers, ConeType.CAR_START)) == 1
    assert len(markers_of_type(markers, ConeType.ORANGE)) == 2


@pytest.mark.parametrize("name", ["oval", "rounded_rectangle", "kidney"])
def test_pairs_separated_by_track_width(name: str) -> None:
    markers = TrackFactory.create(name, track_width=5.0)

    blues = np.array([[m.x, m.y] for m in markers_of_type(markers, ConeType.BLUE)])
    yellows = np.array([[m.x, m.y] for m in markers_of_type(markers, ConeType.YELLOW)])

    np.testing.assert_allclose(np.linalg.norm(blues - yellows, axis=1), 5.0)


def test_start_marker_between_first_pair() -> None:
    markers = TrackFactory.create("oval")
    blue = markers_of_type(markers, ConeType.BLUE)[0]
    yellow = markers_of_type(markers, ConeType.YELLOW)[0]
    start = markers_of_type(markers, ConeType.CAR_START)[0]

    assert start.x == pytest.approx(0.5 * (blue.x + yellow.x))
    assert start.y == pytest.approx(0.5 * (blue.y + yellow.y))


def test_oval_blue_is_inside() -> None:
    markers = TrackFactory.create("oval")
    blue = markers_of_type(markers, ConeType.BLUE)[0]
    yellow = markers_of_type(markers, ConeType.YELLOW)[0]

    assert np.hypot(blue.x, blue.y) < np.hypot(yellow.x, yellow.y)


def test_straight_rows_layout() -> None:
    markers = TrackFactory.create("straight_rows")

    blues = markers_of_type(markers, ConeType.BLUE)
    yellows = markers_of_type(markers, ConeType.YELLOW)

    assert [m.x for m in blues] == [0.0, 1.0, 2.0, 3.0, 4.0]
    assert all(m.y == 0.0 for m in blues)
    assert all(m.y == 3.0 for m in yellows)


def test_unknown_track_raises() -> None:
    with pytest.raises(ValueError):
        TrackFactory.create("monaco")


def test_available() -> None:
    assert TrackFactory.available() == ["kidney", "oval", "rounded_rectangle", "straight_rows"]
