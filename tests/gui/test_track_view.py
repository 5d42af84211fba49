"""
test_track_view.py

Tests for the world -> screen transform. No window is opened.
"""

from __future__ import annotations

import numpy as np
import pytest

from cone_racer.core.path import PathProfile
from cone_racer.gui.track_view import TrackView, TrackViewConfig, fit_view


def test_fit_view_centres_points() -> None:
    points = np.array([[-10.0, -5.0], [10.0, 5.0]])
    ppm, (ox, oy) = fit_view(points, 440, 240, margin_px=20)

    assert ppm == pytest.approx(20.0)
    assert (ox, oy) == (220, 120)


def test_fit_view_empty() -> None:
    assert fit_view(np.zeros((0, 2)), 100, 50) == (1.0, (50, 25))


def test_world_to_screen_flips_y() -> None:
    empty = PathProfile.empty()
    view = TrackView(
        markers=[],
        road_path=empty,
        racing_path=empty,
        config=TrackViewConfig(pixels_per_meter=2.0),
        screen_offset_px=(100, 100),
    )

    assert view.world_to_screen(np.array([[0.0, 0.0], [5.0, 10.0]])) == [(100, 100), (110, 80)]
