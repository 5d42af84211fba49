"""
Shared centerline fixtures for optimizer tests.
"""

from __future__ import annotations

from typing import List

import pytest

from cone_racer.core.centerline import CenterlinePoint, build_centerline
from cone_racer.core.track_factory import TrackFactory


@pytest.fixture
def square() -> List[CenterlinePoint]:
    """
    Counter-clockwise 20 m square with unit spacing, starting at a corner.
    """
    side = 20
    pts = [(float(i), 0.0) for i in range(side)]
    pts += [(float(side), float(i)) for i in range(side)]
    pts += [(float(side - i), float(side)) for i in range(side)]
    pts += [(0.0, float(side - i)) for i in range(side)]
    return [CenterlinePoint(x, y, 2.0) for x, y in pts]


@pytest.fixture
def line() -> List[CenterlinePoint]:
    """
    Straight collinear centerline with equal half-widths.
    """
    return [CenterlinePoint(float(i), 0.0, 1.5) for i in range(120)]


@pytest.fixture(scope="module")
def oval_centerline() -> List[CenterlinePoint]:
    return build_centerline(TrackFactory.create("oval"))
