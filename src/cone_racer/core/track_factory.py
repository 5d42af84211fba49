"""
track_factory.py

Factory system for generating deterministic synthetic cone layouts.

Each generator builds a closed centerline, resamples it at a fixed cone
spacing and places a blue cone on the left and a yellow cone on the right
of every sample (driving counter-clockwise). A car_start marker sits on
the first centerline sample and a pair of orange cones marks the line.
"""

from __future__ import annotations

from typing import List

import numpy as np
from numpy.typing import NDArray

from cone_racer.core.markers import BoundaryMarker, ConeType
from cone_racer.utils.registry import Registry


FloatArray = NDArray[np.float64]

_track_registry: Registry[List[BoundaryMarker]] = Registry("track")


# ================================================================
# Helpers
# ================================================================


def _resample_closed(points: FloatArray, spacing: float) -> FloatArray:
    """
    Resample a closed polyline at (approximately) uniform spacing.
    """
    closed = np.vstack((points, points[:1]))
    seg = np.linalg.norm(np.diff(closed, axis=0), axis=1)
    s = np.zeros(closed.shape[0], dtype=np.float64)
    s[1:] = np.cumsum(seg)

    count = max(3, int(round(s[-1] / spacing)))
    targets = np.linspace(0.0, s[-1], count, endpoint=False)
    xs = np.interp(targets, s, closed[:, 0])
    ys = np.interp(targets, s, closed[:, 1])
    return np.column_stack((xs, ys))


def _left_normals(points: FloatArray, closed: bool) -> FloatArray:
    """
    Unit normals pointing to the left of the driving direction.
    """
    if closed:
        tangents = np.roll(points, -1, axis=0) - np.roll(points, 1, axis=0)
    else:
        tangents = np.zeros_like(points)
        tangents[1:-1] = points[2:] - points[:-2]
        tangents[0] = points[1] - points[0]
        tangents[-1] = points[-1] - points[-2]

    norms = np.linalg.norm(tangents, axis=1, keepdims=True)
    tangents = tangents / norms
    return np.column_stack([-tangents[:, 1], tangents[:, 0]])


def _cones_along(
    centerline: FloatArray,
    track_width: float,
    closed: bool = True,
) -> List[BoundaryMarker]:
    """
    Place boundary cones, start marker and start-line cones.
    """
    normals = _left_normals(centerline, closed)
    half_width = track_width / 2.0
    left = centerline + half_width * normals
    right = centerline - half_width * normals

    markers: List[BoundaryMarker] = []
    for (bx, by), (yx, yy) in zip(left, right):
        markers.append(BoundaryMarker.create(bx, by, ConeType.BLUE))
        markers.append(BoundaryMarker.create(yx, yy, ConeType.YELLOW))

    sx, sy = centerline[0]
    markers.append(BoundaryMarker.create(sx, sy, ConeType.CAR_START))

    # start line slightly outside the first cone pair
    for side in (1.0, -1.0):
        ox, oy = centerline[0] + side * (half_width + 0.5) * normals[0]
        markers.append(BoundaryMarker.create(ox, oy, ConeType.ORANGE))

    return markers


# ================================================================
# Track Generators
# ================================================================


def _oval(
    radius_x: float = 40.0,
    radius_y: float = 25.0,
    track_width: float = 4.0,
    cone_spacing: float = 3.5,
) -> List[BoundaryMarker]:
    angles = np.linspace(0.0, 2.0 * np.pi, 720, endpoint=False)
    dense = np.column_stack((radius_x * np.cos(angles), radius_y * np.sin(angles)))
    return _cones_along(_resample_closed(dense, cone_spacing), track_width)


def _rounded_rectangle(
    length: float = 80.0,
    width: float = 40.0,
    corner_radius: float = 10.0,
    track_width: float = 4.0,
    cone_spacing: float = 3.5,
) -> List[BoundaryMarker]:
    hx = length / 2.0 - corner_radius
    hy = width / 2.0 - corner_radius
    corners = [(hx, hy, 0.0), (-hx, hy, 0.5 * np.pi), (-hx, -hy, np.pi), (hx, -hy, 1.5 * np.pi)]

    pieces: List[FloatArray] = []
    for cx, cy, start in corners:
        arc = np.linspace(start, start + 0.5 * np.pi, 90, endpoint=False)
        pieces.append(
            np.column_stack((cx + corner_radius * np.cos(arc), cy + corner_radius * np.sin(arc)))
        )

    # start on the middle of the right-hand straight
    dense = np.vstack([np.array([[length / 2.0, 0.0]])] + pieces)
    return _cones_along(_resample_closed(dense, cone_spacing), track_width)


def _kidney(
    base_radius: float = 45.0,
    track_width: float = 4.0,
    cone_spacing: float = 3.5,
) -> List[BoundaryMarker]:
    angles = np.linspace(0.0, 2.0 * np.pi, 1440, endpoint=False)
    radius = base_radius + 10.0 * np.sin(2.0 * angles) + 5.0 * np.sin(3.0 * angles)
    dense = np.column_stack((radius * np.cos(angles), radius * np.sin(angles)))
    return _cones_along(_resample_closed(dense, cone_spacing), track_width)


def _straight_rows(
    count: int = 5,
    spacing: float = 1.0,
    track_width: float = 3.0,
) -> List[BoundaryMarker]:
    xs = np.arange(count, dtype=np.float64) * spacing
    markers = [BoundaryMarker.create(x, 0.0, ConeType.BLUE) for x in xs]
    markers += [BoundaryMarker.create(x, track_width, ConeType.YELLOW) for x in xs]
    markers.append(BoundaryMarker.create(-0.5 * spacing, 0.5 * track_width, ConeType.CAR_START))
    return markers


# ================================================================
# Registry Setup
# ================================================================

_track_registry.register("oval", _oval)
_track_registry.register("rounded_rectangle", _rounded_rectangle)
_track_registry.register("kidney", _kidney)
_track_registry.register("straight_rows", _straight_rows)


# ================================================================
# Public API
# ================================================================


class TrackFactory:
    """
    Public synthetic track factory interface.
    """

    @staticmethod
    def create(name: str, **kwargs) -> List[BoundaryMarker]:
        return _track_registry.create(name, **kwargs)

    @staticmethod
    def available() -> list[str]:
        return _track_registry.available
