"""
centerline.py

Track centerline reconstruction from unordered boundary markers.

Algorithm
---------
1. Pairing
   Every yellow (right) marker is paired with its nearest blue (left)
   marker. Pairs wider than ``max_track_width`` are rejected; they usually
   bridge a missing-marker gap or the far side of a hairpin.

2. Overlap filtering
   Candidates are sorted by pairing distance (tight, well-defined sections
   first) and greedily accepted only if their midpoint keeps
   ``min_spacing`` to every accepted midpoint. This suppresses duplicate
   points that would tie knots into the loop.

3. Ordering
   Greedy nearest-neighbour walk from the point closest to the start
   marker, scoring candidates with ``distance * (3 - 2 * alignment)`` where
   alignment is the cosine between the current heading and the candidate
   direction. The walk stops at the first jump wider than
   ``max_track_width``.

Notes
-----
This module belongs to the CORE layer. It never raises on bad data: an
unusable marker set yields an empty centerline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from cone_racer.core.markers import BoundaryMarker, ConeType, markers_of_type

FloatArray = NDArray[np.float64]

_logger = logging.getLogger(__name__)

MIN_CENTERLINE_POINTS: int = 3


# ============================================================
# Configuration
# ============================================================


@dataclass(frozen=True)
class CenterlineParams:
    """
    Centerline reconstruction thresholds.

    Parameters
    ----------
    max_track_width : float
        Maximum accepted pairing distance, also the maximum ordering jump (m).
    min_spacing : float
        Minimum distance between accepted midpoints (m).
    """

    max_track_width: float = 35.0
    min_spacing: float = 2.5

    def __post_init__(self) -> None:
        if self.max_track_width <= 0.0:
            raise ValueError("max_track_width must be positive.")
        if self.min_spacing < 0.0:
            raise ValueError("min_spacing must be non-negative.")


# ============================================================
# Centerline point
# ============================================================


@dataclass(frozen=True)
class CenterlinePoint:
    """
    Immutable control point with its local track half-width.

    Parameters
    ----------
    x : float
        Global x-position [m].
    y : float
        Global y-position [m].
    half_width : float
        Half the distance between the paired boundary markers [m].
    """

    x: float
    y: float
    half_width: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.half_width)

    def copy_with(self, *, x: float | None = None, y: float | None = None) -> CenterlinePoint:
        """
        Return new point with a replaced position and the same half-width.
        """
        return CenterlinePoint(
            x=self.x if x is None else float(x),
            y=self.y if y is None else float(y),
            half_width=self.half_width,
        )


def to_array(points: Sequence[CenterlinePoint]) -> FloatArray:
    """
    Pack control points into an (N, 3) array of ``[x, y, half_width]``.

    The result is always a new array.
    """
    if len(points) == 0:
        return np.zeros((0, 3), dtype=np.float64)
    return np.array([p.as_tuple() for p in points], dtype=np.float64)


def from_array(positions: FloatArray, half_widths: FloatArray) -> List[CenterlinePoint]:
    """
    Unpack (N, 2) positions and (N,) half-widths into control points.
    """
    return [
        CenterlinePoint(x=float(x), y=float(y), half_width=float(w))
        for (x, y), w in zip(positions, half_widths)
    ]


# ============================================================
# Reconstruction steps
# ============================================================


def _marker_xy(markers: Iterable[BoundaryMarker]) -> FloatArray:
    return np.array([[m.x, m.y] for m in markers], dtype=np.float64).reshape(-1, 2)


def _pair_candidates(
    yellows: FloatArray,
    blues: FloatArray,
    max_track_width: float,
) -> Tuple[FloatArray, FloatArray]:
    """
    Pair each yellow marker with its nearest blue marker.

    Returns
    -------
    midpoints : ndarray of shape (K, 2)
    pairing_dist : ndarray of shape (K,)
    """
    # (Y, B) distance matrix
    diffs = yellows[:, None, :] - blues[None, :, :]
    dists = np.linalg.norm(diffs, axis=2)
    nearest = np.argmin(dists, axis=1)
    nearest_dist = dists[np.arange(yellows.shape[0]), nearest]

    keep = nearest_dist < max_track_width
    midpoints = 0.5 * (yellows[keep] + blues[nearest[keep]])
    return midpoints, nearest_dist[keep]


def _filter_overlaps(
    midpoints: FloatArray,
    pairing_dist: FloatArray,
    min_spacing: float,
) -> Tuple[FloatArray, FloatArray]:
    """
    Greedily accept midpoints, tightest pairs first, keeping min_spacing.
    """
    order = np.argsort(pairing_dist, kind="stable")
    min_spacing_sq = min_spacing * min_spacing

    accepted: List[int] = []
    for idx in order:
        if accepted:
            d = midpoints[accepted] - midpoints[idx]
            if np.any(np.einsum("ij,ij->i", d, d) < min_spacing_sq):
                continue
        accepted.append(int(idx))

    return midpoints[accepted], pairing_dist[accepted]


def _order_loop(
    points: FloatArray,
    start: FloatArray,
    max_jump: float,
) -> List[int]:
    """
    Order points by a heading-aware greedy nearest-neighbour walk.

    Returns
    -------
    list[int]
        Indices into ``points`` in driving order.
    """
    n = points.shape[0]
    visited = np.zeros(n, dtype=bool)

    current = int(np.argmin(np.linalg.norm(points - start, axis=1)))
    ordered = [current]
    visited[current] = True

    while len(ordered) < n:
        deltas = points - points[current]
        dists = np.linalg.norm(deltas, axis=1)

        penalty = np.ones(n, dtype=np.float64)
        if len(ordered) > 1:
            heading = points[ordered[-1]] - points[ordered[-2]]
            heading_norm = np.linalg.norm(heading)
            if heading_norm > 0.0:
                heading = heading / heading_norm
                with np.errstate(invalid="ignore", divide="ignore"):
                    directions = deltas / dists[:, None]
                alignment = np.nan_to_num(directions @ heading)
                # 1.0 = straight ahead, 5.0 = straight back
                penalty = 3.0 - 2.0 * alignment

        scores = np.where(visited, np.inf, dists * penalty)
        nearest = int(np.argmin(scores))

        if not np.isfinite(scores[nearest]) or dists[nearest] > max_jump:
            _logger.warning(
                "Centerline ordering stopped after %d of %d points (next jump %.2f m)",
                len(ordered),
                n,
                float(dists[nearest]),
            )
            break

        ordered.append(nearest)
        visited[nearest] = True
        current = nearest

    return ordered


# ============================================================
# Public API
# ============================================================


def build_centerline(
    markers: Sequence[BoundaryMarker],
    params: CenterlineParams | None = None,
) -> List[CenterlinePoint]:
    """
    Reconstruct the ordered track centerline.

    Parameters
    ----------
    markers : Sequence[BoundaryMarker]
        Unordered markers of any category.
    params : CenterlineParams | None
        Thresholds; defaults apply when omitted.

    Returns
    -------
    list[CenterlinePoint]
        Ordered centerline in driving direction, or an empty list when
        either boundary colour is missing or fewer than three points
        survive.
    """
    params = params or CenterlineParams()

    blues = _marker_xy(markers_of_type(markers, ConeType.BLUE))
    yellows = _marker_xy(markers_of_type(markers, ConeType.YELLOW))
    if blues.shape[0] == 0 or yellows.shape[0] == 0:
        _logger.warning("Centerline needs both blue and yellow markers")
        return []

    start_markers = markers_of_type(markers, ConeType.CAR_START)
    start = (
        np.array([start_markers[0].x, start_markers[0].y], dtype=np.float64)
        if start_markers
        else np.zeros(2, dtype=np.float64)
    )

    midpoints, pairing_dist = _pair_candidates(yellows, blues, params.max_track_width)
    if midpoints.shape[0] == 0:
        return []

    midpoints, pairing_dist = _filter_overlaps(midpoints, pairing_dist, params.min_spacing)

    order = _order_loop(midpoints, start, params.max_track_width)
    if len(order) < MIN_CENTERLINE_POINTS:
        return []

    _logger.debug(
        "Centerline: %d yellow markers -> %d ordered points",
        yellows.shape[0],
        len(order),
    )
    return from_array(midpoints[order], 0.5 * pairing_dist[order])
