"""
corridor.py

Width constraint and generic iterate-and-constrain driver shared by the
path optimizers.

A Corridor is the set of discs of radius ``fraction * half_width`` centred on
the reference centerline points. Every optimizer step moves points toward a
target, then projects each point back into the disc of the reference point
with the same index.

Target functions
----------------
Targets map an (N, 2) path to an (N, 2) array of per-point targets:

- laplacian_target    mean of the two neighbours (shortest path)
- biharmonic_target   (-p[i-2] + 4p[i-1] + 4p[i+1] - p[i+2]) / 6
                      (minimum curvature)
- blended_target      weighted mix of the two
- open_laplacian_target
                      neighbour mean on an open polyline, endpoints map to
                      themselves

Closed-loop targets wrap around at the ends.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np
from numpy.typing import NDArray

FloatArray = NDArray[np.float64]
BoolArray = NDArray[np.bool_]
TargetFn = Callable[[FloatArray], FloatArray]


# ================================================================
# CORRIDOR
# ================================================================


class Corridor:
    """
    Per-point circular width constraint around reference points.

    Parameters
    ----------
    centers : ndarray of shape (N, 2)
        Reference centerline positions.
    half_widths : ndarray of shape (N,)
        Local track half-widths.
    fraction : float
        Usable share of the half-width, in (0, 1].
    """

    def __init__(
        self,
        centers: FloatArray,
        half_widths: FloatArray,
        fraction: float,
    ) -> None:
        centers = np.asarray(centers, dtype=np.float64)
        half_widths = np.asarray(half_widths, dtype=np.float64)

        if centers.ndim != 2 or centers.shape[1] != 2:
            raise ValueError("centers must be of shape (N, 2)")
        if half_widths.shape != (centers.shape[0],):
            raise ValueError("half_widths must be of shape (N,)")
        if not (0.0 < fraction <= 1.0):
            raise ValueError("fraction must be in (0, 1].")

        self._centers: FloatArray = centers.copy()
        self._limits: FloatArray = fraction * half_widths
        self._limits_sq: FloatArray = self._limits * self._limits
        self._fraction: float = fraction

    # ------------------------------------------------------------

    @property
    def centers(self) -> FloatArray:
        return self._centers

    @property
    def limits(self) -> FloatArray:
        """
        Maximum allowed deviation per point.
        """
        return self._limits

    @property
    def fraction(self) -> float:
        return self._fraction

    def __len__(self) -> int:
        return int(self._centers.shape[0])

    # ------------------------------------------------------------

    def project(self, points: FloatArray) -> FloatArray:
        """
        Project points back inside their discs.

        Distances are compared squared; the square root is only taken for
        points that actually need projecting.

        Parameters
        ----------
        points : ndarray of shape (N, 2)

        Returns
        -------
        ndarray of shape (N, 2)
            New array; points already inside are returned unchanged.
        """
        offsets = points - self._centers
        dist_sq = np.einsum("ij,ij->i", offsets, offsets)
        outside = dist_sq > self._limits_sq

        projected = np.array(points, dtype=np.float64, copy=True)
        if np.any(outside):
            ratio = self._limits[outside] / np.sqrt(dist_sq[outside])
            projected[outside] = self._centers[outside] + offsets[outside] * ratio[:, None]
        return projected

    # ------------------------------------------------------------

    def deviations(self, points: FloatArray) -> FloatArray:
        """
        Euclidean distance of each point to its reference point.
        """
        return np.linalg.norm(points - self._centers, axis=1)

    def contains(self, points: FloatArray, tol: float = 1e-9) -> bool:
        """
        True if every point lies within its disc (with tolerance).
        """
        return bool(np.all(self.deviations(points) <= self._limits + tol))


# ================================================================
# TARGET FUNCTIONS
# ================================================================


def laplacian_target(path: FloatArray) -> FloatArray:
    """
    Mean of the two closed-loop neighbours.
    """
    return 0.5 * (np.roll(path, 1, axis=0) + np.roll(path, -1, axis=0))


def biharmonic_target(path: FloatArray) -> FloatArray:
    """
    Four-point quartic estimate of the closed-loop neighbours.
    """
    return (
        -np.roll(path, 2, axis=0)
        + 4.0 * np.roll(path, 1, axis=0)
        + 4.0 * np.roll(path, -1, axis=0)
        - np.roll(path, -2, axis=0)
    ) / 6.0


def blended_target(biharmonic_weight: float) -> TargetFn:
    """
    Build a target mixing the Laplacian and biharmonic targets.

    Parameters
    ----------
    biharmonic_weight : float
        Share of the biharmonic (curvature) target in [0, 1].
    """
    if not (0.0 <= biharmonic_weight <= 1.0):
        raise ValueError("biharmonic_weight must be in [0, 1].")

    def _target(path: FloatArray) -> FloatArray:
        return (1.0 - biharmonic_weight) * laplacian_target(path) + (
            biharmonic_weight * biharmonic_target(path)
        )

    return _target


def open_laplacian_target(path: FloatArray) -> FloatArray:
    """
    Neighbour mean on an open polyline; endpoints target themselves.
    """
    target = np.array(path, dtype=np.float64, copy=True)
    if path.shape[0] > 2:
        target[1:-1] = 0.5 * (path[:-2] + path[2:])
    return target


# ================================================================
# DRIVER
# ================================================================


def relax(
    path: FloatArray,
    corridor: Corridor,
    target_fn: TargetFn,
    step: float,
    iterations: int,
    fixed: Optional[BoolArray] = None,
) -> FloatArray:
    """
    Iterate-and-constrain driver.

    Each iteration computes all targets from the previous positions,
    moves every point ``step`` of the way toward its target, then projects
    into the corridor.

    Parameters
    ----------
    path : ndarray of shape (N, 2)
        Starting positions. Not modified.
    corridor : Corridor
        Width constraint with N reference points.
    target_fn : TargetFn
        Per-iteration target computation.
    step : float
        Learning rate in (0, 1].
    iterations : int
        Number of iterations.
    fixed : ndarray of bool, optional
        Points that never move.

    Returns
    -------
    ndarray of shape (N, 2)
        New array with the relaxed path.
    """
    if path.shape != (len(corridor), 2):
        raise ValueError("path must match the corridor shape (N, 2).")

    current = np.array(path, dtype=np.float64, copy=True)
    for _ in range(iterations):
        moved = current + step * (target_fn(current) - current)
        moved = corridor.project(moved)
        if fixed is not None:
            moved[fixed] = current[fixed]
        current = moved

    return current
