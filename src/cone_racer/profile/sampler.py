"""
sampler.py

Control points -> densely sampled, speed-solved PathProfile.

PROFILE Layer
-------------
1. Fit a closed Catmull-Rom curve through x, y, z and half-width.
2. Resample at uniform arc length into ``max(min_samples, 8 * N)`` pieces
   (one extra sample closes the loop).
3. Per-sample geometry: cumulative distance, turn-angle curvature, yaw and
   pitch.
4. Speed solve (see speed_solver.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from cone_racer.core.centerline import CenterlinePoint, to_array
from cone_racer.core.path import PathProfile
from cone_racer.core.vehicle_model import PhysicsParams
from cone_racer.profile.curve import ClosedCatmullRom
from cone_racer.profile.speed_solver import SolverConfig, SpeedSolver

FloatArray = NDArray[np.float64]

# Keeps the turn-angle curvature finite on collapsed segments.
CURVATURE_EPS: float = 1e-3


# ================================================================
# CONFIGURATION
# ================================================================


@dataclass(frozen=True)
class SamplerConfig:
    """
    Curve sampling settings.

    Parameters
    ----------
    min_samples : int
        Lower bound on the number of resampled pieces.
    samples_per_point : int
        Pieces per control point.
    tension : float
        Catmull-Rom tangent scale.
    solver : SolverConfig
        Speed solver settings.
    """

    min_samples: int = 200
    samples_per_point: int = 8
    tension: float = 0.5
    solver: SolverConfig = SolverConfig()

    def __post_init__(self) -> None:
        if self.min_samples < 3:
            raise ValueError("min_samples must be at least 3.")
        if self.samples_per_point < 1:
            raise ValueError("samples_per_point must be positive.")


# ================================================================
# GEOMETRY
# ================================================================


def loop_geometry(points: FloatArray) -> Tuple[FloatArray, FloatArray, FloatArray, FloatArray]:
    """
    Geometry of a closed sampled loop.

    Parameters
    ----------
    points : ndarray of shape (M, 3)
        x, y, z samples whose last row closes onto the first.

    Returns
    -------
    dist : ndarray of shape (M,)
        Cumulative planar distance.
    curvature : ndarray of shape (M,)
        Turn angle over mean adjacent segment length.
    yaw : ndarray of shape (M,)
        Heading of the outgoing tangent.
    pitch : ndarray of shape (M,)
        Slope of the outgoing tangent.
    """
    m = points.shape[0]

    planar_steps = np.linalg.norm(np.diff(points[:, :2], axis=0), axis=1)
    dist = np.zeros(m, dtype=np.float64)
    dist[1:] = np.cumsum(planar_steps)

    # distinct ring without the closing duplicate
    ring = points[:-1]
    prev = np.roll(ring, 1, axis=0)
    nxt = np.roll(ring, -1, axis=0)

    incoming = ring - prev
    outgoing = nxt - ring
    len_in = np.linalg.norm(incoming, axis=1)
    len_out = np.linalg.norm(outgoing, axis=1)

    with np.errstate(invalid="ignore", divide="ignore"):
        u_in = np.nan_to_num(incoming / len_in[:, None])
        u_out = np.nan_to_num(outgoing / len_out[:, None])

    cos_angle = np.clip(np.einsum("ij,ij->i", u_in, u_out), -1.0, 1.0)
    angle = np.arccos(cos_angle)
    ring_curvature = angle / (0.5 * (len_in + len_out) + CURVATURE_EPS)

    ring_yaw = np.arctan2(u_out[:, 1], u_out[:, 0])
    ring_pitch = np.arcsin(np.clip(u_out[:, 2], -1.0, 1.0))

    def _close(values: FloatArray) -> FloatArray:
        return np.append(values, values[0])

    return dist, _close(ring_curvature), _close(ring_yaw), _close(ring_pitch)


# ================================================================
# SAMPLER
# ================================================================


class PathSampler:
    """
    Converts control points into a speed-solved PathProfile.

    Parameters
    ----------
    params : PhysicsParams
        Vehicle constants.
    config : SamplerConfig
        Sampling settings.
    """

    def __init__(self, params: PhysicsParams, config: SamplerConfig = SamplerConfig()) -> None:
        self._config: SamplerConfig = config
        self._solver: SpeedSolver = SpeedSolver(params, config.solver)

    @property
    def solver(self) -> SpeedSolver:
        return self._solver

    # ------------------------------------------------------------

    def num_divisions(self, num_control_points: int) -> int:
        return max(self._config.min_samples, self._config.samples_per_point * num_control_points)

    # ------------------------------------------------------------

    def sample(self, control_points: Sequence[CenterlinePoint]) -> PathProfile:
        """
        Sample and speed-solve a closed control-point sequence.

        Parameters
        ----------
        control_points : Sequence[CenterlinePoint]
            Ordered closed loop.

        Returns
        -------
        PathProfile
            Empty for fewer than three control points.
        """
        if len(control_points) < 3:
            return PathProfile.empty()

        packed = to_array(control_points)
        # channels: x, y, z, half_width
        control = np.column_stack(
            (packed[:, 0], packed[:, 1], np.zeros(packed.shape[0]), packed[:, 2])
        )

        curve = ClosedCatmullRom(control, tension=self._config.tension)
        samples = curve.spaced_points(self.num_divisions(len(control_points)))

        dist, curvature, yaw, pitch = loop_geometry(samples[:, :3])
        speed = self._solver.solve(dist, curvature)

        return PathProfile(
            x=samples[:, 0].copy(),
            y=samples[:, 1].copy(),
            z=samples[:, 2].copy(),
            curvature=curvature,
            dist=dist,
            max_velocity=speed.max_velocity,
            velocity=speed.velocity,
            acceleration=speed.acceleration,
            yaw=yaw,
            pitch=pitch,
            colors=speed.colors,
            half_width=samples[:, 3].copy(),
        )
