"""
speed_solver.py

Flying-lap speed profile solver.

PROFILE Layer
-------------
Given cumulative distance and curvature of a closed sampled loop:

1) Ceiling
   Each sample starts at its curvature-limited cornering speed.

2) Friction-circle passes (repeated ``iterations`` times)
   - seed the loop closure: last = min(last, first)
   - backward (braking) pass from the second-to-last sample to the first
   - carry momentum across the line: first = last
   - forward (acceleration) pass from the second sample to the last
   - re-sync: last = first

   Both passes only ever lower speeds, so the result never exceeds the
   ceiling. Repeating the pair lets braking zones before the start line
   reach the end of the lap.

3) Acceleration and heatmap colour from consecutive speeds.

Notes
-----
The default budget of four iterations reproduces the reference profiles;
it is a tunable, not a convergence bound.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from cone_racer.core.vehicle_model import PhysicsParams, PointMassModel

FloatArray = NDArray[np.float64]
Color = Tuple[int, int, int]

# Accelerations smaller than this are numerical noise.
ACCEL_NOISE: float = 0.1
# Beyond this magnitude a sample is braking / accelerating, else coasting.
ACCEL_COLOR_THRESHOLD: float = 0.5
# Guards zero-length sample spacing.
DIST_EPS: float = 1e-9

COLOR_BRAKE: Color = (239, 68, 68)
COLOR_COAST: Color = (255, 255, 255)
COLOR_ACCEL: Color = (34, 197, 94)


# ================================================================
# CONFIGURATION
# ================================================================


@dataclass(frozen=True)
class SolverConfig:
    """
    Speed solver settings.

    Parameters
    ----------
    iterations : int
        Number of backward/forward pass pairs.
    """

    iterations: int = 4

    def __post_init__(self) -> None:
        if self.iterations < 0:
            raise ValueError("iterations must be non-negative.")


@dataclass(frozen=True)
class SpeedProfile:
    """
    Solver output, one entry per sample.

    Parameters
    ----------
    max_velocity : ndarray
        Curvature-limited ceiling.
    velocity : ndarray
        Solved speed.
    acceleration : ndarray
        Longitudinal acceleration toward the next sample.
    colors : ndarray of shape (N, 3)
        Heatmap colours.
    """

    max_velocity: FloatArray
    velocity: FloatArray
    acceleration: FloatArray
    colors: NDArray[np.uint8]


# ================================================================
# SOLVER
# ================================================================


class SpeedSolver:
    """
    Closed-loop friction-circle speed solver.

    Parameters
    ----------
    params : PhysicsParams
        Vehicle constants.
    config : SolverConfig
        Iteration budget.
    """

    def __init__(self, params: PhysicsParams, config: SolverConfig = SolverConfig()) -> None:
        self._p: PhysicsParams = params
        self._model: PointMassModel = PointMassModel(params)
        self._config: SolverConfig = config

    @property
    def params(self) -> PhysicsParams:
        return self._p

    # ------------------------------------------------------------

    def solve_velocity(
        self,
        dist: FloatArray,
        curvature: FloatArray,
    ) -> Tuple[FloatArray, FloatArray]:
        """
        Solve the speed profile.

        Parameters
        ----------
        dist : ndarray of shape (N,)
            Cumulative distance, non-decreasing.
        curvature : ndarray of shape (N,)
            Unsigned curvature.

        Returns
        -------
        ceiling : ndarray of shape (N,)
        velocity : ndarray of shape (N,)
        """
        dist = np.asarray(dist, dtype=np.float64)
        curvature = np.asarray(curvature, dtype=np.float64)
        if dist.shape != curvature.shape or dist.ndim != 1:
            raise ValueError("dist and curvature must have identical shape (N,)")

        ceiling = self._model.cornering_speed(curvature)
        v = ceiling.copy()
        n = v.shape[0]
        if n < 2:
            return ceiling, v

        model = self._model
        for _ in range(self._config.iterations):
            v[-1] = min(v[-1], v[0])

            # backward pass: braking into the next sample
            for i in range(n - 2, -1, -1):
                d = dist[i + 1] - dist[i]
                v_lim = model.reachable_speed(v[i + 1], curvature[i], d, braking=True)
                v[i] = min(v[i], v_lim)

            v[0] = v[-1]

            # forward pass: accelerating out of the previous sample
            for i in range(1, n):
                d = dist[i] - dist[i - 1]
                v_lim = model.reachable_speed(v[i - 1], curvature[i], d, braking=False)
                v[i] = min(v[i], v_lim)

            v[-1] = v[0]

        return ceiling, v

    # ------------------------------------------------------------

    def acceleration(self, dist: FloatArray, velocity: FloatArray) -> FloatArray:
        """
        Longitudinal acceleration between consecutive samples.

        The last sample copies the first one's value.
        """
        n = velocity.shape[0]
        acc = np.zeros(n, dtype=np.float64)
        if n < 2:
            return acc

        d = np.maximum(np.diff(dist), DIST_EPS)
        acc[:-1] = (velocity[1:] ** 2 - velocity[:-1] ** 2) / (2.0 * d)
        acc[np.abs(acc) < ACCEL_NOISE] = 0.0
        acc[-1] = acc[0]
        return acc

    def colors(self, acceleration: FloatArray) -> NDArray[np.uint8]:
        """
        Heatmap colours: red braking, green accelerating, white coasting.

        Intensity blends from the coast colour by the share of the
        respective braking / acceleration limit.
        """
        coast = np.array(COLOR_COAST, dtype=np.float64)
        brake = np.array(COLOR_BRAKE, dtype=np.float64)
        accel = np.array(COLOR_ACCEL, dtype=np.float64)

        rgb = np.tile(coast, (acceleration.shape[0], 1))

        braking = acceleration < -ACCEL_COLOR_THRESHOLD
        if np.any(braking):
            t = np.minimum(np.abs(acceleration[braking]) / max(self._p.max_braking, DIST_EPS), 1.0)
            rgb[braking] = coast + t[:, None] * (brake - coast)

        accelerating = acceleration > ACCEL_COLOR_THRESHOLD
        if np.any(accelerating):
            t = np.minimum(acceleration[accelerating] / max(self._p.max_accel, DIST_EPS), 1.0)
            rgb[accelerating] = coast + t[:, None] * (accel - coast)

        out = np.rint(rgb).astype(np.uint8)
        if out.shape[0] > 1:
            out[-1] = out[0]
        return out

    # ------------------------------------------------------------

    def solve(self, dist: FloatArray, curvature: FloatArray) -> SpeedProfile:
        """
        Full solve: ceiling, velocity, acceleration and colours.
        """
        ceiling, velocity = self.solve_velocity(dist, curvature)
        acceleration = self.acceleration(np.asarray(dist, dtype=np.float64), velocity)
        return SpeedProfile(
            max_velocity=ceiling,
            velocity=velocity,
            acceleration=acceleration,
            colors=self.colors(acceleration),
        )
