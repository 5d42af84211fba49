"""
vehicle_model.py

Point-mass friction-circle vehicle model used by the speed solver.

Model
-----
1) Cornering limit:
   - total grip a_grip = mu * g
   - steady-state cornering speed v = sqrt(a_grip * R), R = 1 / kappa
   - near-zero curvature is treated as a very large radius

2) Combined slip (friction circle) on longitudinal acceleration:
   - given lateral demand a_lat, the remaining longitudinal budget is
     sqrt(max(a_grip^2 - a_lat^2, 0))
   - capped by the engine (accelerating) or brake (decelerating) limit

Notes
-----
- Deterministic and stateless.
- All helpers accept scalars or numpy arrays.
- No tire slip, suspension or aerodynamic load modelling.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

FloatArray = NDArray[np.float64]


# Curvature below this is treated as a straight.
STRAIGHT_CURVATURE: float = 1e-3
# Radius used for straights.
STRAIGHT_RADIUS: float = 10000.0


@dataclass(frozen=True)
class PhysicsParams:
    """
    Physical constants of the point-mass vehicle.

    Parameters
    ----------
    gravity : float
        Gravitational acceleration (m/s^2).
    friction_coeff : float
        Tire-road friction coefficient (dimensionless).
    max_velocity : float
        Global top speed (m/s).
    max_accel : float
        Maximum engine/traction acceleration (m/s^2).
    max_braking : float
        Maximum braking deceleration magnitude (m/s^2).
    car_mass : float
        Vehicle mass (kg). Informational; the point-mass solve is
        mass-independent.

    Raises
    ------
    ValueError
        If any constant is out of its physical range.
    """

    gravity: float = 9.81
    friction_coeff: float = 1.5
    max_velocity: float = 35.0
    max_accel: float = 10.0
    max_braking: float = 15.0
    car_mass: float = 250.0

    def __post_init__(self) -> None:
        if self.gravity <= 0.0:
            raise ValueError("gravity must be positive.")
        if self.friction_coeff < 0.0:
            raise ValueError("friction_coeff must be non-negative.")
        if self.max_velocity <= 0.0:
            raise ValueError("max_velocity must be positive.")
        if self.max_accel < 0.0:
            raise ValueError("max_accel must be non-negative.")
        if self.max_braking < 0.0:
            raise ValueError("max_braking must be non-negative.")
        if self.car_mass <= 0.0:
            raise ValueError("car_mass must be positive.")

    @property
    def grip_accel(self) -> float:
        """
        Friction circle radius mu * g (m/s^2).
        """
        return self.friction_coeff * self.gravity


class PointMassModel:
    """
    Friction-circle limits for a point-mass vehicle.

    Parameters
    ----------
    params : PhysicsParams
        Physical constants.
    """

    def __init__(self, params: PhysicsParams) -> None:
        self._p: PhysicsParams = params

    @property
    def params(self) -> PhysicsParams:
        return self._p

    # ------------------------------------------------------------------

    def cornering_speed(self, curvature: FloatArray) -> FloatArray:
        """
        Curvature-limited speed ceiling.

        Parameters
        ----------
        curvature : ndarray
            Unsigned curvature (1/m).

        Returns
        -------
        ndarray
            min(sqrt(a_grip * R), max_velocity) per sample.
        """
        kappa = np.abs(np.asarray(curvature, dtype=np.float64))
        radius = np.full_like(kappa, STRAIGHT_RADIUS)
        curved = kappa > STRAIGHT_CURVATURE
        radius[curved] = 1.0 / kappa[curved]
        return np.minimum(np.sqrt(self._p.grip_accel * radius), self._p.max_velocity)

    # ------------------------------------------------------------------

    def longitudinal_limit(self, velocity: float, curvature: float, braking: bool) -> float:
        """
        Longitudinal acceleration available at a cornering state.

        Parameters
        ----------
        velocity : float
            Speed (m/s) at which the corner is taken.
        curvature : float
            Local curvature (1/m).
        braking : bool
            Use the brake limit instead of the engine limit.

        Returns
        -------
        float
            Non-negative acceleration magnitude (m/s^2).
        """
        # a_lat = v^2 * kappa
        a_lat = velocity * velocity * curvature
        grip = self._p.grip_accel
        remaining = np.sqrt(max(0.0, grip * grip - a_lat * a_lat))
        cap = self._p.max_braking if braking else self._p.max_accel
        return float(min(remaining, cap))

    # ------------------------------------------------------------------

    def reachable_speed(
        self,
        v_ref: float,
        curvature: float,
        distance: float,
        braking: bool,
    ) -> float:
        """
        Highest speed reachable from (or able to brake down to) v_ref.

        Uses v^2 = v_ref^2 + 2 * a * d with the friction-limited a.
        """
        a = self.longitudinal_limit(v_ref, curvature, braking)
        return float(np.sqrt(v_ref * v_ref + 2.0 * a * distance))
