"""
vehicle_factory.py

Factory system for named physics presets.

FACTORY LAYER
-------------
Produces:
    - PhysicsParams
    - PointMassModel
"""

from __future__ import annotations

from cone_racer.core.vehicle_model import PhysicsParams, PointMassModel
from cone_racer.utils.registry import Registry


# ================================================================
# Registry
# ================================================================

_vehicle_registry: Registry[PhysicsParams] = Registry("vehicle")

DEFAULT_VEHICLE = "formula_student"


# ================================================================
# Vehicle Presets
# ================================================================


def _formula_student() -> PhysicsParams:
    """
    Formula Student car on slicks (slightly optimistic grip).
    """
    return PhysicsParams(
        gravity=9.81,
        friction_coeff=1.5,
        max_velocity=35.0,
        max_accel=10.0,
        max_braking=15.0,
        car_mass=250.0,
    )


def _kart() -> PhysicsParams:
    """
    Rental kart: low power, modest grip.
    """
    return PhysicsParams(
        gravity=9.81,
        friction_coeff=1.1,
        max_velocity=22.0,
        max_accel=4.0,
        max_braking=8.0,
        car_mass=160.0,
    )


# ================================================================
# Register Presets
# ================================================================

_vehicle_registry.register("formula_student", _formula_student)
_vehicle_registry.register("kart", _kart)


# ================================================================
# Public API
# ================================================================


class VehicleFactory:
    """
    Factory for physics presets.
    """

    @staticmethod
    def create_params(name: str = DEFAULT_VEHICLE) -> PhysicsParams:
        """
        Create PhysicsParams from preset.

        Parameters
        ----------
        name : str
            Preset name.

        Returns
        -------
        PhysicsParams
        """
        return _vehicle_registry.create(name)

    @staticmethod
    def create_model(name: str = DEFAULT_VEHICLE) -> PointMassModel:
        """
        Create a PointMassModel from preset.
        """
        return PointMassModel(VehicleFactory.create_params(name))

    @staticmethod
    def available() -> list[str]:
        return _vehicle_registry.available
