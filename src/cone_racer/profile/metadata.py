"""
metadata.py

Lap summary statistics over a solved PathProfile.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np

from cone_racer.core.path import PathProfile
from cone_racer.core.vehicle_model import PhysicsParams

# Keeps the lap time finite for a standing profile.
SPEED_EPS: float = 0.01


@dataclass(frozen=True)
class TrackMetadata:
    """
    Aggregate lap statistics.

    Parameters
    ----------
    name : str
        Display name.
    total_length : float
        Loop length (m).
    avg_speed : float
        Mean sample speed (m/s).
    est_lap_time : float
        total_length / avg_speed (s).
    max_lat_g : float
        Peak lateral acceleration (g).
    max_long_g : float
        Peak forward acceleration (g).
    min_long_g : float
        Peak braking as a negative value (g).
    """

    name: str
    total_length: float
    avg_speed: float
    est_lap_time: float
    max_lat_g: float
    max_long_g: float
    min_long_g: float

    def to_dict(self) -> Dict[str, float | str]:
        return {
            "name": self.name,
            "total_length": self.total_length,
            "avg_speed": self.avg_speed,
            "est_lap_time": self.est_lap_time,
            "max_lat_g": self.max_lat_g,
            "max_long_g": self.max_long_g,
            "min_long_g": self.min_long_g,
        }


EMPTY_METADATA = TrackMetadata(
    name="Empty",
    total_length=0.0,
    avg_speed=0.0,
    est_lap_time=0.0,
    max_lat_g=0.0,
    max_long_g=0.0,
    min_long_g=0.0,
)


def compute_metadata(
    profile: PathProfile,
    params: PhysicsParams,
    name: str = "Custom Circuit",
) -> TrackMetadata:
    """
    Reduce a profile to lap statistics.

    Parameters
    ----------
    profile : PathProfile
        Solved trajectory.
    params : PhysicsParams
        Supplies gravity for g conversion.
    name : str
        Display name of the result.

    Returns
    -------
    TrackMetadata
        EMPTY_METADATA for an empty profile.
    """
    if profile.is_empty:
        return EMPTY_METADATA

    g = params.gravity
    total_length = float(profile.dist[-1])
    avg_speed = float(np.mean(profile.velocity))
    lat_g = profile.velocity**2 * profile.curvature / g
    long_g = profile.acceleration / g

    return TrackMetadata(
        name=name,
        total_length=total_length,
        avg_speed=avg_speed,
        est_lap_time=total_length / (avg_speed + SPEED_EPS),
        max_lat_g=float(max(0.0, np.max(lat_g))),
        max_long_g=float(max(0.0, np.max(long_g))),
        min_long_g=float(min(0.0, np.min(long_g))),
    )
