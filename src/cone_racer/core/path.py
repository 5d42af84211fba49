"""
path.py

Trajectory sample definitions.

This module defines:

- Immutable scalar PathPoint (single trajectory sample)
- Vectorized PathProfile (full densely sampled loop)
- Serialization helpers
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Tuple

import numpy as np
from numpy.typing import NDArray


FloatArray = NDArray[np.float64]
Color = Tuple[int, int, int]


# ============================================================
# Scalar sample
# ============================================================


@dataclass(frozen=True)
class PathPoint:
    """
    Immutable trajectory sample.

    Parameters
    ----------
    x, y : float
        Planar position [m].
    z : float
        Elevation [m].
    curvature : float
        Unsigned local curvature [1/m].
    dist : float
        Cumulative arc-length from the first sample [m].
    max_velocity : float
        Curvature-limited speed ceiling [m/s].
    velocity : float
        Solved speed [m/s].
    acceleration : float
        Solved longitudinal acceleration [m/s^2].
    yaw : float
        Heading of the outgoing tangent [rad].
    pitch : float
        Slope of the outgoing tangent [rad].
    color : Color
        Display RGB derived from acceleration.
    half_width : float
        Interpolated local track half-width [m].
    """

    x: float
    y: float
    z: float
    curvature: float
    dist: float
    max_velocity: float
    velocity: float
    acceleration: float
    yaw: float
    pitch: float
    color: Color
    half_width: float

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize sample to dictionary.
        """
        return {
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "curvature": self.curvature,
            "dist": self.dist,
            "max_velocity": self.max_velocity,
            "velocity": self.velocity,
            "acceleration": self.acceleration,
            "yaw": self.yaw,
            "pitch": self.pitch,
            "color": list(self.color),
            "half_width": self.half_width,
        }


# ============================================================
# Vectorized profile
# ============================================================


_FLOAT_FIELDS: Tuple[str, ...] = (
    "x",
    "y",
    "z",
    "curvature",
    "dist",
    "max_velocity",
    "velocity",
    "acceleration",
    "yaw",
    "pitch",
    "half_width",
)


@dataclass(frozen=True)
class PathProfile:
    """
    Densely sampled closed trajectory.

    All float arrays have dtype float64 and identical shape (N,). Colors
    are an (N, 3) uint8 array. For a non-empty profile the last sample
    closes the loop onto the first.

    Raises
    ------
    ValueError
        If shapes mismatch.
    """

    x: FloatArray
    y: FloatArray
    z: FloatArray
    curvature: FloatArray
    dist: FloatArray
    max_velocity: FloatArray
    velocity: FloatArray
    acceleration: FloatArray
    yaw: FloatArray
    pitch: FloatArray
    colors: NDArray[np.uint8]
    half_width: FloatArray

    def __post_init__(self) -> None:
        shapes = {getattr(self, name).shape for name in _FLOAT_FIELDS}
        if len(shapes) != 1:
            raise ValueError("All arrays must have identical shape.")

        n = self.x.shape[0]
        if self.colors.shape != (n, 3):
            raise ValueError("colors must have shape (N, 3).")

        for name in _FLOAT_FIELDS:
            if getattr(self, name).dtype != np.float64:
                raise ValueError("All arrays must be float64.")

    # --------------------------------------------------------

    @staticmethod
    def empty() -> PathProfile:
        """
        Profile with no samples.
        """
        zeros = np.zeros(0, dtype=np.float64)
        return PathProfile(
            **{name: zeros.copy() for name in _FLOAT_FIELDS},
            colors=np.zeros((0, 3), dtype=np.uint8),
        )

    # --------------------------------------------------------

    def __len__(self) -> int:
        return int(self.x.shape[0])

    def __iter__(self) -> Iterator[PathPoint]:
        for i in range(len(self)):
            yield self.point(i)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    @property
    def positions(self) -> FloatArray:
        """
        Planar positions as an (N, 2) array.
        """
        return np.column_stack((self.x, self.y))

    @property
    def total_length(self) -> float:
        return float(self.dist[-1]) if len(self) else 0.0

    # --------------------------------------------------------

    def point(self, index: int) -> PathPoint:
        """
        Extract a single sample.
        """
        r, g, b = (int(c) for c in self.colors[index])
        return PathPoint(
            x=float(self.x[index]),
            y=float(self.y[index]),
            z=float(self.z[index]),
            curvature=float(self.curvature[index]),
            dist=float(self.dist[index]),
            max_velocity=float(self.max_velocity[index]),
            velocity=float(self.velocity[index]),
            acceleration=float(self.acceleration[index]),
            yaw=float(self.yaw[index]),
            pitch=float(self.pitch[index]),
            color=(r, g, b),
            half_width=float(self.half_width[index]),
        )

    # --------------------------------------------------------

    def to_dict(self) -> Dict[str, list]:
        """
        Serialize to JSON-safe dict of column lists.
        """
        data: Dict[str, list] = {name: getattr(self, name).tolist() for name in _FLOAT_FIELDS}
        data["colors"] = self.colors.tolist()
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> PathProfile:
        """
        Deserialize from dictionary.
        """
        return PathProfile(
            **{name: np.asarray(data[name], dtype=np.float64) for name in _FLOAT_FIELDS},
            colors=np.asarray(data["colors"], dtype=np.uint8).reshape(-1, 3),
        )
