"""
curve.py

Closed Catmull-Rom curve through multi-channel control points.

PROFILE Layer
-------------
The curve is a periodic cubic Hermite spline whose tangents are
``tension * (p[i+1] - p[i-1])`` (uniform Catmull-Rom). Every channel of the
control array is interpolated with the same basis, so auxiliary scalars such
as the track half-width travel along with the position.

Arc length is measured on the first two channels (planar x, y) only.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import NDArray

FloatArray = NDArray[np.float64]


class ClosedCatmullRom:
    """
    Periodic Catmull-Rom spline.

    Parameters
    ----------
    control : ndarray of shape (N, C)
        Control points; columns 0 and 1 are the planar position, further
        columns are carried channels.
    tension : float
        Tangent scale. 0.5 gives the classic Catmull-Rom spline.
    arc_resolution : int
        Arc-length lookup evaluations per control segment.

    Raises
    ------
    ValueError
        If fewer than two points or channels are given.
    """

    def __init__(
        self,
        control: FloatArray,
        tension: float = 0.5,
        arc_resolution: int = 32,
    ) -> None:
        control = np.asarray(control, dtype=np.float64)
        if control.ndim != 2 or control.shape[1] < 2:
            raise ValueError("control must be of shape (N, C) with C >= 2")
        if control.shape[0] < 2:
            raise ValueError("control must contain at least two points")
        if arc_resolution < 1:
            raise ValueError("arc_resolution must be positive")

        self._control: FloatArray = control.copy()
        self._tension: float = float(tension)
        self._arc_resolution: int = int(arc_resolution)

    # ------------------------------------------------------------

    @property
    def num_segments(self) -> int:
        return int(self._control.shape[0])

    @property
    def num_channels(self) -> int:
        return int(self._control.shape[1])

    # ------------------------------------------------------------

    def evaluate(self, u: FloatArray) -> FloatArray:
        """
        Evaluate the curve at normalized parameters.

        Parameters
        ----------
        u : ndarray of shape (M,)
            Curve parameters in [0, 1]; 0 and 1 both map to the first
            control point.

        Returns
        -------
        ndarray of shape (M, C)
        """
        u = np.asarray(u, dtype=np.float64)
        n = self.num_segments

        p = n * u
        seg = np.floor(p)
        w = (p - seg)[:, None]
        seg = seg.astype(np.int64)

        p0 = self._control[(seg - 1) % n]
        p1 = self._control[seg % n]
        p2 = self._control[(seg + 1) % n]
        p3 = self._control[(seg + 2) % n]

        t0 = self._tension * (p2 - p0)
        t1 = self._tension * (p3 - p1)

        # cubic Hermite coefficients
        c0 = p1
        c1 = t0
        c2 = -3.0 * p1 + 3.0 * p2 - 2.0 * t0 - t1
        c3 = 2.0 * p1 - 2.0 * p2 + t0 + t1

        return c0 + w * (c1 + w * (c2 + w * c3))

    # ------------------------------------------------------------

    def arc_length_table(self) -> Tuple[FloatArray, FloatArray]:
        """
        Cumulative planar arc length over a dense parameter grid.

        Returns
        -------
        u : ndarray of shape (L + 1,)
        s : ndarray of shape (L + 1,)
        """
        count = self.num_segments * self._arc_resolution
        u = np.linspace(0.0, 1.0, count + 1)
        xy = self.evaluate(u)[:, :2]
        seg_len = np.linalg.norm(np.diff(xy, axis=0), axis=1)
        s = np.zeros(count + 1, dtype=np.float64)
        s[1:] = np.cumsum(seg_len)
        return u, s

    @property
    def length(self) -> float:
        """
        Approximate planar loop length.
        """
        _, s = self.arc_length_table()
        return float(s[-1])

    # ------------------------------------------------------------

    def spaced_points(self, divisions: int) -> FloatArray:
        """
        Resample at uniform arc-length spacing.

        Parameters
        ----------
        divisions : int
            Number of equal-length pieces.

        Returns
        -------
        ndarray of shape (divisions + 1, C)
            The last sample closes the loop onto the first.
        """
        if divisions < 1:
            raise ValueError("divisions must be positive")

        u_table, s_table = self.arc_length_table()
        targets = np.linspace(0.0, s_table[-1], divisions + 1)
        u = np.interp(targets, s_table, u_table)
        u[0] = 0.0
        u[-1] = 1.0
        return self.evaluate(u)
