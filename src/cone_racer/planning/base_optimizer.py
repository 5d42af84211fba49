"""
base_optimizer.py

Abstract base class for all path optimizers.

PLANNING Layer
--------------
This module defines the optimizer interface contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence

import numpy as np
from numpy.typing import NDArray

from cone_racer.core.centerline import CenterlinePoint, from_array, to_array

FloatArray = NDArray[np.float64]

# Share of the local half-width an optimized path may use.
TRACK_LIMIT_FRACTION: float = 0.9


class PathOptimizer(ABC):
    """
    Abstract path optimizer.

    An optimizer receives the ordered closed centerline and returns a
    refined control-point sequence of the same length. Output point ``i``
    carries the half-width of centerline point ``i``.

    Notes
    -----
    - Must NOT modify its input; all work happens on copies.
    - Inputs shorter than ``min_points`` are returned unchanged (as a new
      list).
    - Randomized optimizers take an injected numpy Generator.
    """

    min_points: int = 3

    # ==========================================================
    # Core API
    # ==========================================================

    def optimize(self, centerline: Sequence[CenterlinePoint]) -> List[CenterlinePoint]:
        """
        Optimize a closed control-point sequence.

        Parameters
        ----------
        centerline : Sequence[CenterlinePoint]
            Ordered closed centerline.

        Returns
        -------
        list[CenterlinePoint]
            Refined control points.
        """
        if len(centerline) < self.min_points:
            return list(centerline)

        reference = to_array(centerline)
        path = self._optimize(reference[:, :2], reference[:, 2])
        return from_array(path, reference[:, 2])

    # ----------------------------------------------------------

    @abstractmethod
    def _optimize(self, centers: FloatArray, half_widths: FloatArray) -> FloatArray:
        """
        Compute optimized positions.

        Parameters
        ----------
        centers : ndarray of shape (N, 2)
            Reference centerline positions (a private copy).
        half_widths : ndarray of shape (N,)
            Local half-widths.

        Returns
        -------
        ndarray of shape (N, 2)
        """
        raise NotImplementedError
