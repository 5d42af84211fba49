"""
smoothers.py

Deterministic iterative path smoothers.

PLANNING Layer
--------------
- LaplacianSmoother   elastic band, pulls each point toward the mean of its
                      neighbours; shortest-path biased, cuts corners hard
- BiharmonicSmoother  minimum-curvature smoothing with an optional warm start
- HybridSmoother      blend of both targets

All three run the shared iterate-and-constrain driver against a corridor
around the original centerline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from cone_racer.core.centerline import CenterlinePoint, from_array, to_array
from cone_racer.planning.base_optimizer import TRACK_LIMIT_FRACTION, PathOptimizer
from cone_racer.planning.corridor import (
    Corridor,
    biharmonic_target,
    blended_target,
    laplacian_target,
    relax,
)

FloatArray = NDArray[np.float64]


# ================================================================
# CONFIGURATION
# ================================================================


@dataclass(frozen=True)
class SmootherConfig:
    """
    Iteration constants of a smoother.

    Parameters
    ----------
    iterations : int
        Number of driver iterations.
    step : float
        Fraction of the way each point moves toward its target.
    track_limit : float
        Usable share of the local half-width.
    """

    iterations: int
    step: float
    track_limit: float = TRACK_LIMIT_FRACTION

    def __post_init__(self) -> None:
        if self.iterations < 0:
            raise ValueError("iterations must be non-negative.")
        if not (0.0 < self.step <= 1.0):
            raise ValueError("step must be in (0, 1].")
        if not (0.0 < self.track_limit <= 1.0):
            raise ValueError("track_limit must be in (0, 1].")


LAPLACIAN_DEFAULTS = SmootherConfig(iterations=20, step=0.3)
BIHARMONIC_DEFAULTS = SmootherConfig(iterations=200, step=0.1)
HYBRID_DEFAULTS = SmootherConfig(iterations=100, step=0.15)

# Curvature share of the hybrid target (the rest is shortest path).
HYBRID_BIHARMONIC_WEIGHT: float = 0.6


# ================================================================
# LAPLACIAN
# ================================================================


class LaplacianSmoother(PathOptimizer):
    """
    Elastic-band smoother.
    """

    def __init__(self, config: SmootherConfig = LAPLACIAN_DEFAULTS) -> None:
        self._config: SmootherConfig = config

    @property
    def config(self) -> SmootherConfig:
        return self._config

    def _optimize(self, centers: FloatArray, half_widths: FloatArray) -> FloatArray:
        corridor = Corridor(centers, half_widths, self._config.track_limit)
        return relax(
            centers,
            corridor,
            laplacian_target,
            self._config.step,
            self._config.iterations,
        )


# ================================================================
# BIHARMONIC
# ================================================================


class BiharmonicSmoother(PathOptimizer):
    """
    Minimum-curvature smoother.

    The constraint is always measured against the true centerline, so a
    shortcut path may be used as a warm start without loosening the track
    limits.
    """

    def __init__(self, config: SmootherConfig = BIHARMONIC_DEFAULTS) -> None:
        self._config: SmootherConfig = config

    @property
    def config(self) -> SmootherConfig:
        return self._config

    # ------------------------------------------------------------

    def optimize(
        self,
        centerline: Sequence[CenterlinePoint],
        initial_guess: Optional[Sequence[CenterlinePoint]] = None,
    ) -> List[CenterlinePoint]:
        """
        Optimize with an optional warm start.

        Parameters
        ----------
        centerline : Sequence[CenterlinePoint]
            Ordered closed centerline (constraint reference).
        initial_guess : Sequence[CenterlinePoint] | None
            Starting path. Ignored when its length differs from the
            centerline.

        Returns
        -------
        list[CenterlinePoint]
        """
        if len(centerline) < self.min_points:
            return list(centerline)

        reference = to_array(centerline)
        start = None
        if initial_guess is not None and len(initial_guess) == len(centerline):
            start = to_array(initial_guess)[:, :2]

        path = self.refine(reference[:, :2], reference[:, 2], start)
        return from_array(path, reference[:, 2])

    # ------------------------------------------------------------

    def refine(
        self,
        centers: FloatArray,
        half_widths: FloatArray,
        initial: Optional[FloatArray] = None,
    ) -> FloatArray:
        """
        Array-level biharmonic relaxation.

        Parameters
        ----------
        centers : ndarray of shape (N, 2)
        half_widths : ndarray of shape (N,)
        initial : ndarray of shape (N, 2), optional
            Warm start; the centerline when omitted or mismatched.
        """
        if initial is None or initial.shape != centers.shape:
            initial = centers
        corridor = Corridor(centers, half_widths, self._config.track_limit)
        return relax(
            initial,
            corridor,
            biharmonic_target,
            self._config.step,
            self._config.iterations,
        )

    def _optimize(self, centers: FloatArray, half_widths: FloatArray) -> FloatArray:
        return self.refine(centers, half_widths)


# ================================================================
# HYBRID
# ================================================================


class HybridSmoother(PathOptimizer):
    """
    Blend of shortest-path and minimum-curvature targets.

    Parameters
    ----------
    config : SmootherConfig
        Iteration constants.
    biharmonic_weight : float
        Curvature share of the blended target.
    """

    def __init__(
        self,
        config: SmootherConfig = HYBRID_DEFAULTS,
        biharmonic_weight: float = HYBRID_BIHARMONIC_WEIGHT,
    ) -> None:
        self._config: SmootherConfig = config
        self._target = blended_target(biharmonic_weight)

    @property
    def config(self) -> SmootherConfig:
        return self._config

    def _optimize(self, centers: FloatArray, half_widths: FloatArray) -> FloatArray:
        corridor = Corridor(centers, half_widths, self._config.track_limit)
        return relax(
            centers,
            corridor,
            self._target,
            self._config.step,
            self._config.iterations,
        )
