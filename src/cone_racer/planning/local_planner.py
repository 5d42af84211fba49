"""
local_planner.py

Receding-horizon local planner.

PLANNING Layer
--------------
Simulates an online planner that only sees a short horizon of the
centerline ahead of the car. Each cycle:

1. Build a window ``[last committed point, c[i], ..., c[i + horizon - 1]]``.
2. Smooth the window for a few iterations inside a tighter corridor,
   keeping the first point (where the car already is) and the horizon end
   fixed.
3. Commit only the window's second point and advance by one index.

After a full lap the plan for the start index is compared with the first
committed point; when both lie within ``closure_distance`` the loop is
snapped closed by replacing the start with the re-planned point.

Notes
-----
This is an offline simulation over a known centerline, not a sensor-driven
planner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from cone_racer.planning.base_optimizer import PathOptimizer
from cone_racer.planning.corridor import Corridor, open_laplacian_target, relax

FloatArray = NDArray[np.float64]

_logger = logging.getLogger(__name__)


# ================================================================
# CONFIGURATION
# ================================================================


@dataclass(frozen=True)
class LocalPlannerConfig:
    """
    Receding-horizon constants.

    Parameters
    ----------
    horizon : int
        Number of centerline points visible ahead of the car.
    iterations : int
        Smoothing iterations per window.
    step : float
        Smoothing learning rate.
    track_limit : float
        Usable share of the local half-width.
    closure_distance : float
        Maximum gap (m) between the final plan and the start for the loop
        to be snapped closed.
    """

    horizon: int = 5
    iterations: int = 15
    step: float = 0.3
    track_limit: float = 0.85
    closure_distance: float = 5.0

    def __post_init__(self) -> None:
        if self.horizon < 2:
            raise ValueError("horizon must be at least 2.")
        if self.iterations < 0:
            raise ValueError("iterations must be non-negative.")
        if not (0.0 < self.step <= 1.0):
            raise ValueError("step must be in (0, 1].")
        if not (0.0 < self.track_limit <= 1.0):
            raise ValueError("track_limit must be in (0, 1].")
        if self.closure_distance < 0.0:
            raise ValueError("closure_distance must be non-negative.")


# ================================================================
# PLANNER
# ================================================================


class RecedingHorizonPlanner(PathOptimizer):
    """
    Myopic planner committing one point per horizon window.
    """

    min_points = 6

    def __init__(self, config: LocalPlannerConfig = LocalPlannerConfig()) -> None:
        self._config: LocalPlannerConfig = config

    @property
    def config(self) -> LocalPlannerConfig:
        return self._config

    # ------------------------------------------------------------

    def _plan_window(
        self,
        current: FloatArray,
        index: int,
        centers: FloatArray,
        half_widths: FloatArray,
    ) -> FloatArray:
        """
        Plan one window starting at the committed point ``current``.

        Parameters
        ----------
        current : ndarray of shape (2,)
            Last committed point (reference centerline index ``index - 1``).
        index : int
            Centerline index of the first point ahead.

        Returns
        -------
        ndarray of shape (2,)
            The window's second point, committed for ``index``.
        """
        cfg = self._config
        n = centers.shape[0]

        refs = (index - 1 + np.arange(cfg.horizon + 1)) % n
        window = centers[refs].copy()
        window[0] = current

        fixed = np.zeros(window.shape[0], dtype=bool)
        fixed[0] = True
        fixed[-1] = True

        corridor = Corridor(centers[refs], half_widths[refs], cfg.track_limit)
        planned = relax(
            window,
            corridor,
            open_laplacian_target,
            cfg.step,
            cfg.iterations,
            fixed=fixed,
        )
        return planned[1]

    # ------------------------------------------------------------

    def _optimize(self, centers: FloatArray, half_widths: FloatArray) -> FloatArray:
        n = centers.shape[0]
        path = np.empty_like(centers)
        path[0] = centers[0]

        for i in range(1, n):
            path[i] = self._plan_window(path[i - 1], i, centers, half_widths)

        closing = self._plan_window(path[n - 1], n, centers, half_widths)
        gap = float(np.linalg.norm(closing - path[0]))
        if gap < self._config.closure_distance:
            path[0] = closing
        else:
            _logger.warning("Local planner loop left open (gap %.2f m)", gap)

        return path
