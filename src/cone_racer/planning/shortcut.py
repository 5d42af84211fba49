"""
shortcut.py

Search-based optimizers.

PLANNING Layer
--------------
- StochasticShortcutter
    Randomly proposes straight chords between two path points up to 51
    indices apart and commits every chord that stays inside the track
    corridor, then rounds off the polygonal result with Laplacian
    smoothing.
- ShortcutBiharmonicPipeline
    Search + refine: the shortcut path is used as the warm start of the
    minimum-curvature smoother, constraints still measured against the
    centerline.

Randomness
----------
The random source is an injected ``numpy.random.Generator``; a fixed seed
gives a reproducible path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from cone_racer.planning.base_optimizer import TRACK_LIMIT_FRACTION, PathOptimizer
from cone_racer.planning.corridor import Corridor, laplacian_target, relax
from cone_racer.planning.smoothers import BiharmonicSmoother

FloatArray = NDArray[np.float64]

_logger = logging.getLogger(__name__)


# ================================================================
# CONFIGURATION
# ================================================================


@dataclass(frozen=True)
class ShortcutConfig:
    """
    Shortcut search constants.

    Parameters
    ----------
    trials : int
        Number of random chord proposals.
    max_lookahead : int
        Jumps are drawn from ``2 .. max_lookahead + 1`` indices.
    smooth_iterations : int
        Laplacian post-smoothing iterations.
    smooth_step : float
        Laplacian post-smoothing learning rate.
    track_limit : float
        Usable share of the local half-width.
    """

    trials: int = 6000
    max_lookahead: int = 50
    smooth_iterations: int = 60
    smooth_step: float = 0.3
    track_limit: float = TRACK_LIMIT_FRACTION

    def __post_init__(self) -> None:
        if self.trials < 0:
            raise ValueError("trials must be non-negative.")
        if self.max_lookahead < 1:
            raise ValueError("max_lookahead must be at least 1.")
        if not (0.0 < self.smooth_step <= 1.0):
            raise ValueError("smooth_step must be in (0, 1].")
        if not (0.0 < self.track_limit <= 1.0):
            raise ValueError("track_limit must be in (0, 1].")


# ================================================================
# STOCHASTIC SHORTCUTTER
# ================================================================


class StochasticShortcutter(PathOptimizer):
    """
    Stochastic chord-cutting optimizer.

    Parameters
    ----------
    config : ShortcutConfig
        Search constants.
    rng : numpy.random.Generator | None
        Random source. A fresh unseeded generator when omitted.
    """

    def __init__(
        self,
        config: ShortcutConfig = ShortcutConfig(),
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self._config: ShortcutConfig = config
        self._rng: np.random.Generator = rng if rng is not None else np.random.default_rng()

    @property
    def config(self) -> ShortcutConfig:
        return self._config

    # ------------------------------------------------------------

    def _chord(
        self,
        path: FloatArray,
        start: int,
        jump: int,
    ) -> FloatArray:
        """
        Intermediate chord points between path[start] and path[start + jump].

        Returns
        -------
        ndarray of shape (jump - 1, 2)
        """
        n = path.shape[0]
        p_start = path[start]
        p_end = path[(start + jump) % n]
        t = np.arange(1, jump, dtype=np.float64) / jump
        return p_start + t[:, None] * (p_end - p_start)

    def _is_chord_valid(
        self,
        chord: FloatArray,
        start: int,
        jump: int,
        corridor: Corridor,
    ) -> bool:
        """
        Check every chord sample against the interpolated centerline.
        """
        n = len(corridor)
        t = np.arange(1, jump, dtype=np.float64) / jump

        # corresponding spot on the centerline, linearly interpolated
        center_t = start + jump * t
        low_raw = np.floor(center_t)
        sub_t = center_t - low_raw
        low = low_raw.astype(np.int64) % n
        high = (low + 1) % n

        centers = corridor.centers
        ref = centers[low] + sub_t[:, None] * (centers[high] - centers[low])
        limits = corridor.limits[low] + sub_t * (corridor.limits[high] - corridor.limits[low])

        offsets = chord - ref
        dist_sq = np.einsum("ij,ij->i", offsets, offsets)
        return bool(np.all(dist_sq <= limits * limits))

    # ------------------------------------------------------------

    def search(self, centers: FloatArray, half_widths: FloatArray) -> FloatArray:
        """
        Run the chord search and the smoothing pass.

        Parameters
        ----------
        centers : ndarray of shape (N, 2)
        half_widths : ndarray of shape (N,)

        Returns
        -------
        ndarray of shape (N, 2)
        """
        cfg = self._config
        corridor = Corridor(centers, half_widths, cfg.track_limit)
        path = np.array(centers, dtype=np.float64, copy=True)
        n = path.shape[0]

        # chords never wrap onto their own start point
        max_jump = min(cfg.max_lookahead + 1, n - 1)

        accepted = 0
        for _ in range(cfg.trials):
            start = int(self._rng.integers(0, n))
            jump = int(self._rng.integers(2, max_jump + 1))

            chord = self._chord(path, start, jump)
            if self._is_chord_valid(chord, start, jump, corridor):
                path[(start + np.arange(1, jump)) % n] = chord
                accepted += 1

        _logger.debug("Shortcut search: %d of %d chords accepted", accepted, cfg.trials)

        return relax(path, corridor, laplacian_target, cfg.smooth_step, cfg.smooth_iterations)

    def _optimize(self, centers: FloatArray, half_widths: FloatArray) -> FloatArray:
        return self.search(centers, half_widths)


# ================================================================
# SEARCH + REFINE
# ================================================================


class ShortcutBiharmonicPipeline(PathOptimizer):
    """
    Shortcut search followed by minimum-curvature refinement.

    Parameters
    ----------
    shortcutter : StochasticShortcutter | None
        Topology/shortcut estimator.
    smoother : BiharmonicSmoother | None
        Refinement stage warm-started from the shortcut path.
    """

    def __init__(
        self,
        shortcutter: Optional[StochasticShortcutter] = None,
        smoother: Optional[BiharmonicSmoother] = None,
    ) -> None:
        self._shortcutter: StochasticShortcutter = shortcutter or StochasticShortcutter()
        self._smoother: BiharmonicSmoother = smoother or BiharmonicSmoother()

    def _optimize(self, centers: FloatArray, half_widths: FloatArray) -> FloatArray:
        rough = self._shortcutter.search(centers, half_widths)
        return self._smoother.refine(centers, half_widths, rough)
