"""
optimizer_factory.py

Factory for path optimizers, keyed by race mode.

FACTORY LAYER
-------------
Produces PathOptimizer instances. Randomized optimizers receive the
caller's numpy Generator so a pipeline run is reproducible from one seed.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np

from cone_racer.planning.base_optimizer import PathOptimizer
from cone_racer.planning.local_planner import RecedingHorizonPlanner
from cone_racer.planning.shortcut import ShortcutBiharmonicPipeline, StochasticShortcutter
from cone_racer.planning.smoothers import BiharmonicSmoother, HybridSmoother, LaplacianSmoother
from cone_racer.utils.registry import Registry


class OptimizerMode(str, Enum):
    """
    Race mode selecting the racing-line optimizer.
    """

    NONE = "none"
    LAPLACIAN = "laplacian"
    SHORTCUT = "shortcut"
    BIHARMONIC = "biharmonic"
    HYBRID = "hybrid"
    SHORTCUT_BIHARMONIC = "shortcut_biharmonic"
    LOCAL = "local"


# Mode used for the "fastest" ghost line.
GHOST_MODE = OptimizerMode.SHORTCUT_BIHARMONIC


# ================================================================
# Registry
# ================================================================

_optimizer_registry: Registry[PathOptimizer] = Registry("optimizer")


@_optimizer_registry.register(OptimizerMode.LAPLACIAN)
def _laplacian(rng: Optional[np.random.Generator] = None) -> PathOptimizer:
    return LaplacianSmoother()


@_optimizer_registry.register(OptimizerMode.SHORTCUT)
def _shortcut(rng: Optional[np.random.Generator] = None) -> PathOptimizer:
    return StochasticShortcutter(rng=rng)


@_optimizer_registry.register(OptimizerMode.BIHARMONIC)
def _biharmonic(rng: Optional[np.random.Generator] = None) -> PathOptimizer:
    return BiharmonicSmoother()


@_optimizer_registry.register(OptimizerMode.HYBRID)
def _hybrid(rng: Optional[np.random.Generator] = None) -> PathOptimizer:
    return HybridSmoother()


@_optimizer_registry.register(OptimizerMode.SHORTCUT_BIHARMONIC)
def _shortcut_biharmonic(rng: Optional[np.random.Generator] = None) -> PathOptimizer:
    return ShortcutBiharmonicPipeline(shortcutter=StochasticShortcutter(rng=rng))


@_optimizer_registry.register(OptimizerMode.LOCAL)
def _local(rng: Optional[np.random.Generator] = None) -> PathOptimizer:
    return RecedingHorizonPlanner()


# ================================================================
# Public API
# ================================================================


class OptimizerFactory:
    """
    Public optimizer factory interface.
    """

    @staticmethod
    def create(
        mode: OptimizerMode | str,
        rng: Optional[np.random.Generator] = None,
    ) -> PathOptimizer:
        """
        Create the optimizer for a race mode.

        Parameters
        ----------
        mode : OptimizerMode | str
            Race mode. ``NONE`` has no optimizer.
        rng : numpy.random.Generator | None
            Random source for randomized optimizers.

        Raises
        ------
        ValueError
            For ``NONE`` or an unknown mode.
        """
        mode = OptimizerMode(mode)
        if mode is OptimizerMode.NONE:
            raise ValueError("Mode 'none' uses the raw centerline and has no optimizer.")
        return _optimizer_registry.create(mode, rng=rng)

    @staticmethod
    def available() -> list[str]:
        return _optimizer_registry.available
