"""
test_optimizer_factory.py

Unit tests for race modes, the optimizer factory and behaviour shared by
every optimizer.
"""

from __future__ import annotations

from typing import List

import numpy as np
import pytest

from cone_racer.core.centerline import CenterlinePoint, to_array
from cone_racer.planning.base_optimizer import PathOptimizer
from cone_racer.planning.local_planner import RecedingHorizonPlanner
from cone_racer.planning.optimizer_factory import GHOST_MODE, OptimizerFactory, OptimizerMode
from cone_racer.planning.shortcut import ShortcutBiharmonicPipeline, StochasticShortcutter
from cone_racer.planning.smoothers import BiharmonicSmoother, HybridSmoother, LaplacianSmoother


OPTIMIZED_MODES = [m for m in OptimizerMode if m is not OptimizerMode.NONE]


@pytest.mark.parametrize(
    "mode, expected",
    [
        (OptimizerMode.LAPLACIAN, LaplacianSmoother),
        (OptimizerMode.SHORTCUT, StochasticShortcutter),
        (OptimizerMode.BIHARMONIC, BiharmonicSmoother),
        (OptimizerMode.HYBRID, HybridSmoother),
        (OptimizerMode.SHORTCUT_BIHARMONIC, ShortcutBiharmonicPipeline),
        (OptimizerMode.LOCAL, RecedingHorizonPlanner),
    ],
)
def test_create_by_mode(mode: OptimizerMode, expected: type) -> None:
    assert isinstance(OptimizerFactory.create(mode), expected)
    assert isinstance(OptimizerFactory.create(mode.value), expected)


def test_none_has_no_optimizer() -> None:
    with pytest.raises(ValueError):
        OptimizerFactory.create(OptimizerMode.NONE)


def test_unknown_mode() -> None:
    with pytest.raises(ValueError):
        OptimizerFactory.create("teleport")


def test_available_modes() -> None:
    assert sorted(OptimizerFactory.available()) == sorted(m.value for m in OPTIMIZED_MODES)
    assert GHOST_MODE is OptimizerMode.SHORTCUT_BIHARMONIC


def test_fresh_instances() -> None:
    assert OptimizerFactory.create("hybrid") is not OptimizerFactory.create("hybrid")


@pytest.mark.parametrize("mode", OPTIMIZED_MODES)
def test_straight_line_is_fixed_point(mode: OptimizerMode, line: List[CenterlinePoint]) -> None:
    optimizer: PathOptimizer = OptimizerFactory.create(mode, rng=np.random.default_rng(11))
    out = to_array(optimizer.optimize(line))
    ref = to_array(line)

    # everything stays on the line
    np.testing.assert_allclose(out[:, 1], 0.0, atol=1e-9)
    # points far from the closing seam do not move
    np.testing.assert_allclose(out[40:80, :2], ref[40:80, :2], atol=1e-6)


@pytest.mark.parametrize("mode", OPTIMIZED_MODES)
def test_length_preserved(mode: OptimizerMode, square: List[CenterlinePoint]) -> None:
    optimizer = OptimizerFactory.create(mode, rng=np.random.default_rng(5))
    out = optimizer.optimize(square)

    assert len(out) == len(square)
    assert all(isinstance(p, CenterlinePoint) for p in out)
