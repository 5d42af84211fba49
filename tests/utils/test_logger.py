"""
test_logger.py

Unit tests for TrajectoryLogger.
"""

from __future__ import annotations

from pathlib import Path

from cone_racer.core.path import PathProfile
from cone_racer.profile.metadata import EMPTY_METADATA, TrackMetadata
from cone_racer.utils.logger import TrajectoryLogger


META = TrackMetadata(
    name="Test",
    total_length=100.0,
    avg_speed=20.0,
    est_lap_time=5.0,
    max_lat_g=1.2,
    max_long_g=0.8,
    min_long_g=-1.4,
)


def test_log_and_replay(tmp_path: Path) -> None:
    path = tmp_path / "runs.jsonl"

    with TrajectoryLogger(path) as logger:
        logger.log_trajectory(mode="hybrid", seed=3, metadata=META)
        logger.log_trajectory(mode="none", seed=None, metadata=EMPTY_METADATA)

    records = list(TrajectoryLogger.replay(path))

    assert [r["mode"] for r in records] == ["hybrid", "none"]
    assert records[0]["seed"] == 3
    assert records[1]["seed"] is None
    assert records[0]["metadata"] == META.to_dict()
    assert "profile" not in records[0]


def test_profile_only_when_enabled(tmp_path: Path) -> None:
    path = tmp_path / "runs.jsonl"

    with TrajectoryLogger(path, include_profile=True) as logger:
        logger.log_trajectory(mode="none", seed=None, metadata=EMPTY_METADATA, profile=PathProfile.empty())

    record = next(iter(TrajectoryLogger.replay(path)))
    assert record["profile"]["x"] == []
    assert PathProfile.from_dict(record["profile"]).is_empty


def test_identical_runs_identical_logs(tmp_path: Path) -> None:
    for name in ("a.jsonl", "b.jsonl"):
        with TrajectoryLogger(tmp_path / name) as logger:
            logger.log_trajectory(mode="laplacian", seed=1, metadata=META)

    assert (tmp_path / "a.jsonl").read_text() == (tmp_path / "b.jsonl").read_text()
