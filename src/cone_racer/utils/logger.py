"""
logger.py

Deterministic trajectory run logger.

This module provides TrajectoryLogger, which records one line per computed
trajectory:

- mode
- seed
- lap metadata
- optionally the full sampled profile

The logger:

- Has no timestamps (identical runs give identical logs)
- Does not depend on GUI
- Writes JSON Lines (one JSON object per trajectory)

Diagnostic messages go through the standard ``logging`` module instead.

This module belongs to the UTILS layer.
"""

from __future__ import annotations

import json
from pathlib import Path
from types import TracebackType
from typing import Any, Dict, Iterable, Optional, TextIO, Type

from cone_racer.core.path import PathProfile
from cone_racer.profile.metadata import TrackMetadata


class TrajectoryLogger:
    """
    JSON-lines trajectory logger.

    Parameters
    ----------
    path : str | Path
        Output log file path.
    include_profile : bool
        Also store every sample column.
    """

    def __init__(self, path: str | Path, include_profile: bool = False) -> None:
        self._path: Path = Path(path)
        self._include_profile: bool = include_profile
        self._file: TextIO = self._path.open("w", encoding="utf-8")

    # ------------------------------------------------------------------

    def log_trajectory(
        self,
        *,
        mode: str,
        seed: Optional[int],
        metadata: TrackMetadata,
        profile: Optional[PathProfile] = None,
    ) -> None:
        """
        Log a single computed trajectory.

        Parameters
        ----------
        mode : str
            Optimizer mode name.
        seed : int | None
            Seed of the random source, if any.
        metadata : TrackMetadata
            Lap statistics.
        profile : PathProfile | None
            Sampled trajectory; written only when ``include_profile``.
        """
        record: Dict[str, Any] = {
            "mode": mode,
            "seed": seed,
            "metadata": metadata.to_dict(),
        }
        if self._include_profile and profile is not None:
            record["profile"] = profile.to_dict()

        self._file.write(json.dumps(record))
        self._file.write("\n")

    # ------------------------------------------------------------------

    def close(self) -> None:
        """
        Close log file.
        """
        self._file.close()

    def __enter__(self) -> TrajectoryLogger:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    # ------------------------------------------------------------------

    @staticmethod
    def replay(path: str | Path) -> Iterable[Dict[str, Any]]:
        """
        Replay log file.

        Parameters
        ----------
        path : str | Path

        Returns
        -------
        Iterable[dict]
            Logged trajectory records in order.
        """
        with Path(path).open("r", encoding="utf-8") as f:
            for line in f:
                yield json.loads(line)
