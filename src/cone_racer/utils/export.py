"""
export.py

Trajectory CSV export.

Format
------
Header ``x,y,z,yaw,velocity,curvature,acceleration,dist`` followed by one
row per sample, every value in 4-decimal fixed notation, rows joined with
``\\n`` and no trailing newline.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from cone_racer.core.path import PathProfile

CSV_COLUMNS: tuple[str, ...] = (
    "x",
    "y",
    "z",
    "yaw",
    "velocity",
    "curvature",
    "acceleration",
    "dist",
)


def export_csv(profile: PathProfile) -> str:
    """
    Render a profile as trajectory CSV text.

    Parameters
    ----------
    profile : PathProfile

    Returns
    -------
    str
        Header only for an empty profile.
    """
    columns = [getattr(profile, name) for name in CSV_COLUMNS]
    lines: List[str] = [",".join(CSV_COLUMNS)]
    for row in zip(*columns):
        lines.append(",".join(f"{float(value):.4f}" for value in row))
    return "\n".join(lines)


def write_csv(profile: PathProfile, path: str | Path) -> Path:
    """
    Write trajectory CSV to a file.

    Returns
    -------
    Path
        The written path.
    """
    target = Path(path)
    target.write_text(export_csv(profile), encoding="utf-8")
    return target
