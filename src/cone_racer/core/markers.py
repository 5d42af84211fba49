"""
markers.py

Boundary marker ("cone") records and the delimited-text marker parser.

This module defines:

- ConeType categories
- Immutable BoundaryMarker record
- parse_markers(), turning raw CSV-like text into markers

Input format
------------
One record per line, comma-separated ``tag,x,y[,...]``. The tag is matched
by case-sensitive substring against ``blue``, ``yellow``, ``car_start`` and
``orange`` (checked in that order). Lines with fewer than three fields, with
non-numeric coordinates or with an unknown tag are skipped.

Notes
-----
This module belongs to the CORE layer and must not depend on:
- Planning / profile layers
- GUI
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

_logger = logging.getLogger(__name__)


# ============================================================
# Marker categories
# ============================================================


class ConeType(str, Enum):
    """
    Marker category.

    BLUE
        Left track boundary.
    YELLOW
        Right track boundary.
    CAR_START
        Vehicle start position.
    ORANGE
        Start/finish or section boundary.
    """

    BLUE = "BLUE"
    YELLOW = "YELLOW"
    CAR_START = "CAR_START"
    ORANGE = "ORANGE"


# Tag substring -> category, in matching priority order.
_TAG_TYPES: tuple[tuple[str, ConeType], ...] = (
    ("blue", ConeType.BLUE),
    ("yellow", ConeType.YELLOW),
    ("car_start", ConeType.CAR_START),
    ("orange", ConeType.ORANGE),
)


def generate_id() -> str:
    """
    Return a fresh short marker identifier.
    """
    return uuid.uuid4().hex[:12]


# ============================================================
# Marker record
# ============================================================


@dataclass(frozen=True)
class BoundaryMarker:
    """
    Immutable boundary marker.

    Parameters
    ----------
    id : str
        Unique identifier.
    x : float
        Global x-position [m].
    y : float
        Global y-position [m].
    z : float
        Elevation [m]. Always 0 for parsed tracks.
    type : ConeType
        Marker category.
    """

    id: str
    x: float
    y: float
    z: float
    type: ConeType

    # --------------------------------------------------------

    @staticmethod
    def create(x: float, y: float, type: ConeType, z: float = 0.0) -> BoundaryMarker:
        """
        Create a marker with a fresh identifier.
        """
        return BoundaryMarker(id=generate_id(), x=float(x), y=float(y), z=float(z), type=type)

    # --------------------------------------------------------

    def moved_to(self, x: float, y: float) -> BoundaryMarker:
        """
        Return a copy of this marker at a new position, keeping its identity.
        """
        return BoundaryMarker(id=self.id, x=float(x), y=float(y), z=self.z, type=self.type)

    # --------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize marker to a JSON-safe dictionary.
        """
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "type": self.type.value,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> BoundaryMarker:
        """
        Deserialize marker from dictionary.
        """
        return BoundaryMarker(
            id=str(data["id"]),
            x=float(data["x"]),
            y=float(data["y"]),
            z=float(data.get("z", 0.0)),
            type=ConeType(data["type"]),
        )


# ============================================================
# Parsing
# ============================================================


def _match_tag(tag: str) -> Optional[ConeType]:
    for needle, cone_type in _TAG_TYPES:
        if needle in tag:
            return cone_type
    return None


def _parse_float(field: str) -> Optional[float]:
    # plain decimal numbers only: no digit separators, no inf/nan
    if "_" in field:
        return None
    try:
        value = float(field)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_markers(text: str) -> List[BoundaryMarker]:
    """
    Parse delimited marker text.

    Parameters
    ----------
    text : str
        Newline-separated records ``tag,x,y[,...]``.

    Returns
    -------
    list[BoundaryMarker]
        Parsed markers, each with a fresh identifier. Malformed or
        unrecognized lines produce nothing.
    """
    markers: List[BoundaryMarker] = []
    skipped = 0

    for line in text.split("\n"):
        parts = line.split(",")
        if len(parts) < 3:
            skipped += 1
            continue

        x = _parse_float(parts[1])
        y = _parse_float(parts[2])
        if x is None or y is None:
            skipped += 1
            continue

        cone_type = _match_tag(parts[0].strip())
        if cone_type is None:
            skipped += 1
            continue

        markers.append(BoundaryMarker.create(x, y, cone_type))

    _logger.debug("Parsed %d markers (%d lines skipped)", len(markers), skipped)
    return markers


def markers_of_type(markers: Iterable[BoundaryMarker], cone_type: ConeType) -> List[BoundaryMarker]:
    """
    Filter markers by category, preserving order.
    """
    return [m for m in markers if m.type == cone_type]


def moved_marker(
    markers: Sequence[BoundaryMarker],
    marker_id: str,
    x: float,
    y: float,
) -> List[BoundaryMarker]:
    """
    Return a new marker list with one marker repositioned.

    Markers with other identifiers are passed through unchanged. An unknown
    identifier leaves the list unchanged.
    """
    return [m.moved_to(x, y) if m.id == marker_id else m for m in markers]
