"""
test_markers.py

Unit tests for BoundaryMarker and parse_markers.

These tests verify:
- Tag substring matching and its priority order
- Malformed line rejection
- Identity-preserving moves
- Dictionary serialization
"""

from __future__ import annotations

import pytest

from cone_racer.core.markers import (
    BoundaryMarker,
    ConeType,
    markers_of_type,
    moved_marker,
    parse_markers,
)


def test_parse_valid_lines() -> None:
    text = "blue,1.0,2.0\nyellow,3.5,-4.25\ncar_start,0,0\norange,7,8"
    markers = parse_markers(text)

    assert [m.type for m in markers] == [
        ConeType.BLUE,
        ConeType.YELLOW,
        ConeType.CAR_START,
        ConeType.ORANGE,
    ]
    assert markers[1].x == pytest.approx(3.5)
    assert markers[1].y == pytest.approx(-4.25)
    assert all(m.z == 0.0 for m in markers)


def test_tag_is_substring_match() -> None:
    markers = parse_markers("cone_blue_large,1,1\nbig_orange,2,2")

    assert [m.type for m in markers] == [ConeType.BLUE, ConeType.ORANGE]


def test_tag_priority_blue_before_orange() -> None:
    markers = parse_markers("orange_blue,1,1")

    assert len(markers) == 1
    assert markers[0].type == ConeType.BLUE


def test_tag_match_is_case_sensitive() -> None:
    assert parse_markers("BLUE,1,1") == []


def test_extra_fields_ignored() -> None:
    markers = parse_markers("yellow,1,2,0.5,whatever")

    assert len(markers) == 1
    assert (markers[0].x, markers[0].y) == (1.0, 2.0)


@pytest.mark.parametrize(
    "line",
    [
        "",
        "blue,1",
        "blue,abc,2",
        "blue,1,nan",
        "blue,inf,0",
        "yellow,-Infinity,2",
        "yellow,1_000,2",
        "green,1,2",
        "tag,x,y",
    ],
)
def test_malformed_lines_skipped(line: str) -> None:
    assert parse_markers(line) == []


def test_header_and_blank_lines_skipped() -> None:
    text = "tag,x,y\n\nblue,1,2\n\nyellow,1,5\n"
    assert len(parse_markers(text)) == 2


def test_parsed_ids_unique() -> None:
    markers = parse_markers("\n".join(["blue,1,1"] * 20))
    assert len({m.id for m in markers}) == 20


def test_moved_to_keeps_identity() -> None:
    marker = BoundaryMarker.create(1.0, 2.0, ConeType.YELLOW)
    moved = marker.moved_to(5.0, 6.0)

    assert moved.id == marker.id
    assert moved.type == marker.type
    assert (moved.x, moved.y) == (5.0, 6.0)
    assert (marker.x, marker.y) == (1.0, 2.0)


def test_moved_marker_replaces_only_matching_id() -> None:
    a = BoundaryMarker.create(0.0, 0.0, ConeType.BLUE)
    b = BoundaryMarker.create(1.0, 0.0, ConeType.YELLOW)

    result = moved_marker([a, b], b.id, 9.0, 9.0)

    assert result[0] is a
    assert (result[1].x, result[1].y) == (9.0, 9.0)
    assert moved_marker([a, b], "missing", 3.0, 3.0) == [a, b]


def test_markers_of_type_preserves_order() -> None:
    markers = parse_markers("blue,1,0\nyellow,1,3\nblue,2,0")
    blues = markers_of_type(markers, ConeType.BLUE)

    assert [m.x for m in blues] == [1.0, 2.0]


def test_dict_serialization() -> None:
    marker = BoundaryMarker.create(1.5, -2.5, ConeType.CAR_START)
    data = marker.to_dict()

    assert data["type"] == "CAR_START"
    assert BoundaryMarker.from_dict(data) == marker
