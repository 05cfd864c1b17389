from __future__ import annotations

from floorplan.core.hit_test import HitTester
from floorplan.models import (
    EditorParams, Opening, OpeningKind, OpeningSize, Point2D, Room, RoomKind, Wall,
)


def P(x: float, y: float) -> Point2D:
    return Point2D(x=x, y=y)


def make_opening(oid: str, position: Point2D | None) -> Opening:
    return Opening(
        id=oid, kind=OpeningKind.WALK_DOOR,
        size=OpeningSize(width_ft=3, height_ft=7), position=position,
    )


WALL = Wall(id="w1", start=P(10, 10), end=P(10, 30))
ROOM = Room(id="r1", kind=RoomKind.ROOM, position=P(20, 20), width=10, length=8)


def test_room_containment_includes_edges() -> None:
    hits = HitTester([], [], [ROOM])
    assert hits.find_room_at(P(25, 24)) is ROOM
    assert hits.find_room_at(P(30, 28)) is ROOM
    assert hits.find_room_at(P(30.1, 28)) is None


def test_rotated_room_hit_tests_unrotated_rectangle() -> None:
    rotated = ROOM.model_copy(update={"rotation": 90})
    hits = HitTester([], [], [rotated])
    # Inside the un-rotated footprint
    assert hits.find_room_at(P(29, 21)) is rotated
    # Inside the drawn (turned) footprint only
    assert hits.find_room_at(P(15, 25)) is None


def test_opening_hits_within_radius_and_skips_unplaced() -> None:
    placed = make_opening("o1", P(5, 5))
    unplaced = make_opening("o2", None)
    hits = HitTester([], [unplaced, placed], [])
    assert hits.find_opening_at(P(6.5, 5)) is placed
    assert hits.find_opening_at(P(7.1, 5)) is None


def test_wall_hit_tolerance() -> None:
    hits = HitTester([WALL], [], [])
    assert hits.find_wall_at(P(10.4, 20)) is WALL
    assert hits.find_wall_at(P(10.6, 20)) is None


def test_closest_wall_is_hit() -> None:
    near = Wall(id="w2", start=P(10.6, 10), end=P(10.6, 30))
    hits = HitTester([WALL, near], [], [])
    assert hits.find_wall_at(P(10.45, 20)).id == "w2"


def test_handles_only_for_selected_wall() -> None:
    hits = HitTester([WALL], [], [])
    assert hits.find_wall_handle_at(P(10, 10.5), None) is None
    assert hits.find_wall_handle_at(P(10, 10.5), "other") is None
    wall, end = hits.find_wall_handle_at(P(10, 10.5), "w1")
    assert wall is WALL and end == "start"
    assert hits.find_wall_handle_at(P(10.3, 29.6), "w1")[1] == "end"


def test_handle_start_checked_before_end() -> None:
    short = Wall(id="s", start=P(0, 0), end=P(0, 1))
    hits = HitTester([short], [], [])
    assert hits.find_wall_handle_at(P(0, 0.5), "s")[1] == "start"


def test_pick_precedence() -> None:
    opening = make_opening("o1", P(21, 21))
    crossing = Wall(id="w2", start=P(20, 21), end=P(40, 21))
    hits = HitTester([crossing], [opening], [ROOM])

    # Room beats opening and wall inside its rectangle
    assert hits.pick(P(21, 21)).type == "room"
    # Outside the room the opening beats the wall
    assert hits.pick(P(19.5, 21)).type == "opening"
    # A selected wall's handle beats the room
    target = hits.pick(P(20.2, 21), selected_wall_id="w2")
    assert target.type == "handle" and target.handle == "start"
    assert hits.pick(P(0, 50)) is None


def test_custom_tolerances() -> None:
    params = EditorParams(wall_hit_tolerance=1.0)
    hits = HitTester([WALL], [], [], params)
    assert hits.find_wall_at(P(10.9, 20)) is WALL
