from __future__ import annotations

import pytest

from floorplan.core.snap import exterior_walls, snap_to_exterior, snap_to_wall
from floorplan.models import Point2D, Wall


def P(x: float, y: float) -> Point2D:
    return Point2D(x=x, y=y)


def wall(wid: str, x1: float, y1: float, x2: float, y2: float) -> Wall:
    return Wall(id=wid, start=P(x1, y1), end=P(x2, y2))


def test_exterior_walls_follow_building_bounds() -> None:
    names = [(w.name, w.start.x, w.start.y, w.end.x, w.end.y) for w in exterior_walls(40, 60)]
    assert names == [
        ("top", 0, 0, 40, 0),
        ("bottom", 0, 60, 40, 60),
        ("left", 0, 0, 0, 60),
        ("right", 40, 0, 40, 60),
    ]


def test_point_on_exterior_wall_stays_and_is_snapped() -> None:
    result = snap_to_wall(P(0.0, 20.0), 40, 60, [])
    assert result.snapped
    assert result.point == P(0.0, 20.0)
    assert result.wall == "left"


def test_building_centre_is_not_snapped() -> None:
    result = snap_to_wall(P(20.0, 30.0), 40, 60, [])
    assert not result.snapped
    assert result.point == P(20.0, 30.0)
    assert result.wall == "none"


def test_near_left_wall_snaps_x_only() -> None:
    result = snap_to_wall(P(0.3, 20.0), 40, 60, [])
    assert result.snapped
    assert result.point.x == 0.0
    assert result.point.y == 20.0
    assert result.rotation == 90


def test_exterior_wall_rotations() -> None:
    assert snap_to_wall(P(10.0, 0.5), 40, 60, []).rotation == 180
    assert snap_to_wall(P(10.0, 59.5), 40, 60, []).rotation == 0
    assert snap_to_wall(P(39.2, 10.0), 40, 60, []).rotation == 270


def test_exterior_snap_requires_point_within_wall_extent() -> None:
    result = snap_to_wall(P(45.0, 0.5), 40, 60, [])
    assert not result.snapped


def test_interior_wall_projects_onto_segment() -> None:
    walls = [wall("w1", 10, 10, 10, 30)]
    result = snap_to_wall(P(10.6, 20.0), 40, 60, walls)
    assert result.snapped
    assert result.wall == "interior"
    assert result.wall_id == "w1"
    assert result.point.x == pytest.approx(10.0)
    assert result.point.y == pytest.approx(20.0)
    assert result.rotation == 90


def test_horizontal_interior_wall_rotation_is_zero() -> None:
    walls = [wall("w1", 5, 20, 25, 20)]
    result = snap_to_wall(P(12.0, 20.4), 40, 60, walls)
    assert result.snapped
    assert result.rotation == 0


def test_interior_snap_uses_segment_not_infinite_line() -> None:
    walls = [wall("w1", 10, 10, 10, 30)]
    result = snap_to_wall(P(10.2, 35.0), 40, 60, walls)
    assert not result.snapped


def test_nearest_interior_wall_wins_by_default() -> None:
    walls = [wall("a", 10, 10, 10, 30), wall("b", 11, 10, 11, 30)]
    result = snap_to_wall(P(10.7, 20.0), 40, 60, walls)
    assert result.wall_id == "b"
    assert result.point.x == pytest.approx(11.0)


def test_first_tie_break_keeps_insertion_order() -> None:
    walls = [wall("a", 10, 10, 10, 30), wall("b", 11, 10, 11, 30)]
    result = snap_to_wall(P(10.7, 20.0), 40, 60, walls, tie_break="first")
    assert result.wall_id == "a"
    assert result.point.x == pytest.approx(10.0)


def test_exterior_wall_wins_over_interior() -> None:
    walls = [wall("w1", 0.5, 10, 0.5, 30)]
    result = snap_to_wall(P(0.3, 20.0), 40, 60, walls)
    assert result.wall == "left"
    assert result.point == P(0.0, 20.0)


def test_excluded_wall_is_ignored() -> None:
    walls = [wall("w1", 10, 10, 10, 30)]
    result = snap_to_wall(P(10.4, 20.0), 40, 60, walls, exclude_wall_id="w1")
    assert not result.snapped
    assert result.point == P(10.4, 20.0)


def test_custom_threshold() -> None:
    assert not snap_to_wall(P(1.5, 20.0), 40, 60, []).snapped
    assert snap_to_wall(P(1.5, 20.0), 40, 60, [], threshold_ft=2.0).snapped


def test_snap_to_exterior_only_sees_the_envelope() -> None:
    assert snap_to_exterior(P(39.5, 12.0), 40, 60).point == P(40.0, 12.0)
    assert not snap_to_exterior(P(12.2, 20.0), 40, 60).snapped
