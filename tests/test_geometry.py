from __future__ import annotations

import math

import pytest

from floorplan.models import (
    CanvasTransform, Point2D, distance_point_to_segment, normalize_rotation,
    project_point_onto_segment, rotate_point,
)


def P(x: float, y: float) -> Point2D:
    return Point2D(x=x, y=y)


def test_degenerate_segment_distance_is_distance_to_endpoint() -> None:
    a = P(2.0, 3.0)
    assert distance_point_to_segment(P(5.0, 7.0), a, a) == pytest.approx(5.0)


def test_projection_inside_segment_is_perpendicular_foot() -> None:
    proj = project_point_onto_segment(P(4.0, 3.0), P(0.0, 0.0), P(10.0, 0.0))
    assert (proj.x, proj.y) == pytest.approx((4.0, 0.0))
    assert distance_point_to_segment(P(4.0, 3.0), P(0.0, 0.0), P(10.0, 0.0)) == pytest.approx(3.0)


def test_projection_outside_segment_clamps_to_nearer_endpoint() -> None:
    a, b = P(0.0, 0.0), P(10.0, 0.0)
    assert project_point_onto_segment(P(-3.0, 2.0), a, b) == a
    assert project_point_onto_segment(P(14.0, -1.0), a, b) == b
    assert distance_point_to_segment(P(14.0, -1.0), a, b) == pytest.approx(math.hypot(4.0, 1.0))


def test_projection_on_diagonal_segment_clamps() -> None:
    a, b = P(1.0, 1.0), P(4.0, 5.0)
    assert project_point_onto_segment(P(8.0, 9.0), a, b) == b
    assert project_point_onto_segment(P(-2.0, 0.0), a, b) == a


@pytest.mark.parametrize("angle", [0, 90, 180, 270])
def test_quarter_turns_match_rotation_matrix(angle: int) -> None:
    origin = P(2.0, -1.0)
    point = P(5.5, 3.25)
    rotated = rotate_point(point, origin, angle)

    rad = math.radians(angle)
    dx, dy = point.x - origin.x, point.y - origin.y
    expected_x = origin.x + dx * math.cos(rad) - dy * math.sin(rad)
    expected_y = origin.y + dx * math.sin(rad) + dy * math.cos(rad)
    assert rotated.x == pytest.approx(expected_x, abs=1e-12)
    assert rotated.y == pytest.approx(expected_y, abs=1e-12)


def test_quarter_turn_is_exact() -> None:
    rotated = rotate_point(P(1.0, 0.0), P(0.0, 0.0), 90)
    assert (rotated.x, rotated.y) == (0.0, 1.0)


def test_normalize_rotation_wraps_to_quarter_turns() -> None:
    assert normalize_rotation(450) == 90
    assert normalize_rotation(-90) == 270
    assert normalize_rotation(360) == 0
    assert normalize_rotation(181) == 180


def test_canvas_transform_round_trip() -> None:
    t = CanvasTransform(
        building_width=40, building_length=60,
        canvas_width=800, canvas_height=600, zoom=1.3,
    )
    p = P(12.5, 47.0)
    back = t.to_plan(t.to_canvas(p))
    assert back.x == pytest.approx(p.x)
    assert back.y == pytest.approx(p.y)


def test_canvas_transform_centres_and_turns_the_plan() -> None:
    t = CanvasTransform(
        building_width=40, building_length=60, canvas_width=800, canvas_height=600,
    )
    centre = t.to_canvas(P(20.0, 30.0))
    assert (centre.x, centre.y) == pytest.approx((400.0, 300.0))

    # One foot along the building width points down the screen
    step = t.to_canvas(P(21.0, 30.0))
    assert step.x == pytest.approx(400.0)
    assert step.y == pytest.approx(310.0)
