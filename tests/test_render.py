from __future__ import annotations

import pytest

from floorplan.core.editor import FloorPlanEditor
from floorplan.models import (
    CanvasTransform, DrainOrientation, FloorDrain, OpeningKind, Point2D, Room,
    RoomKind, ToolMode,
)
from floorplan.render.adapter import floor_drain_segments, render_plan, room_outline


def P(x: float, y: float) -> Point2D:
    return Point2D(x=x, y=y)


def by_layer(instructions, layer: str):
    return [i for i in instructions if i.layer == layer]


def test_empty_plan_draws_exterior_first() -> None:
    out = render_plan(FloorPlanEditor(40, 60).snapshot())
    assert out[0].op == "polygon" and out[0].layer == "exterior"
    assert out[0].points == [P(0, 0), P(40, 0), P(40, 60), P(0, 60)]
    assert [i.text for i in out[1:3]] == ["40'", "60'"]
    assert len(out) == 3


def test_room_outline_turns_about_anchor() -> None:
    room = Room(id="r", kind=RoomKind.ROOM, position=P(5, 5), width=10, length=4, rotation=90)
    assert room_outline(room) == [P(5, 5), P(5, 15), P(1, 15), P(1, 5)]


def test_rooms_drawn_below_walls_and_openings() -> None:
    editor = FloorPlanEditor(40, 60)
    editor.begin_room_placement(RoomKind.PORCH, 8, 6)
    editor.pointer_down(P(20, 20))
    editor.set_mode(ToolMode.DRAW_WALL)
    editor.pointer_down(P(10, 10))
    editor.pointer_up(P(10, 30))
    editor.set_mode(ToolMode.PLACE_WINDOW)
    editor.pointer_down(P(30, 40))

    layers = [i.layer for i in render_plan(editor.snapshot())]
    assert layers.index("room") < layers.index("wall") < layers.index("opening.window")
    labels = [i.text for i in render_plan(editor.snapshot()) if i.layer == "room" and i.op == "label"]
    assert labels == ["Porch 8' × 6'"]


def test_selected_wall_shows_handles_and_length() -> None:
    editor = FloorPlanEditor(40, 60)
    editor.set_mode(ToolMode.DRAW_WALL)
    editor.pointer_down(P(10, 10))
    editor.pointer_up(P(10, 22.5))

    assert by_layer(render_plan(editor.snapshot()), "handle") == []

    editor.set_mode(ToolMode.SELECT)
    editor.pointer_down(P(10, 15))
    out = render_plan(editor.snapshot())
    wall_line = [i for i in out if i.layer == "wall" and i.op == "line"][0]
    assert wall_line.state == "selected"
    assert [h.text for h in by_layer(out, "handle")] == ["start", "end"]
    assert [i.text for i in out if i.layer == "wall" and i.op == "label"] == ["12.5'"]


def test_wall_drag_draws_provisional_endpoint() -> None:
    editor = FloorPlanEditor(40, 60)
    editor.set_mode(ToolMode.DRAW_WALL)
    editor.pointer_down(P(10, 10))
    editor.pointer_up(P(10, 30))
    editor.set_mode(ToolMode.SELECT)
    editor.pointer_down(P(10, 20))
    editor.pointer_up(P(10, 20))
    editor.pointer_down(P(10, 30))
    editor.pointer_move(P(15, 30))

    wall_line = [i for i in render_plan(editor.snapshot()) if i.layer == "wall" and i.op == "line"][0]
    assert wall_line.state == "dragging"
    assert wall_line.points == [P(10, 10), P(15, 30)]


def test_wall_preview_is_dashed() -> None:
    editor = FloorPlanEditor(40, 60)
    editor.set_mode(ToolMode.DRAW_WALL)
    editor.pointer_down(P(10, 10))
    editor.pointer_move(P(20, 10))

    preview = by_layer(render_plan(editor.snapshot()), "preview")
    assert len(preview) == 1
    assert preview[0].dashed
    assert preview[0].points == [P(10, 10), P(20, 10)]


def test_listed_openings_are_not_drawn() -> None:
    editor = FloorPlanEditor(40, 60)
    editor.add_opening(OpeningKind.WINDOW)
    out = render_plan(editor.snapshot())
    assert not [i for i in out if i.layer.startswith("opening")]


def test_opening_span_follows_rotation() -> None:
    editor = FloorPlanEditor(40, 60)
    editor.set_mode(ToolMode.PLACE_DOOR)
    editor.pointer_down(P(0.2, 20))

    span = by_layer(render_plan(editor.snapshot()), "opening.walk_door")[0]
    assert span.points == [P(0, 18.5), P(0, 21.5)]


def test_drain_segments_are_staggered() -> None:
    drains = [
        FloorDrain(id="d1", length_ft=10),
        FloorDrain(id="d2", length_ft=6, orientation=DrainOrientation.VERTICAL),
        FloorDrain(id="d3", length_ft=4, location="Center aisle"),
    ]
    segments = floor_drain_segments(drains, 40, 60)
    assert segments[0] == (P(8, 12), P(18, 12))
    assert segments[1] == (P(11, 15), P(11, 21))
    assert segments[2] == (P(20, 30), P(24, 30))


def test_drains_are_drawn_dashed() -> None:
    editor = FloorPlanEditor(40, 60)
    editor.add_floor_drain(length_ft=5)
    drains = by_layer(render_plan(editor.snapshot()), "drain")
    assert len(drains) == 1 and drains[0].dashed


def test_transform_maps_points_to_canvas() -> None:
    transform = CanvasTransform(
        building_width=40, building_length=60, canvas_width=800, canvas_height=600,
    )
    out = render_plan(FloorPlanEditor(40, 60).snapshot(), transform)
    corner = out[0].points[0]
    assert corner.x == pytest.approx(700)
    assert corner.y == pytest.approx(100)
    back = transform.to_plan(corner)
    assert back.x == pytest.approx(0)
    assert back.y == pytest.approx(0)
