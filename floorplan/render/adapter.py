"""Render adapter — turns an editor snapshot into draw instructions.

Instructions are renderer-neutral: a canvas, SVG or WebGL front end
walks the list in order and paints each one. Points are in plan feet
unless a `CanvasTransform` is given.
"""

from __future__ import annotations
from typing import Literal
from pydantic import BaseModel

from floorplan.models import (
    CanvasTransform, DraggingOpening, DraggingRoom, DraggingWallHandle,
    DrainOrientation, DrawingWall, EditorSnapshot, EntityKind, FloorDrain,
    Opening, Point2D, Room, Wall, rotate_point,
)


DRAIN_STAGGER_FT = 3.0  # Offset between successive drains without a location


class DrawInstruction(BaseModel):
    op: Literal["line", "polygon", "marker", "label"]
    layer: str
    points: list[Point2D]
    entity_id: str | None = None
    state: Literal["normal", "hover", "selected", "dragging"] = "normal"
    dashed: bool = False
    text: str | None = None


def floor_drain_segments(
    drains: list[FloorDrain], width: float, length: float,
) -> list[tuple[Point2D, Point2D]]:
    """
    Illustrative drain placement.

    Drains are staggered diagonally from 20% into the building, or centred
    when their location mentions "center", and run `length_ft` along
    their orientation.
    """
    segments: list[tuple[Point2D, Point2D]] = []
    for i, drain in enumerate(drains):
        if "center" in drain.location.lower():
            start = Point2D(x=width / 2, y=length / 2)
        else:
            start = Point2D(
                x=width * 0.2 + i * DRAIN_STAGGER_FT,
                y=length * 0.2 + i * DRAIN_STAGGER_FT,
            )
        if drain.orientation == DrainOrientation.HORIZONTAL:
            end = Point2D(x=start.x + drain.length_ft, y=start.y)
        else:
            end = Point2D(x=start.x, y=start.y + drain.length_ft)
        segments.append((start, end))
    return segments


def _ft(value: float) -> str:
    return f"{value:g}'"


def _state(snapshot: EditorSnapshot, kind: EntityKind, entity_id: str, dragging: bool) -> str:
    if dragging:
        return "dragging"
    sel = snapshot.selection
    if sel is not None and sel.kind == kind and sel.id == entity_id:
        return "selected"
    hov = snapshot.hover
    if hov is not None and hov.id == entity_id and (
        hov.type == kind.value or (kind == EntityKind.WALL and hov.type == "handle")
    ):
        return "hover"
    return "normal"


def room_outline(room: Room, position: Point2D | None = None) -> list[Point2D]:
    """Corners of a room turned about its anchor."""
    p = position or room.position
    corners = [
        p,
        Point2D(x=p.x + room.width, y=p.y),
        Point2D(x=p.x + room.width, y=p.y + room.length),
        Point2D(x=p.x, y=p.y + room.length),
    ]
    return [rotate_point(c, p, room.rotation) for c in corners]


def opening_span(opening: Opening, position: Point2D, rotation: int) -> list[Point2D]:
    """The segment an opening covers, centred on its anchor."""
    half = opening.size.width_ft / 2
    a = Point2D(x=position.x - half, y=position.y)
    b = Point2D(x=position.x + half, y=position.y)
    return [rotate_point(a, position, rotation), rotate_point(b, position, rotation)]


def _render_rooms(snapshot: EditorSnapshot) -> list[DrawInstruction]:
    out: list[DrawInstruction] = []
    drag = snapshot.drag
    for room in snapshot.rooms:
        dragging = isinstance(drag, DraggingRoom) and drag.room_id == room.id
        position = drag.provisional_position if dragging else room.position
        outline = room_outline(room, position)
        out.append(DrawInstruction(
            op="polygon", layer="room", points=outline, entity_id=room.id,
            state=_state(snapshot, EntityKind.ROOM, room.id, dragging),
        ))
        centre = outline[0].lerp(outline[2], 0.5)
        out.append(DrawInstruction(
            op="label", layer="room", points=[centre], entity_id=room.id,
            text=f"{room.kind.value.capitalize()} {_ft(room.width)} × {_ft(room.length)}",
        ))
    return out


def _render_walls(snapshot: EditorSnapshot) -> list[DrawInstruction]:
    out: list[DrawInstruction] = []
    drag = snapshot.drag
    for wall in snapshot.walls:
        dragging = isinstance(drag, DraggingWallHandle) and drag.wall_id == wall.id
        start, end = wall.start, wall.end
        if dragging:
            if drag.handle == "start":
                start = drag.provisional_point
            else:
                end = drag.provisional_point
        state = _state(snapshot, EntityKind.WALL, wall.id, dragging)
        out.append(DrawInstruction(
            op="line", layer="wall", points=[start, end], entity_id=wall.id, state=state,
        ))
        if state in ("selected", "dragging"):
            out.extend(_wall_handles(snapshot, wall, start, end))
            out.append(DrawInstruction(
                op="label", layer="wall", points=[start.lerp(end, 0.5)], entity_id=wall.id,
                text=f"{start.distance_to(end):.1f}'",
            ))
    return out


def _wall_handles(
    snapshot: EditorSnapshot, wall: Wall, start: Point2D, end: Point2D,
) -> list[DrawInstruction]:
    hov = snapshot.hover
    handles = []
    for name, point in (("start", start), ("end", end)):
        hovered = hov is not None and hov.type == "handle" and hov.id == wall.id and hov.handle == name
        handles.append(DrawInstruction(
            op="marker", layer="handle", points=[point], entity_id=wall.id,
            state="hover" if hovered else "selected", text=name,
        ))
    return handles


def _render_openings(snapshot: EditorSnapshot) -> list[DrawInstruction]:
    out: list[DrawInstruction] = []
    drag = snapshot.drag
    for opening in snapshot.openings:
        dragging = isinstance(drag, DraggingOpening) and drag.opening_id == opening.id
        if dragging:
            position, rotation = drag.provisional_position, drag.rotation
        elif opening.position is not None:
            position, rotation = opening.position, opening.rotation
        else:
            continue
        out.append(DrawInstruction(
            op="line", layer=f"opening.{opening.kind.value}",
            points=opening_span(opening, position, rotation), entity_id=opening.id,
            state=_state(snapshot, EntityKind.OPENING, opening.id, dragging),
        ))
        out.append(DrawInstruction(
            op="label", layer="opening", points=[position], entity_id=opening.id,
            text=f"{_ft(opening.size.width_ft)} × {_ft(opening.size.height_ft)}",
        ))
    return out


def render_plan(
    snapshot: EditorSnapshot, transform: CanvasTransform | None = None,
) -> list[DrawInstruction]:
    """Draw instructions, back to front, for one snapshot."""
    w, ln = snapshot.width, snapshot.length
    out: list[DrawInstruction] = [
        DrawInstruction(op="polygon", layer="exterior", points=[
            Point2D(x=0.0, y=0.0), Point2D(x=w, y=0.0),
            Point2D(x=w, y=ln), Point2D(x=0.0, y=ln),
        ]),
        DrawInstruction(op="label", layer="exterior", points=[Point2D(x=w / 2, y=0.0)], text=_ft(w)),
        DrawInstruction(op="label", layer="exterior", points=[Point2D(x=0.0, y=ln / 2)], text=_ft(ln)),
    ]
    out.extend(_render_rooms(snapshot))
    out.extend(_render_walls(snapshot))
    out.extend(_render_openings(snapshot))

    if isinstance(snapshot.drag, DrawingWall):
        out.append(DrawInstruction(
            op="line", layer="preview", dashed=True,
            points=[snapshot.drag.start_point, snapshot.drag.current_point],
        ))

    for drain, (start, end) in zip(
        snapshot.floor_drains, floor_drain_segments(snapshot.floor_drains, w, ln),
    ):
        out.append(DrawInstruction(
            op="line", layer="drain", points=[start, end], entity_id=drain.id, dashed=True,
        ))

    if transform is not None:
        out = [
            i.model_copy(update={"points": [transform.to_canvas(p) for p in i.points]})
            for i in out
        ]
    return out
