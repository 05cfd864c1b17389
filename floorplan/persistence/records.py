"""Conversion between plan entities and flat storage rows.

Storage keeps the legacy row layout: flattened coordinates, opening
sizes as text labels such as ``3' × 7'`` and ``walkdoor`` as the walk
door type. Nothing outside this module sees that layout.
"""

from __future__ import annotations
import re
from typing import Any, cast

from floorplan.models import (
    Cupola, EntityKind, FloorDrain, Opening, OpeningKind, OpeningSize,
    PlanEntity, Point2D, Room, Wall, default_opening_size,
)


Record = dict[str, Any]

_SIZE_RE = re.compile(r"(\d+(?:\.\d+)?)'?\s*[x×]\s*(\d+(?:\.\d+)?)'?", re.IGNORECASE)

# Storage names differ from model names for walk doors only
_OPENING_TYPE_TO_ROW = {
    OpeningKind.WALK_DOOR: "walkdoor",
    OpeningKind.WINDOW: "window",
    OpeningKind.OVERHEAD_DOOR: "overhead_door",
    OpeningKind.OTHER: "other",
}
_OPENING_TYPE_FROM_ROW = {v: k for k, v in _OPENING_TYPE_TO_ROW.items()}


def parse_size_label(label: str, kind: OpeningKind) -> OpeningSize:
    """Parse ``W' × H'``; unreadable labels fall back to the kind's default."""
    match = _SIZE_RE.search(label or "")
    if match is None:
        return default_opening_size(kind)
    return OpeningSize(width_ft=float(match.group(1)), height_ft=float(match.group(2)))


def format_size_label(size: OpeningSize) -> str:
    return f"{size.width_ft:g}' × {size.height_ft:g}'"


def to_record(kind: EntityKind, entity: PlanEntity) -> Record:
    """Row payload for an entity, without its id."""
    if kind == EntityKind.WALL:
        wall = cast(Wall, entity)
        return {
            "start_x": wall.start.x,
            "start_y": wall.start.y,
            "end_x": wall.end.x,
            "end_y": wall.end.y,
        }
    if kind == EntityKind.OPENING:
        opening = cast(Opening, entity)
        return {
            "opening_type": _OPENING_TYPE_TO_ROW[opening.kind],
            "size_detail": format_size_label(opening.size),
            "quantity": opening.quantity,
            "location": opening.location,
            "position_x": opening.position.x if opening.position else None,
            "position_y": opening.position.y if opening.position else None,
            "wall": opening.wall_ref,
            "swing_direction": opening.swing_direction.value if opening.swing_direction else None,
            "rotation": opening.rotation,
        }
    if kind == EntityKind.ROOM:
        room = cast(Room, entity)
        return {
            "type": room.kind.value,
            "x": room.position.x,
            "y": room.position.y,
            "width": room.width,
            "length": room.length,
            "rotation": room.rotation,
        }
    if kind == EntityKind.FLOOR_DRAIN:
        drain = cast(FloorDrain, entity)
        return {
            "length_ft": drain.length_ft,
            "orientation": drain.orientation.value,
            "location": drain.location,
        }
    cupola = cast(Cupola, entity)
    return {
        "size": cupola.size.value,
        "cupola_type": cupola.type,
        "weather_vane": cupola.weather_vane,
        "location": cupola.location,
    }


def change_record(kind: EntityKind, changes: dict[str, Any], entity: PlanEntity) -> Record:
    """
    Row columns touched by a set of model field changes.

    Position-like fields expand into their flattened columns; the values
    are read from the already updated entity.
    """
    full = to_record(kind, entity)
    columns: set[str] = set()
    for field in changes:
        columns.update(_FIELD_COLUMNS[kind].get(field, (field,)))
    return {c: full[c] for c in columns if c in full}


_FIELD_COLUMNS: dict[EntityKind, dict[str, tuple[str, ...]]] = {
    EntityKind.WALL: {"start": ("start_x", "start_y"), "end": ("end_x", "end_y")},
    EntityKind.OPENING: {
        "position": ("position_x", "position_y"),
        "size": ("size_detail",),
        "wall_ref": ("wall",),
    },
    EntityKind.ROOM: {"position": ("x", "y")},
    EntityKind.FLOOR_DRAIN: {},
    EntityKind.CUPOLA: {"type": ("cupola_type",)},
}


def _point(row: Record, x_key: str, y_key: str) -> Point2D | None:
    if row.get(x_key) is None or row.get(y_key) is None:
        return None
    return Point2D(x=float(row[x_key]), y=float(row[y_key]))


def from_record(kind: EntityKind, row: Record) -> PlanEntity:
    """Build an entity from a stored row (which must carry its id)."""
    entity_id = str(row["id"])
    if kind == EntityKind.WALL:
        return Wall(
            id=entity_id,
            start=_point(row, "start_x", "start_y"),
            end=_point(row, "end_x", "end_y"),
        )
    if kind == EntityKind.OPENING:
        opening_kind = _OPENING_TYPE_FROM_ROW.get(row.get("opening_type", ""), OpeningKind.OTHER)
        return Opening(
            id=entity_id,
            kind=opening_kind,
            size=parse_size_label(row.get("size_detail", ""), opening_kind),
            quantity=row.get("quantity") or 1,
            location=row.get("location") or "",
            position=_point(row, "position_x", "position_y"),
            wall_ref=row.get("wall") or "front",
            swing_direction=row.get("swing_direction"),
            rotation=row.get("rotation") or 0,
        )
    if kind == EntityKind.ROOM:
        return Room(
            id=entity_id,
            kind=row["type"],
            position=_point(row, "x", "y"),
            width=row["width"],
            length=row["length"],
            rotation=row.get("rotation") or 0,
        )
    if kind == EntityKind.FLOOR_DRAIN:
        return FloorDrain(
            id=entity_id,
            length_ft=row["length_ft"],
            orientation=row["orientation"],
            location=row.get("location") or "",
        )
    return Cupola(
        id=entity_id,
        size=row["size"],
        type=row.get("cupola_type") or "standard",
        weather_vane=bool(row.get("weather_vane")),
        location=row.get("location") or "",
    )
