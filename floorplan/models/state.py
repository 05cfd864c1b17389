"""Editor state — tool modes, drag sub-states, selection and snapshots."""

from __future__ import annotations
from enum import Enum
from typing import Annotated, Literal, Union
from pydantic import BaseModel, Field

from .entities import (
    Cupola, EntityKind, FloorDrain, Opening, OpeningKind, Room, RoomTemplate, Wall,
)
from .geometry import Point2D


class ToolMode(str, Enum):
    SELECT = "select"
    DRAW_WALL = "draw-wall"
    PLACE_DOOR = "place-door"
    PLACE_WINDOW = "place-window"
    PLACE_OVERHEAD_DOOR = "place-overhead-door"
    PLACE_ROOM = "place-room"


PLACEMENT_KINDS: dict[ToolMode, OpeningKind] = {
    ToolMode.PLACE_DOOR: OpeningKind.WALK_DOOR,
    ToolMode.PLACE_WINDOW: OpeningKind.WINDOW,
    ToolMode.PLACE_OVERHEAD_DOOR: OpeningKind.OVERHEAD_DOOR,
}


HandleEnd = Literal["start", "end"]


class Idle(BaseModel):
    kind: Literal["idle"] = "idle"


class DraggingWallHandle(BaseModel):
    kind: Literal["wall_handle"] = "wall_handle"
    wall_id: str
    handle: HandleEnd
    anchor: Point2D                # Pointer position at pointer-down
    provisional_point: Point2D
    moved: bool = False


class DraggingOpening(BaseModel):
    kind: Literal["opening"] = "opening"
    opening_id: str
    anchor: Point2D
    grab_offset: Point2D
    provisional_position: Point2D
    rotation: int
    moved: bool = False


class DraggingRoom(BaseModel):
    kind: Literal["room"] = "room"
    room_id: str
    anchor: Point2D
    grab_offset: Point2D
    provisional_position: Point2D
    moved: bool = False


class DrawingWall(BaseModel):
    """Rubber band from the raw drag start to the snapped pointer."""
    kind: Literal["drawing_wall"] = "drawing_wall"
    start_point: Point2D
    current_point: Point2D


DragState = Annotated[
    Union[Idle, DraggingWallHandle, DraggingOpening, DraggingRoom, DrawingWall],
    Field(discriminator="kind"),
]


class Selection(BaseModel):
    kind: EntityKind
    id: str


class HoverTarget(BaseModel):
    """What the pointer is over while idle in select mode."""
    type: Literal["handle", "room", "opening", "wall"]
    id: str
    handle: HandleEnd | None = None


class EditorSnapshot(BaseModel):
    """Read-only view handed to renderers after every state change."""
    width: float
    length: float
    mode: ToolMode
    walls: list[Wall]
    openings: list[Opening]
    rooms: list[Room]
    floor_drains: list[FloorDrain]
    cupolas: list[Cupola]
    selection: Selection | None = None
    hover: HoverTarget | None = None
    drag: DragState = Field(default_factory=Idle)
    pending_room: RoomTemplate | None = None
    editing_opening_id: str | None = None
