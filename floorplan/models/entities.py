"""Plan entity models — walls, openings, rooms, floor drains, cupolas."""

from __future__ import annotations
from enum import Enum
from typing import Annotated
from pydantic import AfterValidator, BaseModel, Field

from .geometry import Point2D, normalize_rotation


TEMP_ID_PREFIX = "temp_"


def is_temporary_id(entity_id: str) -> bool:
    """Temporary ids belong to entities that have never been persisted."""
    return entity_id.startswith(TEMP_ID_PREFIX)


class EntityKind(str, Enum):
    WALL = "wall"
    OPENING = "opening"
    ROOM = "room"
    FLOOR_DRAIN = "floor_drain"
    CUPOLA = "cupola"


class OpeningKind(str, Enum):
    WALK_DOOR = "walk_door"
    WINDOW = "window"
    OVERHEAD_DOOR = "overhead_door"
    OTHER = "other"


class SwingDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    IN = "in"
    OUT = "out"


class RoomKind(str, Enum):
    ROOM = "room"
    PORCH = "porch"
    LOFT = "loft"


class DrainOrientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class CupolaSize(str, Enum):
    SMALL = '18"x18"'
    STANDARD = '24"x24"'
    LARGE = '30"x30"'
    EXTRA_LARGE = '36"x36"'


def _quarter_turn(value: int) -> int:
    if value % 90 != 0:
        raise ValueError(f"rotation must be a multiple of 90 degrees, got {value}")
    return normalize_rotation(value)


QuarterTurn = Annotated[int, AfterValidator(_quarter_turn)]


class Wall(BaseModel):
    """An interior partition defined by two plan endpoints."""
    id: str
    start: Point2D
    end: Point2D

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def endpoint(self, handle: str) -> Point2D:
        return self.start if handle == "start" else self.end


class OpeningSize(BaseModel):
    """Rough opening in feet."""
    width_ft: float
    height_ft: float


DEFAULT_OPENING_SIZES: dict[OpeningKind, OpeningSize] = {
    OpeningKind.WALK_DOOR: OpeningSize(width_ft=3, height_ft=7),
    OpeningKind.WINDOW: OpeningSize(width_ft=3, height_ft=4),
    OpeningKind.OVERHEAD_DOOR: OpeningSize(width_ft=10, height_ft=10),
    OpeningKind.OTHER: OpeningSize(width_ft=3, height_ft=7),
}


def default_opening_size(kind: OpeningKind) -> OpeningSize:
    return DEFAULT_OPENING_SIZES[kind].model_copy()


class Opening(BaseModel):
    """A door, window or other opening. Unplaced while position is None."""
    id: str
    kind: OpeningKind
    size: OpeningSize
    quantity: int = 1
    location: str = ""
    position: Point2D | None = None
    wall_ref: str = "front"
    swing_direction: SwingDirection | None = None  # Doors only
    rotation: QuarterTurn = 0

    @property
    def is_door(self) -> bool:
        return self.kind in (OpeningKind.WALK_DOOR, OpeningKind.OVERHEAD_DOOR)

    @property
    def is_placed(self) -> bool:
        return self.position is not None


class Room(BaseModel):
    """
    A room, porch or loft footprint.

    `position` is the top-left corner before rotation. Rotation turns the
    drawing about that corner; width and length never change.
    """
    id: str
    kind: RoomKind
    position: Point2D
    width: float = Field(gt=0, frozen=True)
    length: float = Field(gt=0, frozen=True)
    rotation: QuarterTurn = 0

    def contains(self, p: Point2D) -> bool:
        """Containment in the un-rotated rectangle."""
        return (
            self.position.x <= p.x <= self.position.x + self.width
            and self.position.y <= p.y <= self.position.y + self.length
        )


class RoomTemplate(BaseModel):
    """Kind and dimensions chosen before a room is placed."""
    kind: RoomKind = RoomKind.ROOM
    width: float = Field(default=10.0, gt=0)
    length: float = Field(default=10.0, gt=0)


class FloorDrain(BaseModel):
    id: str
    length_ft: float = 10.0
    orientation: DrainOrientation = DrainOrientation.HORIZONTAL
    location: str = ""


class Cupola(BaseModel):
    """Roof accessory. No plan geometry."""
    id: str
    size: CupolaSize = CupolaSize.STANDARD
    type: str = "standard"
    weather_vane: bool = False
    location: str = ""


PlanEntity = Wall | Opening | Room | FloorDrain | Cupola
