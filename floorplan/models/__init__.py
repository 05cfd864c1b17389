from .geometry import (
    Point2D, Vector2D, CanvasTransform, direction_from_points,
    distance_point_to_segment, project_point_onto_segment,
    rotate_point, normalize_rotation,
)
from .entities import (
    EntityKind, Wall, Opening, OpeningKind, OpeningSize, SwingDirection,
    Room, RoomKind, RoomTemplate, FloorDrain, DrainOrientation,
    Cupola, CupolaSize, PlanEntity,
    default_opening_size, is_temporary_id, TEMP_ID_PREFIX,
)
from .parameters import EditorParams, BuildingBounds
from .state import (
    ToolMode, PLACEMENT_KINDS, DragState, Idle, DraggingWallHandle,
    DraggingOpening, DraggingRoom, DrawingWall, Selection, HoverTarget,
    EditorSnapshot,
)

__all__ = [
    "Point2D", "Vector2D", "CanvasTransform", "direction_from_points",
    "distance_point_to_segment", "project_point_onto_segment",
    "rotate_point", "normalize_rotation",
    "EntityKind", "Wall", "Opening", "OpeningKind", "OpeningSize", "SwingDirection",
    "Room", "RoomKind", "RoomTemplate", "FloorDrain", "DrainOrientation",
    "Cupola", "CupolaSize", "PlanEntity",
    "default_opening_size", "is_temporary_id", "TEMP_ID_PREFIX",
    "EditorParams", "BuildingBounds",
    "ToolMode", "PLACEMENT_KINDS", "DragState", "Idle", "DraggingWallHandle",
    "DraggingOpening", "DraggingRoom", "DrawingWall", "Selection", "HoverTarget",
    "EditorSnapshot",
]
