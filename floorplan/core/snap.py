"""Pulls dropped or drawn points onto nearby walls."""

from __future__ import annotations
from typing import Sequence
from pydantic import BaseModel

from floorplan.models import (
    Point2D, Wall, direction_from_points,
    distance_point_to_segment, project_point_onto_segment,
)


DEFAULT_SNAP_THRESHOLD = 1.0  # Feet


class ExteriorWall(BaseModel):
    """One edge of the building rectangle."""
    name: str            # top | bottom | left | right
    start: Point2D
    end: Point2D
    horizontal: bool
    rotation: int        # Orientation an opening takes on this wall


class SnapResult(BaseModel):
    point: Point2D
    snapped: bool
    wall: str = "none"             # top | bottom | left | right | interior | none
    wall_id: str | None = None     # Set for interior hits
    rotation: int = 0


def exterior_walls(width: float, length: float) -> list[ExteriorWall]:
    """The four implicit exterior walls, checked in this order."""
    tl = Point2D(x=0.0, y=0.0)
    tr = Point2D(x=width, y=0.0)
    bl = Point2D(x=0.0, y=length)
    br = Point2D(x=width, y=length)
    return [
        ExteriorWall(name="top", start=tl, end=tr, horizontal=True, rotation=180),
        ExteriorWall(name="bottom", start=bl, end=br, horizontal=True, rotation=0),
        ExteriorWall(name="left", start=tl, end=bl, horizontal=False, rotation=90),
        ExteriorWall(name="right", start=tr, end=br, horizontal=False, rotation=270),
    ]


def _snap_exterior(
    point: Point2D, width: float, length: float, threshold: float,
) -> SnapResult | None:
    for wall in exterior_walls(width, length):
        if wall.horizontal:
            if abs(point.y - wall.start.y) < threshold and wall.start.x <= point.x <= wall.end.x:
                return SnapResult(
                    point=Point2D(x=point.x, y=wall.start.y),
                    snapped=True, wall=wall.name, rotation=wall.rotation,
                )
        else:
            if abs(point.x - wall.start.x) < threshold and wall.start.y <= point.y <= wall.end.y:
                return SnapResult(
                    point=Point2D(x=wall.start.x, y=point.y),
                    snapped=True, wall=wall.name, rotation=wall.rotation,
                )
    return None


def _snap_interior(
    point: Point2D,
    walls: Sequence[Wall],
    threshold: float,
    tie_break: str,
    exclude_wall_id: str | None,
) -> SnapResult | None:
    best: Wall | None = None
    best_dist = threshold
    for wall in walls:
        if wall.id == exclude_wall_id:
            continue
        d = distance_point_to_segment(point, wall.start, wall.end)
        if d >= threshold:
            continue
        if tie_break == "first":
            best = wall
            break
        if best is None or d < best_dist:
            best, best_dist = wall, d

    if best is None:
        return None

    horizontal = direction_from_points(best.start, best.end).is_horizontal()
    return SnapResult(
        point=project_point_onto_segment(point, best.start, best.end),
        snapped=True,
        wall="interior",
        wall_id=best.id,
        rotation=0 if horizontal else 90,
    )


def snap_to_exterior(
    point: Point2D,
    building_width: float,
    building_length: float,
    threshold_ft: float = DEFAULT_SNAP_THRESHOLD,
) -> SnapResult:
    """Snap against the building envelope only (used for room anchors)."""
    hit = _snap_exterior(point, building_width, building_length, threshold_ft)
    return hit or SnapResult(point=point, snapped=False)


def snap_to_wall(
    point: Point2D,
    building_width: float,
    building_length: float,
    interior_walls: Sequence[Wall],
    threshold_ft: float = DEFAULT_SNAP_THRESHOLD,
    tie_break: str = "nearest",
    exclude_wall_id: str | None = None,
) -> SnapResult:
    """
    Snap a point to the nearest wall within `threshold_ft`.

    Exterior walls win over interior ones. Among interior walls the
    closest wins unless `tie_break` is "first", in which case the first
    wall within range in insertion order wins.
    """
    hit = _snap_exterior(point, building_width, building_length, threshold_ft)
    if hit is not None:
        return hit

    hit = _snap_interior(point, interior_walls, threshold_ft, tie_break, exclude_wall_id)
    if hit is not None:
        return hit

    return SnapResult(point=point, snapped=False)
