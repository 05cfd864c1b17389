"""Geometric primitives and the plan-space geometry kernel.

All coordinates are feet measured from the building's top-left corner,
with +y pointing down the plan (canvas convention).
"""

from __future__ import annotations
import math
from pydantic import BaseModel


class Point2D(BaseModel):
    """Point on the floor plan."""
    x: float
    y: float

    def distance_to(self, other: Point2D) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def lerp(self, other: Point2D, t: float) -> Point2D:
        return Point2D(
            x=self.x + (other.x - self.x) * t,
            y=self.y + (other.y - self.y) * t,
        )

    def __add__(self, other: Point2D) -> Point2D:
        return Point2D(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: Point2D) -> Point2D:
        return Point2D(x=self.x - other.x, y=self.y - other.y)

    def __mul__(self, scalar: float) -> Point2D:
        return Point2D(x=self.x * scalar, y=self.y * scalar)


class Vector2D(BaseModel):
    """2D vector for direction calculations on the plan."""
    x: float
    y: float

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def dot(self, other: Vector2D) -> float:
        return self.x * other.x + self.y * other.y

    def is_horizontal(self) -> bool:
        """True when the vector runs more along x than along y."""
        return abs(self.x) > abs(self.y)


def direction_from_points(start: Point2D, end: Point2D) -> Vector2D:
    """Get direction vector from start to end."""
    return Vector2D(x=end.x - start.x, y=end.y - start.y)


def _segment_parameter(p: Point2D, a: Point2D, b: Point2D) -> float:
    """Projection parameter of p onto a->b, clamped to [0, 1]."""
    d = direction_from_points(a, b)
    len_sq = d.dot(d)
    if len_sq == 0:
        return 0.0
    t = direction_from_points(a, p).dot(d) / len_sq
    return max(0.0, min(1.0, t))


def project_point_onto_segment(p: Point2D, a: Point2D, b: Point2D) -> Point2D:
    """Nearest point to p that lies on the segment a-b (never its extension)."""
    t = _segment_parameter(p, a, b)
    if t == 0.0:
        return Point2D(x=a.x, y=a.y)
    if t == 1.0:
        return Point2D(x=b.x, y=b.y)
    return a.lerp(b, t)


def distance_point_to_segment(p: Point2D, a: Point2D, b: Point2D) -> float:
    return p.distance_to(project_point_onto_segment(p, a, b))


def normalize_rotation(angle: float) -> int:
    """Round an angle to the nearest quarter turn in [0, 360)."""
    return int(round(angle / 90.0)) * 90 % 360


def rotate_point(point: Point2D, origin: Point2D, angle_deg: float) -> Point2D:
    """
    Rotate `point` about `origin` by `angle_deg`.

    With +y down, a positive angle turns clockwise on screen, matching
    the canvas rotate() the plan is drawn with. Quarter turns are done
    as exact axis swaps so no trigonometric noise creeps into
    coordinates; they agree with the general matrix at those angles.
    """
    dx = point.x - origin.x
    dy = point.y - origin.y

    quarter = angle_deg % 360
    if quarter == 0:
        rx, ry = dx, dy
    elif quarter == 90:
        rx, ry = -dy, dx
    elif quarter == 180:
        rx, ry = -dx, -dy
    elif quarter == 270:
        rx, ry = dy, -dx
    else:
        rad = math.radians(angle_deg)
        cos_a = math.cos(rad)
        sin_a = math.sin(rad)
        rx = dx * cos_a - dy * sin_a
        ry = dx * sin_a + dy * cos_a

    return Point2D(x=origin.x + rx, y=origin.y + ry)


class CanvasTransform(BaseModel):
    """
    Maps plan feet to canvas pixels and back.

    The plan is drawn centred on the canvas, turned a quarter turn so the
    building's length runs across the screen, then scaled. `zoom` is the
    combined fit-to-view and user zoom factor.
    """
    building_width: float
    building_length: float
    canvas_width: float
    canvas_height: float
    scale: float = 10.0   # Pixels per foot at zoom 1.0
    zoom: float = 1.0
    view_rotation: int = 90

    def _centre(self) -> Point2D:
        return Point2D(x=self.canvas_width / 2, y=self.canvas_height / 2)

    def _plan_centre(self) -> Point2D:
        return Point2D(x=self.building_width / 2, y=self.building_length / 2)

    def to_canvas(self, p: Point2D) -> Point2D:
        k = self.scale * self.zoom
        local = (p - self._plan_centre()) * k
        turned = rotate_point(local, Point2D(x=0.0, y=0.0), self.view_rotation)
        return turned + self._centre()

    def to_plan(self, p: Point2D) -> Point2D:
        k = self.scale * self.zoom
        local = p - self._centre()
        unturned = rotate_point(local, Point2D(x=0.0, y=0.0), -self.view_rotation)
        return unturned * (1.0 / k) + self._plan_centre()
