"""Editor tunables and building bounds."""

from __future__ import annotations
from pydantic import BaseModel, Field


class EditorParams(BaseModel):
    """User-adjustable tolerances, all in feet."""
    snap_threshold: float = 1.0        # Snap distance to any wall
    opening_hit_radius: float = 2.0    # Openings hit-test as points
    wall_hit_tolerance: float = 0.5
    handle_hit_radius: float = 0.8
    min_wall_length: float = 1.0       # Shorter drawn walls are discarded
    snap_tie_break: str = "nearest"    # nearest | first


class BuildingBounds(BaseModel):
    """The rectangular footprint. Exterior walls are its four edges."""
    width: float = Field(gt=0)
    length: float = Field(gt=0)
