"""API request/response schemas."""

from __future__ import annotations
from typing import Literal
from pydantic import BaseModel, Field

from floorplan.models import (
    CupolaSize, DrainOrientation, EditorSnapshot, OpeningKind, OpeningSize,
    SwingDirection, ToolMode,
)
from floorplan.render.adapter import DrawInstruction


class OpenSessionRequest(BaseModel):
    """Building footprint and, for saved plans, the plan id."""
    width: float = Field(gt=0)
    length: float = Field(gt=0)
    plan_id: str | None = None


class SessionResponse(BaseModel):
    session_id: str
    snapshot: EditorSnapshot
    warnings: list[str] = []


class PointerEvent(BaseModel):
    """Pointer event in plan feet."""
    type: Literal["down", "move", "up", "double_click"]
    x: float
    y: float


class ModeRequest(BaseModel):
    mode: ToolMode


class AttachRequest(BaseModel):
    plan_id: str


class PlaceRequest(BaseModel):
    x: float
    y: float


class OpeningInput(BaseModel):
    kind: OpeningKind
    size: OpeningSize | None = None
    quantity: int = Field(default=1, ge=1)
    location: str = ""
    wall_ref: str = "front"
    swing_direction: SwingDirection | None = None


class OpeningEdit(BaseModel):
    size: OpeningSize | None = None
    quantity: int | None = Field(default=None, ge=1)
    location: str | None = None
    wall_ref: str | None = None
    swing_direction: SwingDirection | None = None


class DrainInput(BaseModel):
    length_ft: float = Field(default=10.0, gt=0)
    orientation: DrainOrientation = DrainOrientation.HORIZONTAL
    location: str = ""


class DrainEdit(BaseModel):
    length_ft: float | None = Field(default=None, gt=0)
    orientation: DrainOrientation | None = None
    location: str | None = None


class CupolaInput(BaseModel):
    size: CupolaSize = CupolaSize.STANDARD
    type: str = "standard"
    weather_vane: bool = False
    location: str = ""


class CupolaEdit(BaseModel):
    size: CupolaSize | None = None
    type: str | None = None
    weather_vane: bool | None = None
    location: str | None = None


class RenderResponse(BaseModel):
    instructions: list[DrawInstruction]
