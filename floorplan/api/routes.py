"""FastAPI route definitions."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from floorplan.models import EntityKind, Point2D, RoomTemplate
from floorplan.core.editor import FloorPlanEditor
from floorplan.render.adapter import render_plan
from floorplan.services.plan_service import PlanService, UnknownSessionError
from floorplan.api.schemas import (
    AttachRequest, CupolaEdit, CupolaInput, DrainEdit, DrainInput, ModeRequest,
    OpenSessionRequest, OpeningEdit, OpeningInput, PlaceRequest, PointerEvent,
    RenderResponse, SessionResponse,
)

router = APIRouter()

# Shared service instance
_service = PlanService()


def _editor(session_id: str) -> FloorPlanEditor:
    try:
        return _service.get(session_id)
    except UnknownSessionError:
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id}")


def _respond(session_id: str, editor: FloorPlanEditor) -> SessionResponse:
    return SessionResponse(
        session_id=session_id,
        snapshot=editor.snapshot(),
        warnings=editor.drain_warnings(),
    )


def _found(entity: object, what: str) -> None:
    if entity is None:
        raise HTTPException(status_code=404, detail=f"Unknown {what}")


@router.post("/sessions", response_model=SessionResponse)
async def open_session(request: OpenSessionRequest) -> SessionResponse:
    """Open an editor on a new draft or an existing plan."""
    session_id, editor = _service.open_session(request.width, request.length, request.plan_id)
    return _respond(session_id, editor)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str) -> SessionResponse:
    return _respond(session_id, _editor(session_id))


@router.delete("/sessions/{session_id}")
async def close_session(session_id: str) -> dict[str, str]:
    try:
        _service.close_session(session_id)
    except UnknownSessionError:
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id}")
    return {"status": "closed"}


@router.post("/sessions/{session_id}/events", response_model=SessionResponse)
async def pointer_event(session_id: str, event: PointerEvent) -> SessionResponse:
    """Feed one pointer event to the editor."""
    editor = _editor(session_id)
    point = Point2D(x=event.x, y=event.y)
    if event.type == "down":
        editor.pointer_down(point)
    elif event.type == "move":
        editor.pointer_move(point)
    elif event.type == "up":
        editor.pointer_up(point)
    else:
        editor.double_click(point)
    return _respond(session_id, editor)


@router.post("/sessions/{session_id}/mode", response_model=SessionResponse)
async def set_mode(session_id: str, request: ModeRequest) -> SessionResponse:
    editor = _editor(session_id)
    editor.set_mode(request.mode)
    return _respond(session_id, editor)


@router.post("/sessions/{session_id}/room-template", response_model=SessionResponse)
async def room_template(session_id: str, template: RoomTemplate) -> SessionResponse:
    """Choose a room's kind and size; the next click places it."""
    editor = _editor(session_id)
    editor.begin_room_placement(template.kind, template.width, template.length)
    return _respond(session_id, editor)


@router.post("/sessions/{session_id}/rotate", response_model=SessionResponse)
async def rotate_selected(session_id: str) -> SessionResponse:
    editor = _editor(session_id)
    editor.rotate_selected()
    return _respond(session_id, editor)


@router.post("/sessions/{session_id}/delete", response_model=SessionResponse)
async def delete_selected(session_id: str) -> SessionResponse:
    editor = _editor(session_id)
    editor.delete_selected()
    return _respond(session_id, editor)


@router.delete("/sessions/{session_id}/{kind}/{entity_id}", response_model=SessionResponse)
async def delete_entity(session_id: str, kind: EntityKind, entity_id: str) -> SessionResponse:
    editor = _editor(session_id)
    if not editor.delete(kind, entity_id):
        raise HTTPException(status_code=404, detail=f"Unknown {kind.value} {entity_id}")
    return _respond(session_id, editor)


@router.post("/sessions/{session_id}/attach", response_model=SessionResponse)
async def attach(session_id: str, request: AttachRequest) -> SessionResponse:
    """Save a draft session under a plan id."""
    editor = _editor(session_id)
    _service.attach(session_id, request.plan_id)
    return _respond(session_id, editor)


@router.get("/sessions/{session_id}/render", response_model=RenderResponse)
async def render(session_id: str) -> RenderResponse:
    return RenderResponse(instructions=render_plan(_editor(session_id).snapshot()))


@router.post("/sessions/{session_id}/openings", response_model=SessionResponse)
async def add_opening(session_id: str, request: OpeningInput) -> SessionResponse:
    """List an opening without placing it."""
    editor = _editor(session_id)
    editor.add_opening(**request.model_dump(exclude_none=True))
    return _respond(session_id, editor)


@router.patch("/sessions/{session_id}/openings/{opening_id}", response_model=SessionResponse)
async def edit_opening(session_id: str, opening_id: str, request: OpeningEdit) -> SessionResponse:
    editor = _editor(session_id)
    _found(editor.edit_opening(opening_id, **dict(request)), f"opening {opening_id}")
    return _respond(session_id, editor)


@router.post("/sessions/{session_id}/openings/{opening_id}/place", response_model=SessionResponse)
async def place_opening(session_id: str, opening_id: str, request: PlaceRequest) -> SessionResponse:
    editor = _editor(session_id)
    placed = editor.place_opening(opening_id, Point2D(x=request.x, y=request.y))
    _found(placed, f"opening {opening_id}")
    return _respond(session_id, editor)


@router.post("/sessions/{session_id}/floor-drains", response_model=SessionResponse)
async def add_floor_drain(session_id: str, request: DrainInput) -> SessionResponse:
    editor = _editor(session_id)
    editor.add_floor_drain(request.length_ft, request.orientation, request.location)
    return _respond(session_id, editor)


@router.patch("/sessions/{session_id}/floor-drains/{drain_id}", response_model=SessionResponse)
async def edit_floor_drain(session_id: str, drain_id: str, request: DrainEdit) -> SessionResponse:
    editor = _editor(session_id)
    changes = request.model_dump(exclude_none=True)
    _found(editor.update_floor_drain(drain_id, **changes), f"floor drain {drain_id}")
    return _respond(session_id, editor)


@router.post("/sessions/{session_id}/cupolas", response_model=SessionResponse)
async def add_cupola(session_id: str, request: CupolaInput) -> SessionResponse:
    editor = _editor(session_id)
    editor.add_cupola(request.size, request.type, request.weather_vane, request.location)
    return _respond(session_id, editor)


@router.patch("/sessions/{session_id}/cupolas/{cupola_id}", response_model=SessionResponse)
async def edit_cupola(session_id: str, cupola_id: str, request: CupolaEdit) -> SessionResponse:
    editor = _editor(session_id)
    changes = request.model_dump(exclude_none=True)
    _found(editor.update_cupola(cupola_id, **changes), f"cupola {cupola_id}")
    return _respond(session_id, editor)


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
