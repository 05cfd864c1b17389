"""Interactive floor plan editor — tool modes, pointer drags and commits."""

from __future__ import annotations
import logging
from typing import Any, Callable, cast

from floorplan.models import (
    PLACEMENT_KINDS, BuildingBounds, Cupola, CupolaSize, DraggingOpening,
    DraggingRoom, DraggingWallHandle, DragState, DrainOrientation, DrawingWall,
    EditorParams, EditorSnapshot, EntityKind, FloorDrain, HoverTarget, Idle,
    Opening, OpeningKind, OpeningSize, PlanEntity, Point2D, Room, RoomKind,
    RoomTemplate, Selection, SwingDirection, ToolMode, Wall,
    default_opening_size, is_temporary_id,
)
from floorplan.core.hit_test import HitTester
from floorplan.core.snap import SnapResult, snap_to_exterior, snap_to_wall
from floorplan.core.store import ENTITY_MODELS, EntityStore
from floorplan.persistence.base import PersistenceError, PlanRepository
from floorplan.persistence.records import change_record, from_record, to_record

logger = logging.getLogger(__name__)


# Order in which draft entities are committed and plans are loaded
KIND_ORDER = [
    EntityKind.WALL, EntityKind.OPENING, EntityKind.ROOM,
    EntityKind.FLOOR_DRAIN, EntityKind.CUPOLA,
]

_HOVER_KINDS = {
    "handle": EntityKind.WALL,
    "wall": EntityKind.WALL,
    "room": EntityKind.ROOM,
    "opening": EntityKind.OPENING,
}

Subscriber = Callable[[EditorSnapshot], None]


class FloorPlanEditor:
    """
    Owns the tool mode, selection and in-progress drag for one plan.

    Pointer events arrive in plan feet. Drags only touch their own
    provisional state; the store is updated on pointer-up. Events that
    match no transition are ignored.

    Without a plan id and repository the editor works on a local draft
    with temporary ids; `attach()` later commits the draft. With a
    backing plan, creations go to the repository first and only appear
    once it accepts them, while moves, rotations, edits and deletes are
    applied locally first and stay applied if the repository fails.
    """

    def __init__(
        self,
        width: float,
        length: float,
        plan_id: str | None = None,
        repository: PlanRepository | None = None,
        params: EditorParams | None = None,
    ) -> None:
        self.bounds = BuildingBounds(width=width, length=length)
        self.params = params or EditorParams()
        self.plan_id = plan_id
        self.repository = repository

        self.store = EntityStore()
        self.store.add_delete_listener(self._on_entity_deleted)

        self.mode = ToolMode.SELECT
        self.drag: DragState = Idle()
        self.selection: Selection | None = None
        self.hover: HoverTarget | None = None
        self.pending_room: RoomTemplate | None = None
        self.editing_opening_id: str | None = None

        self._warnings: list[str] = []
        self._subscribers: list[Subscriber] = []

    @property
    def width(self) -> float:
        return self.bounds.width

    @property
    def length(self) -> float:
        return self.bounds.length

    @property
    def is_backed(self) -> bool:
        return self.plan_id is not None and self.repository is not None

    # -- outbound ---------------------------------------------------------

    def snapshot(self) -> EditorSnapshot:
        return EditorSnapshot(
            width=self.width,
            length=self.length,
            mode=self.mode,
            walls=self.store.walls,
            openings=self.store.openings,
            rooms=self.store.rooms,
            floor_drains=self.store.floor_drains,
            cupolas=self.store.cupolas,
            selection=self.selection,
            hover=self.hover,
            drag=self.drag,
            pending_room=self.pending_room,
            editing_opening_id=self.editing_opening_id,
        )

    def subscribe(self, callback: Subscriber) -> None:
        """Call `callback` with a fresh snapshot after every state change."""
        self._subscribers.append(callback)

    def drain_warnings(self) -> list[str]:
        """Return and clear the user-facing warnings queued so far."""
        warnings, self._warnings = self._warnings, []
        return warnings

    def _changed(self) -> None:
        if not self._subscribers:
            return
        snap = self.snapshot()
        for callback in self._subscribers:
            callback(snap)

    def _warn(self, message: str, exc: Exception) -> None:
        logger.warning("%s: %s", message, exc)
        self._warnings.append(message)

    # -- geometry helpers -------------------------------------------------

    def _hit_tester(self) -> HitTester:
        return HitTester(self.store.walls, self.store.openings, self.store.rooms, self.params)

    def _snap(self, p: Point2D, exclude_wall_id: str | None = None) -> SnapResult:
        return snap_to_wall(
            p, self.width, self.length, self.store.walls,
            threshold_ft=self.params.snap_threshold,
            tie_break=self.params.snap_tie_break,
            exclude_wall_id=exclude_wall_id,
        )

    def _snap_room(self, p: Point2D) -> SnapResult:
        return snap_to_exterior(p, self.width, self.length, self.params.snap_threshold)

    def _selected_id(self, kind: EntityKind) -> str | None:
        if self.selection is not None and self.selection.kind == kind:
            return self.selection.id
        return None

    # -- persistence ------------------------------------------------------

    def _create(self, kind: EntityKind, fields: dict[str, Any]) -> PlanEntity | None:
        """Create an entity; in a backed plan it appears only once stored."""
        if not self.is_backed:
            return self.store.create(kind, fields)

        draft = ENTITY_MODELS[kind].model_validate({**fields, "id": "pending"})
        try:
            row = self.repository.create(self.plan_id, kind, to_record(kind, draft))
        except PersistenceError as exc:
            self._warn(f"Failed to add {kind.value}", exc)
            return None
        entity = self.store.create(kind, fields, entity_id=str(row["id"]))
        logger.info("Created %s %s in plan %s", kind.value, entity.id, self.plan_id)
        return entity

    def _update(self, kind: EntityKind, entity_id: str, **changes: Any) -> PlanEntity | None:
        """Apply changes locally, then store them. Local changes are kept on failure."""
        entity = self.store.update(kind, entity_id, **changes)
        if entity is None or not self.is_backed or is_temporary_id(entity_id):
            return entity
        try:
            self.repository.update(
                self.plan_id, kind, entity_id, change_record(kind, changes, entity),
            )
        except PersistenceError as exc:
            self._warn(f"Failed to save {kind.value} changes", exc)
        return entity

    def delete(self, kind: EntityKind, entity_id: str) -> bool:
        """Remove an entity and clear any selection, hover or drag on it."""
        removed = self.store.delete(kind, entity_id)
        if removed is None:
            return False
        if self.is_backed and not is_temporary_id(entity_id):
            try:
                self.repository.delete(self.plan_id, kind, entity_id)
            except PersistenceError as exc:
                self._warn(f"Failed to delete {kind.value}", exc)
        self._changed()
        return True

    def _on_entity_deleted(self, kind: EntityKind, entity_id: str) -> None:
        if self.selection is not None and self.selection.kind == kind and self.selection.id == entity_id:
            self.selection = None
        if self.hover is not None and _HOVER_KINDS[self.hover.type] == kind and self.hover.id == entity_id:
            self.hover = None
        if kind == EntityKind.OPENING and self.editing_opening_id == entity_id:
            self.editing_opening_id = None
        if _drag_target(self.drag) == (kind, entity_id):
            self.drag = Idle()

    def attach(self, plan_id: str, repository: PlanRepository) -> int:
        """
        Bind a draft editor to a backing plan and commit its entities.

        Every entity with a temporary id is created in the repository and
        takes the persisted id. Entities whose create fails keep their
        temporary id. Returns the number committed.
        """
        self.plan_id = plan_id
        self.repository = repository
        self.drag = Idle()

        committed = 0
        for kind in KIND_ORDER:
            for entity in self.store.entities(kind):
                if not is_temporary_id(entity.id):
                    continue
                try:
                    row = repository.create(plan_id, kind, to_record(kind, entity))
                except PersistenceError as exc:
                    self._warn(f"Failed to save {kind.value}", exc)
                    continue
                new_id = str(row["id"])
                self.store.replace_id(kind, entity.id, new_id)
                self._rename_references(kind, entity.id, new_id)
                committed += 1

        logger.info("Attached to plan %s, committed %d draft entities", plan_id, committed)
        self._changed()
        return committed

    def _rename_references(self, kind: EntityKind, old_id: str, new_id: str) -> None:
        if self.selection is not None and self.selection.kind == kind and self.selection.id == old_id:
            self.selection = Selection(kind=kind, id=new_id)
        if self.hover is not None and _HOVER_KINDS[self.hover.type] == kind and self.hover.id == old_id:
            self.hover = self.hover.model_copy(update={"id": new_id})
        if kind == EntityKind.OPENING and self.editing_opening_id == old_id:
            self.editing_opening_id = new_id

    def load(self) -> None:
        """
        Replace the plan contents with what the repository holds.

        If any kind fails to load, the current contents stay untouched and
        a warning is queued.
        """
        if not self.is_backed:
            return
        try:
            loaded = {
                kind: [from_record(kind, row) for row in self.repository.load(self.plan_id, kind)]
                for kind in KIND_ORDER
            }
        except PersistenceError as exc:
            self._warn("Failed to load plan", exc)
            self._changed()
            return
        for kind, entities in loaded.items():
            self.store.load(kind, entities)
        self.selection = None
        self.hover = None
        self.drag = Idle()
        self._changed()

    # -- pointer events ---------------------------------------------------

    def pointer_down(self, point: Point2D) -> None:
        if not isinstance(self.drag, Idle):
            return

        if self.mode == ToolMode.SELECT:
            self._press_select(point)
        elif self.mode == ToolMode.DRAW_WALL:
            self.drag = DrawingWall(start_point=point, current_point=point)
        elif self.mode in PLACEMENT_KINDS:
            self._place_new_opening(PLACEMENT_KINDS[self.mode], point)
        elif self.mode == ToolMode.PLACE_ROOM and self.pending_room is not None:
            self._place_new_room(point)
        else:
            return
        self._changed()

    def _press_select(self, point: Point2D) -> None:
        target = self._hit_tester().pick(point, self._selected_id(EntityKind.WALL))
        if target is None:
            self.selection = None
            return

        if target.type == "handle":
            wall = cast(Wall, self.store.get(EntityKind.WALL, target.id))
            self.drag = DraggingWallHandle(
                wall_id=wall.id,
                handle=target.handle,
                anchor=point,
                provisional_point=wall.endpoint(target.handle),
            )
        elif target.type == "room":
            room = cast(Room, self.store.get(EntityKind.ROOM, target.id))
            self.selection = Selection(kind=EntityKind.ROOM, id=room.id)
            self.drag = DraggingRoom(
                room_id=room.id,
                anchor=point,
                grab_offset=point - room.position,
                provisional_position=room.position,
            )
        elif target.type == "opening":
            opening = cast(Opening, self.store.get(EntityKind.OPENING, target.id))
            self.selection = Selection(kind=EntityKind.OPENING, id=opening.id)
            self.drag = DraggingOpening(
                opening_id=opening.id,
                anchor=point,
                grab_offset=point - opening.position,
                provisional_position=opening.position,
                rotation=opening.rotation,
            )
        else:
            self.selection = Selection(kind=EntityKind.WALL, id=target.id)

    def pointer_move(self, point: Point2D) -> None:
        if isinstance(self.drag, Idle):
            if self.mode != ToolMode.SELECT:
                return
            hover = self._hit_tester().pick(point, self._selected_id(EntityKind.WALL))
            if hover == self.hover:
                return
            self.hover = hover
        else:
            self._drag_to(point)
        self._changed()

    def _drag_to(self, point: Point2D) -> None:
        drag = self.drag
        if isinstance(drag, DraggingWallHandle):
            snap = self._snap(point, exclude_wall_id=drag.wall_id)
            self.drag = drag.model_copy(update={"provisional_point": snap.point, "moved": True})
        elif isinstance(drag, DraggingOpening):
            opening = cast(Opening, self.store.get(EntityKind.OPENING, drag.opening_id))
            snap = self._snap(point - drag.grab_offset)
            rotation = snap.rotation if snap.snapped else opening.rotation
            self.drag = drag.model_copy(update={
                "provisional_position": snap.point, "rotation": rotation, "moved": True,
            })
        elif isinstance(drag, DraggingRoom):
            snap = self._snap_room(point - drag.grab_offset)
            self.drag = drag.model_copy(update={"provisional_position": snap.point, "moved": True})
        elif isinstance(drag, DrawingWall):
            snap = self._snap(point)
            self.drag = drag.model_copy(update={"current_point": snap.point})

    def pointer_up(self, point: Point2D) -> None:
        drag = self.drag
        if isinstance(drag, Idle):
            return

        if isinstance(drag, DrawingWall):
            self.drag = Idle()
            self._finish_wall(drag.start_point, point)
            self._changed()
            return

        if drag.moved or point != drag.anchor:
            self._drag_to(point)
            drag = self.drag
        self.drag = Idle()

        if isinstance(drag, DraggingWallHandle) and drag.moved:
            self._update(EntityKind.WALL, drag.wall_id, **{drag.handle: drag.provisional_point})
            self.selection = Selection(kind=EntityKind.WALL, id=drag.wall_id)
            logger.debug("Resized wall %s (%s handle)", drag.wall_id, drag.handle)
        elif isinstance(drag, DraggingOpening) and drag.moved:
            self._update(
                EntityKind.OPENING, drag.opening_id,
                position=drag.provisional_position, rotation=drag.rotation,
            )
        elif isinstance(drag, DraggingRoom) and drag.moved:
            self._update(EntityKind.ROOM, drag.room_id, position=drag.provisional_position)
        self._changed()

    def double_click(self, point: Point2D) -> Opening | None:
        """Open the property editor for the opening under the pointer."""
        opening = self._hit_tester().find_opening_at(point)
        if opening is None:
            return None
        self.editing_opening_id = opening.id
        self._changed()
        return opening

    # -- creation ---------------------------------------------------------

    def _finish_wall(self, raw_start: Point2D, raw_end: Point2D) -> Wall | None:
        start = self._snap(raw_start).point
        end = self._snap(raw_end).point
        if start.distance_to(end) < self.params.min_wall_length:
            logger.debug("Discarded %.2f ft wall", start.distance_to(end))
            return None
        return self._create(EntityKind.WALL, {"start": start, "end": end})  # type: ignore[return-value]

    def _place_new_opening(self, kind: OpeningKind, point: Point2D) -> Opening | None:
        snap = self._snap(point)
        fields = _opening_fields(kind)
        fields.update(position=snap.point, rotation=snap.rotation)
        opening = self._create(EntityKind.OPENING, fields)
        if opening is not None:
            self.selection = Selection(kind=EntityKind.OPENING, id=opening.id)
        self.mode = ToolMode.SELECT
        return opening  # type: ignore[return-value]

    def _place_new_room(self, point: Point2D) -> Room | None:
        template = self.pending_room
        if template is None:
            return None
        snap = self._snap_room(point)
        room = self._create(EntityKind.ROOM, {
            "kind": template.kind,
            "position": snap.point,
            "width": template.width,
            "length": template.length,
        })
        if room is not None:
            self.selection = Selection(kind=EntityKind.ROOM, id=room.id)
        self.pending_room = None
        self.mode = ToolMode.SELECT
        return room  # type: ignore[return-value]

    # -- commands ---------------------------------------------------------

    def set_mode(self, mode: ToolMode) -> None:
        """Switch tools. Cancels any drag in progress."""
        self.mode = mode
        self.drag = Idle()
        self.hover = None
        if mode != ToolMode.PLACE_ROOM:
            self.pending_room = None
        self._changed()

    def begin_room_placement(
        self, kind: RoomKind, width: float, length: float,
    ) -> RoomTemplate:
        """Hold a room template until the next canvas click places it."""
        template = RoomTemplate(kind=kind, width=width, length=length)
        self.mode = ToolMode.PLACE_ROOM
        self.drag = Idle()
        self.pending_room = template
        self._changed()
        return template

    def rotate_selected(self) -> PlanEntity | None:
        """Turn the selected opening or room a quarter turn clockwise."""
        if self.selection is None or self.selection.kind not in (EntityKind.OPENING, EntityKind.ROOM):
            return None
        entity = self.store.get(self.selection.kind, self.selection.id)
        if entity is None:
            return None
        rotated = self._update(
            self.selection.kind, entity.id, rotation=(entity.rotation + 90) % 360,
        )
        self._changed()
        return rotated

    def delete_selected(self) -> bool:
        if self.selection is None:
            return False
        return self.delete(self.selection.kind, self.selection.id)

    def add_opening(
        self,
        kind: OpeningKind,
        size: OpeningSize | None = None,
        quantity: int = 1,
        location: str = "",
        wall_ref: str = "front",
        swing_direction: SwingDirection | None = None,
    ) -> Opening | None:
        """List an opening without placing it on the plan."""
        fields = _opening_fields(kind)
        fields.update(quantity=quantity, location=location, wall_ref=wall_ref)
        if size is not None:
            fields["size"] = size
        if swing_direction is not None and fields["swing_direction"] is not None:
            fields["swing_direction"] = swing_direction
        opening = self._create(EntityKind.OPENING, fields)
        self._changed()
        return opening  # type: ignore[return-value]

    def place_opening(self, opening_id: str, point: Point2D) -> Opening | None:
        """Snap and commit a plan position for a listed opening."""
        opening = self.store.get(EntityKind.OPENING, opening_id)
        if opening is None:
            return None
        snap = self._snap(point)
        rotation = snap.rotation if snap.snapped else opening.rotation
        placed = self._update(EntityKind.OPENING, opening_id, position=snap.point, rotation=rotation)
        self._changed()
        return placed  # type: ignore[return-value]

    def edit_opening(
        self,
        opening_id: str,
        size: OpeningSize | None = None,
        quantity: int | None = None,
        location: str | None = None,
        wall_ref: str | None = None,
        swing_direction: SwingDirection | None = None,
    ) -> Opening | None:
        """Change the non-geometric properties of an opening."""
        changes = {
            k: v for k, v in {
                "size": size, "quantity": quantity, "location": location,
                "wall_ref": wall_ref, "swing_direction": swing_direction,
            }.items() if v is not None
        }
        opening = self._update(EntityKind.OPENING, opening_id, **changes)
        if self.editing_opening_id == opening_id:
            self.editing_opening_id = None
        self._changed()
        return opening  # type: ignore[return-value]

    def add_floor_drain(
        self,
        length_ft: float = 10.0,
        orientation: DrainOrientation = DrainOrientation.HORIZONTAL,
        location: str = "",
    ) -> FloorDrain | None:
        drain = self._create(EntityKind.FLOOR_DRAIN, {
            "length_ft": length_ft, "orientation": orientation, "location": location,
        })
        self._changed()
        return drain  # type: ignore[return-value]

    def update_floor_drain(self, drain_id: str, **changes: Any) -> FloorDrain | None:
        drain = self._update(EntityKind.FLOOR_DRAIN, drain_id, **changes)
        self._changed()
        return drain  # type: ignore[return-value]

    def add_cupola(
        self,
        size: CupolaSize = CupolaSize.STANDARD,
        type: str = "standard",
        weather_vane: bool = False,
        location: str = "",
    ) -> Cupola | None:
        cupola = self._create(EntityKind.CUPOLA, {
            "size": size, "type": type, "weather_vane": weather_vane, "location": location,
        })
        self._changed()
        return cupola  # type: ignore[return-value]

    def update_cupola(self, cupola_id: str, **changes: Any) -> Cupola | None:
        cupola = self._update(EntityKind.CUPOLA, cupola_id, **changes)
        self._changed()
        return cupola  # type: ignore[return-value]


def _opening_fields(kind: OpeningKind) -> dict[str, Any]:
    """Defaults for a new opening of the given kind."""
    is_door = kind in (OpeningKind.WALK_DOOR, OpeningKind.OVERHEAD_DOOR)
    return {
        "kind": kind,
        "size": default_opening_size(kind),
        "swing_direction": SwingDirection.RIGHT if is_door else None,
    }


def _drag_target(drag: DragState) -> tuple[EntityKind, str] | None:
    if isinstance(drag, DraggingWallHandle):
        return EntityKind.WALL, drag.wall_id
    if isinstance(drag, DraggingOpening):
        return EntityKind.OPENING, drag.opening_id
    if isinstance(drag, DraggingRoom):
        return EntityKind.ROOM, drag.room_id
    return None
