"""Authoritative in-memory collections of plan entities."""

from __future__ import annotations
import logging
from typing import Any, Callable

from floorplan.models import (
    Cupola, EntityKind, FloorDrain, Opening, PlanEntity, Point2D, Room, Wall,
    TEMP_ID_PREFIX,
)

logger = logging.getLogger(__name__)


ENTITY_MODELS: dict[EntityKind, type[PlanEntity]] = {
    EntityKind.WALL: Wall,
    EntityKind.OPENING: Opening,
    EntityKind.ROOM: Room,
    EntityKind.FLOOR_DRAIN: FloorDrain,
    EntityKind.CUPOLA: Cupola,
}

# Fields each kind may change after creation. Rooms never resize.
MUTABLE_FIELDS: dict[EntityKind, frozenset[str]] = {
    EntityKind.WALL: frozenset({"start", "end"}),
    EntityKind.OPENING: frozenset({
        "size", "quantity", "location", "position",
        "wall_ref", "swing_direction", "rotation",
    }),
    EntityKind.ROOM: frozenset({"position", "rotation"}),
    EntityKind.FLOOR_DRAIN: frozenset({"length_ft", "orientation", "location"}),
    EntityKind.CUPOLA: frozenset({"size", "type", "weather_vane", "location"}),
}

DeleteListener = Callable[[EntityKind, str], None]


class EntityStore:
    """
    Per-kind ordered collections with create / update / delete.

    Updates and deletes of unknown ids return None instead of raising.
    Delete listeners run after every successful removal so holders of
    selections can drop references to the removed entity.
    """

    def __init__(self) -> None:
        self._items: dict[EntityKind, list[PlanEntity]] = {k: [] for k in EntityKind}
        self._temp_counter = 0
        self._delete_listeners: list[DeleteListener] = []

    # -- identity ---------------------------------------------------------

    def next_temp_id(self) -> str:
        entity_id = f"{TEMP_ID_PREFIX}{self._temp_counter}"
        self._temp_counter += 1
        return entity_id

    # -- queries ----------------------------------------------------------

    def entities(self, kind: EntityKind) -> list[PlanEntity]:
        return list(self._items[kind])

    @property
    def walls(self) -> list[Wall]:
        return self.entities(EntityKind.WALL)  # type: ignore[return-value]

    @property
    def openings(self) -> list[Opening]:
        return self.entities(EntityKind.OPENING)  # type: ignore[return-value]

    @property
    def rooms(self) -> list[Room]:
        return self.entities(EntityKind.ROOM)  # type: ignore[return-value]

    @property
    def floor_drains(self) -> list[FloorDrain]:
        return self.entities(EntityKind.FLOOR_DRAIN)  # type: ignore[return-value]

    @property
    def cupolas(self) -> list[Cupola]:
        return self.entities(EntityKind.CUPOLA)  # type: ignore[return-value]

    def get(self, kind: EntityKind, entity_id: str) -> PlanEntity | None:
        for entity in self._items[kind]:
            if entity.id == entity_id:
                return entity
        return None

    def _index(self, kind: EntityKind, entity_id: str) -> int | None:
        for i, entity in enumerate(self._items[kind]):
            if entity.id == entity_id:
                return i
        return None

    # -- mutations --------------------------------------------------------

    def create(
        self, kind: EntityKind, fields: dict[str, Any], entity_id: str | None = None,
    ) -> PlanEntity:
        """Build and append a new entity. Without an id a temporary one is used."""
        model = ENTITY_MODELS[kind]
        entity = model.model_validate({**fields, "id": entity_id or self.next_temp_id()})
        self._items[kind].append(entity)
        return entity

    def update(self, kind: EntityKind, entity_id: str, **changes: Any) -> PlanEntity | None:
        """Replace the entity at `entity_id` with the given fields changed."""
        illegal = set(changes) - MUTABLE_FIELDS[kind]
        if illegal:
            raise TypeError(f"{kind.value} fields cannot be updated: {sorted(illegal)}")

        i = self._index(kind, entity_id)
        if i is None:
            logger.debug("Update of unknown %s %s ignored", kind.value, entity_id)
            return None

        current = self._items[kind][i]
        data = current.model_dump()
        data.update(changes)
        updated = type(current).model_validate(data)
        self._items[kind][i] = updated
        return updated

    def update_wall(
        self, wall_id: str, start: Point2D | None = None, end: Point2D | None = None,
    ) -> Wall | None:
        changes: dict[str, Any] = {}
        if start is not None:
            changes["start"] = start
        if end is not None:
            changes["end"] = end
        return self.update(EntityKind.WALL, wall_id, **changes)  # type: ignore[return-value]

    def update_room(
        self, room_id: str, position: Point2D | None = None, rotation: int | None = None,
    ) -> Room | None:
        """Move or rotate a room. Width and length stay as created."""
        changes: dict[str, Any] = {}
        if position is not None:
            changes["position"] = position
        if rotation is not None:
            changes["rotation"] = rotation
        return self.update(EntityKind.ROOM, room_id, **changes)  # type: ignore[return-value]

    def delete(self, kind: EntityKind, entity_id: str) -> PlanEntity | None:
        i = self._index(kind, entity_id)
        if i is None:
            return None
        removed = self._items[kind].pop(i)
        for listener in self._delete_listeners:
            listener(kind, entity_id)
        return removed

    def replace_id(self, kind: EntityKind, old_id: str, new_id: str) -> PlanEntity | None:
        """Swap a temporary id for the persisted one assigned at commit."""
        i = self._index(kind, old_id)
        if i is None:
            return None
        entity = self._items[kind][i].model_copy(update={"id": new_id})
        self._items[kind][i] = entity
        return entity

    def load(self, kind: EntityKind, entities: list[PlanEntity]) -> None:
        self._items[kind] = list(entities)

    def clear(self) -> None:
        for kind in EntityKind:
            self._items[kind] = []

    def add_delete_listener(self, listener: DeleteListener) -> None:
        self._delete_listeners.append(listener)
