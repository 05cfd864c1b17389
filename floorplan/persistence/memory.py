"""In-memory repository used by the API and tests."""

from __future__ import annotations
import uuid

from floorplan.models import EntityKind
from floorplan.persistence.base import PersistenceError, PlanRepository
from floorplan.persistence.records import Record


class InMemoryPlanRepository(PlanRepository):
    """Rows live in dicts keyed plan -> kind -> id, with uuid4 ids."""

    def __init__(self) -> None:
        self._rows: dict[str, dict[EntityKind, dict[str, Record]]] = {}

    def _table(self, plan_id: str, kind: EntityKind) -> dict[str, Record]:
        plan = self._rows.setdefault(plan_id, {})
        return plan.setdefault(kind, {})

    def create(self, plan_id: str, kind: EntityKind, record: Record) -> Record:
        row = {**record, "id": str(uuid.uuid4()), "plan_id": plan_id}
        self._table(plan_id, kind)[row["id"]] = row
        return dict(row)

    def update(self, plan_id: str, kind: EntityKind, entity_id: str, changes: Record) -> None:
        table = self._table(plan_id, kind)
        if entity_id not in table:
            raise PersistenceError(f"{kind.value} {entity_id} not found in plan {plan_id}")
        table[entity_id].update(changes)

    def delete(self, plan_id: str, kind: EntityKind, entity_id: str) -> None:
        table = self._table(plan_id, kind)
        if table.pop(entity_id, None) is None:
            raise PersistenceError(f"{kind.value} {entity_id} not found in plan {plan_id}")

    def load(self, plan_id: str, kind: EntityKind) -> list[Record]:
        return [dict(row) for row in self._table(plan_id, kind).values()]
