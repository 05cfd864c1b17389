"""Abstract persistence collaborator for plan entities.

Repositories store flat rows (see `records.py`) per plan and entity
kind. Every operation either succeeds or raises `PersistenceError`;
the editor turns those into warnings and never lets them escape.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from floorplan.models import EntityKind
from floorplan.persistence.records import Record


class PersistenceError(Exception):
    """A repository call failed. The in-memory plan is left as it was."""


class PlanRepository(ABC):
    """Backing store keyed by plan id and entity kind."""

    @abstractmethod
    def create(self, plan_id: str, kind: EntityKind, record: Record) -> Record:
        """Insert a row and return it with its persisted `id`."""
        ...

    @abstractmethod
    def update(self, plan_id: str, kind: EntityKind, entity_id: str, changes: Record) -> None:
        ...

    @abstractmethod
    def delete(self, plan_id: str, kind: EntityKind, entity_id: str) -> None:
        ...

    @abstractmethod
    def load(self, plan_id: str, kind: EntityKind) -> list[Record]:
        """All rows of one kind for a plan, in insertion order."""
        ...
