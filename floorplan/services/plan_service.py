"""Plan session service, the facade used by the API layer."""

from __future__ import annotations
import logging
import uuid

from floorplan.models import EditorParams
from floorplan.core.editor import FloorPlanEditor
from floorplan.persistence.base import PlanRepository
from floorplan.persistence.memory import InMemoryPlanRepository

logger = logging.getLogger(__name__)


class UnknownSessionError(Exception):
    """No editor session with the requested id."""


class PlanService:
    """Keeps one editor per open session, all sharing a repository."""

    def __init__(
        self,
        repository: PlanRepository | None = None,
        params: EditorParams | None = None,
    ) -> None:
        self.repository = repository or InMemoryPlanRepository()
        self.params = params or EditorParams()
        self._sessions: dict[str, FloorPlanEditor] = {}

    def open_session(
        self, width: float, length: float, plan_id: str | None = None,
    ) -> tuple[str, FloorPlanEditor]:
        """
        Start editing a building.

        With a plan id the editor is backed by the repository and loads
        what is already stored; without one it edits a local draft.
        """
        if plan_id is None:
            editor = FloorPlanEditor(width, length, params=self.params)
        else:
            editor = FloorPlanEditor(
                width, length, plan_id=plan_id, repository=self.repository, params=self.params,
            )
            editor.load()

        session_id = str(uuid.uuid4())
        self._sessions[session_id] = editor
        logger.info("Opened session %s (plan %s)", session_id, plan_id or "draft")
        return session_id, editor

    def get(self, session_id: str) -> FloorPlanEditor:
        editor = self._sessions.get(session_id)
        if editor is None:
            raise UnknownSessionError(session_id)
        return editor

    def attach(self, session_id: str, plan_id: str) -> int:
        """Save a draft session under `plan_id`."""
        return self.get(session_id).attach(plan_id, self.repository)

    def close_session(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise UnknownSessionError(session_id)
        logger.info("Closed session %s", session_id)
