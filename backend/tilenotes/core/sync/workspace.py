from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tilenotes.core.sync.collection import NoteCollection, TaskCollection
from tilenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from uuid import UUID

    from tilenotes.core.models.note import Note
    from tilenotes.core.models.task import Task

logger = get_logger(__name__)


@dataclass
class Workspace:
    """Cached collections of one user."""

    notes: NoteCollection = field(default_factory=NoteCollection)
    tasks: TaskCollection = field(default_factory=TaskCollection)


class WorkspaceCache:
    """Per-process registry of user workspaces, least recently used first out.

    The remote store stays the source of truth: a workspace is only a cache
    and is dropped or reloaded freely.
    """

    def __init__(self, max_workspaces: int = 256) -> None:
        if max_workspaces < 1:
            raise ValueError("max_workspaces must be at least 1")
        self._max_workspaces = max_workspaces
        self._workspaces: OrderedDict[UUID, Workspace] = OrderedDict()

    def __len__(self) -> int:
        return len(self._workspaces)

    def __contains__(self, user_id: UUID) -> bool:
        return user_id in self._workspaces

    def get(self, user_id: UUID) -> Workspace:
        workspace = self._workspaces.get(user_id)
        if workspace is None:
            workspace = Workspace()
            self._workspaces[user_id] = workspace
            while len(self._workspaces) > self._max_workspaces:
                evicted, _ = self._workspaces.popitem(last=False)
                logger.debug("Evicted cached workspace", extra={"user_id": str(evicted)})
        else:
            self._workspaces.move_to_end(user_id)
        return workspace

    def drop(self, user_id: UUID) -> None:
        self._workspaces.pop(user_id, None)

    def apply_enrichment(self, user_id: UUID, note: Note | None, tasks: list[Task]) -> None:
        """Fold a finished enrichment job into the owner's cached collections."""
        workspace = self._workspaces.get(user_id)
        if workspace is None:
            return
        if note is not None and note.id in workspace.notes:
            workspace.notes.replace(note)
        if workspace.tasks.loaded:
            for task in tasks:
                workspace.tasks.replace(task)
