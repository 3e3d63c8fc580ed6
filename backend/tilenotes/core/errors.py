from __future__ import annotations


class PersistenceError(Exception):
    """The remote store rejected or failed a read/write.

    Raised before any cached state is touched, so callers can surface the
    message and leave their view of the data as it was.
    """


class NoteNotFoundError(PersistenceError):
    """The target row does not exist or is not owned by the caller."""


class TaskNotFoundError(PersistenceError):
    """The target task does not exist or is not owned by the caller."""


class CompletionServiceError(Exception):
    """The completion service call failed (network, refusal, malformed output)."""
