from __future__ import annotations
from typing import Optional

from app.engine.types import SessionStatus, SetRecord


class WorkoutError(Exception):
    """Base for every error the workout engine raises."""


class SessionNotResumable(WorkoutError):
    """Resume target is missing, owned by someone else, or no longer active."""

    def __init__(self, session_id: int, status: Optional[SessionStatus] = None):
        self.session_id = session_id
        # Known status when the session exists but is terminal
        self.status = status
        reason = "not found" if status is None else f"is {status.value}"
        super().__init__(f"session {session_id} {reason}")


class InvalidSessionState(WorkoutError):
    """Operation not allowed in the session's current state."""


class SetLogInFlight(InvalidSessionState):
    """A second log_set arrived while the first one was still being written."""


class PersistenceError(WorkoutError):
    """Wraps any failure of the backing store."""


class AutoFinishFailed(PersistenceError):
    """The last target set was stored but completing the session was not."""

    def __init__(self, set_record: SetRecord, cause: Exception):
        self.set_record = set_record
        super().__init__(f"set {set_record.id} logged, finishing failed: {cause}")
