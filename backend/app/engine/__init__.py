from app.engine.errors import (
    AutoFinishFailed,
    InvalidSessionState,
    PersistenceError,
    SessionNotResumable,
    SetLogInFlight,
    WorkoutError,
)
from app.engine.types import Direction, RoutineStep, SessionRecord, SessionState, SessionStatus, SetRecord

__all__ = [
    "AutoFinishFailed",
    "Direction",
    "InvalidSessionState",
    "PersistenceError",
    "RoutineStep",
    "SessionNotResumable",
    "SessionRecord",
    "SessionState",
    "SessionStatus",
    "SetLogInFlight",
    "SetRecord",
    "WorkoutError",
]
