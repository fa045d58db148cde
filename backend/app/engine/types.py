# app/engine/types.py
"""Plain value types the workout engine works with.

These are storage-independent snapshots of the persisted rows. The SQL store
converts ORM objects into them so that the engine never holds a live ORM
session across requests.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class SessionStatus(str, Enum):
    active = "active"
    completed = "completed"
    cancelled = "cancelled"


class Direction(str, Enum):
    forward = "forward"
    backward = "backward"


@dataclass(frozen=True, slots=True)
class RoutineStep:
    """One exercise entry of a routine, as snapshotted at session start."""
    exercise_id: int
    order_index: int
    target_sets: int
    target_reps: Optional[int] = None
    target_weight: Optional[float] = None
    rest_seconds: Optional[int] = None
    notes: Optional[str] = None
    exercise_name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SessionRecord:
    id: int
    user_id: str
    name: str
    date: date
    status: SessionStatus
    created_at: datetime
    routine_id: Optional[int] = None
    duration_minutes: Optional[int] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.active


@dataclass(frozen=True, slots=True)
class SetRecord:
    id: int
    workout_session_id: int
    exercise_id: int
    set_number: int
    created_at: datetime
    weight: Optional[float] = None
    reps: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SessionState:
    """Read-only snapshot handed to the presentation layer."""
    session: SessionRecord
    steps: tuple[RoutineStep, ...]
    sets: tuple[SetRecord, ...]
    current_exercise_index: int
    current_set_number: int
    is_resting: bool
    rest_seconds_remaining: int
    session_start_time: datetime
    sequence_complete: bool
    resumed_existing: bool = False

    @property
    def current_exercise(self) -> Optional[RoutineStep]:
        if 0 <= self.current_exercise_index < len(self.steps):
            return self.steps[self.current_exercise_index]
        return None


@dataclass(slots=True)
class ExerciseGroup:
    exercise_id: int
    sets: list[SetRecord] = field(default_factory=list)
    exercise_name: Optional[str] = None
    total_reps: int = 0
    volume: float = 0.0


@dataclass(slots=True)
class SessionSummary:
    groups: list[ExerciseGroup]
    set_count: int
    total_reps: int
    total_volume: float
    average_weight: Optional[float]
