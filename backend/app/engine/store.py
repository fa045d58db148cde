# app/engine/store.py
"""
Persistence collaborator for the workout engine.

``WorkoutStore`` is what the engine talks to. ``SqlWorkoutStore`` implements it
on top of the repositories, opening one short ORM session per call so an engine
can outlive the HTTP request that created it.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Any, Callable, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.engine.errors import PersistenceError
from app.engine.types import RoutineStep, SessionRecord, SetRecord
from app.models import ExerciseSet, RoutineExercise, WorkoutRoutine, WorkoutSession
from app.repositories.routine_repo import RoutineRepository
from app.repositories.session_repo import SessionRepository
from app.repositories.set_repo import SetRepository

log = logging.getLogger(__name__)


class WorkoutStore(Protocol):
    def get_active_session_for_date(self, user_id: str, on: date) -> Optional[SessionRecord]: ...

    def get_session(self, session_id: int) -> Optional[SessionRecord]: ...

    def create_session(
        self, *, user_id: str, name: str, on: date, routine_id: Optional[int]
    ) -> SessionRecord: ...

    def update_session(self, session_id: int, **fields: Any) -> SessionRecord: ...

    def get_routine_name(self, routine_id: int, user_id: str) -> Optional[str]: ...

    def get_routine_exercises(self, routine_id: int) -> list[RoutineStep]: ...

    def get_sets_for_session(self, session_id: int) -> list[SetRecord]: ...

    def insert_set(
        self,
        *,
        session_id: int,
        exercise_id: int,
        set_number: int,
        weight: Optional[float],
        reps: Optional[int],
    ) -> SetRecord: ...


def _num(value) -> Optional[float]:
    # Numeric columns come back as Decimal
    return float(value) if value is not None else None


def session_record(row: WorkoutSession) -> SessionRecord:
    return SessionRecord(
        id=row.id,
        user_id=row.user_id,
        routine_id=row.routine_id,
        name=row.name,
        date=row.date,
        status=row.status,
        created_at=row.created_at,
        duration_minutes=row.duration_minutes,
        completed_at=row.completed_at,
        notes=row.notes,
    )


def set_record(row: ExerciseSet) -> SetRecord:
    return SetRecord(
        id=row.id,
        workout_session_id=row.workout_session_id,
        exercise_id=row.exercise_id,
        set_number=row.set_number,
        weight=_num(row.weight),
        reps=row.reps,
        created_at=row.created_at,
    )


def routine_step(row: RoutineExercise) -> RoutineStep:
    return RoutineStep(
        exercise_id=row.exercise_id,
        order_index=row.order_index,
        target_sets=row.target_sets,
        target_reps=row.target_reps,
        target_weight=_num(row.target_weight),
        rest_seconds=row.rest_seconds,
        notes=row.notes,
        exercise_name=row.exercise.name if row.exercise is not None else None,
    )


class SqlWorkoutStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _run(self, op: str, fn: Callable[[Session], Any]) -> Any:
        with self.session_factory() as db:
            try:
                return fn(db)
            except SQLAlchemyError as e:
                db.rollback()
                log.warning("store op %s failed: %s", op, e)
                raise PersistenceError(f"{op} failed") from e

    def get_active_session_for_date(self, user_id: str, on: date) -> Optional[SessionRecord]:
        def q(db: Session):
            row = SessionRepository(db).get_active_for_date(user_id, on)
            return session_record(row) if row else None
        return self._run("get_active_session_for_date", q)

    def get_session(self, session_id: int) -> Optional[SessionRecord]:
        def q(db: Session):
            row = SessionRepository(db).get(session_id)
            return session_record(row) if row else None
        return self._run("get_session", q)

    def create_session(
        self, *, user_id: str, name: str, on: date, routine_id: Optional[int]
    ) -> SessionRecord:
        return self._run(
            "create_session",
            lambda db: session_record(
                SessionRepository(db).create(user_id, name=name, on=on, routine_id=routine_id)
            ),
        )

    def update_session(self, session_id: int, **fields: Any) -> SessionRecord:
        def q(db: Session):
            row = SessionRepository(db).update(session_id, **fields)
            if row is None:
                raise PersistenceError(f"session {session_id} vanished")
            return session_record(row)
        return self._run("update_session", q)

    def get_routine_name(self, routine_id: int, user_id: str) -> Optional[str]:
        """Name of the routine if it exists and belongs to ``user_id``."""
        def q(db: Session):
            routine: Optional[WorkoutRoutine] = RoutineRepository(db).get_owned(routine_id, user_id)
            return routine.name if routine else None
        return self._run("get_routine_name", q)

    def get_routine_exercises(self, routine_id: int) -> list[RoutineStep]:
        return self._run(
            "get_routine_exercises",
            lambda db: [routine_step(r) for r in RoutineRepository(db).list_exercises(routine_id)],
        )

    def get_sets_for_session(self, session_id: int) -> list[SetRecord]:
        return self._run(
            "get_sets_for_session",
            lambda db: [set_record(r) for r in SetRepository(db).list_by_session(session_id)],
        )

    def insert_set(
        self,
        *,
        session_id: int,
        exercise_id: int,
        set_number: int,
        weight: Optional[float],
        reps: Optional[int],
    ) -> SetRecord:
        return self._run(
            "insert_set",
            lambda db: set_record(
                SetRepository(db).create(
                    session_id,
                    exercise_id=exercise_id,
                    set_number=set_number,
                    weight=weight,
                    reps=reps,
                )
            ),
        )
