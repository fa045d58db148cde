"""In-memory stand-ins for the store and the clock, for engine tests."""
import itertools
import threading
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

from app.engine.errors import PersistenceError
from app.engine.types import RoutineStep, SessionRecord, SessionStatus, SetRecord


class FakeClock:
    def __init__(self, start=datetime(2025, 7, 2, 18, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kw):
        self.now = self.now + timedelta(**kw)


class InMemoryStore:
    """
    Implements WorkoutStore over dicts. ``fail_next`` holds operation names whose
    next call raises PersistenceError; ``hold_inserts`` blocks insert_set until set.
    """

    def __init__(self, clock=None):
        self.clock = clock or FakeClock()
        self.sessions: dict[int, SessionRecord] = {}
        self.sets: list[SetRecord] = []
        self.routines: dict[int, tuple[str, str, list[RoutineStep]]] = {}
        self.fail_next: set[str] = set()
        self.hold_inserts: threading.Event | None = None
        self.insert_started = threading.Event()
        self._ids = itertools.count(1)
        self.calls: list[str] = []

    def _enter(self, op):
        self.calls.append(op)
        if op in self.fail_next:
            self.fail_next.discard(op)
            raise PersistenceError(f"{op} failed")

    def add_routine(self, name, steps, *, user_id="user-1"):
        routine_id = next(self._ids)
        self.routines[routine_id] = (user_id, name, list(steps))
        return routine_id

    def add_session(self, user_id, on, *, routine_id=None, status=SessionStatus.active):
        rec = SessionRecord(
            id=next(self._ids), user_id=user_id, routine_id=routine_id, name="Seeded",
            date=on, status=status, created_at=self.clock(),
        )
        self.sessions[rec.id] = rec
        return rec

    # WorkoutStore

    def get_active_session_for_date(self, user_id, on):
        self._enter("get_active_session_for_date")
        for rec in self.sessions.values():
            if rec.user_id == user_id and rec.date == on and rec.status == SessionStatus.active:
                return rec
        return None

    def get_session(self, session_id):
        self._enter("get_session")
        return self.sessions.get(session_id)

    def create_session(self, *, user_id, name, on, routine_id):
        self._enter("create_session")
        return self._create(user_id, name, on, routine_id)

    def _create(self, user_id, name, on, routine_id):
        rec = SessionRecord(
            id=next(self._ids), user_id=user_id, routine_id=routine_id, name=name,
            date=on, status=SessionStatus.active, created_at=self.clock(),
        )
        self.sessions[rec.id] = rec
        return rec

    def update_session(self, session_id, **fields):
        self._enter("update_session")
        rec = replace(self.sessions[session_id], **fields)
        self.sessions[session_id] = rec
        return rec

    def get_routine_name(self, routine_id, user_id):
        self._enter("get_routine_name")
        entry = self.routines.get(routine_id)
        return entry[1] if entry and entry[0] == user_id else None

    def get_routine_exercises(self, routine_id):
        self._enter("get_routine_exercises")
        return sorted(self.routines[routine_id][2], key=lambda s: s.order_index)

    def get_sets_for_session(self, session_id):
        self._enter("get_sets_for_session")
        return [s for s in self.sets if s.workout_session_id == session_id]

    def insert_set(self, *, session_id, exercise_id, set_number, weight, reps):
        self.insert_started.set()
        if self.hold_inserts is not None:
            self.hold_inserts.wait(5)
        self._enter("insert_set")
        for s in self.sets:
            if (s.workout_session_id, s.exercise_id, s.set_number) == (session_id, exercise_id, set_number):
                raise PersistenceError("duplicate set number")
        rec = SetRecord(
            id=next(self._ids), workout_session_id=session_id, exercise_id=exercise_id,
            set_number=set_number, weight=weight, reps=reps, created_at=self.clock(),
        )
        self.sets.append(rec)
        return rec


def step(exercise_id, order_index, target_sets, rest_seconds=None, name=None):
    return RoutineStep(
        exercise_id=exercise_id, order_index=order_index, target_sets=target_sets,
        rest_seconds=rest_seconds, exercise_name=name,
    )


def logged(exercise_id, set_number, session_id=1, weight=None, reps=None):
    return SetRecord(
        id=exercise_id * 100 + set_number, workout_session_id=session_id, exercise_id=exercise_id,
        set_number=set_number, weight=weight, reps=reps,
        created_at=datetime(2025, 7, 2, tzinfo=timezone.utc),
    )


TODAY = date(2025, 7, 2)
