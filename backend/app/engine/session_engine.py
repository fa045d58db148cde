# app/engine/session_engine.py
"""
Lifecycle of one workout session: start or resume, set-by-set progression
through the routine, rest countdown, and finish/cancel.

The in-memory pointer (current exercise, next set number) is never a source of
truth. It is rebuilt from persisted sets on resume and only moves forward after
the store has accepted a write.
"""
from __future__ import annotations
import logging
import math
import threading
from datetime import date, datetime, timezone
from typing import Callable, Optional, Sequence
from zoneinfo import ZoneInfo

from app.engine.errors import (
    AutoFinishFailed,
    InvalidSessionState,
    PersistenceError,
    SessionNotResumable,
    SetLogInFlight,
)
from app.engine.progress import (
    all_targets_met,
    next_set_number,
    ordered_steps,
    resume_point,
    summarize_sets,
    unfinished_steps,
)
from app.engine.rest_timer import RestTimer
from app.engine.store import WorkoutStore
from app.engine.types import (
    Direction,
    RoutineStep,
    SessionRecord,
    SessionState,
    SessionStatus,
    SessionSummary,
    SetRecord,
)
from app.settings import get_settings

log = logging.getLogger(__name__)

CUSTOM_WORKOUT_NAME = "Custom Workout"

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def local_today(clock: Clock = utcnow, tz_name: Optional[str] = None) -> date:
    tz = ZoneInfo(tz_name or get_settings().DEFAULT_TIMEZONE)
    return clock().astimezone(tz).date()


def _aware(ts: datetime) -> datetime:
    # SQLite hands back naive UTC timestamps
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, halves rounded up."""
    seconds = (_aware(end) - _aware(start)).total_seconds()
    return max(int(math.floor(seconds / 60 + 0.5)), 0)


class WorkoutSessionEngine:
    """
    Drives one session from start to a terminal state.

    Build one with :meth:`start_from_routine`, :meth:`start_custom` or
    :meth:`resume`; the constructor only wires already-loaded data together.
    """

    def __init__(
        self,
        store: WorkoutStore,
        session: SessionRecord,
        steps: Sequence[RoutineStep] = (),
        sets: Sequence[SetRecord] = (),
        *,
        clock: Clock = utcnow,
        timer: Optional[RestTimer] = None,
        resumed_existing: bool = False,
    ):
        self.store = store
        self.clock = clock
        self.timer = timer or RestTimer(tick_seconds=get_settings().REST_TICK_SECONDS)
        self.resumed_existing = resumed_existing

        self._session = session
        self._steps = ordered_steps(steps)
        self._sets: list[SetRecord] = list(sets)
        self._start_time = _aware(session.created_at)
        self._index, self._set_number = resume_point(self._steps, self._sets)

        self._lock = threading.RLock()
        self._log_in_flight = threading.Lock()

    # ------------------------------------------------------------------
    # Entry modes
    # ------------------------------------------------------------------

    @classmethod
    def start_from_routine(
        cls,
        store: WorkoutStore,
        user_id: str,
        routine_id: int,
        *,
        today: Optional[date] = None,
        **engine_kwargs,
    ) -> "WorkoutSessionEngine":
        # Someone else's routine is reported exactly like a missing one
        name = store.get_routine_name(routine_id, user_id)
        if name is None:
            raise InvalidSessionState(f"routine {routine_id} not found")
        return cls._start(store, user_id, routine_id, name, today=today, **engine_kwargs)

    @classmethod
    def start_custom(
        cls,
        store: WorkoutStore,
        user_id: str,
        *,
        today: Optional[date] = None,
        **engine_kwargs,
    ) -> "WorkoutSessionEngine":
        return cls._start(store, user_id, None, CUSTOM_WORKOUT_NAME, today=today, **engine_kwargs)

    @classmethod
    def _start(
        cls,
        store: WorkoutStore,
        user_id: str,
        routine_id: Optional[int],
        name: str,
        *,
        today: Optional[date],
        **engine_kwargs,
    ) -> "WorkoutSessionEngine":
        clock = engine_kwargs.get("clock", utcnow)
        on = today or local_today(clock)

        # One active session per user per calendar date, whatever the routine
        existing = store.get_active_session_for_date(user_id, on)
        if existing is not None:
            if existing.routine_id != routine_id:
                log.warning(
                    "user=%s asked for routine=%s but session=%s (routine=%s) is active on %s; resuming it",
                    user_id, routine_id, existing.id, existing.routine_id, on,
                )
            else:
                log.info("user=%s resuming active session=%s for %s", user_id, existing.id, on)
            return cls._load(store, existing, resumed_existing=True, **engine_kwargs)

        steps = store.get_routine_exercises(routine_id) if routine_id is not None else []
        session = store.create_session(user_id=user_id, name=name, on=on, routine_id=routine_id)
        log.info("user=%s started session=%s routine=%s on %s", user_id, session.id, routine_id, on)
        return cls(store, session, steps, (), **engine_kwargs)

    @classmethod
    def resume(
        cls,
        store: WorkoutStore,
        user_id: str,
        session_id: int,
        **engine_kwargs,
    ) -> "WorkoutSessionEngine":
        session = store.get_session(session_id)
        if session is None or session.user_id != user_id:
            raise SessionNotResumable(session_id)
        if not session.is_active:
            raise SessionNotResumable(session_id, session.status)
        return cls._load(store, session, **engine_kwargs)

    @classmethod
    def _load(cls, store: WorkoutStore, session: SessionRecord, **engine_kwargs) -> "WorkoutSessionEngine":
        steps = store.get_routine_exercises(session.routine_id) if session.routine_id is not None else []
        sets = store.get_sets_for_session(session.id)
        engine = cls(store, session, steps, sets, **engine_kwargs)
        log.info(
            "session=%s resumed at exercise %s/%s set %s",
            session.id, engine._index, len(engine._steps), engine._set_number,
        )
        return engine

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def session_id(self) -> int:
        return self._session.id

    @property
    def user_id(self) -> str:
        return self._session.user_id

    @property
    def is_active(self) -> bool:
        return self._session.is_active

    @property
    def is_resting(self) -> bool:
        return self.timer.is_running

    @property
    def state(self) -> SessionState:
        with self._lock:
            remaining = self.timer.remaining
            return SessionState(
                session=self._session,
                steps=self._steps,
                sets=tuple(self._sets),
                current_exercise_index=self._index,
                current_set_number=self._set_number,
                is_resting=remaining > 0,
                rest_seconds_remaining=remaining,
                session_start_time=self._start_time,
                sequence_complete=self._index >= len(self._steps),
                resumed_existing=self.resumed_existing,
            )

    def unfinished_exercises(self) -> list[RoutineStep]:
        with self._lock:
            return unfinished_steps(self._steps, self._sets)

    def summary(self) -> SessionSummary:
        with self._lock:
            return summarize_sets(self._steps, self._sets)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def log_set(self, weight: Optional[float], reps: Optional[int]) -> SetRecord:
        if not self._log_in_flight.acquire(blocking=False):
            raise SetLogInFlight("a set is already being logged")
        try:
            with self._lock:
                self._require_active()
                if self.is_resting:
                    raise InvalidSessionState("still resting; skip the rest or wait for it to end")
                if not 0 <= self._index < len(self._steps):
                    raise InvalidSessionState("no current exercise to log against")
                step = self._steps[self._index]
                set_number = self._set_number

            # The write happens outside the state lock so reads stay responsive
            record = self.store.insert_set(
                session_id=self._session.id,
                exercise_id=step.exercise_id,
                set_number=set_number,
                weight=weight,
                reps=reps,
            )

            with self._lock:
                self._sets.append(record)
                self._set_number = set_number + 1
                log.info(
                    "session=%s logged exercise=%s set=%s weight=%s reps=%s",
                    self._session.id, step.exercise_id, set_number, weight, reps,
                )

                if all_targets_met(self._steps, self._sets):
                    try:
                        self._finish()
                    except PersistenceError as e:
                        raise AutoFinishFailed(record, e) from e
                    return record

                if self._set_number > step.target_sets and self._index < len(self._steps) - 1:
                    self._move_to(self._index + 1)

                # Rest follows the set just finished, even after moving on
                if step.rest_seconds:
                    self.start_rest_timer(step.rest_seconds)
            return record
        finally:
            self._log_in_flight.release()

    def start_rest_timer(self, seconds: int) -> None:
        with self._lock:
            self._require_active()
            self.timer.start(seconds)

    def skip_rest(self) -> None:
        self.timer.cancel()

    def advance_exercise(self, direction: Direction | str) -> SessionState:
        direction = Direction(direction)
        with self._lock:
            self._require_active()
            target = self._index + (1 if direction is Direction.forward else -1)
            if not 0 <= target < len(self._steps):
                raise InvalidSessionState(f"no exercise {direction.value} of index {self._index}")
            self._move_to(target)
        return self.state

    def finish(self) -> SessionRecord:
        with self._lock:
            self._require_no_log_in_flight()
            return self._finish()

    def _finish(self) -> SessionRecord:
        with self._lock:
            self._require_active()
            now = self.clock()
            self._session = self.store.update_session(
                self._session.id,
                status=SessionStatus.completed,
                duration_minutes=elapsed_minutes(self._start_time, now),
                completed_at=now,
            )
            self.timer.cancel()
            unfinished = len(unfinished_steps(self._steps, self._sets))
            log.info(
                "session=%s completed in %s min (%s exercises under target)",
                self._session.id, self._session.duration_minutes, unfinished,
            )
            return self._session

    def cancel(self) -> SessionRecord:
        with self._lock:
            self._require_no_log_in_flight()
            self._require_active()
            self._session = self.store.update_session(
                self._session.id,
                status=SessionStatus.cancelled,
                duration_minutes=elapsed_minutes(self._start_time, self.clock()),
            )
            self.timer.cancel()
            log.info("session=%s cancelled after %s min", self._session.id, self._session.duration_minutes)
            return self._session

    def close(self) -> None:
        """Release the rest timer; the persisted session is left as is."""
        self.timer.cancel()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_active(self) -> None:
        if not self._session.is_active:
            raise InvalidSessionState(f"session {self._session.id} is {self._session.status.value}")

    def _require_no_log_in_flight(self) -> None:
        # Sets only land on active sessions, so status waits for the write
        if self._log_in_flight.locked():
            raise SetLogInFlight("a set is being logged; retry once it lands")

    def _move_to(self, index: int) -> None:
        self._index = index
        self._set_number = next_set_number(self._steps[index].exercise_id, self._sets)
