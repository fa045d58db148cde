# app/engine/registry.py
from __future__ import annotations
import logging
import threading
from typing import Any, Callable

from app.engine.errors import InvalidSessionState, SessionNotResumable
from app.engine.session_engine import WorkoutSessionEngine
from app.engine.store import WorkoutStore

log = logging.getLogger(__name__)


class EngineRegistry:
    """
    Live engines of this process, keyed by session id.

    A session missing from the registry (restart, another worker) is rebuilt
    from the store on first use, which is the same path as an explicit resume.
    """

    def __init__(self, store_factory: Callable[[], WorkoutStore], **engine_kwargs: Any):
        self.store_factory = store_factory
        self.engine_kwargs = engine_kwargs
        self._engines: dict[int, WorkoutSessionEngine] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._engines)

    def _register(self, engine: WorkoutSessionEngine) -> WorkoutSessionEngine:
        with self._lock:
            current = self._engines.get(engine.session_id)
            if current is not None and current is not engine:
                # Keep the live one so its rest countdown is not lost
                engine.close()
                current.resumed_existing = current.resumed_existing or engine.resumed_existing
                return current
            self._engines[engine.session_id] = engine
            return engine

    def start(self, user_id: str, routine_id: int | None = None, **kwargs: Any) -> WorkoutSessionEngine:
        store = self.store_factory()
        if routine_id is None:
            engine = WorkoutSessionEngine.start_custom(store, user_id, **kwargs, **self.engine_kwargs)
        else:
            engine = WorkoutSessionEngine.start_from_routine(
                store, user_id, routine_id, **kwargs, **self.engine_kwargs
            )
        return self._register(engine)

    def resume(self, user_id: str, session_id: int) -> WorkoutSessionEngine:
        with self._lock:
            engine = self._engines.get(session_id)
        if engine is not None:
            if engine.user_id != user_id:
                raise SessionNotResumable(session_id)
            if not engine.is_active:
                raise SessionNotResumable(session_id, engine.state.session.status)
            return engine
        engine = WorkoutSessionEngine.resume(self.store_factory(), user_id, session_id, **self.engine_kwargs)
        return self._register(engine)

    def get(self, user_id: str, session_id: int) -> WorkoutSessionEngine:
        """Engine for an action; a finished or cancelled session is a state error, not a 404."""
        try:
            return self.resume(user_id, session_id)
        except SessionNotResumable as e:
            if e.status is not None:
                raise InvalidSessionState(f"session {session_id} is {e.status.value}") from e
            raise

    def release(self, engine: WorkoutSessionEngine) -> None:
        """Drop an engine once its session reached a terminal state."""
        if engine.is_active:
            return
        with self._lock:
            if self._engines.get(engine.session_id) is engine:
                del self._engines[engine.session_id]
        engine.close()

    def close_all(self) -> None:
        with self._lock:
            engines = list(self._engines.values())
            self._engines.clear()
        for engine in engines:
            engine.close()
        if engines:
            log.info("closed %s live workout engines", len(engines))
