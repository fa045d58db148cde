# app/deps/workouts.py
from functools import lru_cache

from app.db import SessionLocal
from app.engine.registry import EngineRegistry
from app.engine.store import SqlWorkoutStore

@lru_cache
def get_registry() -> EngineRegistry:
    """Process-wide registry; tests swap it with app.dependency_overrides."""
    return EngineRegistry(lambda: SqlWorkoutStore(SessionLocal))
