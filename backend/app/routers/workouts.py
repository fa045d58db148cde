from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from app.db import get_db
from app.deps.auth import get_current_user_id
from app.deps.workouts import get_registry
from app.engine.progress import summarize_sets
from app.engine.registry import EngineRegistry
from app.engine.session_engine import local_today
from app.repositories.session_repo import SessionRepository
from app.schemas.workout_session import (
    Navigate,
    RestStart,
    SessionPage,
    SessionRead,
    SetLog,
    SetRead,
    StepRead,
    SummaryRead,
    WorkoutStart,
    WorkoutStateRead,
)

router = APIRouter(prefix="/workouts", tags=["workouts"])

@router.post("", response_model=WorkoutStateRead, status_code=status.HTTP_201_CREATED)
def start_workout(
    payload: WorkoutStart,
    response: Response,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    engine = registry.start(user_id, payload.routine_id, today=payload.local_date or local_today())
    if engine.resumed_existing:
        # today's active session was picked up instead of creating a new one
        response.status_code = status.HTTP_200_OK
    return WorkoutStateRead.from_state(engine.state)

@router.get("", response_model=SessionPage)
def list_my_workouts(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    page = SessionRepository(db).list_by_user(user_id, limit=limit, offset=offset)
    return SessionPage(
        items=[SessionRead.model_validate(s) for s in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )

@router.post("/{session_id}/resume", response_model=WorkoutStateRead)
def resume_workout(
    session_id: int,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    return WorkoutStateRead.from_state(registry.resume(user_id, session_id).state)

@router.get("/{session_id}/state", response_model=WorkoutStateRead)
def workout_state(
    session_id: int,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    return WorkoutStateRead.from_state(registry.get(user_id, session_id).state)

@router.post("/{session_id}/sets", response_model=SetRead, status_code=status.HTTP_201_CREATED)
def log_set(
    session_id: int,
    payload: SetLog,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    engine = registry.get(user_id, session_id)
    record = engine.log_set(payload.weight, payload.reps)
    # the last target set may have completed the workout
    registry.release(engine)
    return record

@router.post("/{session_id}/rest", response_model=WorkoutStateRead)
def start_rest(
    session_id: int,
    payload: RestStart,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    engine = registry.get(user_id, session_id)
    engine.start_rest_timer(payload.total_seconds)
    return WorkoutStateRead.from_state(engine.state)

@router.post("/{session_id}/rest/skip", response_model=WorkoutStateRead)
def skip_rest(
    session_id: int,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    engine = registry.get(user_id, session_id)
    engine.skip_rest()
    return WorkoutStateRead.from_state(engine.state)

@router.post("/{session_id}/navigate", response_model=WorkoutStateRead)
def navigate(
    session_id: int,
    payload: Navigate,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    engine = registry.get(user_id, session_id)
    return WorkoutStateRead.from_state(engine.advance_exercise(payload.direction))

@router.get("/{session_id}/unfinished", response_model=list[StepRead])
def unfinished_exercises(
    session_id: int,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    return registry.get(user_id, session_id).unfinished_exercises()

@router.post("/{session_id}/finish", response_model=SessionRead)
def finish_workout(
    session_id: int,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    engine = registry.get(user_id, session_id)
    session = engine.finish()
    registry.release(engine)
    return session

@router.post("/{session_id}/cancel", response_model=SessionRead)
def cancel_workout(
    session_id: int,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    engine = registry.get(user_id, session_id)
    session = engine.cancel()
    registry.release(engine)
    return session

@router.get("/{session_id}/summary", response_model=SummaryRead)
def workout_summary(
    session_id: int,
    registry: EngineRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
):
    # Works for any status, so it reads the store instead of a live engine
    store = registry.store_factory()
    session = store.get_session(session_id)
    if session is None or session.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workout not found")
    steps = store.get_routine_exercises(session.routine_id) if session.routine_id is not None else []
    return summarize_sets(steps, store.get_sets_for_session(session_id))
