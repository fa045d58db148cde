from typing import Annotated
from datetime import date, datetime
from pydantic import BaseModel, Field, model_validator

from app.engine.types import Direction, SessionStatus

PosInt = Annotated[int, Field(ge=1)]
NonNegInt = Annotated[int, Field(ge=0)]
Weight = Annotated[float, Field(ge=0, le=2000)]
Reps = Annotated[int, Field(ge=0, le=1000)]

class WorkoutStart(BaseModel):
    # omitted => custom workout with no exercise list
    routine_id: PosInt | None = None
    # the caller's calendar date; server default timezone otherwise
    local_date: date | None = None

class SetLog(BaseModel):
    weight: Weight | None = None
    reps: Reps | None = None

class RestStart(BaseModel):
    minutes: Annotated[int, Field(ge=0, le=60)] = 0
    seconds: Annotated[int, Field(ge=0, le=59)] = 0

    @model_validator(mode="after")
    def non_zero(self):
        if self.minutes == 0 and self.seconds == 0:
            raise ValueError("rest must be at least one second")
        return self

    @property
    def total_seconds(self) -> int:
        return self.minutes * 60 + self.seconds

class Navigate(BaseModel):
    direction: Direction

class SessionRead(BaseModel):
    id: int
    user_id: str
    routine_id: int | None = None
    name: str
    date: date
    status: SessionStatus
    duration_minutes: int | None = None
    completed_at: datetime | None = None
    created_at: datetime
    notes: str | None = None

    model_config = {"from_attributes": True}

class SessionPage(BaseModel):
    items: list[SessionRead]
    total: int
    limit: int
    offset: int

class SetRead(BaseModel):
    id: int
    workout_session_id: int
    exercise_id: int
    set_number: int
    weight: float | None = None
    reps: int | None = None
    created_at: datetime

    model_config = {"from_attributes": True}

class StepRead(BaseModel):
    exercise_id: int
    exercise_name: str | None = None
    order_index: int
    target_sets: int
    target_reps: int | None = None
    target_weight: float | None = None
    rest_seconds: NonNegInt | None = None
    notes: str | None = None

    model_config = {"from_attributes": True}

class WorkoutStateRead(BaseModel):
    session: SessionRead
    exercises: list[StepRead]
    sets: list[SetRead]
    current_exercise_index: int
    current_set_number: int
    current_exercise: StepRead | None = None
    is_resting: bool
    rest_seconds_remaining: int
    session_start_time: datetime
    sequence_complete: bool
    resumed_existing: bool

    @classmethod
    def from_state(cls, state) -> "WorkoutStateRead":
        return cls(
            session=SessionRead.model_validate(state.session),
            exercises=[StepRead.model_validate(s) for s in state.steps],
            sets=[SetRead.model_validate(s) for s in state.sets],
            current_exercise_index=state.current_exercise_index,
            current_set_number=state.current_set_number,
            current_exercise=StepRead.model_validate(state.current_exercise) if state.current_exercise else None,
            is_resting=state.is_resting,
            rest_seconds_remaining=state.rest_seconds_remaining,
            session_start_time=state.session_start_time,
            sequence_complete=state.sequence_complete,
            resumed_existing=state.resumed_existing,
        )

class ExerciseGroupRead(BaseModel):
    exercise_id: int
    exercise_name: str | None = None
    sets: list[SetRead]
    total_reps: int
    volume: float

    model_config = {"from_attributes": True}

class SummaryRead(BaseModel):
    groups: list[ExerciseGroupRead]
    set_count: int
    total_reps: int
    total_volume: float
    average_weight: float | None = None

    model_config = {"from_attributes": True}
