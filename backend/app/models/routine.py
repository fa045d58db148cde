from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Integer, ForeignKey, String, Text, Numeric, DateTime, CheckConstraint, UniqueConstraint, func,
)
from app.db import Base

class WorkoutRoutine(Base):
    __tablename__ = "workout_routines"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    exercises = relationship(
        "RoutineExercise",
        back_populates="routine",
        cascade="all, delete-orphan",
        order_by="RoutineExercise.order_index",
    )

class RoutineExercise(Base):
    __tablename__ = "routine_exercises"
    __table_args__ = (
        UniqueConstraint("routine_id", "order_index", name="uq_routine_exercise_order"),
        CheckConstraint("target_sets >= 1", name="ck_routine_exercise_target_sets"),
        CheckConstraint("rest_seconds IS NULL OR rest_seconds >= 0", name="ck_routine_exercise_rest"),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    routine_id: Mapped[int] = mapped_column(ForeignKey("workout_routines.id", ondelete="CASCADE"), index=True)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id", ondelete="CASCADE"), index=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    target_sets: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    target_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_weight: Mapped[float | None] = mapped_column(Numeric(6, 1), nullable=True)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    routine = relationship("WorkoutRoutine", back_populates="exercises")
    exercise = relationship("Exercise", lazy="joined")
