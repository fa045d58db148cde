from __future__ import annotations
from sqlalchemy import select
from app.models import ExerciseSet
from app.repositories.base import BaseRepository

class SetRepository(BaseRepository[ExerciseSet]):
    model = ExerciseSet

    def list_by_session(self, session_id: int) -> list[ExerciseSet]:
        stmt = select(ExerciseSet).where(ExerciseSet.workout_session_id == session_id)\
                                  .order_by(ExerciseSet.exercise_id.asc(), ExerciseSet.set_number.asc())
        return list(self.db.execute(stmt).scalars().all())

    def create(
        self,
        session_id: int,
        *,
        exercise_id: int,
        set_number: int,
        weight: float | None,
        reps: int | None,
    ) -> ExerciseSet:
        s = ExerciseSet(
            workout_session_id=session_id,
            exercise_id=exercise_id,
            set_number=set_number,
            weight=weight,
            reps=reps,
        )
        return self.add_and_commit(s)
