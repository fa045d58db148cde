from __future__ import annotations
from typing import Iterable, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from app.models import WorkoutRoutine, RoutineExercise
from app.repositories.base import BaseRepository

class RoutineRepository(BaseRepository[WorkoutRoutine]):
    model = WorkoutRoutine

    def list_exercises(self, routine_id: int) -> list[RoutineExercise]:
        stmt = select(RoutineExercise).where(RoutineExercise.routine_id == routine_id)\
                                      .order_by(RoutineExercise.order_index.asc())
        return list(self.db.execute(stmt).scalars().all())

    def create(
        self,
        user_id: str,
        *,
        name: str,
        description: str | None = None,
        exercises: Iterable[dict] = (),
    ) -> WorkoutRoutine:
        """
        ``exercises`` are dicts of RoutineExercise columns; ``order_index`` defaults
        to the position in the iterable.
        """
        routine = WorkoutRoutine(user_id=user_id, name=name, description=description)
        for position, entry in enumerate(exercises):
            fields = {"order_index": position, **entry}
            routine.exercises.append(RoutineExercise(**fields))
        try:
            return self.add_and_commit(routine)
        except IntegrityError:
            self.db.rollback()
            raise ValueError("duplicate_order_index")

    def get_owned(self, routine_id: int, user_id: str) -> Optional[WorkoutRoutine]:
        routine = self.get(routine_id)
        if not routine or routine.user_id != user_id:
            return None
        return routine
