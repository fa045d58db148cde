from __future__ import annotations
from app.models import Exercise
from app.repositories.base import BaseRepository

class ExerciseRepository(BaseRepository[Exercise]):
    model = Exercise

    def create(
        self,
        *,
        name: str,
        muscle_group: str,
        equipment: str | None = None,
        instructions: str | None = None,
        user_id: str | None = None,
    ) -> Exercise:
        ex = Exercise(
            name=name,
            muscle_group=muscle_group,
            equipment=equipment,
            instructions=instructions,
            user_id=user_id,
            is_custom=user_id is not None,
        )
        return self.add_and_commit(ex)
