from __future__ import annotations
from datetime import date
from typing import Any, Optional
from sqlalchemy import select, case
from app.models import WorkoutSession
from app.engine.types import SessionStatus
from app.repositories.base import BaseRepository, Page

class SessionRepository(BaseRepository[WorkoutSession]):
    model = WorkoutSession

    def get_active_for_date(self, user_id: str, on: date) -> Optional[WorkoutSession]:
        # Should be at most one; if a race produced two, the newest wins
        stmt = select(WorkoutSession).where(
            WorkoutSession.user_id == user_id,
            WorkoutSession.status == SessionStatus.active,
            WorkoutSession.date == on,
        ).order_by(WorkoutSession.id.desc()).limit(1)
        return self.db.execute(stmt).scalars().first()

    def list_by_user(self, user_id: str, *, limit: int = 50, offset: int = 0) -> Page[WorkoutSession]:
        # active first, then newest calendar date
        active_first = case((WorkoutSession.status == SessionStatus.active, 0), else_=1)
        stmt = select(WorkoutSession).where(WorkoutSession.user_id == user_id)\
                                     .order_by(active_first, WorkoutSession.date.desc(), WorkoutSession.id.desc())
        return self.page_from_stmt(stmt, limit=limit, offset=offset)

    def create(
        self,
        user_id: str,
        *,
        name: str,
        on: date,
        routine_id: int | None = None,
        notes: str | None = None,
    ) -> WorkoutSession:
        sess = WorkoutSession(
            user_id=user_id,
            routine_id=routine_id,
            name=name,
            date=on,
            status=SessionStatus.active,
            notes=notes,
        )
        return self.add_and_commit(sess)

    def update(self, session_id: int, **fields: Any) -> Optional[WorkoutSession]:
        sess = self.get(session_id)
        if not sess:
            return None
        for key, value in fields.items():
            setattr(sess, key, value)
        self.db.commit()
        self.db.refresh(sess)
        return sess
