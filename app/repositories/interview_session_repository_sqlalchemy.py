from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.db.models.conversation import InterviewSessionORM
from app.models import InterviewSession


class InterviewSessionRepositorySQLAlchemy:
    def __init__(self, db: Session):
        self.db = db

    def create(self, session: InterviewSession) -> InterviewSession:
        orm = InterviewSessionORM(
            session_id=session.session_id,
            candidate_name=session.candidate_name,
            position=session.position,
            start_time=session.start_time,
            status=session.status,
        )
        self.db.add(orm)
        self.db.commit()
        self.db.refresh(orm)
        return self._to_model(orm)

    def get(self, session_id: str) -> InterviewSession | None:
        orm = self.db.get(InterviewSessionORM, session_id)
        if not orm:
            return None
        return self._to_model(orm)

    def update_status(self, session_id: str, status: str) -> InterviewSession | None:
        orm = self.db.get(InterviewSessionORM, session_id)
        if not orm:
            return None
        orm.status = status
        orm.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(orm)
        return self._to_model(orm)

    def delete(self, session_id: str) -> bool:
        orm = self.db.get(InterviewSessionORM, session_id)
        if not orm:
            return False
        self.db.delete(orm)
        self.db.commit()
        return True

    def _to_model(self, orm: InterviewSessionORM) -> InterviewSession:
        return InterviewSession(
            session_id=orm.session_id,
            candidate_name=orm.candidate_name,
            position=orm.position,
            start_time=orm.start_time,
            status=orm.status,
        )
