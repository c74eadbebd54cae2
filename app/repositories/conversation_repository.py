from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.db.models.conversation import ConversationTurnORM, InterviewSessionORM
from app.models import ConversationTurn


class ConversationRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def add_turns(self, *, session_id: str, turns: Iterable[ConversationTurn]) -> int:
        """Append turns after the last captured one; returns how many were added."""
        sess = self.db.get(InterviewSessionORM, session_id)
        if sess is None:
            raise LookupError(f"Interview session not found: {session_id}")

        stmt = select(func.max(ConversationTurnORM.sequence)).where(ConversationTurnORM.session_id == session_id)
        last = self.db.execute(stmt).scalar()
        next_seq = 0 if last is None else last + 1

        rows = [
            ConversationTurnORM(session_id=session_id, sequence=next_seq + i, role=t.role, content=t.content)
            for i, t in enumerate(turns)
        ]
        # touch updated_at
        sess.updated_at = datetime.now(timezone.utc)
        self.db.add_all([*rows, sess])
        self.db.commit()
        return len(rows)

    def list_turns(self, *, session_id: str) -> list[ConversationTurn]:
        stmt = (
            select(ConversationTurnORM)
            .where(ConversationTurnORM.session_id == session_id)
            .order_by(ConversationTurnORM.sequence.asc())
        )
        rows = self.db.execute(stmt).scalars().all()
        return [ConversationTurn(role=r.role, content=r.content) for r in rows]
