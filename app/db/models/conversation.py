from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class InterviewSessionORM(Base):
    __tablename__ = "interview_sessions"

    session_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    candidate_name: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[str] = mapped_column(String(200), nullable=False)

    # "active" | "completed"
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")

    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    turns: Mapped[list["ConversationTurnORM"]] = relationship(
        "ConversationTurnORM",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ConversationTurnORM.sequence",
        lazy="selectin",
    )


class ConversationTurnORM(Base):
    __tablename__ = "conversation_turns"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    session_id: Mapped[str] = mapped_column(String(64), ForeignKey("interview_sessions.session_id", ondelete="CASCADE"), nullable=False, index=True)

    # Position within the session; turns are append-only.
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    # "interviewer" | "candidate"
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    content: Mapped[str] = mapped_column(Text(), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    session: Mapped["InterviewSessionORM"] = relationship("InterviewSessionORM", back_populates="turns")


Index("ix_conversation_turns_session_sequence", ConversationTurnORM.session_id, ConversationTurnORM.sequence, unique=True)
