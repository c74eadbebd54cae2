from app.db.models.conversation import ConversationTurnORM, InterviewSessionORM

__all__ = [
    "InterviewSessionORM",
    "ConversationTurnORM",
]
