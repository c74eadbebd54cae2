"""Domain errors raised by the documentation pipeline.

Enrichment failures (transcript sources, summarization) never surface as
exceptions; only identity resolution and durable persistence do.
"""


class DocumentationError(Exception):
    """Base class for documentation pipeline failures."""


class SessionNotFoundError(DocumentationError):
    """No live session and no stored record exist for a session id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Interview session not found: {session_id}")
        self.session_id = session_id


class PersistenceError(DocumentationError):
    """Writing an artifact to durable storage failed."""
