"""
Errors raised by the interview session lifecycle.

LLM failures never appear here; they are absorbed by the fallback paths.
"""


class InterviewError(Exception):
    """Base class for interview session errors."""


class SessionNotFoundError(InterviewError):
    """No session exists for the given id."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Interview session not found: {session_id}")


class InvalidSessionStateError(InterviewError):
    """Operation is not allowed in the session's current status."""

    def __init__(self, session_id: str, status: str, operation: str = "update"):
        self.session_id = session_id
        self.status = status
        self.operation = operation
        super().__init__(f"Cannot {operation} interview session {session_id}: status is '{status}'")
