"""Exception hierarchy shared by the gateways, the session store and the engine."""
from __future__ import annotations

from typing import Any, Dict, Optional


class InterviewError(Exception):
    """Base class for all interview service errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InputValidationError(InterviewError):
    """Missing or malformed caller input (role, level, profile, answer text)."""


class NotFoundError(InterviewError):
    """Something the caller referred to does not exist."""


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}", {"session_id": session_id})


class NoOpenQuestionError(NotFoundError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"No open question for session: {session_id}", {"session_id": session_id})


class SessionEndedError(InterviewError):
    """The session already produced its final report."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session already ended: {session_id}", {"session_id": session_id})


class UpstreamTransportError(InterviewError):
    """Network or HTTP failure talking to the generation or speech backend."""


class MalformedResponseError(InterviewError):
    """A JSON payload from the generation backend failed to parse or validate."""


class ConfigurationError(InterviewError):
    """Required configuration is missing or invalid."""


__all__ = [
    "InterviewError",
    "InputValidationError",
    "NotFoundError",
    "SessionNotFoundError",
    "NoOpenQuestionError",
    "SessionEndedError",
    "UpstreamTransportError",
    "MalformedResponseError",
    "ConfigurationError",
]
