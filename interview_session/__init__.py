"""Interview session state and turn orchestration."""
from .interview_session import AnswerResult, EndResult, InterviewEngine, StartResult, session_snapshot
from .state import Session, Turn

__all__ = ["AnswerResult", "EndResult", "InterviewEngine", "Session", "StartResult", "Turn", "session_snapshot"]
