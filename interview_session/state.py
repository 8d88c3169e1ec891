"""Serializable interview session state."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from agents.types import CandidateProfile, Evaluation, FinalReport, Level

SessionStatus = Literal["awaiting_answer", "ended"]


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


class Turn(BaseModel):
    """One question/answer/evaluation unit. ``answer is None`` marks the open turn."""

    question: str
    answer: Optional[str] = None
    evaluation: Optional[Evaluation] = None
    timestamp: str = Field(default_factory=utcnow)
    answered_at: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.answer is None


class Session(BaseModel):
    session_id: str
    role: str
    level: Level
    profile: CandidateProfile
    turns: List[Turn] = Field(default_factory=list)
    rubric_scores: List[float] = Field(default_factory=list)
    open_turn_index: Optional[int] = None
    status: SessionStatus = "awaiting_answer"
    final_report: Optional[FinalReport] = None
    created_at: str = Field(default_factory=utcnow)
    last_activity: str = Field(default_factory=utcnow)

    def open_turn(self) -> Optional[Turn]:
        """Return the open turn the pointer refers to, if it is really open."""

        index = self.open_turn_index
        if index is None or not 0 <= index < len(self.turns):
            return None
        turn = self.turns[index]
        return turn if turn.is_open else None

    def history(self) -> List[Dict[str, Any]]:
        """Closed turns as plain dicts, the shape the prompt renderers consume."""

        return [turn.model_dump() for turn in self.turns if not turn.is_open]

    def open_turn_count(self) -> int:
        return sum(1 for turn in self.turns if turn.is_open)


__all__ = ["Session", "SessionStatus", "Turn", "utcnow"]
