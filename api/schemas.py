"""Pydantic schemas for the interview session API."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from agents.types import Evaluation, FinalReport


class StartReq(BaseModel):
    role: str
    level: str
    name: str
    age: int
    experience_years: float


class AnswerReq(BaseModel):
    answer_text: str


class StartResp(BaseModel):
    session_id: str
    first_question_text: str
    interviewer_audio_url_or_base64: str = ""


class AnswerResp(BaseModel):
    followup_question_text: str
    evaluation: Evaluation
    interviewer_audio_url_or_base64: str = ""


class EndResp(BaseModel):
    final_report: FinalReport
    live_scores: Dict[str, float]
    interviewer_audio_url_or_base64: str = ""


class TurnView(BaseModel):
    question: str
    answer: Optional[str] = None
    evaluation: Optional[Evaluation] = None
    timestamp: str
    answered_at: Optional[str] = None


class SessionResp(BaseModel):
    session_id: str
    role: str
    level: str
    status: str
    profile: Dict[str, object]
    turns: List[TurnView] = Field(default_factory=list)
    rubric_scores: List[float] = Field(default_factory=list)
    scores: Dict[str, float]
    created_at: str
    last_activity: str
