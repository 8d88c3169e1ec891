"""Turn orchestration for a voice mock interview.

One engine instance serves every session. Each public operation is a short
sequential pipeline (prompt -> generation -> optional speech) and writes the
session back only after the whole pipeline succeeded, so a failed call leaves
the stored session exactly as it was and the caller may retry.
"""
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import BaseModel, ValidationError

from agents.question_gen import first_question, followup_question
from agents.report_writer import closing_remark, write_final_report
from agents.response_evaluator import evaluate_answer
from agents.types import LEVELS, CandidateProfile, Evaluation, FinalReport
from interview_session.state import Session, Turn, utcnow
from llm_gateway import TextGenerator
from observability import log_event, span
from services.errors import (
    InputValidationError,
    NoOpenQuestionError,
    SessionEndedError,
    SessionNotFoundError,
)
from services.scoring import ScoresTriple, score_triple
from tts_gateway import SpeechSynthesizer

if TYPE_CHECKING:
    from storage.session_store import SessionStore


class StartResult(BaseModel):
    session_id: str
    first_question_text: str
    interviewer_audio_base64: str = ""
    started_at: str


class AnswerResult(BaseModel):
    session_id: str
    followup_question_text: str
    evaluation: Evaluation
    interviewer_audio_base64: str = ""
    timestamp: str


class EndResult(BaseModel):
    session_id: str
    final_report: FinalReport
    scores: ScoresTriple
    interviewer_audio_base64: str = ""


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InputValidationError(f"{field} is required", {"field": field})
    return value.strip()


def _normalize_level(level: Any) -> str:
    text = _require_text(level, "level").lower()
    if text not in LEVELS:
        raise InputValidationError(f"level must be one of {', '.join(LEVELS)}", {"field": "level"})
    return text


class InterviewEngine:
    """State machine: NotStarted -> AwaitingAnswer -> (AwaitingAnswer | Ended)."""

    def __init__(self, generator: TextGenerator, speaker: Optional[SpeechSynthesizer], store: SessionStore) -> None:
        self._generator = generator
        self._speaker = speaker
        self._store = store

    @property
    def store(self) -> SessionStore:
        return self._store

    def start(self, role: str, level: str, name: str, age: int, experience_years: float) -> StartResult:
        role = _require_text(role, "role")
        level = _normalize_level(level)
        try:
            profile = CandidateProfile(name=name, age=age, experience_years=experience_years)
        except ValidationError as exc:
            raise InputValidationError("Invalid candidate profile", {"errors": str(exc)}) from exc

        session_id = str(uuid.uuid4())
        with span(session_id, "start"):
            question = first_question(self._generator, role=role, level=level, profile=profile)
            audio = self._speak(session_id, question)

        started_at = utcnow()
        session = Session(
            session_id=session_id,
            role=role,
            level=level,
            profile=profile,
            turns=[Turn(question=question, timestamp=started_at)],
            open_turn_index=0,
            created_at=started_at,
            last_activity=started_at,
        )
        self._store.put(session_id, session)
        log_event("session_started", session_id, role=role, level=level, turns=1)
        return StartResult(
            session_id=session_id,
            first_question_text=question,
            interviewer_audio_base64=audio,
            started_at=started_at,
        )

    def submit_answer(self, session_id: str, answer_text: str) -> AnswerResult:
        answer = _require_text(answer_text, "answer_text")
        with self._store.session_lock(session_id):
            session = self._load_active(session_id)
            turn = session.open_turn()
            if turn is None:
                raise NoOpenQuestionError(session_id)

            with span(session_id, "answer"):
                history = session.history()
                evaluation = evaluate_answer(
                    self._generator,
                    question=turn.question,
                    answer=answer,
                    role=session.role,
                    level=session.level,
                    history=history,
                )
                followup = followup_question(
                    self._generator,
                    question=turn.question,
                    answer=answer,
                    evaluation=evaluation,
                    role=session.role,
                    level=session.level,
                    history=history,
                )
                audio = self._speak(session_id, followup)

            now = utcnow()
            index = session.open_turn_index
            session.turns[index] = turn.model_copy(
                update={"answer": answer, "evaluation": evaluation, "answered_at": now}
            )
            session.turns.append(Turn(question=followup, timestamp=now))
            session.open_turn_index = len(session.turns) - 1
            session.rubric_scores.append(evaluation.score)
            session.last_activity = now
            self._store.put(session_id, session)

        log_event(
            "answer_evaluated",
            session_id,
            turns=len(session.turns),
            score=evaluation.score,
            intent=evaluation.followup_intent,
        )
        return AnswerResult(
            session_id=session_id,
            followup_question_text=followup,
            evaluation=evaluation,
            interviewer_audio_base64=audio,
            timestamp=now,
        )

    def end(self, session_id: str) -> EndResult:
        with self._store.session_lock(session_id):
            session = self._load_active(session_id)
            with span(session_id, "end"):
                report = write_final_report(
                    self._generator,
                    role=session.role,
                    level=session.level,
                    history=session.history(),
                    rubric_scores=session.rubric_scores,
                )
                audio = self._speak(session_id, closing_remark(report))

            session.final_report = report
            session.status = "ended"
            session.open_turn_index = None
            session.last_activity = utcnow()
            self._store.put(session_id, session)

        scores = score_triple(session.rubric_scores)
        log_event("session_ended", session_id, turns=len(session.turns), overall=report.overall_score)
        return EndResult(
            session_id=session_id,
            final_report=report,
            scores=scores,
            interviewer_audio_base64=audio,
        )

    def get_session(self, session_id: str) -> Session:
        session = self._store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def _load_active(self, session_id: str) -> Session:
        session = self.get_session(session_id)
        if session.status == "ended":
            raise SessionEndedError(session_id)
        return session

    def _speak(self, session_id: str, text: str) -> str:
        """Best-effort speech; any failure degrades to no audio."""

        if self._speaker is None:
            return ""
        try:
            return self._speaker.synthesize(text)
        except Exception as exc:  # noqa: BLE001
            log_event("synthesis_degraded", session_id, log_level=logging.WARNING, error=str(exc))
            return ""


def session_snapshot(session: Session) -> Dict[str, Any]:
    """Public view of a session for API callers."""

    return {
        "session_id": session.session_id,
        "role": session.role,
        "level": session.level,
        "status": session.status,
        "profile": session.profile.model_dump(),
        "turns": [turn.model_dump() for turn in session.turns],
        "rubric_scores": list(session.rubric_scores),
        "scores": score_triple(session.rubric_scores).model_dump(),
        "created_at": session.created_at,
        "last_activity": session.last_activity,
    }


__all__ = ["InterviewEngine", "StartResult", "AnswerResult", "EndResult", "session_snapshot"]
