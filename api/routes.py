"""FastAPI routes for interview session control."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_engine
from api.schemas import AnswerReq, AnswerResp, EndResp, SessionResp, StartReq, StartResp
from interview_session import InterviewEngine, session_snapshot


router = APIRouter(prefix="/api/session")


@router.post("/start", response_model=StartResp)
def start(req: StartReq, engine: InterviewEngine = Depends(get_engine)) -> StartResp:
    result = engine.start(req.role, req.level, req.name, req.age, req.experience_years)
    return StartResp(
        session_id=result.session_id,
        first_question_text=result.first_question_text,
        interviewer_audio_url_or_base64=result.interviewer_audio_base64,
    )


@router.post("/{session_id}/answer", response_model=AnswerResp)
def answer(session_id: str, req: AnswerReq, engine: InterviewEngine = Depends(get_engine)) -> AnswerResp:
    result = engine.submit_answer(session_id, req.answer_text)
    return AnswerResp(
        followup_question_text=result.followup_question_text,
        evaluation=result.evaluation,
        interviewer_audio_url_or_base64=result.interviewer_audio_base64,
    )


@router.post("/{session_id}/end", response_model=EndResp)
def end(session_id: str, engine: InterviewEngine = Depends(get_engine)) -> EndResp:
    result = engine.end(session_id)
    return EndResp(
        final_report=result.final_report,
        live_scores=result.scores.model_dump(),
        interviewer_audio_url_or_base64=result.interviewer_audio_base64,
    )


@router.get("/{session_id}", response_model=SessionResp)
def get_session(session_id: str, engine: InterviewEngine = Depends(get_engine)) -> SessionResp:
    return SessionResp.model_validate(session_snapshot(engine.get_session(session_id)))
