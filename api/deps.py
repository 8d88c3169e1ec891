"""FastAPI dependencies wiring the engine to configured backends."""
from __future__ import annotations

from functools import lru_cache

from config.routes import generation_route, speech_route
from config.settings import settings
from interview_session import InterviewEngine
from llm_gateway import GenerationClient
from storage.session_store import build_session_store
from tts_gateway import SpeechClient


@lru_cache(maxsize=1)
def get_engine() -> InterviewEngine:
    """Build the process-wide engine on first use."""

    return InterviewEngine(
        GenerationClient(generation_route(settings)),
        SpeechClient(speech_route(settings)),
        build_session_store(settings),
    )
