"""Question generation for the opening question and adaptive follow-ups."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from agents.prompts import format_followup_prompt, format_question_prompt
from agents.types import CandidateProfile, Evaluation
from llm_gateway import TextGenerator
from services.errors import MalformedResponseError

logger = logging.getLogger(__name__)

_QUOTES = "\"'“”"


def _clean_question(text: str) -> str:
    question = text.strip().strip(_QUOTES).strip()
    if not question:
        raise MalformedResponseError("Generation returned an empty question")
    return question


def first_question(generator: TextGenerator, *, role: str, level: str, profile: CandidateProfile) -> str:
    """Ask for the opening question (stage 1, no history)."""

    prompt = format_question_prompt(
        role,
        level,
        1,
        None,
        candidate_name=profile.name,
        candidate_age=profile.age,
        experience_years=profile.experience_years,
    )
    question = _clean_question(generator.generate(prompt))
    logger.info("Generated first question role=%s level=%s chars=%d", role, level, len(question))
    return question


def followup_question(
    generator: TextGenerator,
    *,
    question: str,
    answer: str,
    evaluation: Evaluation,
    role: str,
    level: str,
    history: Optional[Sequence[Dict[str, Any]]] = None,
) -> str:
    prompt = format_followup_prompt(question, answer, evaluation, role, level, history)
    followup = _clean_question(generator.generate(prompt))
    logger.info("Generated follow-up intent=%s chars=%d", evaluation.followup_intent, len(followup))
    return followup


__all__ = ["first_question", "followup_question"]
