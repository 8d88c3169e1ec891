"""LLM-backed answer evaluator with schema validation and follow-up policy."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Sequence

from pydantic import ValidationError

from agents.prompts import format_evaluation_prompt
from agents.types import FOLLOWUP_INTENTS, Evaluation
from llm_gateway import TextGenerator
from services.errors import MalformedResponseError

logger = logging.getLogger(__name__)

DEEPEN_THRESHOLD = 7.0
CLARIFY_THRESHOLD = 4.0


def resolve_followup_intent(score: float, proposed: Optional[str] = None) -> str:
    """Map a score onto the follow-up intent.

    ``next_topic`` is the evaluator's own call and is kept as-is; every other
    intent is derived from the score so the policy stays deterministic.
    """

    if proposed == "next_topic":
        return "next_topic"
    if score >= DEEPEN_THRESHOLD:
        return "deepen"
    if score >= CLARIFY_THRESHOLD:
        return "clarify"
    return "simplify"


def load_json_object(raw: str, what: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse %s JSON: %s", what, raw[:200])
        raise MalformedResponseError(f"Invalid {what} response format", {"raw": raw[:500]}) from exc
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Invalid {what} response format", {"raw": raw[:500]})
    return data


def parse_evaluation(raw: str) -> Evaluation:
    """Parse and validate an evaluation payload, raising ``MalformedResponseError`` on any violation."""

    data = load_json_object(raw, "evaluation")
    proposed = data.get("followup_intent")
    if proposed is not None and proposed not in FOLLOWUP_INTENTS:
        raise MalformedResponseError(
            f"Unknown followup_intent: {proposed!r}",
            {"allowed": list(FOLLOWUP_INTENTS)},
        )
    try:
        parsed = Evaluation.model_validate({**data, "followup_intent": proposed or "clarify"})
    except ValidationError as exc:
        logger.error("Evaluation failed schema validation: %s", exc)
        raise MalformedResponseError("Evaluation failed schema validation", {"errors": str(exc)}) from exc
    intent = resolve_followup_intent(parsed.score, proposed)
    return parsed.model_copy(update={"followup_intent": intent})


def evaluate_answer(
    generator: TextGenerator,
    *,
    question: str,
    answer: str,
    role: str,
    level: str,
    history: Optional[Sequence[Dict[str, Any]]] = None,
) -> Evaluation:
    prompt = format_evaluation_prompt(question, answer, role, level, history)
    raw = generator.generate(prompt, require_json=True)
    evaluation = parse_evaluation(raw)
    logger.info(
        "Evaluation score=%.1f strengths=%d weaknesses=%d intent=%s",
        evaluation.score,
        len(evaluation.strengths),
        len(evaluation.weaknesses),
        evaluation.followup_intent,
    )
    return evaluation


__all__ = ["resolve_followup_intent", "load_json_object", "parse_evaluation", "evaluate_answer", "DEEPEN_THRESHOLD", "CLARIFY_THRESHOLD"]
