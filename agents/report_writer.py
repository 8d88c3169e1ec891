"""Final report generation."""
from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

from pydantic import ValidationError

from agents.prompts import format_final_report_prompt
from agents.response_evaluator import load_json_object
from agents.types import FinalReport
from llm_gateway import TextGenerator
from services.errors import MalformedResponseError
from services.scoring import average, round_1dp

logger = logging.getLogger(__name__)


def parse_final_report(raw: str, *, average_score: float) -> FinalReport:
    data = load_json_object(raw, "final report")
    data["average_score"] = round_1dp(average_score)
    try:
        return FinalReport.model_validate(data)
    except ValidationError as exc:
        logger.error("Final report failed schema validation: %s", exc)
        raise MalformedResponseError("Final report failed schema validation", {"errors": str(exc)}) from exc


def write_final_report(
    generator: TextGenerator,
    *,
    role: str,
    level: str,
    history: Sequence[Dict[str, Any]],
    rubric_scores: Sequence[float],
) -> FinalReport:
    """Summarise the whole interview into a scored report."""

    prompt = format_final_report_prompt(role, level, history, rubric_scores)
    raw = generator.generate(prompt, require_json=True)
    report = parse_final_report(raw, average_score=average(rubric_scores))
    logger.info(
        "Final report overall=%.1f average=%.1f categories=%d",
        report.overall_score,
        report.average_score or 0.0,
        len(report.rubric_breakdown),
    )
    return report


def closing_remark(report: FinalReport) -> str:
    return (
        f"Thank you for the interview. Your overall score is {report.overall_score:.1f} out of 10. "
        f"{report.summary}"
    )


__all__ = ["parse_final_report", "write_final_report", "closing_remark"]
