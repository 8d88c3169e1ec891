"""Score normalisation and aggregation helpers."""
from __future__ import annotations

from statistics import median
from typing import Iterable, List

from pydantic import BaseModel

SCORE_MIN = 0.0
SCORE_MAX = 10.0


class ScoresTriple(BaseModel):
    avg: float
    median: float
    max: float


def round_1dp(value: float) -> float:
    """Round a float to one decimal place with stable formatting."""
    return float(f"{value:.1f}")


def clamp_score(value: float) -> float:
    """Bound a rubric score into [0, 10] and keep one decimal."""

    bounded = max(SCORE_MIN, min(SCORE_MAX, float(value)))
    return round_1dp(bounded)


def average(scores: Iterable[float]) -> float:
    values = list(scores)
    if not values:
        return 0.0
    return sum(values) / len(values)


def score_triple(scores: Iterable[float]) -> ScoresTriple:
    """Average, median and max of the rubric scores, 0.0 across the board when empty."""

    values: List[float] = [float(v) for v in scores]
    if not values:
        return ScoresTriple(avg=0.0, median=0.0, max=0.0)
    return ScoresTriple(
        avg=round_1dp(average(values)),
        median=round_1dp(float(median(values))),
        max=round_1dp(max(values)),
    )


__all__ = ["ScoresTriple", "SCORE_MIN", "SCORE_MAX", "round_1dp", "clamp_score", "average", "score_triple"]
