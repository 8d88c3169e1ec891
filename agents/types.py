"""Shared type definitions for agents."""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from services.scoring import clamp_score

Level = Literal["junior", "mid", "senior"]
FollowupIntent = Literal["deepen", "clarify", "simplify", "next_topic"]
RubricCategory = Literal["technical_knowledge", "problem_solving", "communication", "experience_relevance"]

LEVELS: tuple = ("junior", "mid", "senior")
FOLLOWUP_INTENTS: tuple = ("deepen", "clarify", "simplify", "next_topic")
RUBRIC_CATEGORIES: tuple = ("technical_knowledge", "problem_solving", "communication", "experience_relevance")


def _string_list(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return [str(item) for item in value if str(item).strip()]


class CandidateProfile(BaseModel):
    name: str = Field(min_length=1)
    age: int = Field(gt=0, lt=150)
    experience_years: float = Field(ge=0, lt=100)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class Evaluation(BaseModel):
    score: float
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    missing_topics: List[str] = Field(default_factory=list)
    followup_intent: FollowupIntent

    model_config = {"frozen": True}

    @field_validator("score", mode="before")
    @classmethod
    def _bound_score(cls, value):
        if isinstance(value, bool) or value is None:
            raise ValueError("score must be numeric")
        return clamp_score(float(value))

    @field_validator("strengths", "weaknesses", "suggestions", "missing_topics", mode="before")
    @classmethod
    def _lists(cls, value):
        return _string_list(value)


class RubricItem(BaseModel):
    category: RubricCategory
    score: float
    notes: str = ""

    @field_validator("score", mode="before")
    @classmethod
    def _bound_score(cls, value):
        if isinstance(value, bool) or value is None:
            raise ValueError("score must be numeric")
        return clamp_score(float(value))


class FinalReport(BaseModel):
    overall_score: float
    summary: str = Field(min_length=1)
    rubric_breakdown: List[RubricItem]
    next_steps: List[str] = Field(min_length=1)
    average_score: Optional[float] = None

    model_config = {"frozen": True}

    @field_validator("overall_score", mode="before")
    @classmethod
    def _bound_score(cls, value):
        if isinstance(value, bool) or value is None:
            raise ValueError("overall_score must be numeric")
        return clamp_score(float(value))

    @field_validator("next_steps", mode="before")
    @classmethod
    def _steps(cls, value):
        return _string_list(value)

    @field_validator("rubric_breakdown")
    @classmethod
    def _fixed_categories(cls, value: List[RubricItem]) -> List[RubricItem]:
        seen = [item.category for item in value]
        if sorted(seen) != sorted(RUBRIC_CATEGORIES):
            raise ValueError("rubric_breakdown must cover each rubric category exactly once")
        return sorted(value, key=lambda item: RUBRIC_CATEGORIES.index(item.category))
