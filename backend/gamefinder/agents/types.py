"""Shapes of the suggestion payload the model is asked to return."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from gamefinder.core.constants import FALLBACK_SUMMARY


class GameSuggestion(BaseModel):
    """One suggested game. reasoning is for the model's benefit and never stored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    title: str
    description: str
    platform: str
    genre: str
    rating: str | None = None
    price: str | None = None
    image_url: str = ""
    reasoning: str = ""

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_image_url(cls, v: Any) -> Any:
        return v or ""

    @field_validator("reasoning", mode="before")
    @classmethod
    def blank_reasoning(cls, v: Any) -> Any:
        return v or ""


class SuggestionResult(BaseModel):
    """
    Structured answer of the suggestion agent; its JSON schema is sent to the model.
    suggestions is required (empty is fine). followUpQuestions and summary are lenient:
    anything unusable becomes [] and FALLBACK_SUMMARY.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    suggestions: list[GameSuggestion] = Field(description="2-4 game recommendations")
    follow_up_questions: list[str] = Field(default_factory=list, description="2-3 follow-up questions")
    summary: str = Field(default=FALLBACK_SUMMARY, description="Brief, engaging summary of the recommendations")

    @field_validator("follow_up_questions", mode="before")
    @classmethod
    def keep_string_questions(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [q for q in v if isinstance(q, str)]

    @field_validator("summary", mode="before")
    @classmethod
    def default_summary(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            return FALLBACK_SUMMARY
        return v
