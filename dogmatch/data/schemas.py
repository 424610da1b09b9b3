"""Pydantic models for data validation and serialization."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from dogmatch.matching.normalize import (
    is_missing,
    normalize_flag,
    normalize_number,
    normalize_token,
    normalize_tokens,
)

_MULTI_ANSWERS = (
    "play_styles",
    "size_preference",
    "age_preference",
    "pets_in_home",
    "shedding_levels",
)
_SCALAR_ANSWERS = (
    "energy_preference",
    "potty_requirement",
    "kids_in_home",
    "cats_in_home",
    "first_time_owner",
    "allergy_sensitivity",
    "shedding_preference",
    "noise_preference",
    "alone_time",
)
# Yes/no questions; a boolean answer maps onto their yes/no tokens.
_YES_NO_ANSWERS = frozenset({"kids_in_home", "cats_in_home", "first_time_owner"})
_FLAGS = (
    "potty_trained",
    "good_with_kids",
    "good_with_cats",
    "good_with_dogs",
    "good_with_small_animals",
    "first_time_friendly",
    "hypoallergenic",
)
_TEXT_FIELDS = (
    "name",
    "breed",
    "size",
    "energy_level",
    "shedding_level",
    "barking_level",
    "description",
    "photo_url",
)


class DogRecord(BaseModel):
    """One adoptable dog from a shelter catalog.

    Every field is optional. Malformed values are coerced to ``None`` (or
    an empty list) instead of failing validation, so incomplete shelter
    data never blocks ranking. Yes/no attributes are tri-state: ``None``
    means unknown, which is distinct from ``False``.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default="", description="Catalog identifier")
    name: str | None = Field(default=None, description="Display name")
    breed: str | None = None
    age_years: float | None = Field(default=None, description="Age in years")
    size: str | None = None
    energy_level: str | None = None
    play_styles: list[str] = Field(default_factory=list)
    shedding_level: str | None = None
    barking_level: str | None = None
    max_alone_hours: float | None = Field(
        default=None, description="Longest time the dog tolerates being alone"
    )
    potty_trained: bool | None = None
    good_with_kids: bool | None = None
    good_with_cats: bool | None = None
    good_with_dogs: bool | None = None
    good_with_small_animals: bool | None = None
    first_time_friendly: bool | None = None
    hypoallergenic: bool | None = None
    description: str | None = None
    photo_url: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        if is_missing(value):
            return ""
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value).strip()

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        if is_missing(value) or isinstance(value, (list, dict)):
            return None
        return str(value).strip()

    @field_validator("age_years", "max_alone_hours", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float | None:
        number = normalize_number(value)
        if number is None or number < 0:
            return None
        return number

    @field_validator("play_styles", mode="before")
    @classmethod
    def _coerce_tokens(cls, value: Any) -> list[str]:
        return normalize_tokens(value)

    @field_validator(*_FLAGS, mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool | None:
        return normalize_flag(value)


class QuizAnswers(BaseModel):
    """One adopter's quiz answers.

    Unset questions are ``None``. Multi-select answers accept lists, comma
    separated strings or a single value and are stored as lower-case token
    lists; single-choice answers are stored as lower-case tokens.
    """

    model_config = ConfigDict(extra="ignore")

    play_styles: list[str] | None = None
    energy_preference: str | None = None
    size_preference: list[str] | None = None
    age_preference: list[str] | None = None
    potty_requirement: str | None = None
    kids_in_home: str | None = None
    pets_in_home: list[str] | None = None
    cats_in_home: str | None = None
    first_time_owner: str | None = None
    allergy_sensitivity: str | None = None
    shedding_levels: list[str] | None = None
    shedding_preference: str | None = None
    noise_preference: str | None = None
    alone_time: str | None = None

    @field_validator(*_MULTI_ANSWERS, mode="before")
    @classmethod
    def _coerce_multi(cls, value: Any) -> list[str] | None:
        return normalize_tokens(value) or None

    @field_validator(*_SCALAR_ANSWERS, mode="before")
    @classmethod
    def _coerce_scalar(cls, value: Any, info: ValidationInfo) -> str | None:
        if isinstance(value, bool) and info.field_name in _YES_NO_ANSWERS:
            return "yes" if value else "no"
        if isinstance(value, (list, tuple)):
            tokens = normalize_tokens(value)
            return tokens[0] if tokens else None
        return normalize_token(value) or None

    def answered_count(self) -> int:
        """Number of questions with an answer."""
        return sum(1 for value in self.model_dump().values() if value)


class RankedResult(BaseModel):
    """A dog's score against one set of quiz answers."""

    dog: DogRecord
    raw_score: int = Field(description="Points earned across all criteria")
    score_pct: float = Field(description="Percentage of the denominator, one decimal")
    breakdown: dict[str, int] = Field(default_factory=dict)
    total_weight: int = Field(default=0, description="Denominator used for score_pct")
    answered: list[str] = Field(
        default_factory=list,
        description="Criteria counted as answered",
    )


class MatchResult(RankedResult):
    """A ranked dog decorated for display."""

    label: str = Field(default="", description="Match tier label")
    reasons: list[str] = Field(default_factory=list)


class MatchRequest(BaseModel):
    """Body of a match request."""

    answers: QuizAnswers = Field(default_factory=QuizAnswers)
    min_score_pct: float = Field(default=0.0, ge=0.0, le=100.0)
    size: str | None = None
    energy_level: str | None = None
    age_bucket: str | None = None
    top_k: int | None = Field(default=None, ge=1)
    reason_limit: int = Field(default=3, ge=1, le=10)
    detailed_reasons: bool = Field(
        default=False,
        description="Quote the dog's size, energy level or age in reasons",
    )


class MatchResponse(BaseModel):
    """Full response from a match request."""

    results: list[MatchResult] = Field(default_factory=list)
    total_candidates: int = Field(default=0)
    total_matches: int = Field(default=0, description="Results after filtering")
    denominator_mode: str = Field(default="active")
    rank_time_ms: float = Field(default=0.0)


class DogSummary(BaseModel):
    """A dog as shown when browsing without quiz answers."""

    dog: DogRecord
    age_label: str = ""
    reasons: list[str] = Field(default_factory=list)
