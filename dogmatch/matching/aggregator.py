"""Combine per-criterion scores into a dog's overall match."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dogmatch.data.schemas import DogRecord, QuizAnswers, RankedResult
from dogmatch.matching.normalize import round_half_up
from dogmatch.matching.scorers import evaluate, get_criterion
from dogmatch.matching.weights import MatchingConfig

Profile = Mapping[str, Any]


def coerce_answers(answers: QuizAnswers | Mapping[str, Any] | None) -> QuizAnswers:
    """Accept a QuizAnswers model, a plain mapping, or nothing."""
    if isinstance(answers, QuizAnswers):
        return answers
    if isinstance(answers, Mapping):
        return QuizAnswers.model_validate(dict(answers))
    return QuizAnswers()


def coerce_dog(dog: DogRecord | Mapping[str, Any] | None) -> DogRecord:
    """Accept a DogRecord model, a plain mapping, or nothing."""
    if isinstance(dog, DogRecord):
        return dog
    if isinstance(dog, Mapping):
        return DogRecord.model_validate(dict(dog))
    return DogRecord()


def build_profile(answers: QuizAnswers, rules: MatchingConfig) -> dict[str, Any]:
    """Extract the normalized preference for every configured criterion.

    Built once per ranking call and shared by every dog.
    """
    return {name: get_criterion(name).preference(answers) for name in rules.criteria}


def score_pct(raw_score: int, total_weight: int) -> float:
    """Percentage of *total_weight*, one decimal; 0.0 for an empty denominator."""
    if total_weight <= 0:
        return 0.0
    return round_half_up(100 * raw_score / total_weight, 1)


def score_dog(dog: DogRecord, profile: Profile, rules: MatchingConfig) -> RankedResult:
    """Score one dog against a prepared preference profile.

    In ``active`` mode unanswered criteria are left out of both the
    breakdown and the denominator. In ``fixed`` mode they appear with zero
    points and the denominator is the whole weight table.

    Args:
        dog: Candidate dog.
        profile: Output of :func:`build_profile`.
        rules: Active matching configuration.

    Returns:
        RankedResult with breakdown, raw score and percentage.
    """
    breakdown: dict[str, int] = {}
    answered: list[str] = []
    active_weight = 0

    for name in rules.criteria:
        points, is_answered = evaluate(name, profile.get(name), dog, rules)
        if is_answered:
            answered.append(name)
            active_weight += rules.weight_for(name)
        elif rules.denominator_mode == "active":
            continue
        breakdown[name] = points

    raw_score = sum(breakdown.values())
    total_weight = active_weight if rules.denominator_mode == "active" else rules.total_weight

    assert raw_score <= total_weight, "criterion points exceeded their weights"

    return RankedResult(
        dog=dog,
        raw_score=raw_score,
        score_pct=score_pct(raw_score, total_weight),
        breakdown=breakdown,
        total_weight=total_weight,
        answered=answered,
    )
