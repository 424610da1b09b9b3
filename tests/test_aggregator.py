"""Tests for dogmatch/matching/aggregator.py."""

from __future__ import annotations

import pytest

from dogmatch.data.schemas import DogRecord, QuizAnswers
from dogmatch.matching.aggregator import (
    build_profile,
    coerce_answers,
    coerce_dog,
    score_dog,
    score_pct,
)
from dogmatch.matching.weights import DEFAULT_MATCHING_CONFIG, MatchingConfig


class TestScorePct:
    """Tests for percentage normalization."""

    def test_one_decimal(self) -> None:
        """Percentages are rounded to one decimal."""
        assert score_pct(1, 3) == pytest.approx(33.3)

    def test_zero_denominator(self) -> None:
        """An empty denominator gives 0 rather than dividing by zero."""
        assert score_pct(0, 0) == 0.0


class TestCoercion:
    """Tests for accepting plain mappings."""

    def test_dict_answers(self) -> None:
        """Plain dicts are validated into QuizAnswers."""
        answers = coerce_answers({"size_preference": "Small"})
        assert answers.size_preference == ["small"]

    def test_none_answers(self) -> None:
        """Missing answers become an empty answer set."""
        assert coerce_answers(None) == QuizAnswers()

    def test_dict_dog(self) -> None:
        """Plain dicts are validated into DogRecord."""
        assert coerce_dog({"id": 5, "name": "Rex"}).id == "5"


class TestScoreDog:
    """Tests for per-dog aggregation."""

    def test_perfect_example(
        self, example_rules: MatchingConfig, example_answers: QuizAnswers
    ) -> None:
        """Small, trained dog earns 40 of 40."""
        dog = DogRecord(id="a", size="small", energy_level="high", potty_trained=True)
        result = score_dog(dog, build_profile(example_answers, example_rules), example_rules)
        assert result.breakdown == {"energy": 10, "size": 15, "potty": 15}
        assert result.raw_score == 40
        assert result.score_pct == 100.0

    def test_weak_example(
        self, example_rules: MatchingConfig, example_answers: QuizAnswers
    ) -> None:
        """Large, untrained dog earns only the open energy points."""
        dog = DogRecord(id="b", size="large", energy_level="low", potty_trained=False)
        result = score_dog(dog, build_profile(example_answers, example_rules), example_rules)
        assert result.raw_score == 10
        assert result.score_pct == 25.0

    def test_fixed_mode_keeps_unanswered_in_denominator(self) -> None:
        """An unset age scores 0 of 10 and still counts toward the total."""
        rules = MatchingConfig(weights={"size": 15, "age": 10}, denominator_mode="fixed")
        answers = QuizAnswers(size_preference=["small"])
        dog = DogRecord(size="small", age_years=1)
        result = score_dog(dog, build_profile(answers, rules), rules)
        assert result.breakdown == {"size": 15, "age": 0}
        assert result.total_weight == 25
        assert result.score_pct == 60.0
        assert result.answered == ["size"]

    def test_active_mode_drops_unanswered(self) -> None:
        """In active mode an unset age is left out entirely."""
        rules = MatchingConfig(weights={"size": 15, "age": 10})
        answers = QuizAnswers(size_preference=["small"])
        dog = DogRecord(size="small", age_years=1)
        result = score_dog(dog, build_profile(answers, rules), rules)
        assert result.breakdown == {"size": 15}
        assert result.total_weight == 15
        assert result.score_pct == 100.0

    def test_open_marker_counts_as_answered(self) -> None:
        """Open answers join the active denominator."""
        rules = MatchingConfig(weights={"size": 15, "age": 10})
        answers = QuizAnswers(size_preference=["small"], age_preference=["any"])
        result = score_dog(DogRecord(size="large"), build_profile(answers, rules), rules)
        assert result.total_weight == 25
        assert result.raw_score == 10
        assert result.score_pct == 40.0

    def test_no_answers_active_mode(self, sample_dog: DogRecord) -> None:
        """With nothing answered the active denominator is empty."""
        profile = build_profile(QuizAnswers(), DEFAULT_MATCHING_CONFIG)
        result = score_dog(sample_dog, profile, DEFAULT_MATCHING_CONFIG)
        assert result.raw_score == 0
        assert result.total_weight == 0
        assert result.score_pct == 0.0

    def test_zero_weight_configuration(self) -> None:
        """A zero total weight yields 0% for every dog."""
        rules = MatchingConfig(weights={"size": 0}, denominator_mode="fixed")
        answers = QuizAnswers(size_preference=["small"])
        result = score_dog(DogRecord(size="small"), build_profile(answers, rules), rules)
        assert result.raw_score == 0
        assert result.score_pct == 0.0

    def test_weight_conservation(
        self, sample_dog: DogRecord, full_answers: QuizAnswers
    ) -> None:
        """Breakdown sums to the raw score, bounded by the weights."""
        for mode in ("active", "fixed"):
            rules = MatchingConfig(denominator_mode=mode)
            result = score_dog(sample_dog, build_profile(full_answers, rules), rules)
            assert sum(result.breakdown.values()) == result.raw_score
            assert result.raw_score <= result.total_weight
            for name, points in result.breakdown.items():
                assert 0 <= points <= rules.weight_for(name)

    def test_full_answers_breakdown(
        self, sample_dog: DogRecord, full_answers: QuizAnswers
    ) -> None:
        """Every criterion contributes as expected for a realistic dog."""
        result = score_dog(
            sample_dog,
            build_profile(full_answers, DEFAULT_MATCHING_CONFIG),
            DEFAULT_MATCHING_CONFIG,
        )
        assert result.breakdown == {
            "play": 13,
            "energy": 0,
            "size": 15,
            "age": 10,
            "potty": 15,
            "kids": 10,
            "cats": 0,
            "first_time": 5,
            "allergy": 10,
            "shedding": 10,
            "pets": 4,
            "noise": 3,
            "alone": 5,
        }
        assert result.raw_score == 100
        assert result.total_weight == 140
        assert result.score_pct == 71.4

    def test_bare_dog_degrades_gracefully(
        self, bare_dog: DogRecord, full_answers: QuizAnswers
    ) -> None:
        """A dog with no data still scores without raising."""
        result = score_dog(
            bare_dog,
            build_profile(full_answers, DEFAULT_MATCHING_CONFIG),
            DEFAULT_MATCHING_CONFIG,
        )
        assert result.raw_score >= 0
        assert result.score_pct >= 0.0
