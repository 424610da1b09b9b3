"""Rank a dog catalog against one adopter's quiz answers."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from dogmatch.data.schemas import DogRecord, QuizAnswers, RankedResult
from dogmatch.matching.aggregator import build_profile, coerce_answers, coerce_dog, score_dog
from dogmatch.matching.normalize import normalize_token
from dogmatch.matching.weights import DEFAULT_MATCHING_CONFIG, MatchingConfig

logger = logging.getLogger(__name__)


def sort_key(result: RankedResult) -> tuple[int, float, str, str]:
    """Total order: raw score desc, percentage desc, name asc, id asc."""
    return (
        -result.raw_score,
        -result.score_pct,
        normalize_token(result.dog.name),
        result.dog.id,
    )


class DogRanker:
    """Ranking engine for the adoption quiz.

    Scores every dog independently and sorts the results with a
    deterministic comparator, so the same inputs always give the same
    order. Scoring may fan out over a thread pool; the pool never affects
    ordering.

    Args:
        rules: Matching configuration (weights, markers, tunables).
        max_workers: Threads used to score dogs; 1 scores inline.
    """

    def __init__(
        self,
        rules: MatchingConfig = DEFAULT_MATCHING_CONFIG,
        max_workers: int = 1,
    ) -> None:
        self.rules = rules
        self.max_workers = max(1, max_workers)

    def rank(
        self,
        dogs: Iterable[DogRecord | Mapping[str, Any]],
        answers: QuizAnswers | Mapping[str, Any] | None,
    ) -> list[RankedResult]:
        """Score and order every dog.

        No dog is dropped; filtering by score or attributes is left to the
        caller.

        Args:
            dogs: Catalog of dogs (models or plain mappings).
            answers: Quiz answers (model or plain mapping).

        Returns:
            One RankedResult per dog, best match first.
        """
        start = time.monotonic()
        records = [coerce_dog(dog) for dog in dogs or []]
        profile = build_profile(coerce_answers(answers), self.rules)

        if self.max_workers > 1 and len(records) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(lambda dog: score_dog(dog, profile, self.rules), records))
        else:
            results = [score_dog(dog, profile, self.rules) for dog in records]

        results.sort(key=sort_key)

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug(
            "Ranked %d dogs in %.1f ms (%s denominator)",
            len(results),
            elapsed_ms,
            self.rules.denominator_mode,
        )
        return results


def rank_dogs(
    dogs: Iterable[DogRecord | Mapping[str, Any]],
    answers: QuizAnswers | Mapping[str, Any] | None,
    rules: MatchingConfig | None = None,
) -> list[RankedResult]:
    """Rank *dogs* against *answers* with a single-threaded DogRanker."""
    return DogRanker(rules or DEFAULT_MATCHING_CONFIG).rank(dogs, answers)
