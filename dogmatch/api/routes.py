"""FastAPI routes for browsing dogs, quiz matching, and health check."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, HTTPException, Request

from dogmatch.data.schemas import (
    DogRecord,
    DogSummary,
    MatchRequest,
    MatchResponse,
    MatchResult,
    RankedResult,
)
from dogmatch.matching.normalize import normalize_token
from dogmatch.matching.reasons import explain, format_age, match_label
from dogmatch.matching.scorers import age_bucket

logger = logging.getLogger(__name__)

router = APIRouter()


def _matches_filters(
    dog: DogRecord,
    size: str | None = None,
    energy_level: str | None = None,
    bucket: str | None = None,
) -> bool:
    """Apply the hard attribute filters from the results page.

    ``None`` or ``"all"`` disables a filter.
    """
    size, energy_level, bucket = (normalize_token(v) for v in (size, energy_level, bucket))

    if size and size != "all" and normalize_token(dog.size) != size:
        return False
    if energy_level and energy_level != "all" and normalize_token(dog.energy_level) != energy_level:
        return False
    if bucket and bucket != "all" and age_bucket(dog.age_years) != bucket:
        return False
    return True


def _to_match_result(
    result: RankedResult, reason_limit: int, detailed: bool = False
) -> MatchResult:
    return MatchResult(
        **result.model_dump(exclude={"dog"}),
        dog=result.dog,
        label=match_label(result.score_pct),
        reasons=explain(
            result.breakdown, result.dog, limit=reason_limit, detailed=detailed
        ),
    )


def _summarize(dog: DogRecord, reason_limit: int) -> DogSummary:
    return DogSummary(
        dog=dog,
        age_label=format_age(dog.age_years),
        reasons=explain(None, dog, limit=reason_limit),
    )


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint for monitoring.

    Returns:
        Dict with system health status.
    """
    dogs = request.app.state.dogs
    return {
        "status": "healthy" if dogs else "degraded",
        "dogs_loaded": len(dogs),
    }


@router.get("/api/dogs", response_model=list[DogSummary])
async def list_dogs(
    request: Request,
    size: str | None = None,
    energy_level: str | None = None,
    age: str | None = None,
) -> list[DogSummary]:
    """Browse the catalog without quiz answers.

    Args:
        request: FastAPI request object.
        size: Optional size filter.
        energy_level: Optional energy filter.
        age: Optional age bucket filter (puppy, adult, senior).

    Returns:
        Dogs with display age and attribute reasons.
    """
    limit = request.app.state.config.default_reason_limit
    return [
        _summarize(dog, limit)
        for dog in request.app.state.dogs
        if _matches_filters(dog, size, energy_level, age)
    ]


@router.get("/api/dogs/{dog_id}", response_model=DogSummary)
async def get_dog(request: Request, dog_id: str) -> DogSummary:
    """Return one dog by catalog id.

    Raises:
        HTTPException: 404 when the id is not in the catalog.
    """
    for dog in request.app.state.dogs:
        if dog.id == dog_id:
            return _summarize(dog, request.app.state.config.default_reason_limit)
    raise HTTPException(status_code=404, detail=f"Dog {dog_id!r} not found")


@router.post("/api/match", response_model=MatchResponse)
async def match_dogs(request: Request, body: MatchRequest) -> MatchResponse:
    """Rank the catalog against posted quiz answers.

    Ranking covers every dog; minimum score, attribute filters and
    ``top_k`` are applied afterwards.

    Args:
        request: FastAPI request object.
        body: Quiz answers plus optional post-ranking filters.

    Returns:
        MatchResponse as JSON.
    """
    start = time.monotonic()
    dogs = request.app.state.dogs
    ranker = request.app.state.ranker

    ranked = ranker.rank(dogs, body.answers)
    filtered = [
        result
        for result in ranked
        if result.score_pct >= body.min_score_pct
        and _matches_filters(result.dog, body.size, body.energy_level, body.age_bucket)
    ]
    if body.top_k is not None:
        filtered = filtered[: body.top_k]

    elapsed_ms = (time.monotonic() - start) * 1000
    logger.info(
        "Matched %d answers against %d dogs: %d results in %.1f ms",
        body.answers.answered_count(),
        len(dogs),
        len(filtered),
        elapsed_ms,
    )

    return MatchResponse(
        results=[
            _to_match_result(result, body.reason_limit, body.detailed_reasons)
            for result in filtered
        ],
        total_candidates=len(ranked),
        total_matches=len(filtered),
        denominator_mode=ranker.rules.denominator_mode,
        rank_time_ms=round(elapsed_ms, 1),
    )
