"""Human-readable reasons, labels and age text for ranked dogs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dogmatch.data.schemas import DogRecord
from dogmatch.matching.normalize import normalize_number, round_half_up
from dogmatch.matching.scorers import age_bucket

GENERIC_REASON = "General fit"

# Breakdown key -> reason shown to adopters. Order breaks ties on points.
CRITERION_LABELS: Mapping[str, str] = {
    "play": "Matches your play style",
    "size": "Fits your preferred size",
    "potty": "Potty training fits your needs",
    "energy": "Energy level fits your lifestyle",
    "age": "Age matches what you're looking for",
    "kids": "Good fit for your kids",
    "cats": "Comfortable around cats",
    "pets": "Gets along with your pets",
    "allergy": "Good fit for your allergies",
    "shedding": "Shedding level works for you",
    "first_time": "Good for your experience level",
    "noise": "Noise level suits your home",
    "alone": "Can handle your alone-time schedule",
}

# Bookkeeping keys that can ride along in a stored breakdown.
EXCLUDED_REASON_KEYS = frozenset(
    {
        "raw_score",
        "rawscore",
        "score_pct",
        "scorepct",
        "total_weight",
        "total_score",
        "normalized_score",
        "completion_count",
        "completion_total",
        "completion_pct",
    }
)

_CRITERION_ORDER = {key: index for index, key in enumerate(CRITERION_LABELS)}


def _criterion_detail(key: str, dog: DogRecord) -> str:
    """The dog attribute a size, energy or age reason can quote."""
    if key == "size":
        return dog.size or ""
    if key == "energy":
        return dog.energy_level or ""
    if key == "age":
        return age_bucket(dog.age_years) or ""
    return ""


def _append_unique(reasons: list[str], reason: str) -> None:
    if reason and reason not in reasons:
        reasons.append(reason)


def _breakdown_reasons(
    breakdown: Mapping[str, Any],
    dog: DogRecord,
    detailed: bool = False,
) -> list[str]:
    scored: list[tuple[float, int, str]] = []
    for key, value in breakdown.items():
        if key in EXCLUDED_REASON_KEYS or key not in CRITERION_LABELS:
            continue
        points = normalize_number(value)
        if points is None or points <= 0:
            continue
        scored.append((-points, _CRITERION_ORDER[key], key))

    reasons: list[str] = []
    for _, _, key in sorted(scored):
        reason = CRITERION_LABELS[key]
        detail = _criterion_detail(key, dog) if detailed else ""
        _append_unique(reasons, f"{reason} ({detail})" if detail else reason)
    return reasons


def attribute_reasons(dog: DogRecord) -> list[str]:
    """Salient known facts about a dog, used when there is no breakdown."""
    reasons: list[str] = []
    if dog.size:
        _append_unique(reasons, f"Size: {dog.size}")
    if dog.energy_level:
        _append_unique(reasons, f"Energy: {dog.energy_level}")
    bucket = age_bucket(dog.age_years)
    if bucket:
        _append_unique(reasons, f"Age: {bucket}")
    if dog.hypoallergenic is True:
        _append_unique(reasons, "Hypoallergenic")
    if dog.potty_trained is True:
        _append_unique(reasons, "Potty trained")
    if dog.good_with_kids is True:
        _append_unique(reasons, "Good with kids")
    if dog.good_with_cats is True:
        _append_unique(reasons, "Good with cats")
    if dog.good_with_dogs is True:
        _append_unique(reasons, "Good with other dogs")
    return reasons


def explain(
    breakdown: Mapping[str, Any] | None,
    dog: DogRecord,
    limit: int = 3,
    detailed: bool = False,
) -> list[str]:
    """Build up to *limit* reasons for a dog's rank.

    Criteria that earned points come first, highest points first. When
    there are fewer than *limit* of those (or no breakdown at all, e.g.
    browsing without a quiz) known attributes of the dog fill the rest.

    Args:
        breakdown: Criterion to points, or None.
        dog: The dog being explained.
        limit: Maximum number of reasons.
        detailed: Quote the dog's size, energy level or age bucket in
            the matching reasons, e.g. "Fits your preferred size (small)".

    Returns:
        Reasons list; ``[GENERIC_REASON]`` when nothing is known.
    """
    if limit <= 0:
        return []

    reasons = _breakdown_reasons(breakdown, dog, detailed) if breakdown else []
    for reason in attribute_reasons(dog):
        if len(reasons) >= limit:
            break
        _append_unique(reasons, reason)

    if not reasons:
        return [GENERIC_REASON]
    return reasons[:limit]


def match_label(score_pct: Any) -> str:
    """Tier label for a match percentage; empty for non-numeric input."""
    pct = normalize_number(score_pct)
    if pct is None:
        return ""
    if pct >= 85:
        return "Great match"
    if pct >= 70:
        return "Strong match"
    if pct >= 55:
        return "Good match"
    return "Possible match"


def format_age(age_years: Any) -> str:
    """Short display age: months under a year, otherwise years."""
    years = normalize_number(age_years)
    if years is None or years < 0:
        return "Unknown"
    if years < 1:
        months = max(1, int(round_half_up(years * 12)))
        return f"{months} mo"
    years = round_half_up(years, 1)
    text = f"{years:g}"
    return f"{text} yr" if years == 1 else f"{text} yrs"
