"""Per-criterion scorers.

Each scorer maps a normalized preference and a normalized candidate value
to the points earned out of the criterion's weight. Scorers only see
answered, non-open preferences: the unanswered and open-marker rules are
applied once, uniformly, in :func:`evaluate`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from dogmatch.data.schemas import DogRecord, QuizAnswers
from dogmatch.matching.normalize import (
    is_open,
    normalize_token,
    normalize_tokens,
    round_points,
)
from dogmatch.matching.weights import MatchingConfig

logger = logging.getLogger(__name__)

Preference = Any
Scorer = Callable[[Preference, Any, int, str, MatchingConfig], int]

PET_NEEDS = {
    "dogs": "dogs",
    "cats": "cats",
    "small_animals": "small_animals",
    "small_pets": "small_animals",
}


# ---------------------------------------------------------------------------
# Candidate canonicalization
# ---------------------------------------------------------------------------

def age_bucket(age_years: float | None) -> str | None:
    """Bucket a continuous age into ``puppy`` (<2), ``adult`` (<7) or ``senior``."""
    if age_years is None:
        return None
    if age_years < 2:
        return "puppy"
    if age_years < 7:
        return "adult"
    return "senior"


def canonical_size(value: Any) -> str:
    """Canonical size token; ``xl`` and ``extra large`` become ``extra_large``."""
    token = normalize_token(value).replace("-", " ").replace("_", " ")
    if not token:
        return ""
    if token == "xl" or "extra" in token:
        return "extra_large"
    return token.replace(" ", "_")


def canonical_shedding(value: Any) -> str:
    token = normalize_token(value)
    if "min" in token or token in ("low", "none"):
        return "minimal"
    if "mod" in token or token == "medium":
        return "moderate"
    if "heavy" in token or token == "high":
        return "heavy_ok"
    return token


def canonical_barking(value: Any) -> str:
    """Map free-text barking descriptions onto quiet / moderate / vocal."""
    token = normalize_token(value)
    if not token:
        return ""
    if "quiet" in token or "rare" in token or token == "low":
        return "quiet"
    if "mod" in token or "some" in token or token == "medium":
        return "moderate"
    if "vocal" in token or "high" in token or "often" in token:
        return "vocal"
    return token


# ---------------------------------------------------------------------------
# Scorers
# ---------------------------------------------------------------------------

def score_overlap(
    preference: list[str], candidate: list[str], weight: int, criterion: str, rules: MatchingConfig
) -> int:
    """Share of selected tokens the candidate also has, scaled to the weight."""
    if not candidate:
        return 0
    matches = sum(1 for token in preference if token in candidate)
    return round_points(weight * matches / len(preference))


def score_membership(
    preference: list[str], candidate: str, weight: int, criterion: str, rules: MatchingConfig
) -> int:
    """Full weight when the candidate's value is one of the selected tokens."""
    if not candidate:
        return 0
    return weight if candidate in preference else 0


def score_exact(
    preference: str, candidate: str, weight: int, criterion: str, rules: MatchingConfig
) -> int:
    return weight if candidate and candidate == preference else 0


def score_graded(
    preference: str, candidate: bool | None, weight: int, criterion: str, rules: MatchingConfig
) -> int:
    """Must / preferred scoring against a yes/no attribute.

    A hard requirement earns nothing unless the attribute is known to be
    true. A soft requirement falls back to the configured partial credit.
    Tokens in neither tier earn nothing.
    """
    tiers = rules.graded_tiers.get(criterion)
    if tiers is None:
        return 0
    if preference in tiers.hard:
        return weight if candidate is True else 0
    if preference in tiers.soft:
        if candidate is True:
            return weight
        return round_points(weight * tiers.soft_credit)
    logger.debug("Unrecognized %s answer %r scored as zero", criterion, preference)
    return 0


def score_age(
    preference: list[str], candidate: str | None, weight: int, criterion: str, rules: MatchingConfig
) -> int:
    if candidate is None:
        return 0
    return weight if candidate in preference else 0


def score_alone_time(
    preference: str, candidate: float | None, weight: int, criterion: str, rules: MatchingConfig
) -> int:
    """Full credit when the adopter's hours away fit the dog's tolerance.

    Missing shelter data or an unrecognized answer band is not penalized.
    """
    hours = rules.alone_hours.get(preference)
    if hours is None or candidate is None:
        return weight
    return weight if hours <= candidate else 0


def score_noise(
    preference: str, candidate: str, weight: int, criterion: str, rules: MatchingConfig
) -> int:
    row = rules.noise_table.get(preference)
    if row is None or candidate not in row:
        return weight
    return round_points(weight * row[candidate])


def score_cats(
    preference: list[str], candidate: bool | None, weight: int, criterion: str, rules: MatchingConfig
) -> int:
    if "cats" not in preference:
        return weight
    return weight if candidate is True else 0


def score_pets(
    preference: list[str],
    candidate: dict[str, bool | None],
    weight: int,
    criterion: str,
    rules: MatchingConfig,
) -> int:
    """Start from full credit and subtract per declared co-habitant need."""
    incompatible = round_points(weight * rules.pet_incompatible_penalty)
    unknown = round_points(weight * rules.pet_unknown_penalty)

    needs = {PET_NEEDS[token] for token in preference if token in PET_NEEDS}
    points = weight
    for need in sorted(needs):
        compatible = candidate.get(need)
        if compatible is False:
            points -= incompatible
        elif compatible is None:
            points -= unknown
    return points


# ---------------------------------------------------------------------------
# Preference and candidate extraction
# ---------------------------------------------------------------------------

def _cats_preference(answers: QuizAnswers) -> list[str]:
    if answers.pets_in_home:
        return list(answers.pets_in_home)
    legacy = normalize_token(answers.cats_in_home)
    if legacy == "yes":
        return ["cats"]
    if legacy == "no":
        return ["none"]
    return normalize_tokens(legacy)


def _shedding_preference(answers: QuizAnswers) -> list[str]:
    return list(answers.shedding_levels or normalize_tokens(answers.shedding_preference))


def _pet_compatibility(dog: DogRecord) -> dict[str, bool | None]:
    return {
        "dogs": dog.good_with_dogs,
        "cats": dog.good_with_cats,
        "small_animals": dog.good_with_small_animals,
    }


@dataclass(frozen=True)
class Criterion:
    """One scoring axis: where its inputs come from and how it scores them."""

    name: str
    preference: Callable[[QuizAnswers], Preference]
    candidate: Callable[[DogRecord], Any]
    scorer: Scorer


REGISTRY: dict[str, Criterion] = {
    criterion.name: criterion
    for criterion in (
        Criterion(
            "play",
            lambda a: list(a.play_styles or []),
            lambda d: list(d.play_styles),
            score_overlap,
        ),
        Criterion(
            "energy",
            lambda a: normalize_token(a.energy_preference),
            lambda d: normalize_token(d.energy_level),
            score_exact,
        ),
        Criterion(
            "size",
            lambda a: [canonical_size(t) for t in a.size_preference or []],
            lambda d: canonical_size(d.size),
            score_membership,
        ),
        Criterion(
            "age",
            lambda a: list(a.age_preference or []),
            lambda d: age_bucket(d.age_years),
            score_age,
        ),
        Criterion(
            "potty",
            lambda a: normalize_token(a.potty_requirement),
            lambda d: d.potty_trained,
            score_graded,
        ),
        Criterion(
            "kids",
            lambda a: normalize_token(a.kids_in_home),
            lambda d: d.good_with_kids,
            score_graded,
        ),
        Criterion("cats", _cats_preference, lambda d: d.good_with_cats, score_cats),
        Criterion(
            "first_time",
            lambda a: normalize_token(a.first_time_owner),
            lambda d: d.first_time_friendly,
            score_graded,
        ),
        Criterion(
            "allergy",
            lambda a: normalize_token(a.allergy_sensitivity),
            lambda d: d.hypoallergenic,
            score_graded,
        ),
        Criterion(
            "shedding",
            _shedding_preference,
            lambda d: canonical_shedding(d.shedding_level),
            score_membership,
        ),
        Criterion(
            "pets",
            lambda a: list(a.pets_in_home or []),
            _pet_compatibility,
            score_pets,
        ),
        Criterion(
            "noise",
            lambda a: normalize_token(a.noise_preference),
            lambda d: canonical_barking(d.barking_level),
            score_noise,
        ),
        Criterion(
            "alone",
            lambda a: normalize_token(a.alone_time),
            lambda d: d.max_alone_hours,
            score_alone_time,
        ),
    )
}


def get_criterion(name: str) -> Criterion:
    """Look up a registered criterion, failing loudly on a typo."""
    try:
        return REGISTRY[name]
    except KeyError:
        raise KeyError(f"No scorer registered for criterion {name!r}") from None


def evaluate(
    name: str,
    preference: Preference,
    dog: DogRecord,
    rules: MatchingConfig,
) -> tuple[int, bool]:
    """Score one criterion for one dog.

    Args:
        name: Criterion name; must be in the weight table.
        preference: The normalized preference for this criterion.
        dog: Candidate dog.
        rules: Active matching configuration.

    Returns:
        Tuple of (points earned, whether the criterion was answered).
    """
    weight = rules.weight_for(name)
    criterion = get_criterion(name)

    if not preference:
        return 0, False
    if is_open(preference, rules.markers_for(name)):
        return weight, True

    points = criterion.scorer(preference, criterion.candidate(dog), weight, name, rules)
    return max(0, min(weight, points)), True
