"""Weight table and tunables for the matching engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

CRITERIA: tuple[str, ...] = (
    "play",
    "energy",
    "size",
    "age",
    "potty",
    "kids",
    "cats",
    "first_time",
    "allergy",
    "shedding",
    "pets",
    "noise",
    "alone",
)

DENOMINATOR_MODES = ("active", "fixed")

DEFAULT_WEIGHTS: Mapping[str, int] = MappingProxyType(
    {
        "play": 25,
        "energy": 10,
        "size": 15,
        "age": 10,
        "potty": 15,
        "kids": 10,
        "cats": 10,
        "first_time": 5,
        "allergy": 10,
        "shedding": 10,
        "pets": 10,
        "noise": 5,
        "alone": 5,
    }
)

DEFAULT_OPEN_MARKERS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "play": frozenset({"no_preference", "any"}),
        "energy": frozenset({"any", "flexible", "no_preference"}),
        "size": frozenset({"any", "flexible"}),
        "age": frozenset({"any", "flexible"}),
        "potty": frozenset({"no_matter", "flexible", "doesnt_matter"}),
        "kids": frozenset({"no", "not_sure"}),
        "cats": frozenset({"none", "not_sure"}),
        "first_time": frozenset({"no", "not_sure"}),
        "allergy": frozenset({"no_allergies", "none"}),
        "shedding": frozenset({"no_preference", "any", "flexible"}),
        "pets": frozenset({"none", "not_sure", "no_preference"}),
        "noise": frozenset({"no_pref", "no_preference"}),
        "alone": frozenset({"not_sure"}),
    }
)


@dataclass(frozen=True)
class GradedTiers:
    """Answer tokens for a must / preferred / open style question.

    Args:
        hard: Tokens that require the attribute; no credit without it.
        soft: Tokens that prefer the attribute; partial credit without it.
        soft_credit: Fraction of the weight awarded on a soft miss.
    """

    hard: frozenset[str] = frozenset()
    soft: frozenset[str] = frozenset()
    soft_credit: float = 0.0


DEFAULT_GRADED_TIERS: Mapping[str, GradedTiers] = MappingProxyType(
    {
        "potty": GradedTiers(
            hard=frozenset({"must", "must_be_trained"}),
            soft=frozenset({"preferred"}),
            soft_credit=0.35,
        ),
        # "sometimes" earns half credit on purpose, not zero.
        "kids": GradedTiers(
            hard=frozenset({"yes"}),
            soft=frozenset({"sometimes"}),
            soft_credit=0.5,
        ),
        "first_time": GradedTiers(
            soft=frozenset({"yes"}),
            soft_credit=0.35,
        ),
        "allergy": GradedTiers(
            hard=frozenset({"have_allergies", "needs_low_shedding"}),
            soft=frozenset({"mild_allergies", "mild"}),
            soft_credit=0.4,
        ),
    }
)

# Preference band -> candidate band -> fraction of the noise weight.
DEFAULT_NOISE_TABLE: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {
        "need_very_quiet": {"quiet": 1.0, "moderate": 0.0, "vocal": 0.0},
        "prefer_quiet": {"quiet": 1.0, "moderate": 0.6, "vocal": 0.0},
        "some_ok": {"quiet": 1.0, "moderate": 1.0, "vocal": 0.6},
        "alert_ok": {"quiet": 0.7, "moderate": 0.7, "vocal": 1.0},
    }
)

DEFAULT_ALONE_HOURS: Mapping[str, float] = MappingProxyType(
    {
        "lt4": 3,
        "4to6": 5,
        "4_6": 5,
        "6to8": 7,
        "6_8": 7,
        "gt8": 9,
        "8_plus": 9,
    }
)


class ConfigurationError(ValueError):
    """Raised when a matching configuration is internally inconsistent."""


@dataclass(frozen=True)
class MatchingConfig:
    """Immutable scoring scheme injected into the aggregator and ranker.

    Swapping this object changes weights, open markers and partial-credit
    fractions without touching scorer code, so several schemes can be
    used side by side in one process.

    Args:
        weights: Criterion name to maximum points.
        open_markers: Criterion name to tokens meaning "no constraint".
        graded_tiers: Tier tokens for must/preferred style criteria.
        pet_incompatible_penalty: Fraction of the pets weight removed per
            declared co-habitant the dog is known to be incompatible with.
        pet_unknown_penalty: Fraction removed when compatibility is unknown.
        noise_table: Directional comfort lookup for barking.
        alone_hours: Alone-time answer to representative hours.
        denominator_mode: ``"active"`` divides by the weight of answered
            criteria only; ``"fixed"`` divides by the full weight table.
    """

    weights: Mapping[str, int] = field(default_factory=lambda: DEFAULT_WEIGHTS)
    open_markers: Mapping[str, frozenset[str]] = field(
        default_factory=lambda: DEFAULT_OPEN_MARKERS
    )
    graded_tiers: Mapping[str, GradedTiers] = field(
        default_factory=lambda: DEFAULT_GRADED_TIERS
    )
    pet_incompatible_penalty: float = 0.6
    pet_unknown_penalty: float = 0.15
    noise_table: Mapping[str, Mapping[str, float]] = field(
        default_factory=lambda: DEFAULT_NOISE_TABLE
    )
    alone_hours: Mapping[str, float] = field(default_factory=lambda: DEFAULT_ALONE_HOURS)
    denominator_mode: str = "active"
    total_weight: int = field(init=False)

    def __post_init__(self) -> None:
        unknown = sorted(set(self.weights) - set(CRITERIA))
        if unknown:
            raise ConfigurationError(f"Unknown criteria in weight table: {unknown}")

        non_integer = sorted(
            name
            for name, w in self.weights.items()
            if isinstance(w, bool) or not isinstance(w, int)
        )
        if non_integer:
            raise ConfigurationError(f"Weights must be integers: {non_integer}")

        negative = sorted(name for name, w in self.weights.items() if w < 0)
        if negative:
            raise ConfigurationError(f"Negative weights for: {negative}")

        if self.denominator_mode not in DENOMINATOR_MODES:
            raise ConfigurationError(
                f"denominator_mode must be one of {DENOMINATOR_MODES}, "
                f"got {self.denominator_mode!r}"
            )

        # Freeze caller-supplied dicts so the scheme cannot drift at runtime.
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))
        object.__setattr__(self, "total_weight", sum(self.weights.values()))

    @property
    def criteria(self) -> tuple[str, ...]:
        """Configured criteria in canonical order."""
        return tuple(name for name in CRITERIA if name in self.weights)

    def weight_for(self, criterion: str) -> int:
        """Return the maximum points for *criterion*.

        Raises:
            ConfigurationError: If the criterion is not in the weight table.
        """
        try:
            return self.weights[criterion]
        except KeyError:
            raise ConfigurationError(
                f"Criterion {criterion!r} is not in the weight table"
            ) from None

    def markers_for(self, criterion: str) -> frozenset[str]:
        """Open-marker tokens for *criterion* (empty when none configured)."""
        return frozenset(self.open_markers.get(criterion, frozenset()))


DEFAULT_MATCHING_CONFIG = MatchingConfig()
