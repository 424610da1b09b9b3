"""Shared test fixtures for the Dog Match test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from dogmatch.data.schemas import DogRecord, QuizAnswers
from dogmatch.matching.weights import MatchingConfig


@pytest.fixture
def sample_dog() -> DogRecord:
    """Create a fully populated DogRecord for testing."""
    return DogRecord(
        id="d-100",
        name="Biscuit",
        breed="Beagle Mix",
        age_years=3,
        size="Medium",
        energy_level="moderate",
        play_styles=["fetch", "dog_park"],
        shedding_level="moderate",
        barking_level="vocal",
        max_alone_hours=6,
        potty_trained=True,
        good_with_kids=True,
        good_with_cats=False,
        good_with_dogs=True,
        good_with_small_animals=None,
        first_time_friendly=True,
        hypoallergenic=False,
    )


@pytest.fixture
def bare_dog() -> DogRecord:
    """Create a DogRecord with every optional field missing."""
    return DogRecord(id="d-bare")


@pytest.fixture
def example_rules() -> MatchingConfig:
    """Three-criterion scheme with a 40 point total."""
    return MatchingConfig(weights={"size": 15, "energy": 10, "potty": 15})


@pytest.fixture
def example_answers() -> QuizAnswers:
    """Answers for the size / energy / potty example."""
    return QuizAnswers(
        size_preference=["small"],
        energy_preference="any",
        potty_requirement="must",
    )


@pytest.fixture
def example_dogs() -> list[DogRecord]:
    """Dogs for the size / energy / potty example, deliberately out of order."""
    return [
        DogRecord(id="d-2", name="Bravo", size="large", energy_level="low", potty_trained=False),
        DogRecord(id="d-3", name="charlie"),
        DogRecord(id="d-1", name="Alpha", size="small", energy_level="high", potty_trained=True),
    ]


@pytest.fixture
def full_answers() -> QuizAnswers:
    """Answers touching every criterion."""
    return QuizAnswers(
        play_styles=["fetch", "hikes"],
        energy_preference="high",
        size_preference=["medium", "large"],
        age_preference=["adult"],
        potty_requirement="preferred",
        kids_in_home="yes",
        pets_in_home=["cats"],
        first_time_owner="no",
        allergy_sensitivity="no_allergies",
        shedding_levels=["flexible"],
        noise_preference="some_ok",
        alone_time="4to6",
    )


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """Create a temporary data directory structure."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir
