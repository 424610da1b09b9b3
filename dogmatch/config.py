"""Central application configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dogmatch.matching.weights import MatchingConfig


@dataclass(frozen=True)
class Config:
    """Central application configuration.

    Reads from environment variables with sensible defaults.
    All paths are resolved relative to project root.
    """

    # Paths
    data_dir: Path = field(default_factory=lambda: Path(os.getenv("DATA_DIR", "data")))
    catalog_path: Path = field(
        default_factory=lambda: Path(
            os.getenv("CATALOG_PATH", os.path.join(os.getenv("DATA_DIR", "data"), "dogs.csv"))
        )
    )

    # Matching
    denominator_mode: str = field(
        default_factory=lambda: os.getenv("MATCH_DENOMINATOR_MODE", "active")
    )
    rank_workers: int = field(default_factory=lambda: int(os.getenv("RANK_WORKERS", "1")))
    default_reason_limit: int = 3
    default_top_k: int = 50
    min_score_pct: float = 0.0

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))

    def matching_config(self) -> MatchingConfig:
        """Build the scoring scheme for this configuration.

        Raises:
            ConfigurationError: If the denominator mode is not recognized.
        """
        return MatchingConfig(denominator_mode=self.denominator_mode)


def get_config() -> Config:
    """Get application configuration.

    Returns:
        Config instance with values from environment or defaults.
    """
    return Config()
