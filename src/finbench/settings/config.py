"""Application-wide configuration defaults and helpers."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from finbench.domain.services.evaluator import TierPolicy
from finbench.infrastructure.benchmarks import COMPARISON_LEVELS

# Relative output paths resolve against the working directory.
BASE_DIR = Path.cwd()


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    """Parse truthy environment values like '1' or 'true'."""
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: Optional[str], default: int) -> int:
    """Parse an integer env var, keeping the default on failure."""
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _to_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def _to_levels(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return COMPARISON_LEVELS
    levels = tuple(item.strip().lower() for item in value.split(",") if item.strip())
    return levels or COMPARISON_LEVELS


@dataclass
class Config:
    """Runtime configuration loaded from environment variables."""

    debug: bool = False
    max_workers: int = 8
    top_k: int = 3
    default_language: str = "ar"
    benchmark_file: Optional[Path] = None
    output_dir: Path = BASE_DIR / "reports"
    comparison_levels: Tuple[str, ...] = COMPARISON_LEVELS
    tiers: TierPolicy = field(default_factory=TierPolicy)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a configuration instance using environment overrides."""
        defaults = TierPolicy()
        benchmark_file = os.getenv("BENCHMARK_FILE")
        return cls(
            debug=_to_bool(os.getenv("APP_DEBUG")),
            max_workers=max(1, _to_int(os.getenv("ANALYSIS_MAX_WORKERS"), 8)),
            top_k=max(1, _to_int(os.getenv("ANALYSIS_TOP_K"), 3)),
            default_language=os.getenv("DEFAULT_LANGUAGE", "ar"),
            benchmark_file=Path(benchmark_file) if benchmark_file else None,
            output_dir=Path(os.getenv("OUTPUT_DIR", BASE_DIR / "reports")),
            comparison_levels=_to_levels(os.getenv("COMPARISON_LEVELS")),
            tiers=TierPolicy(
                excellent_min=_to_float(os.getenv("TIER_EXCELLENT_MIN"), defaults.excellent_min),
                very_good_min=_to_float(os.getenv("TIER_VERY_GOOD_MIN"), defaults.very_good_min),
                good_min=_to_float(os.getenv("TIER_GOOD_MIN"), defaults.good_min),
                acceptable_min=_to_float(os.getenv("TIER_ACCEPTABLE_MIN"), defaults.acceptable_min),
                equal_tolerance=_to_float(os.getenv("TIER_EQUAL_TOLERANCE"), defaults.equal_tolerance),
            ),
        )

    def tier_policy(self) -> TierPolicy:
        return self.tiers

    def ensure_directories(self) -> None:
        """Create directories needed for runtime artifacts."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
