"""Compare computed values to industry benchmarks and derive evaluation tiers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from finbench.domain.catalog.definitions import AnalysisDefinition, Direction
from finbench.domain.models.results import (
    BenchmarkEntry,
    BenchmarkSet,
    Comparison,
    EvaluationResult,
    NotApplicable,
    Numeric,
    Tier,
)
from finbench.domain.services.recommendations import recommend

BENCHMARK_ZERO = "benchmark:zero"
BENCHMARK_MISSING = "benchmark:missing"


@dataclass(frozen=True)
class TierPolicy:
    """Lower bounds (in percent) of each tier on the favourable difference scale."""

    excellent_min: float = 25.0
    very_good_min: float = 10.0
    good_min: float = -10.0
    acceptable_min: float = -25.0
    equal_tolerance: float = 1.0

    def __post_init__(self) -> None:
        bounds = (self.excellent_min, self.very_good_min, self.good_min, self.acceptable_min)
        if any(upper <= lower for upper, lower in zip(bounds, bounds[1:])):
            raise ValueError(f"Tier bounds must be strictly decreasing, got {bounds}")
        if self.equal_tolerance < 0:
            raise ValueError("equal_tolerance cannot be negative")

    def tier_for(self, favourable_difference: float) -> Tier:
        if favourable_difference >= self.excellent_min:
            return Tier.EXCELLENT
        if favourable_difference >= self.very_good_min:
            return Tier.VERY_GOOD
        if favourable_difference >= self.good_min:
            return Tier.GOOD
        if favourable_difference >= self.acceptable_min:
            return Tier.ACCEPTABLE
        return Tier.WEAK


def percentile_difference(value: float, average: float) -> Union[float, NotApplicable]:
    """Signed distance from the average, in percent of its magnitude, rounded to 4 decimals."""
    if average == 0:
        return NotApplicable(BENCHMARK_ZERO)
    return round((value - average) / abs(average) * 100.0, 4)


def favourable(difference: float, direction: Direction) -> float:
    """Map a raw difference onto a scale where larger is always better."""
    if direction is Direction.LOWER_IS_BETTER:
        return -difference
    if direction is Direction.NEUTRAL:
        return -abs(difference)
    return difference


class ComparativeEvaluator:
    """Score a computed analysis against its benchmark entry."""

    def __init__(self, policy: Optional[TierPolicy] = None) -> None:
        self.policy = policy or TierPolicy()

    def evaluate(
        self,
        definition: AnalysisDefinition,
        computed: Numeric,
        benchmarks: BenchmarkSet,
    ) -> EvaluationResult:
        value = computed.latest
        entry, low_confidence = benchmarks.lookup(definition.id)

        difference: Union[float, NotApplicable]
        comparison: Optional[Comparison] = None
        tier: Optional[Tier] = None
        if entry is None:
            difference = NotApplicable(BENCHMARK_MISSING)
        else:
            difference = percentile_difference(value, entry.average)
            if isinstance(difference, NotApplicable):
                comparison = _sign(value)
            else:
                comparison = self._compare(difference)
                tier = self.policy.tier_for(favourable(difference, definition.direction))

        rank, total = (None, None) if entry is None else peer_rank(value, entry, definition.direction)
        return EvaluationResult(
            analysis_id=definition.id,
            category=definition.category.value,
            name=definition.name,
            direction=definition.direction.value,
            series=computed.points,
            value=value,
            industry_average=None if entry is None else entry.average,
            percentile_difference=difference,
            comparison=comparison,
            tier=tier,
            peer_rank=rank,
            peer_total=total,
            recommendation=recommend(definition.category, tier, definition.name),
            low_confidence=low_confidence,
        )

    def _compare(self, difference: float) -> Comparison:
        if abs(difference) <= self.policy.equal_tolerance:
            return Comparison.EQUAL
        return Comparison.HIGHER if difference > 0 else Comparison.LOWER


def _sign(value: float) -> Comparison:
    if value > 0:
        return Comparison.HIGHER
    if value < 0:
        return Comparison.LOWER
    return Comparison.EQUAL


def peer_rank(
    value: float, entry: BenchmarkEntry, direction: Direction
) -> Tuple[Optional[int], Optional[int]]:
    """Rank among peers plus the company itself: ``1 + peers strictly better``.

    Exact when the entry carries raw peer values; interpolated from the
    percentile table otherwise. ``(None, None)`` when neither is available.
    Outside the table a value sits at the 0th or 100th percentile.
    """
    if entry.distribution:
        peers = [float(item) for item in entry.distribution]
        if direction is Direction.LOWER_IS_BETTER:
            better = sum(1 for peer in peers if peer < value)
        elif direction is Direction.NEUTRAL:
            distance = abs(value - entry.average)
            better = sum(1 for peer in peers if abs(peer - entry.average) < distance)
        else:
            better = sum(1 for peer in peers if peer > value)
        return 1 + better, len(peers) + 1

    if entry.percentiles and entry.peer_count > 0 and direction is not Direction.NEUTRAL:
        pairs = sorted((float(level_value), float(level)) for level, level_value in entry.percentiles.items())
        values = [pair[0] for pair in pairs]
        if value < values[0]:
            share_below = 0.0
        elif value > values[-1]:
            share_below = 1.0
        else:
            share_below = float(np.interp(value, values, [pair[1] / 100.0 for pair in pairs]))
        share_better = 1.0 - share_below if direction is Direction.HIGHER_IS_BETTER else share_below
        better = int(round(share_better * entry.peer_count))
        return 1 + better, entry.peer_count + 1
    return None, None
