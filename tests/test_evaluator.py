from __future__ import annotations

import pytest

from finbench.domain.catalog import get_catalog
from finbench.domain.models.results import (
    BenchmarkEntry,
    BenchmarkSet,
    Comparison,
    NotApplicable,
    Numeric,
    Tier,
    YearValue,
)
from finbench.domain.services.evaluator import ComparativeEvaluator, TierPolicy, peer_rank
from finbench.domain.catalog.definitions import Direction

evaluator = ComparativeEvaluator()


def numeric(value: float) -> Numeric:
    return Numeric(points=(YearValue(2023, value),))


def benchmarks(entries=None, fallback=None, low_confidence=False) -> BenchmarkSet:
    return BenchmarkSet(
        sector="retail",
        legal_entity=None,
        comparison_level="local",
        source="exact",
        entries=entries or {},
        fallback_entries=fallback or {},
        low_confidence=low_confidence,
    )


def test_current_ratio_above_average_is_excellent():
    definition = get_catalog().get("ratio.current")
    result = evaluator.evaluate(definition, numeric(1.5), benchmarks({"ratio.current": BenchmarkEntry(1.2)}))
    assert result.percentile_difference == 25.0
    assert result.comparison is Comparison.HIGHER
    assert result.tier is Tier.EXCELLENT
    assert result.industry_average == 1.2
    assert result.low_confidence is False
    assert "Current ratio" in result.recommendation.en
    assert "نسبة التداول" in result.recommendation.ar


def test_zero_average_has_no_tier():
    definition = get_catalog().get("ratio.current")
    result = evaluator.evaluate(definition, numeric(1.5), benchmarks({"ratio.current": BenchmarkEntry(0.0)}))
    assert result.percentile_difference == NotApplicable("benchmark:zero")
    assert result.tier is None
    assert result.comparison is Comparison.HIGHER


def test_missing_benchmark_is_reported():
    definition = get_catalog().get("ratio.current")
    result = evaluator.evaluate(definition, numeric(1.5), benchmarks())
    assert result.percentile_difference == NotApplicable("benchmark:missing")
    assert result.tier is None
    assert result.industry_average is None
    assert "No usable industry benchmark" in result.recommendation.en


def test_fallback_entry_is_low_confidence():
    definition = get_catalog().get("ratio.current")
    result = evaluator.evaluate(definition, numeric(1.5), benchmarks(fallback={"ratio.current": BenchmarkEntry(1.5)}))
    assert result.low_confidence is True
    assert result.comparison is Comparison.EQUAL
    assert result.tier is Tier.GOOD


def test_lower_is_better_inverts_the_scale():
    definition = get_catalog().get("ratio.debt_to_assets")
    entry = {"ratio.debt_to_assets": BenchmarkEntry(0.5)}
    low = evaluator.evaluate(definition, numeric(0.4), benchmarks(entry))
    high = evaluator.evaluate(definition, numeric(0.7), benchmarks(entry))
    assert low.percentile_difference == -20.0
    assert low.comparison is Comparison.LOWER
    assert low.tier is Tier.VERY_GOOD
    assert high.tier is Tier.WEAK


def test_neutral_penalizes_distance_both_ways():
    definition = get_catalog().get("ratio.price_to_earnings")
    entry = {"ratio.price_to_earnings": BenchmarkEntry(15.0)}
    above = evaluator.evaluate(definition, numeric(19.5), benchmarks(entry))
    below = evaluator.evaluate(definition, numeric(10.5), benchmarks(entry))
    assert above.tier is below.tier is Tier.WEAK


def test_small_differences_compare_equal():
    definition = get_catalog().get("ratio.current")
    result = evaluator.evaluate(definition, numeric(1.005), benchmarks({"ratio.current": BenchmarkEntry(1.0)}))
    assert result.comparison is Comparison.EQUAL


def test_tiers_are_monotonic_in_the_value():
    definition = get_catalog().get("ratio.current")
    entry = {"ratio.current": BenchmarkEntry(1.0)}
    scores = [
        evaluator.evaluate(definition, numeric(value / 100.0), benchmarks(entry)).tier.score
        for value in range(50, 160, 5)
    ]
    assert scores == sorted(scores)
    assert scores[0] == Tier.WEAK.score
    assert scores[-1] == Tier.EXCELLENT.score


@pytest.mark.parametrize(
    "difference,tier",
    [(25.0, Tier.EXCELLENT), (24.9, Tier.VERY_GOOD), (10.0, Tier.VERY_GOOD), (0.0, Tier.GOOD),
     (-10.0, Tier.GOOD), (-10.1, Tier.ACCEPTABLE), (-25.0, Tier.ACCEPTABLE), (-25.1, Tier.WEAK)],
)
def test_default_tier_bands(difference, tier):
    assert TierPolicy().tier_for(difference) is tier


def test_custom_policy_changes_bands():
    strict = ComparativeEvaluator(TierPolicy(excellent_min=40.0, very_good_min=20.0))
    definition = get_catalog().get("ratio.current")
    result = strict.evaluate(definition, numeric(1.5), benchmarks({"ratio.current": BenchmarkEntry(1.2)}))
    assert result.tier is Tier.VERY_GOOD


def test_policy_bounds_must_decrease():
    with pytest.raises(ValueError):
        TierPolicy(excellent_min=5.0, very_good_min=10.0)


def test_peer_rank_from_distribution():
    entry = BenchmarkEntry(average=1.45, distribution=(1.0, 1.2, 1.6, 2.0))
    assert peer_rank(1.5, entry, Direction.HIGHER_IS_BETTER) == (3, 5)
    assert peer_rank(1.5, entry, Direction.LOWER_IS_BETTER) == (3, 5)
    assert peer_rank(2.5, entry, Direction.HIGHER_IS_BETTER) == (1, 5)


def test_peer_rank_from_percentile_table():
    entry = BenchmarkEntry(average=1.2, peer_count=20, percentiles={25: 1.0, 50: 1.2, 75: 1.4})
    assert peer_rank(1.2, entry, Direction.HIGHER_IS_BETTER) == (11, 21)


def test_peer_rank_absent_without_peer_data():
    assert peer_rank(1.2, BenchmarkEntry(average=1.0), Direction.HIGHER_IS_BETTER) == (None, None)


def test_lower_is_better_tiers_fall_as_the_value_rises():
    definition = get_catalog().get("ratio.debt_to_assets")
    entry = {"ratio.debt_to_assets": BenchmarkEntry(0.5)}
    scores = [
        evaluator.evaluate(definition, numeric(value / 100.0), benchmarks(entry)).tier.score
        for value in range(25, 80, 5)
    ]
    assert scores == sorted(scores, reverse=True)
    assert scores[0] == Tier.EXCELLENT.score
    assert scores[-1] == Tier.WEAK.score


def test_peer_rank_outside_the_percentile_table():
    entry = BenchmarkEntry(average=1.2, peer_count=20, percentiles={25: 1.0, 50: 1.2, 75: 1.4})
    assert peer_rank(0.2, entry, Direction.HIGHER_IS_BETTER) == (21, 21)
    assert peer_rank(1.0, entry, Direction.HIGHER_IS_BETTER) == (16, 21)
    assert peer_rank(3.0, entry, Direction.HIGHER_IS_BETTER) == (1, 21)
    assert peer_rank(0.2, entry, Direction.LOWER_IS_BETTER) == (1, 21)
