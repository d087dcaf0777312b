from __future__ import annotations

from typing import Optional

import pytest

from finbench.domain.models.results import (
    BilingualText,
    Comparison,
    EvaluationResult,
    NotApplicable,
    Tier,
    YearValue,
)
from finbench.domain.services.aggregation import AggregationEngine, majority_tier


def result(
    analysis_id: str,
    tier: Optional[Tier],
    difference: float = 0.0,
    *,
    category: str = "classical-ratio",
    direction: str = "higher-is-better",
    low_confidence: bool = False,
) -> EvaluationResult:
    return EvaluationResult(
        analysis_id=analysis_id,
        category=category,
        name=BilingualText(ar=analysis_id, en=analysis_id),
        direction=direction,
        series=(YearValue(2023, 1.0),),
        value=1.0,
        industry_average=None if tier is None else 1.0,
        percentile_difference=NotApplicable("benchmark:missing") if tier is None else difference,
        comparison=None if tier is None else Comparison.EQUAL,
        tier=tier,
        peer_rank=None,
        peer_total=None,
        recommendation=BilingualText(ar=f"ع {analysis_id}", en=f"fix {analysis_id}"),
        low_confidence=low_confidence,
    )


def test_majority_ties_resolve_to_lower_tier():
    assert majority_tier([Tier.EXCELLENT, Tier.WEAK]) is Tier.WEAK
    assert majority_tier([Tier.GOOD, Tier.GOOD, Tier.WEAK]) is Tier.GOOD
    assert majority_tier([]) is None


def test_strengths_ranked_by_tier_then_magnitude():
    engine = AggregationEngine(top_k=2)
    summary = engine.summarize_category(
        "classical-ratio",
        [
            result("a", Tier.VERY_GOOD, 20.0),
            result("b", Tier.EXCELLENT, 30.0),
            result("c", Tier.EXCELLENT, 60.0),
            result("d", Tier.GOOD, 0.0),
        ],
    )
    assert summary.strengths == ("c", "b")
    assert summary.weaknesses == ()
    assert summary.recommendations == ()


def test_weaknesses_worst_first_with_lower_is_better():
    engine = AggregationEngine()
    summary = engine.summarize_category(
        "classical-ratio",
        [
            result("debt", Tier.WEAK, 80.0, direction="lower-is-better"),
            result("margin", Tier.WEAK, -40.0),
            result("quick", Tier.ACCEPTABLE, -15.0),
        ],
    )
    assert summary.weaknesses == ("debt", "margin", "quick")
    assert [text.en for text in summary.recommendations] == ["fix debt", "fix margin", "fix quick"]
    assert summary.performance is Tier.WEAK
    assert summary.performance_label.ar == "ضعيف"


def test_equal_magnitudes_break_ties_by_id():
    summary = AggregationEngine().summarize_category(
        "structural", [result("z", Tier.EXCELLENT, 30.0), result("a", Tier.EXCELLENT, 30.0)]
    )
    assert summary.strengths == ("a", "z")


def test_results_without_tier_are_listed_but_not_ranked():
    summary = AggregationEngine().summarize_category("cash-flow", [result("x", None), result("y", Tier.GOOD)])
    assert summary.analysis_ids == ("x", "y")
    assert summary.performance is Tier.GOOD
    assert summary.strengths == summary.weaknesses == ()


def test_aggregate_follows_category_order_and_builds_executive_summary():
    engine = AggregationEngine(top_k=1)
    results = [
        result("flow.a", Tier.WEAK, -50.0, category="cash-flow"),
        result("ratio.a", Tier.EXCELLENT, 40.0, low_confidence=True),
        result("ratio.b", Tier.WEAK, -30.0),
        result("ratio.c", None),
    ]
    summaries, executive = engine.aggregate(results, ["classical-ratio", "structural", "cash-flow"])

    assert [summary.category for summary in summaries] == ["classical-ratio", "cash-flow"]
    assert executive.strengths == ("ratio.a",)
    assert executive.weaknesses == ("ratio.b", "flow.a")
    assert [text.en for text in executive.recommendations] == ["fix ratio.b", "fix flow.a"]
    assert executive.performance is Tier.WEAK
    assert executive.tier_counts == {
        "excellent": 1, "very-good": 0, "good": 0, "acceptable": 0, "weak": 2,
    }
    assert executive.low_confidence is True


def test_top_k_must_be_positive():
    with pytest.raises(ValueError):
        AggregationEngine(top_k=0)


def test_executive_summary_lists_table_risks_and_forecasts():
    results = [
        result("adv.risk.liquidity_gap", Tier.WEAK, -40.0, category="advanced"),
        result("adv.risk.cash_runway_months", Tier.GOOD, 0.0, category="advanced"),
        result("adv.stat.revenue_forecast_change", Tier.GOOD, 0.0, category="advanced"),
        result("adv.stat.revenue_trend", None, category="advanced"),
    ]
    _, executive = AggregationEngine().aggregate(results, ["advanced"])

    assert [row.index for row in executive.table] == [1, 2, 3, 4]
    assert executive.table[0].analysis_id == "adv.risk.liquidity_gap"
    assert executive.table[0].tier is Tier.WEAK
    assert executive.table[3].benchmark is None
    assert executive.risks == ("adv.risk.liquidity_gap",)
    assert executive.forecasts == {"adv.stat.revenue_forecast_change": 1.0}
