"""Roll evaluation results up into category summaries and an executive summary."""
from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from finbench.domain.models.results import (
    BilingualText,
    CategorySummary,
    EvaluationResult,
    ExecutiveSummary,
    SummaryRow,
    Tier,
)

STRENGTH_TIERS = (Tier.EXCELLENT, Tier.VERY_GOOD)
WEAKNESS_TIERS = (Tier.ACCEPTABLE, Tier.WEAK)
RISK_PREFIX = "adv.risk."
FORECAST_PREFIX = "adv.stat."


def majority_tier(tiers: Iterable[Tier]) -> Optional[Tier]:
    """Most frequent tier; ties resolve to the lower (worse) tier."""
    counts = Counter(tiers)
    if not counts:
        return None
    return max(counts, key=lambda tier: (counts[tier], -tier.score))


def _favourable_key(result: EvaluationResult) -> Tuple[int, float]:
    """Sort key on tier first, then on the size of the favourable difference."""
    difference = result.percentile_difference
    magnitude = difference if isinstance(difference, float) else 0.0
    if result.direction == "lower-is-better":
        magnitude = -magnitude
    elif result.direction == "neutral":
        magnitude = -abs(magnitude)
    tier_score = result.tier.score if result.tier is not None else 0
    return tier_score, magnitude


def _dedupe(texts: Iterable[BilingualText]) -> Tuple[BilingualText, ...]:
    seen: List[BilingualText] = []
    for text in texts:
        if text not in seen:
            seen.append(text)
    return tuple(seen)


class AggregationEngine:
    """Build category summaries (catalog order) and the executive summary."""

    def __init__(self, top_k: int = 3) -> None:
        if top_k < 1:
            raise ValueError("top_k must be at least 1")
        self.top_k = top_k

    def summarize_category(self, category: str, results: Sequence[EvaluationResult]) -> CategorySummary:
        tiered = [item for item in results if item.tier is not None]
        performance = majority_tier(item.tier for item in tiered)  # type: ignore[misc]

        strengths = sorted(
            (item for item in tiered if item.tier in STRENGTH_TIERS),
            key=lambda item: (-_favourable_key(item)[0], -_favourable_key(item)[1], item.analysis_id),
        )[: self.top_k]
        weaknesses = sorted(
            (item for item in tiered if item.tier in WEAKNESS_TIERS),
            key=lambda item: (_favourable_key(item)[0], _favourable_key(item)[1], item.analysis_id),
        )[: self.top_k]

        return CategorySummary(
            category=category,
            analysis_ids=tuple(item.analysis_id for item in results),
            performance=performance,
            performance_label=None if performance is None else performance.label,
            strengths=tuple(item.analysis_id for item in strengths),
            weaknesses=tuple(item.analysis_id for item in weaknesses),
            recommendations=_dedupe(item.recommendation for item in weaknesses),
        )

    def aggregate(
        self,
        results: Sequence[EvaluationResult],
        category_order: Sequence[str],
    ) -> Tuple[Tuple[CategorySummary, ...], ExecutiveSummary]:
        grouped: Dict[str, List[EvaluationResult]] = {}
        for item in results:
            grouped.setdefault(item.category, []).append(item)

        summaries = tuple(
            self.summarize_category(category, grouped[category])
            for category in category_order
            if category in grouped
        )
        return summaries, self.executive_summary(results, summaries)

    def executive_summary(
        self,
        results: Sequence[EvaluationResult],
        summaries: Sequence[CategorySummary],
    ) -> ExecutiveSummary:
        """Risks are risk flags graded acceptable or weak; forecasts are trend-implied next-year changes."""
        strengths: List[str] = []
        for summary in summaries:
            strengths.extend(item for item in summary.strengths if item not in strengths)
        weaknesses: List[str] = []
        for summary in summaries:
            weaknesses.extend(
                item for item in summary.weaknesses if item not in strengths and item not in weaknesses
            )

        tiers = [item.tier for item in results if item.tier is not None]
        counts = Counter(tiers)
        performance = majority_tier(tiers)  # type: ignore[arg-type]
        return ExecutiveSummary(
            performance=performance,
            performance_label=None if performance is None else performance.label,
            strengths=tuple(strengths),
            weaknesses=tuple(weaknesses),
            recommendations=_dedupe(text for summary in summaries for text in summary.recommendations),
            tier_counts={tier.value: counts.get(tier, 0) for tier in Tier},
            low_confidence=any(item.low_confidence for item in results),
            table=tuple(
                SummaryRow(
                    index=position,
                    analysis_id=item.analysis_id,
                    name=item.name,
                    value=item.value,
                    benchmark=item.industry_average,
                    tier=item.tier,
                )
                for position, item in enumerate(results, start=1)
            ),
            risks=tuple(
                item.analysis_id
                for item in results
                if item.analysis_id.startswith(RISK_PREFIX) and item.tier in WEAKNESS_TIERS
            ),
            forecasts={
                item.analysis_id: item.value
                for item in results
                if item.analysis_id.startswith(FORECAST_PREFIX) and "forecast" in item.analysis_id
            },
        )
