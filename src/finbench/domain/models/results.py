"""Result types produced by a run: computed values, evaluations, summaries and the report."""
from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class BilingualText:
    """Arabic/English text pair."""

    ar: str
    en: str

    def get(self, language: str) -> str:
        return self.en if language == "en" else self.ar


class Tier(str, Enum):
    """Evaluation tiers, best first."""

    EXCELLENT = "excellent"
    VERY_GOOD = "very-good"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    WEAK = "weak"

    @property
    def score(self) -> int:
        """5 for excellent down to 1 for weak."""
        return _TIER_SCORES[self]

    @property
    def label(self) -> BilingualText:
        return _TIER_LABELS[self]


_TIER_SCORES = {
    Tier.EXCELLENT: 5,
    Tier.VERY_GOOD: 4,
    Tier.GOOD: 3,
    Tier.ACCEPTABLE: 2,
    Tier.WEAK: 1,
}

_TIER_LABELS = {
    Tier.EXCELLENT: BilingualText(ar="ممتاز", en="Excellent"),
    Tier.VERY_GOOD: BilingualText(ar="جيد جدا", en="Very good"),
    Tier.GOOD: BilingualText(ar="جيد", en="Good"),
    Tier.ACCEPTABLE: BilingualText(ar="مقبول", en="Acceptable"),
    Tier.WEAK: BilingualText(ar="ضعيف", en="Weak"),
}


class Comparison(str, Enum):
    HIGHER = "higher"
    EQUAL = "equal"
    LOWER = "lower"

    @property
    def label(self) -> BilingualText:
        return _COMPARISON_LABELS[self]


_COMPARISON_LABELS = {
    Comparison.HIGHER: BilingualText(ar="أعلى", en="Higher"),
    Comparison.EQUAL: BilingualText(ar="مساوي", en="Equal"),
    Comparison.LOWER: BilingualText(ar="أقل", en="Lower"),
}


@dataclass(frozen=True)
class YearValue:
    fiscal_year: int
    value: float


@dataclass(frozen=True)
class Numeric:
    """A successfully computed series, oldest year first."""

    points: Tuple[YearValue, ...]

    @property
    def latest(self) -> float:
        return self.points[-1].value


@dataclass(frozen=True)
class NotApplicable:
    """Why a value could not be produced, e.g. ``missing:inventory``."""

    reason: str


ComputationResult = Union[Numeric, NotApplicable]


@dataclass(frozen=True)
class ComputedAnalysis:
    analysis_id: str
    result: ComputationResult


@dataclass(frozen=True)
class BenchmarkEntry:
    """Industry reference for one analysis.

    ``distribution`` holds raw peer values; ``percentiles`` maps a percentile
    (0..100) to a value. Either may be empty.
    """

    average: float
    peer_count: int = 0
    distribution: Tuple[float, ...] = ()
    percentiles: Mapping[int, float] = field(default_factory=dict)


@dataclass(frozen=True)
class BenchmarkSet:
    """Resolved industry references for one run; read-only once built.

    ``source`` names the resolution strategy that produced ``entries``.
    Analyses absent from ``entries`` fall back to ``fallback_entries`` and are
    always treated as low confidence.
    """

    sector: str
    legal_entity: Optional[str]
    comparison_level: str
    source: str
    entries: Mapping[str, BenchmarkEntry]
    fallback_entries: Mapping[str, BenchmarkEntry] = field(default_factory=dict)
    low_confidence: bool = False

    def lookup(self, analysis_id: str) -> Tuple[Optional[BenchmarkEntry], bool]:
        if analysis_id in self.entries:
            return self.entries[analysis_id], self.low_confidence
        return self.fallback_entries.get(analysis_id), True


@dataclass(frozen=True)
class EvaluationResult:
    analysis_id: str
    category: str
    name: BilingualText
    direction: str
    series: Tuple[YearValue, ...]
    value: float
    industry_average: Optional[float]
    percentile_difference: Union[float, NotApplicable]
    comparison: Optional[Comparison]
    tier: Optional[Tier]
    peer_rank: Optional[int]
    peer_total: Optional[int]
    recommendation: BilingualText
    low_confidence: bool = False


@dataclass(frozen=True)
class SkippedAnalysis:
    analysis_id: str
    category: str
    reason: str


@dataclass(frozen=True)
class AnalysisError:
    """An analysis whose computation raised; the run carried on without it."""

    analysis_id: str
    kind: str
    message: str


Outcome = Union[EvaluationResult, SkippedAnalysis, AnalysisError]


@dataclass(frozen=True)
class CategorySummary:
    category: str
    analysis_ids: Tuple[str, ...]
    performance: Optional[Tier]
    performance_label: Optional[BilingualText]
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]
    recommendations: Tuple[BilingualText, ...]


@dataclass(frozen=True)
class SummaryRow:
    """One line of the executive summary table."""

    index: int
    analysis_id: str
    name: BilingualText
    value: float
    benchmark: Optional[float]
    tier: Optional[Tier]


@dataclass(frozen=True)
class ExecutiveSummary:
    performance: Optional[Tier]
    performance_label: Optional[BilingualText]
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]
    recommendations: Tuple[BilingualText, ...]
    tier_counts: Mapping[str, int]
    low_confidence: bool = False
    table: Tuple[SummaryRow, ...] = ()
    risks: Tuple[str, ...] = ()
    forecasts: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class RunMetadata:
    company: str
    run_at: str
    language: str
    sector: str
    legal_entity: Optional[str]
    comparison_level: str
    benchmark_source: str
    low_confidence: bool
    years: Tuple[int, ...]
    attempted: int
    succeeded: int
    skipped: int
    failed: int


@dataclass(frozen=True)
class AnalysisReport:
    """Final output of a run. Results follow catalog order."""

    metadata: RunMetadata
    executive_summary: ExecutiveSummary
    categories: Tuple[CategorySummary, ...]
    results: Tuple[Outcome, ...]

    def get(self, analysis_id: str) -> Optional[Outcome]:
        for outcome in self.results:
            if outcome.analysis_id == analysis_id:
                return outcome
        return None

    @property
    def evaluations(self) -> Tuple[EvaluationResult, ...]:
        return tuple(item for item in self.results if isinstance(item, EvaluationResult))

    @property
    def skipped(self) -> Tuple[SkippedAnalysis, ...]:
        return tuple(item for item in self.results if isinstance(item, SkippedAnalysis))

    @property
    def failures(self) -> Tuple[AnalysisError, ...]:
        return tuple(item for item in self.results if isinstance(item, AnalysisError))

    def chart_points(self) -> Dict[str, Dict[str, Optional[float]]]:
        """Value vs. industry average per evaluated analysis, for chart renderers."""
        return {
            item.analysis_id: {"value": item.value, "benchmark": item.industry_average}
            for item in self.evaluations
        }

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation; each outcome carries an ``outcome`` tag."""
        payload = _plain(self)
        for raw, outcome in zip(payload["results"], self.results):
            raw["outcome"] = _OUTCOME_TAGS[type(outcome)]
        return payload


_OUTCOME_TAGS = {
    EvaluationResult: "evaluated",
    SkippedAnalysis: "skipped",
    AnalysisError: "failed",
}


def _plain(value: Any) -> Any:
    if isinstance(value, NotApplicable):
        return {"not_applicable": value.reason}
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
