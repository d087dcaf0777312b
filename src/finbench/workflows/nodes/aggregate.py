"""LangGraph node building summaries and the final report."""
from __future__ import annotations

from finbench.domain.models.results import (
    AnalysisError,
    AnalysisReport,
    EvaluationResult,
    RunMetadata,
    SkippedAnalysis,
)
from finbench.workflows.context import WorkflowContext
from finbench.workflows.state import RunState, RunStatus


def run(state: RunState, context: WorkflowContext) -> RunState:
    logs = state.setdefault("logs", [])
    state["status"] = RunStatus.AGGREGATING.value
    options = state["options"]
    outcomes = state.get("outcomes") or []
    benchmarks = state["benchmarks"]

    evaluations = [item for item in outcomes if isinstance(item, EvaluationResult)]
    logs.append(f"Aggregator -> summarize {len(evaluations)} evaluated analyses")
    categories, executive = context.aggregator.aggregate(
        evaluations, [category.value for category in context.catalog.categories()]
    )

    metadata = RunMetadata(
        company=state["statements"][0].company,
        run_at=state["run_at"],
        language=options.language,
        sector=options.sector,
        legal_entity=options.legal_entity,
        comparison_level=options.comparison_level,
        benchmark_source=benchmarks.source,
        low_confidence=benchmarks.low_confidence or executive.low_confidence,
        years=state["window"].years,
        attempted=len(state["definitions"]),
        succeeded=len(evaluations),
        skipped=sum(1 for item in outcomes if isinstance(item, SkippedAnalysis)),
        failed=sum(1 for item in outcomes if isinstance(item, AnalysisError)),
    )
    state["report"] = AnalysisReport(
        metadata=metadata,
        executive_summary=executive,
        categories=categories,
        results=tuple(outcomes),
    )
    state["status"] = RunStatus.COMPLETED.value
    return state
