from __future__ import annotations

import json
import threading
import time

import pytest

from conftest import fixed_clock, make_statements
from finbench.domain.catalog import AnalysisCatalog, get_catalog
from finbench.domain.errors import RunCancelled, StructuralError, UnknownAnalysis
from finbench.domain.models.financials import FinancialStatement, RunOptions
from finbench.domain.models.results import (
    AnalysisError,
    Comparison,
    EvaluationResult,
    NotApplicable,
    SkippedAnalysis,
    Tier,
)
from finbench.infrastructure.benchmarks import (
    BenchmarkResolver,
    StaticBenchmarkSource,
    default_benchmark_table,
)
from finbench.settings.config import Config
from finbench.workflows.graph import AnalysisWorkflow
from finbench.workflows.state import RunStatus


def workflow_with(entries=None, *, catalog=None, max_workers=4) -> AnalysisWorkflow:
    catalog = catalog or get_catalog()
    source = StaticBenchmarkSource()
    if entries:
        source.add("retail", None, "local", entries)
    resolver = BenchmarkResolver(source, default_benchmark_table(catalog))
    return AnalysisWorkflow(Config(max_workers=max_workers), catalog=catalog, resolver=resolver, clock=fixed_clock)


OPTIONS = RunOptions(sector="retail")


def test_full_run_accounts_for_every_analysis(statements):
    report = workflow_with().run(statements, OPTIONS)
    meta = report.metadata

    assert meta.attempted == 181
    assert len(report.results) == 181
    assert meta.succeeded + meta.skipped + meta.failed == meta.attempted
    assert meta.failed == 0
    assert [item.analysis_id for item in report.results] == [
        item.id for item in get_catalog().list_definitions()
    ]
    assert meta.company == "ACME"
    assert meta.years == (2021, 2022, 2023)
    assert meta.run_at == "2024-03-31T12:00:00+00:00"
    assert meta.benchmark_source == "default"
    assert meta.low_confidence is True
    assert [summary.category for summary in report.categories] == [
        "classical-ratio", "structural", "cash-flow", "advanced",
    ]
    assert sum(report.executive_summary.tier_counts.values()) == meta.succeeded


def test_current_ratio_against_exact_benchmark(statements):
    report = workflow_with({"ratio.current": {"average": 1.4}}).run(statements, OPTIONS)
    result = report.get("ratio.current")

    assert isinstance(result, EvaluationResult)
    assert result.value == pytest.approx(1.75)
    assert result.percentile_difference == 25.0
    assert result.comparison is Comparison.HIGHER
    assert result.tier is Tier.EXCELLENT
    assert result.low_confidence is False
    assert report.metadata.benchmark_source == "exact"


def test_missing_input_is_skipped_not_failed():
    report = workflow_with().run(make_statements(drop=("inventory",)), OPTIONS)
    skipped = report.get("ratio.quick")
    assert isinstance(skipped, SkippedAnalysis)
    assert skipped.reason == "missing:inventory"
    assert report.metadata.failed == 0


def test_zero_benchmark_average_keeps_the_result(statements):
    report = workflow_with({"ratio.current": {"average": 0.0}}).run(statements, OPTIONS)
    result = report.get("ratio.current")
    assert isinstance(result, EvaluationResult)
    assert result.percentile_difference == NotApplicable("benchmark:zero")
    assert result.tier is None


def test_raising_analysis_is_isolated(statements):
    def boom(view):
        raise RuntimeError("formula exploded")

    definitions = list(get_catalog().list_definitions())
    definitions[5] = definitions[5].replace(formula=boom)
    workflow = workflow_with(catalog=AnalysisCatalog(definitions))

    report = workflow.run(statements, OPTIONS)
    failed = report.get(definitions[5].id)

    assert report.metadata.failed == 1
    assert isinstance(failed, AnalysisError)
    assert failed.kind == "ComputationError"
    assert "formula exploded" in failed.message
    others = [item for item in report.results if item.analysis_id != definitions[5].id]
    assert len(others) == 180
    assert not any(isinstance(item, AnalysisError) for item in others)


def test_reports_are_deterministic_across_pool_sizes(statements):
    first = workflow_with(max_workers=1).run(statements, OPTIONS)
    second = workflow_with(max_workers=8).run(statements, OPTIONS)
    assert json.dumps(first.to_dict(), sort_keys=True) == json.dumps(second.to_dict(), sort_keys=True)


def test_empty_input_fails_the_run():
    workflow = workflow_with()
    state = workflow.execute([], OPTIONS)
    assert state["status"] == RunStatus.FAILED.value
    assert state.get("report") is None
    with pytest.raises(StructuralError):
        workflow.run([], OPTIONS)


def test_blank_sector_fails_the_run(statements):
    with pytest.raises(StructuralError):
        workflow_with().run(statements, RunOptions(sector=" "))


def test_unknown_selection_fails_the_run(statements):
    with pytest.raises(UnknownAnalysis):
        workflow_with().run(statements, RunOptions(sector="retail", analysis_selection=["ratio.nope"]))


def test_selection_and_years_narrow_the_run():
    options = RunOptions(sector="retail", years_count=2, analysis_selection=["ratio.quick", "ratio.current"])
    report = workflow_with().run(make_statements(years=(2020, 2021, 2022, 2023)), options)
    assert [item.analysis_id for item in report.results] == ["ratio.current", "ratio.quick"]
    assert report.metadata.years == (2022, 2023)
    assert report.metadata.attempted == 2


def test_cancelled_run_raises(statements):
    event = threading.Event()
    event.set()
    workflow = workflow_with()
    state = workflow.execute(statements, OPTIONS, cancel_event=event)
    assert state["cancelled"] is True
    assert state.get("report") is None
    with pytest.raises(RunCancelled):
        workflow.run(statements, OPTIONS, cancel_event=event)


def test_report_serializes_with_outcome_tags(tmp_path):
    report = workflow_with().run(make_statements(drop=("inventory",)), OPTIONS)
    payload = report.to_dict()
    tags = {item["analysis_id"]: item["outcome"] for item in payload["results"]}
    assert tags["ratio.current"] == "evaluated"
    assert tags["ratio.quick"] == "skipped"

    points = report.chart_points()
    assert points["ratio.current"] == {"value": pytest.approx(1.75), "benchmark": 1.5}
    assert "ratio.quick" not in points

    path = tmp_path / "out" / "report.json"
    workflow_with().persist_report(report, path)
    assert json.loads(path.read_text(encoding="utf-8"))["metadata"]["attempted"] == 181


def test_empty_middle_year_is_kept():
    statements = [
        FinancialStatement(item.company, item.fiscal_year, item.statement_type, {})
        if item.fiscal_year == 2022
        else item
        for item in make_statements()
    ]
    report = workflow_with().run(statements, OPTIONS)
    assert report.metadata.years == (2021, 2022, 2023)
    assert report.get("struct.horizontal.revenue") == SkippedAnalysis(
        "struct.horizontal.revenue", "structural", "missing:revenue"
    )


def test_statements_without_line_items_skip_every_analysis():
    report = workflow_with().run([FinancialStatement("ACME", 2023, "balance_sheet", {})], OPTIONS)
    assert report.metadata.years == (2023,)
    assert report.metadata.attempted == report.metadata.skipped == 181
    assert report.metadata.succeeded == 0
    assert report.executive_summary.performance is None


def test_cancel_during_computation_discards_the_run(statements):
    event = threading.Event()

    def cancel_midway(view):
        event.set()
        time.sleep(0.2)
        return 1.0

    definitions = list(get_catalog().list_definitions())
    definitions[0] = definitions[0].replace(formula=cancel_midway)
    workflow = workflow_with(catalog=AnalysisCatalog(definitions), max_workers=1)

    state = workflow.execute(statements, OPTIONS, cancel_event=event)
    assert state["cancelled"] is True
    assert state.get("report") is None
    assert state["status"] != RunStatus.COMPLETED.value
    with pytest.raises(RunCancelled):
        workflow.unwrap(state)
