"""LangGraph workflow assembly for an end-to-end analysis run."""
from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from langgraph.graph import END, StateGraph

from finbench.domain.catalog import AnalysisCatalog, get_catalog
from finbench.domain.errors import RunCancelled
from finbench.domain.models.financials import FinancialStatement, RunOptions
from finbench.domain.models.results import AnalysisReport
from finbench.domain.services.aggregation import AggregationEngine
from finbench.domain.services.computer import RatioComputer
from finbench.domain.services.evaluator import ComparativeEvaluator
from finbench.infrastructure.benchmarks import (
    BenchmarkResolver,
    StaticBenchmarkSource,
    default_benchmark_table,
)
from finbench.settings.config import Config
from finbench.workflows import context as context_module
from finbench.workflows.blueprint import StageSpec, build_default_stages
from finbench.workflows.state import RunState, RunStatus


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _route(state: RunState) -> str:
    if state.get("status") == RunStatus.FAILED.value or state.get("cancelled"):
        return "stop"
    return "continue"


class AnalysisWorkflow:
    """Compose the run stages into a LangGraph state machine.

    validating -> resolving -> computing -> aggregating -> completed, with
    ``failed`` reachable from the first two stages only.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        catalog: Optional[AnalysisCatalog] = None,
        resolver: Optional[BenchmarkResolver] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._config = config or Config()
        self._context = self._build_context(catalog, resolver, clock)
        self._stages: List[StageSpec] = build_default_stages()
        self._graph = self._build_graph()

    @property
    def context(self) -> context_module.WorkflowContext:
        return self._context

    def _build_context(
        self,
        catalog: Optional[AnalysisCatalog],
        resolver: Optional[BenchmarkResolver],
        clock: Optional[Callable[[], datetime]],
    ) -> context_module.WorkflowContext:
        catalog = catalog or get_catalog()
        if resolver is None:
            source = (
                StaticBenchmarkSource.from_json(self._config.benchmark_file)
                if self._config.benchmark_file
                else StaticBenchmarkSource()
            )
            resolver = BenchmarkResolver(
                source,
                default_benchmark_table(catalog),
                levels=self._config.comparison_levels,
            )
        return context_module.WorkflowContext(
            config=self._config,
            catalog=catalog,
            resolver=resolver,
            computer=RatioComputer(),
            evaluator=ComparativeEvaluator(self._config.tier_policy()),
            aggregator=AggregationEngine(top_k=self._config.top_k),
            clock=clock or _utc_now,
        )

    def _build_graph(self):
        builder = StateGraph(RunState)

        if not self._stages:
            raise RuntimeError("Workflow blueprint is empty; cannot build LangGraph.")

        for stage in self._stages:
            builder.add_node(stage.key, self._wrap(stage.handler))

        builder.set_entry_point(self._stages[0].key)
        for current, nxt in zip(self._stages, self._stages[1:]):
            builder.add_conditional_edges(current.key, _route, {"continue": nxt.key, "stop": END})
        builder.add_edge(self._stages[-1].key, END)

        return builder.compile(checkpointer=None)

    def _wrap(self, func: Callable[[RunState, context_module.WorkflowContext], RunState]):
        def wrapper(state: Dict[str, Any]) -> Dict[str, Any]:
            return func(state, self._context)  # type: ignore[arg-type,return-value]

        return wrapper

    def execute(
        self,
        statements: Sequence[FinancialStatement],
        options: RunOptions,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> RunState:
        """Run the graph and return the final state without raising on failure."""
        initial_state: RunState = {
            "statements": tuple(statements),
            "options": options,
            "run_at": self._context.clock().isoformat(),
            "status": RunStatus.VALIDATING.value,
            "failure": None,
            "cancel_event": cancel_event,
            "cancelled": False,
            "report": None,
            "stage_order": [stage.key for stage in self._stages],
            "logs": [],
            "errors": [],
        }
        result: RunState = self._graph.invoke(initial_state)  # type: ignore[assignment]
        return result

    @staticmethod
    def unwrap(state: RunState) -> AnalysisReport:
        """Return the report of a finished state, re-raising a fatal failure or cancellation."""
        failure = state.get("failure")
        if failure is not None:
            raise failure
        if state.get("cancelled"):
            raise RunCancelled("Run cancelled; partial results were discarded")
        report = state.get("report")
        if report is None:
            raise RuntimeError(f"Run stopped in status {state.get('status')!r} without a report")
        return report

    def run(
        self,
        statements: Sequence[FinancialStatement],
        options: RunOptions,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> AnalysisReport:
        """Execute one analysis run; StructuralError and RunCancelled escape, nothing else does."""
        return self.unwrap(self.execute(statements, options, cancel_event=cancel_event))

    def persist_report(self, report: AnalysisReport, path: Path) -> None:
        """Write the report as UTF-8 JSON."""
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
        path.write_text(payload, encoding="utf-8")

    def describe_stages(self) -> List[str]:
        """Return human-readable workflow stage descriptions."""
        return [f"{stage.key}: {stage.description}" for stage in self._stages]
