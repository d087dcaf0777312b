"""LangGraph node fanning the selected analyses out over a bounded worker pool."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Tuple

from finbench.domain.catalog import AnalysisDefinition
from finbench.domain.models.results import (
    AnalysisError,
    BenchmarkSet,
    NotApplicable,
    Outcome,
    SkippedAnalysis,
)
from finbench.domain.window import StatementWindow
from finbench.workflows.context import WorkflowContext
from finbench.workflows.state import RunState, RunStatus

logger = logging.getLogger(__name__)

COMPUTATION_ERROR = "ComputationError"


def analyze(
    definition: AnalysisDefinition,
    window: StatementWindow,
    benchmarks: BenchmarkSet,
    context: WorkflowContext,
) -> Outcome:
    """Compute then evaluate one analysis; skipped analyses never reach the evaluator."""
    computed = context.computer.compute(definition, window)
    if isinstance(computed.result, NotApplicable):
        return SkippedAnalysis(
            analysis_id=definition.id,
            category=definition.category.value,
            reason=computed.result.reason,
        )
    return context.evaluator.evaluate(definition, computed.result, benchmarks)


def run(state: RunState, context: WorkflowContext) -> RunState:
    logs = state.setdefault("logs", [])
    errors = state.setdefault("errors", [])
    state["status"] = RunStatus.COMPUTING.value
    definitions = state["definitions"]
    window = state["window"]
    benchmarks = state["benchmarks"]
    cancel_event = state.get("cancel_event")

    workers = context.config.max_workers
    logs.append(f"Computer -> {len(definitions)} analyses on up to {workers} workers")

    submitted: List[Tuple[AnalysisDefinition, Future]] = []
    outcomes: List[Outcome] = []
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="finbench") as pool:
        for definition in definitions:
            if cancel_event is not None and cancel_event.is_set():
                state["cancelled"] = True
                break
            submitted.append((definition, pool.submit(analyze, definition, window, benchmarks, context)))

        # Join in submission order so the report never depends on completion order.
        for definition, future in submitted:
            try:
                outcomes.append(future.result())
            except Exception as exc:  # pylint: disable=broad-except
                logger.exception("Analysis %s raised", definition.id)
                errors.append(f"{definition.id} failed: {exc}")
                outcomes.append(
                    AnalysisError(
                        analysis_id=definition.id,
                        kind=COMPUTATION_ERROR,
                        message=f"{type(exc).__name__}: {exc}",
                    )
                )

    # A cancel that lands while submitted analyses are running still discards the run.
    if cancel_event is not None and cancel_event.is_set():
        state["cancelled"] = True

    state["outcomes"] = outcomes
    if state.get("cancelled"):
        logs.append(f"Computer -> cancelled after {len(submitted)} of {len(definitions)} analyses")
    else:
        failed = sum(1 for item in outcomes if isinstance(item, AnalysisError))
        skipped = sum(1 for item in outcomes if isinstance(item, SkippedAnalysis))
        logs.append(f"Computer -> done ({skipped} skipped, {failed} failed)")
    return state
