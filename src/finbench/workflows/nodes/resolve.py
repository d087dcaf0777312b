"""LangGraph node resolving the industry benchmark set for the run."""
from __future__ import annotations

from finbench.domain.errors import StructuralError
from finbench.workflows.context import WorkflowContext
from finbench.workflows.state import RunState, RunStatus


def run(state: RunState, context: WorkflowContext) -> RunState:
    logs = state.setdefault("logs", [])
    errors = state.setdefault("errors", [])
    state["status"] = RunStatus.RESOLVING.value
    options = state["options"]

    logs.append(
        f"BenchmarkResolver -> {options.sector} / {options.legal_entity or '-'} / {options.comparison_level}"
    )
    try:
        benchmarks = context.resolver.resolve(options.sector, options.legal_entity, options.comparison_level)
    except StructuralError as exc:
        errors.append(f"Benchmark resolution failed: {exc}")
        state["failure"] = exc
        state["status"] = RunStatus.FAILED.value
        return state

    state["benchmarks"] = benchmarks
    if benchmarks.low_confidence:
        logs.append(f"BenchmarkResolver -> degraded to '{benchmarks.source}' table (low confidence)")
    return state
