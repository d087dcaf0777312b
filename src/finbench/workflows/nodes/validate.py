"""LangGraph node checking inputs and fixing the run's analysis selection."""
from __future__ import annotations

from finbench.domain.errors import StructuralError
from finbench.domain.services.validation import validate_statements
from finbench.domain.window import StatementWindow
from finbench.workflows.context import WorkflowContext
from finbench.workflows.state import RunState, RunStatus


def run(state: RunState, context: WorkflowContext) -> RunState:
    logs = state.setdefault("logs", [])
    errors = state.setdefault("errors", [])
    state["status"] = RunStatus.VALIDATING.value
    options = state["options"]

    logs.append("Validator -> check statements and resolve analysis selection")
    try:
        statements = validate_statements(state.get("statements") or ())
        state["definitions"] = context.catalog.select(options.analysis_selection)
        state["window"] = StatementWindow.from_statements(statements, options.years_count)
        if not state["window"].years:
            raise StructuralError("No fiscal years left to analyze")
    except StructuralError as exc:
        errors.append(f"Validation failed: {exc}")
        state["failure"] = exc
        state["status"] = RunStatus.FAILED.value
        return state

    window = state["window"]
    logs.append(
        f"Validator -> {len(state['definitions'])} analyses over fiscal years "
        f"{window.years[0]}-{window.latest_year}"
    )
    return state
