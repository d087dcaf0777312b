"""Workflow blueprint describing run stages and their handlers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List

from finbench.workflows.nodes import aggregate, compute, resolve, validate

if TYPE_CHECKING:
    from finbench.workflows.context import WorkflowContext
    from finbench.workflows.state import RunState


@dataclass
class StageSpec:
    """Single LangGraph stage definition."""

    key: str
    description: str
    handler: Callable[["RunState", "WorkflowContext"], "RunState"]
    depends_on: List[str] = field(default_factory=list)


def build_default_stages() -> List[StageSpec]:
    """Return the ordered stages of an analysis run."""
    return [
        StageSpec(
            key="validate",
            description="Check statement shape, resolve the analysis selection and build the year window.",
            handler=validate.run,
        ),
        StageSpec(
            key="resolve_benchmarks",
            description="Resolve industry benchmarks through the exact/coarser/sector/default chain.",
            handler=resolve.run,
            depends_on=["validate"],
        ),
        StageSpec(
            key="compute",
            description="Compute and evaluate every selected analysis on a bounded worker pool.",
            handler=compute.run,
            depends_on=["resolve_benchmarks"],
        ),
        StageSpec(
            key="aggregate",
            description="Summarize categories, build the executive summary and assemble the report.",
            handler=aggregate.run,
            depends_on=["compute"],
        ),
    ]
