"""Workflow state definitions shared by LangGraph nodes."""
from __future__ import annotations

import threading
from enum import Enum
from typing import List, Optional, Tuple, TypedDict

from finbench.domain.catalog import AnalysisDefinition
from finbench.domain.errors import StructuralError
from finbench.domain.models.financials import FinancialStatement, RunOptions
from finbench.domain.models.results import AnalysisReport, BenchmarkSet, Outcome
from finbench.domain.window import StatementWindow


class RunStatus(str, Enum):
    VALIDATING = "validating"
    RESOLVING = "resolving"
    COMPUTING = "computing"
    AGGREGATING = "aggregating"
    COMPLETED = "completed"
    FAILED = "failed"


class RunState(TypedDict, total=False):
    statements: Tuple[FinancialStatement, ...]
    options: RunOptions
    run_at: str
    status: str

    window: StatementWindow
    definitions: Tuple[AnalysisDefinition, ...]
    benchmarks: BenchmarkSet
    outcomes: List[Outcome]
    report: Optional[AnalysisReport]

    failure: Optional[StructuralError]
    cancel_event: Optional[threading.Event]
    cancelled: bool
    stage_order: List[str]

    logs: List[str]
    errors: List[str]
