"""Workflow dependency container."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from finbench.domain.catalog import AnalysisCatalog
from finbench.domain.services.aggregation import AggregationEngine
from finbench.domain.services.computer import RatioComputer
from finbench.domain.services.evaluator import ComparativeEvaluator
from finbench.infrastructure.benchmarks import BenchmarkResolver
from finbench.settings.config import Config


@dataclass
class WorkflowContext:
    """Holds the shared, read-only collaborators used by LangGraph nodes."""

    config: Config
    catalog: AnalysisCatalog
    resolver: BenchmarkResolver
    computer: RatioComputer
    evaluator: ComparativeEvaluator
    aggregator: AggregationEngine
    clock: Callable[[], datetime]
