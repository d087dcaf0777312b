"""Convenience re-exports for the analysis catalog."""
from __future__ import annotations

from .definitions import AnalysisDefinition, Category, Direction, Scope
from .registry import CATALOG_SIZE, AnalysisCatalog, build_catalog, get_catalog

__all__ = [
    "AnalysisCatalog",
    "AnalysisDefinition",
    "CATALOG_SIZE",
    "Category",
    "Direction",
    "Scope",
    "build_catalog",
    "get_catalog",
]
