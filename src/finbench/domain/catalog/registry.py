"""Immutable, load-time validated registry of analysis definitions."""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from finbench.domain.catalog import advanced, cash_flow, ratios, structural
from finbench.domain.catalog.definitions import LEVEL_ORDER, AnalysisDefinition, Category
from finbench.domain.errors import CatalogError, UnknownAnalysis
from finbench.domain.models.financials import COMPREHENSIVE

logger = logging.getLogger(__name__)

CATALOG_SIZE = 181


class AnalysisCatalog:
    """Ordered set of definitions, keyed by id."""

    def __init__(self, definitions: Iterable[AnalysisDefinition]) -> None:
        self._definitions: Tuple[AnalysisDefinition, ...] = tuple(definitions)
        self._validate()
        self._by_id: Dict[str, AnalysisDefinition] = {item.id: item for item in self._definitions}

    def _validate(self) -> None:
        seen = set()
        for definition in self._definitions:
            if definition.id in seen:
                raise CatalogError(f"Duplicate analysis id: {definition.id}")
            seen.add(definition.id)
            if not definition.required_inputs:
                raise CatalogError(f"Analysis {definition.id} declares no required inputs")
            if definition.level not in LEVEL_ORDER:
                raise CatalogError(f"Analysis {definition.id} has unknown level {definition.level!r}")

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, analysis_id: object) -> bool:
        return analysis_id in self._by_id

    def list_definitions(self) -> Tuple[AnalysisDefinition, ...]:
        return self._definitions

    def get(self, analysis_id: str) -> AnalysisDefinition:
        try:
            return self._by_id[analysis_id]
        except KeyError:
            raise UnknownAnalysis(analysis_id) from None

    def categories(self) -> Tuple[Category, ...]:
        ordered: List[Category] = []
        for definition in self._definitions:
            if definition.category not in ordered:
                ordered.append(definition.category)
        return tuple(ordered)

    def select(self, selection: Optional[object] = None) -> Tuple[AnalysisDefinition, ...]:
        """Resolve a run selection to definitions in catalog order.

        ``None`` or ``"comprehensive"`` selects everything; a level name selects
        that level and the ones below it; a sequence selects explicit ids.
        """
        if selection is None or selection == COMPREHENSIVE:
            return self._definitions
        if isinstance(selection, str):
            if selection not in LEVEL_ORDER:
                raise UnknownAnalysis(selection)
            allowed = LEVEL_ORDER[: LEVEL_ORDER.index(selection) + 1]
            return tuple(item for item in self._definitions if item.level in allowed)
        wanted = list(selection)  # type: ignore[call-overload]
        for analysis_id in wanted:
            self.get(analysis_id)
        wanted_ids = set(wanted)
        return tuple(item for item in self._definitions if item.id in wanted_ids)


def build_catalog(groups: Sequence[Sequence[AnalysisDefinition]] = ()) -> AnalysisCatalog:
    groups = groups or (ratios.DEFINITIONS, structural.DEFINITIONS, cash_flow.DEFINITIONS, advanced.DEFINITIONS)
    catalog = AnalysisCatalog(item for group in groups for item in group)
    logger.debug("Loaded analysis catalog with %d definitions", len(catalog))
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> AnalysisCatalog:
    """Process-wide catalog, built and validated on first use."""
    catalog = build_catalog()
    if len(catalog) != CATALOG_SIZE:
        raise CatalogError(f"Catalog holds {len(catalog)} analyses, expected {CATALOG_SIZE}")
    return catalog
