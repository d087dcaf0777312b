"""Industry benchmark tables and the resolver that walks the fallback chain."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from finbench.domain.catalog import AnalysisCatalog
from finbench.domain.errors import StructuralError
from finbench.domain.models.results import BenchmarkEntry, BenchmarkSet

logger = logging.getLogger(__name__)

COMPARISON_LEVELS: Tuple[str, ...] = ("local", "regional", "global")

TableKey = Tuple[str, Optional[str], str]
Entries = Mapping[str, BenchmarkEntry]
Found = Optional[Tuple[str, Entries]]


def _norm(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = str(value).strip().lower()
    return cleaned or None


def entry_from_record(record: Mapping[str, object]) -> BenchmarkEntry:
    """Parse one benchmark entry; a missing average is derived from the peer data."""
    distribution = tuple(float(item) for item in record.get("distribution") or ())  # type: ignore[union-attr]
    percentiles = {
        int(level): float(value)
        for level, value in dict(record.get("percentiles") or {}).items()  # type: ignore[call-overload]
    }
    average = record.get("average")
    if average is None:
        if distribution:
            average = float(np.mean(distribution))
        elif 50 in percentiles:
            average = percentiles[50]
        else:
            raise ValueError("Benchmark entry needs an average, a distribution or a median percentile")
    peer_count = record.get("peer_count")
    return BenchmarkEntry(
        average=float(average),  # type: ignore[arg-type]
        peer_count=int(peer_count) if peer_count is not None else len(distribution),  # type: ignore[call-overload]
        distribution=distribution,
        percentiles=MappingProxyType(percentiles),
    )


class StaticBenchmarkSource:
    """In-memory benchmark tables keyed by (sector, legal entity, comparison level)."""

    def __init__(self) -> None:
        self._tables: Dict[TableKey, Dict[str, BenchmarkEntry]] = {}

    def add(
        self,
        sector: str,
        legal_entity: Optional[str],
        comparison_level: str,
        entries: Mapping[str, Union[BenchmarkEntry, Mapping[str, object]]],
    ) -> None:
        parsed = {
            analysis_id: entry if isinstance(entry, BenchmarkEntry) else entry_from_record(entry)
            for analysis_id, entry in entries.items()
        }
        key = (_norm(sector) or "", _norm(legal_entity), _norm(comparison_level) or "")
        self._tables.setdefault(key, {}).update(parsed)

    def fetch(self, sector: str, legal_entity: Optional[str], comparison_level: str) -> Optional[Entries]:
        return self._tables.get((_norm(sector) or "", _norm(legal_entity), _norm(comparison_level) or ""))

    def __len__(self) -> int:
        return len(self._tables)

    @classmethod
    def from_records(cls, tables: Iterable[Mapping[str, object]]) -> "StaticBenchmarkSource":
        source = cls()
        for table in tables:
            source.add(
                sector=str(table["sector"]),
                legal_entity=table.get("legal_entity"),  # type: ignore[arg-type]
                comparison_level=str(table.get("comparison_level") or COMPARISON_LEVELS[-1]),
                entries=table.get("entries") or {},  # type: ignore[arg-type]
            )
        return source

    @classmethod
    def from_json(cls, path: Path) -> "StaticBenchmarkSource":
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        source = cls.from_records(payload.get("tables", []))
        logger.info("Loaded %d benchmark tables from %s", len(source), path)
        return source


class ExactMatch:
    name = "exact"

    def attempt(self, source, sector: str, legal_entity: Optional[str], comparison_level: str) -> Found:
        entries = source.fetch(sector, legal_entity, comparison_level)
        return (self.name, entries) if entries else None


class CoarserLevel:
    """Same sector and legal entity at each broader comparison level.

    A level outside the configured list has no ordering, so nothing is tried.
    """

    name = "coarser-level"

    def __init__(self, levels: Sequence[str] = COMPARISON_LEVELS) -> None:
        self.levels = tuple(_norm(level) or "" for level in levels)

    def attempt(self, source, sector: str, legal_entity: Optional[str], comparison_level: str) -> Found:
        level = _norm(comparison_level) or ""
        if level not in self.levels:
            return None
        for coarser in self.levels[self.levels.index(level) + 1 :]:
            entries = source.fetch(sector, legal_entity, coarser)
            if entries:
                return f"{self.name}:{coarser}", entries
        return None


class SectorWide:
    """Sector table regardless of legal entity, at the broadest comparison level."""

    name = "sector-global"

    def __init__(self, levels: Sequence[str] = COMPARISON_LEVELS) -> None:
        self.level = levels[-1]

    def attempt(self, source, sector: str, legal_entity: Optional[str], comparison_level: str) -> Found:
        entries = source.fetch(sector, None, self.level)
        return (self.name, entries) if entries else None


class DefaultTable:
    """Conservative catalog-wide references; always succeeds."""

    name = "default"

    def __init__(self, entries: Entries) -> None:
        self.entries = entries

    def attempt(self, source, sector: str, legal_entity: Optional[str], comparison_level: str) -> Found:
        return self.name, self.entries


def default_benchmark_table(catalog: AnalysisCatalog) -> Dict[str, BenchmarkEntry]:
    return {
        definition.id: BenchmarkEntry(average=definition.reference_average)
        for definition in catalog.list_definitions()
    }


class BenchmarkResolver:
    """Resolve (sector, legal entity, comparison level) through an ordered strategy list.

    Only an exact match is full confidence. Strategies that raise are logged
    and skipped, so resolution itself never fails once the sector is known.
    """

    def __init__(
        self,
        source,
        default_entries: Entries,
        *,
        levels: Sequence[str] = COMPARISON_LEVELS,
        strategies: Optional[List[object]] = None,
    ) -> None:
        self._source = source
        self._default = MappingProxyType(dict(default_entries))
        self.strategies = strategies or [
            ExactMatch(),
            CoarserLevel(levels),
            SectorWide(levels),
            DefaultTable(self._default),
        ]

    def resolve(self, sector: str, legal_entity: Optional[str], comparison_level: str) -> BenchmarkSet:
        if not sector or not sector.strip():
            raise StructuralError("A sector is required to resolve industry benchmarks")

        for strategy in self.strategies:
            try:
                found = strategy.attempt(self._source, sector, legal_entity, comparison_level)  # type: ignore[attr-defined]
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Benchmark strategy %s failed: %s", getattr(strategy, "name", strategy), exc)
                continue
            if found is None:
                continue
            label, entries = found
            low_confidence = label != ExactMatch.name
            if low_confidence:
                logger.warning(
                    "No exact benchmark for %s/%s/%s; using %s (low confidence)",
                    sector, legal_entity, comparison_level, label,
                )
            return BenchmarkSet(
                sector=sector,
                legal_entity=legal_entity,
                comparison_level=comparison_level,
                source=label,
                entries=MappingProxyType(dict(entries)),
                fallback_entries=self._default,
                low_confidence=low_confidence,
            )

        logger.warning("Every benchmark strategy failed; falling back to the default table")
        return BenchmarkSet(
            sector=sector,
            legal_entity=legal_entity,
            comparison_level=comparison_level,
            source=DefaultTable.name,
            entries=self._default,
            fallback_entries=self._default,
            low_confidence=True,
        )
