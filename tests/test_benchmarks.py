from __future__ import annotations

import json
import logging

import pytest

from finbench.domain.catalog import get_catalog
from finbench.domain.errors import StructuralError
from finbench.infrastructure.benchmarks import (
    BenchmarkResolver,
    StaticBenchmarkSource,
    default_benchmark_table,
    entry_from_record,
)


@pytest.fixture
def source() -> StaticBenchmarkSource:
    source = StaticBenchmarkSource()
    source.add("retail", "joint-stock", "local", {"ratio.current": {"average": 1.4}})
    source.add("retail", "joint-stock", "global", {"ratio.current": {"average": 1.6}})
    source.add("energy", None, "global", {"ratio.current": {"average": 1.1}})
    return source


def resolver_for(source) -> BenchmarkResolver:
    return BenchmarkResolver(source, default_benchmark_table(get_catalog()))


def test_exact_match_is_full_confidence(source):
    resolved = resolver_for(source).resolve("retail", "joint-stock", "local")
    assert resolved.source == "exact"
    assert resolved.low_confidence is False
    entry, low_confidence = resolved.lookup("ratio.current")
    assert entry.average == 1.4
    assert low_confidence is False


def test_coarser_level_is_used_before_sector_wide(source, caplog):
    with caplog.at_level(logging.WARNING):
        resolved = resolver_for(source).resolve("retail", "joint-stock", "regional")
    assert resolved.source == "coarser-level:global"
    assert resolved.low_confidence is True
    assert resolved.lookup("ratio.current")[0].average == 1.6
    assert "low confidence" in caplog.text


def test_sector_wide_table_ignores_legal_entity(source):
    resolved = resolver_for(source).resolve("Energy", "llc", "local")
    assert resolved.source == "sector-global"
    assert resolved.low_confidence is True
    assert resolved.lookup("ratio.current")[0].average == 1.1


def test_unknown_sector_falls_back_to_defaults(source):
    resolved = resolver_for(source).resolve("aerospace", None, "local")
    assert resolved.source == "default"
    assert resolved.low_confidence is True
    entry, low_confidence = resolved.lookup("ratio.current")
    assert entry.average == 1.5
    assert low_confidence is True


def test_ids_absent_from_a_matched_table_use_defaults_at_low_confidence(source):
    resolved = resolver_for(source).resolve("retail", "joint-stock", "local")
    entry, low_confidence = resolved.lookup("ratio.quick")
    assert entry.average == 1.0
    assert low_confidence is True


def test_raising_source_is_skipped(caplog):
    class BrokenSource:
        def fetch(self, sector, legal_entity, comparison_level):
            raise ConnectionError("benchmark store unavailable")

    with caplog.at_level(logging.WARNING):
        resolved = resolver_for(BrokenSource()).resolve("retail", None, "local")
    assert resolved.source == "default"
    assert "benchmark store unavailable" in caplog.text


def test_blank_sector_is_structural(source):
    with pytest.raises(StructuralError):
        resolver_for(source).resolve("  ", None, "local")


def test_average_derived_from_peer_data():
    assert entry_from_record({"distribution": [1.0, 2.0, 3.0]}).average == 2.0
    assert entry_from_record({"distribution": [1.0, 2.0, 3.0]}).peer_count == 3
    assert entry_from_record({"percentiles": {"25": 1.0, "50": 1.3}, "peer_count": 12}).average == 1.3
    with pytest.raises(ValueError):
        entry_from_record({"peer_count": 4})


def test_tables_load_from_json(tmp_path):
    path = tmp_path / "benchmarks.json"
    path.write_text(
        json.dumps(
            {
                "tables": [
                    {
                        "sector": "Retail",
                        "legal_entity": None,
                        "comparison_level": "Local",
                        "entries": {"ratio.current": {"average": 1.3, "distribution": [1.1, 1.5]}},
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    source = StaticBenchmarkSource.from_json(path)
    assert len(source) == 1
    entries = source.fetch("RETAIL", None, "local")
    assert entries["ratio.current"].distribution == (1.1, 1.5)


def test_unknown_comparison_level_skips_finer_levels():
    source = StaticBenchmarkSource()
    source.add("retail", None, "local", {"ratio.current": {"average": 1.4}})
    resolved = resolver_for(source).resolve("retail", None, "national")
    assert resolved.source == "default"
