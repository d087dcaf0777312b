from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from conftest import make_statements
from finbench.cli import commands
from finbench.cli.commands import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.delenv("BENCHMARK_FILE", raising=False)
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "reports"))


def write_export(path, statements):
    records = [
        {
            "fiscal_year": item.fiscal_year,
            "statement_type": item.statement_type.value,
            "line_items": dict(item.line_items),
        }
        for item in statements
    ]
    path.write_text(json.dumps({"company": "ACME", "statements": records}), encoding="utf-8")
    return path


def test_catalog_lists_every_analysis():
    result = runner.invoke(app, ["catalog"])
    assert result.exit_code == 0, result.output
    assert "Analysis catalog (181)" in result.output


def test_catalog_filters_by_category():
    result = runner.invoke(app, ["catalog", "--category", "cash-flow"])
    assert result.exit_code == 0, result.output
    assert "Analysis catalog (36)" in result.output

    result = runner.invoke(app, ["catalog", "--category", "astrology"])
    assert result.exit_code == 2


def test_plan_lists_stages():
    result = runner.invoke(app, ["plan"])
    assert result.exit_code == 0, result.output
    assert "validate" in result.output
    assert "aggregate" in result.output


def test_analyze_writes_report(tmp_path):
    export = write_export(tmp_path / "acme.json", make_statements())
    benchmarks = tmp_path / "benchmarks.json"
    benchmarks.write_text(
        json.dumps({"tables": [{"sector": "retail", "comparison_level": "local",
                                "entries": {"ratio.current": {"average": 1.4}}}]}),
        encoding="utf-8",
    )
    target = tmp_path / "out" / "report.json"

    result = runner.invoke(
        app,
        ["--benchmarks", str(benchmarks), "analyze", str(export),
         "--sector", "retail", "--language", "en", "--output", str(target)],
    )

    assert result.exit_code == 0, result.output
    assert "Run completed." in result.output
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["metadata"]["attempted"] == 181
    assert payload["metadata"]["benchmark_source"] == "exact"
    current = next(item for item in payload["results"] if item["analysis_id"] == "ratio.current")
    assert current["tier"] == "excellent"
    assert current["outcome"] == "evaluated"


def test_analyze_defaults_output_to_configured_directory(tmp_path):
    export = write_export(tmp_path / "acme.json", make_statements())
    result = runner.invoke(app, ["analyze", str(export), "--sector", "retail", "--select", "basic"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "reports" / "acme_analysis.json").exists()


def test_analyze_rejects_broken_input(tmp_path):
    export = write_export(tmp_path / "gap.json", make_statements(years=(2019, 2021)))
    result = runner.invoke(app, ["analyze", str(export), "--sector", "retail"])
    assert result.exit_code == 2
    assert "consecutive" in result.output

    missing = runner.invoke(app, ["analyze", str(tmp_path / "absent.json"), "--sector", "retail"])
    assert missing.exit_code == 2


def test_catalog_shows_required_inputs(monkeypatch):
    monkeypatch.setattr(commands.console, "width", 300)
    result = runner.invoke(app, ["catalog", "--category", "classical-ratio"])
    assert result.exit_code == 0, result.output
    assert "Inputs" in result.output
    assert "current_liabilities" in result.output
