from __future__ import annotations

import pytest

from conftest import make_statements
from finbench.domain.errors import StructuralError
from finbench.domain.models.financials import FinancialStatement, RunOptions, StatementKind
from finbench.domain.services.validation import validate_statements
from finbench.domain.window import StatementWindow


def test_valid_statements_pass_through():
    statements = make_statements()
    assert validate_statements(statements) == tuple(statements)


def test_empty_input_is_structural():
    with pytest.raises(StructuralError):
        validate_statements([])


def test_unsorted_years_rejected():
    statements = make_statements()
    with pytest.raises(StructuralError, match="sorted"):
        validate_statements(list(reversed(statements)))


def test_gap_in_years_rejected():
    statements = make_statements(years=(2019, 2021, 2022))
    with pytest.raises(StructuralError, match="consecutive"):
        validate_statements(statements)


def test_duplicate_year_and_kind_rejected():
    statements = make_statements(years=(2022,))
    statements.append(FinancialStatement("ACME", 2022, "balance_sheet", {"total_assets": 1.0}))
    with pytest.raises(StructuralError, match="duplicate"):
        validate_statements(statements)


def test_mixed_companies_rejected():
    statements = make_statements(years=(2022,)) + make_statements(years=(2023,), company="OTHER")
    with pytest.raises(StructuralError, match="several companies"):
        validate_statements(statements)


def test_missing_line_item_mapping_rejected():
    statements = [FinancialStatement("ACME", 2023, StatementKind.CASH_FLOW, None)]
    with pytest.raises(StructuralError, match="no line items"):
        validate_statements(statements)


def test_sparse_mapping_is_allowed():
    statements = [FinancialStatement("ACME", 2023, "bs", {"total_assets": None})]
    assert validate_statements(statements)[0].statement_type is StatementKind.BALANCE_SHEET


def test_window_keeps_trailing_years():
    window = StatementWindow.from_statements(make_statements(years=(2019, 2020, 2021, 2022)), years_count=2)
    assert window.years == (2021, 2022)
    assert window.latest_year == 2022


def test_run_options_reject_unknown_language():
    with pytest.raises(ValueError):
        RunOptions(sector="retail", language="fr")
