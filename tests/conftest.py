"""Shared builders for the test suite."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

import pytest

from finbench.domain.models.financials import FinancialStatement

BALANCE_SHEET: Dict[str, float] = {
    "cash_and_equivalents": 150.0,
    "accounts_receivable": 200.0,
    "inventory": 250.0,
    "current_assets": 700.0,
    "fixed_assets": 800.0,
    "intangible_assets": 100.0,
    "total_assets": 1800.0,
    "accounts_payable": 150.0,
    "short_term_debt": 100.0,
    "current_liabilities": 400.0,
    "long_term_debt": 300.0,
    "total_liabilities": 900.0,
    "total_equity": 900.0,
    "retained_earnings": 400.0,
    "shares_outstanding": 100.0,
    "share_price": 20.0,
}

INCOME_STATEMENT: Dict[str, float] = {
    "revenue": 2000.0,
    "cost_of_goods_sold": 1200.0,
    "gross_profit": 800.0,
    "operating_expenses": 500.0,
    "operating_income": 300.0,
    "interest_expense": 30.0,
    "tax_expense": 54.0,
    "net_income": 216.0,
    "depreciation_amortization": 80.0,
    "fixed_costs": 400.0,
    "variable_costs": 1300.0,
}

CASH_FLOW: Dict[str, float] = {
    "operating_cash_flow": 280.0,
    "capital_expenditures": 120.0,
    "investing_cash_flow": -130.0,
    "financing_cash_flow": -90.0,
    "dividends_paid": 60.0,
    "debt_repayment": 50.0,
    "debt_issued": 40.0,
    "net_change_in_cash": 60.0,
    "beginning_cash": 90.0,
    "ending_cash": 150.0,
}

FIXED_RUN_AT = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)


def make_statements(
    years: Sequence[int] = (2021, 2022, 2023),
    *,
    company: str = "ACME",
    drop: Iterable[str] = (),
    overrides: Optional[Dict[str, float]] = None,
) -> List[FinancialStatement]:
    """Three statements per year; every line item grows 10% of the base per year.

    ``overrides`` replaces values in the latest year only.
    """
    dropped = set(drop)
    statements: List[FinancialStatement] = []
    for offset, year in enumerate(years):
        growth = 1.0 + 0.1 * offset
        for kind, items in (
            ("balance_sheet", BALANCE_SHEET),
            ("income_statement", INCOME_STATEMENT),
            ("cash_flow", CASH_FLOW),
        ):
            line_items = {key: value * growth for key, value in items.items() if key not in dropped}
            if overrides and year == years[-1]:
                line_items.update({key: value for key, value in overrides.items() if key in items})
            statements.append(FinancialStatement(company, year, kind, line_items))
    return statements


def fixed_clock() -> datetime:
    return FIXED_RUN_AT


@pytest.fixture
def statements() -> List[FinancialStatement]:
    return make_statements()
