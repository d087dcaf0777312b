"""Structural checks on normalized statements before any computation runs."""
from __future__ import annotations

from typing import List, Sequence, Tuple

from finbench.domain.errors import StructuralError
from finbench.domain.models.financials import FinancialStatement


def validate_statements(statements: Sequence[FinancialStatement]) -> Tuple[FinancialStatement, ...]:
    """Return the statements unchanged or raise StructuralError.

    Only shape is checked: one company, ascending and consecutive fiscal years,
    a single statement per (year, kind) and a line-item mapping on each
    statement. Economic plausibility is left to the analyses themselves.
    """
    if not statements:
        raise StructuralError("No financial statements supplied")

    problems: List[str] = []
    companies = sorted({statement.company for statement in statements})
    if len(companies) > 1:
        problems.append(f"statements belong to several companies: {', '.join(companies)}")

    years = [statement.fiscal_year for statement in statements]
    if years != sorted(years):
        problems.append("statements are not sorted ascending by fiscal year")

    seen = set()
    for statement in statements:
        key = (statement.fiscal_year, statement.statement_type)
        if key in seen:
            problems.append(
                f"duplicate {statement.statement_type.value} statement for fiscal year {statement.fiscal_year}"
            )
        seen.add(key)
        if statement.line_items is None:
            problems.append(
                f"{statement.statement_type.value} statement for {statement.fiscal_year} has no line items"
            )

    distinct = sorted(set(years))
    gaps = [later for earlier, later in zip(distinct, distinct[1:]) if later - earlier != 1]
    if gaps:
        problems.append(f"fiscal years are not consecutive (gap before {gaps[0]})")

    if problems:
        raise StructuralError("Invalid statements: " + "; ".join(problems))
    return tuple(statements)
