"""JSON loaders for statement exports."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Tuple

from finbench.domain.errors import StructuralError
from finbench.domain.models.financials import FinancialStatement, statements_from_records


def load_statements(path: Path) -> Tuple[FinancialStatement, ...]:
    """Read ``{"company": ..., "statements": [...]}`` and return statements sorted by year.

    Sorting here only orders records that share a year by their position in the
    file; validation still rejects gaps and duplicates.
    """
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise StructuralError(f"Cannot read statements from {path}: {exc}") from exc

    if isinstance(payload, list):
        payload = {"statements": payload}
    company = str(payload.get("company") or "")
    records = payload.get("statements") or []
    try:
        statements = statements_from_records(company, records)
    except (KeyError, TypeError, ValueError) as exc:
        raise StructuralError(f"Malformed statement record in {path}: {exc}") from exc
    return tuple(sorted(statements, key=lambda item: item.fiscal_year))
