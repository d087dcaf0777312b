"""Year-indexed view over validated statements, consumed by analysis formulas."""
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from finbench.domain.models.financials import FinancialStatement


def _to_float(value) -> float:
    if value is None:
        return float("nan")
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def _frame_from_statements(statements: Iterable[FinancialStatement]) -> pd.DataFrame:
    """Merge every statement of a year into one row; the first statement carrying a key wins."""
    rows: Dict[int, Dict[str, float]] = {}
    for statement in statements:
        row = rows.setdefault(statement.fiscal_year, {})
        for key, value in (statement.line_items or {}).items():
            parsed = _to_float(value)
            if key not in row or math.isnan(row[key]):
                row[key] = parsed
    # Years whose statements are all empty still occupy a row.
    years = sorted(rows)
    frame = pd.DataFrame.from_dict(rows, orient="index", dtype=float).reindex(years)
    frame.index = pd.Index(years, dtype=int)
    return frame


class StatementWindow:
    """Line items per fiscal year, oldest first, truncated to the requested trailing years."""

    def __init__(self, frame: pd.DataFrame) -> None:
        self._frame = frame.sort_index()

    @classmethod
    def from_statements(
        cls,
        statements: Sequence[FinancialStatement],
        years_count: Optional[int] = None,
    ) -> "StatementWindow":
        frame = _frame_from_statements(statements)
        if years_count is not None:
            frame = frame.tail(years_count)
        return cls(frame)

    @property
    def years(self) -> Tuple[int, ...]:
        return tuple(int(year) for year in self._frame.index)

    @property
    def latest_year(self) -> int:
        return self.years[-1]

    def __len__(self) -> int:
        return len(self._frame.index)

    def has(self, key: str, year: int) -> bool:
        if key not in self._frame.columns or year not in self._frame.index:
            return False
        return not pd.isna(self._frame.at[year, key])

    def first_missing(self, keys: Iterable[str], years: Iterable[int]) -> Optional[str]:
        """First key, in sorted order, lacking a value in any of ``years``."""
        years = list(years)
        for key in sorted(keys):
            if any(not self.has(key, year) for year in years):
                return key
        return None

    def view(self, year: int) -> "YearView":
        return YearView(self._frame, year)


class YearView:
    """Accessor handed to formulas: values of one year plus its history."""

    def __init__(self, frame: pd.DataFrame, year: int) -> None:
        self._frame = frame
        self.year = year
        self._position = list(frame.index).index(year)

    def __getitem__(self, key: str) -> float:
        return self._value(key, self.year)

    def prev(self, key: str) -> float:
        if self._position == 0:
            raise LookupError(f"No fiscal year before {self.year}")
        return self._value(key, int(self._frame.index[self._position - 1]))

    def series(self, key: str) -> np.ndarray:
        """Values from the first window year up to and including this year."""
        column = self._frame[key].iloc[: self._position + 1]
        return column.to_numpy(dtype=float)

    def items(self) -> Dict[str, float]:
        row = self._frame.loc[self.year]
        return {str(key): float(value) for key, value in row.items() if not pd.isna(value)}

    def _value(self, key: str, year: int) -> float:
        value = self._frame.at[year, key]
        if pd.isna(value):
            raise KeyError(key)
        return float(value)


def ratio_series(view: YearView, numerator: str, denominator: str) -> List[float]:
    """Year-by-year ``numerator / denominator`` over the view's history."""
    top = view.series(numerator)
    bottom = view.series(denominator)
    return [float(a) / float(b) for a, b in zip(top, bottom)]
