"""Domain models describing the statements and options handed to the engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

LANGUAGES = ("ar", "en")
SELECTION_LEVELS = ("basic", "intermediate", "advanced")
COMPREHENSIVE = "comprehensive"


class StatementKind(str, Enum):
    BALANCE_SHEET = "balance_sheet"
    INCOME_STATEMENT = "income_statement"
    CASH_FLOW = "cash_flow"

    @classmethod
    def parse(cls, value: Union[str, "StatementKind"]) -> "StatementKind":
        """Accept the enum value or the short aliases used in exported files."""
        if isinstance(value, cls):
            return value
        aliases = {"bs": cls.BALANCE_SHEET, "is": cls.INCOME_STATEMENT, "cf": cls.CASH_FLOW}
        key = str(value).strip().lower()
        if key in aliases:
            return aliases[key]
        return cls(key)


@dataclass(frozen=True)
class FinancialStatement:
    """A normalized statement for one company, one fiscal year and one kind.

    ``line_items`` may be sparse; absent keys and ``None`` values are both treated
    as missing by the computer.
    """

    company: str
    fiscal_year: int
    statement_type: StatementKind
    line_items: Optional[Mapping[str, Optional[float]]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "statement_type", StatementKind.parse(self.statement_type))
        if self.line_items is not None:
            object.__setattr__(self, "line_items", MappingProxyType(dict(self.line_items)))


Selection = Union[None, str, Sequence[str]]


@dataclass(frozen=True)
class RunOptions:
    """Per-run options supplied by the caller."""

    sector: str
    legal_entity: Optional[str] = None
    comparison_level: str = "local"
    years_count: Optional[int] = None
    analysis_selection: Selection = None
    language: str = "ar"

    def __post_init__(self) -> None:
        if self.language not in LANGUAGES:
            raise ValueError(f"Unsupported language {self.language!r}; expected one of {LANGUAGES}")
        if self.years_count is not None and self.years_count < 1:
            raise ValueError("years_count must be a positive integer")
        selection = self.analysis_selection
        if selection is not None and not isinstance(selection, str):
            object.__setattr__(self, "analysis_selection", tuple(selection))


def statements_from_records(company: str, records: Iterable[Mapping[str, object]]) -> Tuple[FinancialStatement, ...]:
    """Build statements from plain dictionaries (e.g. parsed JSON)."""
    statements = []
    for record in records:
        items = record.get("line_items")
        statements.append(
            FinancialStatement(
                company=str(record.get("company") or company),
                fiscal_year=int(record["fiscal_year"]),  # type: ignore[arg-type]
                statement_type=StatementKind.parse(record["statement_type"]),  # type: ignore[arg-type]
                line_items=None if items is None else {
                    str(key): (None if value is None else float(value))  # type: ignore[arg-type]
                    for key, value in dict(items).items()  # type: ignore[call-overload]
                },
            )
        )
    return tuple(statements)
