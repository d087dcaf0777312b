"""Analysis definition types and the vocabulary shared by the catalog tables."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, FrozenSet, Optional

from finbench.domain.models.results import BilingualText

if TYPE_CHECKING:
    from finbench.domain.window import YearView

Formula = Callable[["YearView"], Optional[float]]


class Category(str, Enum):
    CLASSICAL_RATIO = "classical-ratio"
    STRUCTURAL = "structural"
    CASH_FLOW = "cash-flow"
    ADVANCED = "advanced"

    @property
    def label(self) -> BilingualText:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    Category.CLASSICAL_RATIO: BilingualText(ar="النسب المالية الكلاسيكية", en="Classical ratios"),
    Category.STRUCTURAL: BilingualText(ar="التحليل الهيكلي", en="Structural analysis"),
    Category.CASH_FLOW: BilingualText(ar="تحليل التدفقات والحركة", en="Cash-flow analysis"),
    Category.ADVANCED: BilingualText(ar="التحليل المتقدم", en="Advanced analysis"),
}


class Direction(str, Enum):
    HIGHER_IS_BETTER = "higher-is-better"
    LOWER_IS_BETTER = "lower-is-better"
    NEUTRAL = "neutral"


class Scope(str, Enum):
    """How many fiscal years an analysis reads.

    point: the evaluated year only; change: the evaluated year and the one
    before it; trend: every year of the window up to the evaluated year.
    """

    POINT = "point"
    CHANGE = "change"
    TREND = "trend"


HIGHER = Direction.HIGHER_IS_BETTER
LOWER = Direction.LOWER_IS_BETTER
NEUTRAL = Direction.NEUTRAL

# Cumulative selection levels; a level includes every level before it.
LEVEL_ORDER = ("basic", "intermediate", "advanced")

_DEFAULT_LEVELS = {
    Category.CLASSICAL_RATIO: "basic",
    Category.STRUCTURAL: "basic",
    Category.CASH_FLOW: "intermediate",
    Category.ADVANCED: "advanced",
}


@dataclass(frozen=True)
class AnalysisDefinition:
    """Immutable description of one analysis.

    ``reference_average`` is the conservative industry value used when no
    benchmark table provides the analysis.
    """

    id: str
    category: Category
    name: BilingualText
    formula: Formula = field(compare=False, repr=False)
    required_inputs: FrozenSet[str] = frozenset()
    direction: Direction = HIGHER
    scope: Scope = Scope.POINT
    min_years: int = 1
    reference_average: float = 1.0
    unit: str = "ratio"
    level: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "required_inputs", frozenset(self.required_inputs))
        floor = {Scope.POINT: 1, Scope.CHANGE: 2, Scope.TREND: 2}[self.scope]
        if self.min_years < floor:
            object.__setattr__(self, "min_years", floor)
        if self.level is None:
            object.__setattr__(self, "level", _DEFAULT_LEVELS[self.category])

    def replace(self, **changes) -> "AnalysisDefinition":
        return dataclasses.replace(self, **changes)


LINE_ITEM_LABELS = {
    "cash_and_equivalents": BilingualText(ar="النقدية وما في حكمها", en="cash and equivalents"),
    "accounts_receivable": BilingualText(ar="الذمم المدينة", en="accounts receivable"),
    "inventory": BilingualText(ar="المخزون", en="inventory"),
    "current_assets": BilingualText(ar="الأصول المتداولة", en="current assets"),
    "fixed_assets": BilingualText(ar="الأصول الثابتة", en="fixed assets"),
    "intangible_assets": BilingualText(ar="الأصول غير الملموسة", en="intangible assets"),
    "total_assets": BilingualText(ar="إجمالي الأصول", en="total assets"),
    "accounts_payable": BilingualText(ar="الذمم الدائنة", en="accounts payable"),
    "short_term_debt": BilingualText(ar="الديون قصيرة الأجل", en="short-term debt"),
    "current_liabilities": BilingualText(ar="الخصوم المتداولة", en="current liabilities"),
    "long_term_debt": BilingualText(ar="الديون طويلة الأجل", en="long-term debt"),
    "total_liabilities": BilingualText(ar="إجمالي الخصوم", en="total liabilities"),
    "total_equity": BilingualText(ar="حقوق الملكية", en="total equity"),
    "retained_earnings": BilingualText(ar="الأرباح المحتجزة", en="retained earnings"),
    "shares_outstanding": BilingualText(ar="عدد الأسهم القائمة", en="shares outstanding"),
    "share_price": BilingualText(ar="سعر السهم", en="share price"),
    "revenue": BilingualText(ar="الإيرادات", en="revenue"),
    "cost_of_goods_sold": BilingualText(ar="تكلفة المبيعات", en="cost of goods sold"),
    "gross_profit": BilingualText(ar="مجمل الربح", en="gross profit"),
    "operating_expenses": BilingualText(ar="المصروفات التشغيلية", en="operating expenses"),
    "operating_income": BilingualText(ar="الربح التشغيلي", en="operating income"),
    "interest_expense": BilingualText(ar="مصروف الفوائد", en="interest expense"),
    "tax_expense": BilingualText(ar="مصروف الضريبة", en="tax expense"),
    "net_income": BilingualText(ar="صافي الربح", en="net income"),
    "depreciation_amortization": BilingualText(ar="الإهلاك والاستهلاك", en="depreciation and amortization"),
    "fixed_costs": BilingualText(ar="التكاليف الثابتة", en="fixed costs"),
    "variable_costs": BilingualText(ar="التكاليف المتغيرة", en="variable costs"),
    "operating_cash_flow": BilingualText(ar="التدفق النقدي التشغيلي", en="operating cash flow"),
    "capital_expenditures": BilingualText(ar="النفقات الرأسمالية", en="capital expenditures"),
    "investing_cash_flow": BilingualText(ar="التدفق النقدي الاستثماري", en="investing cash flow"),
    "financing_cash_flow": BilingualText(ar="التدفق النقدي التمويلي", en="financing cash flow"),
    "dividends_paid": BilingualText(ar="التوزيعات المدفوعة", en="dividends paid"),
    "debt_repayment": BilingualText(ar="سداد الديون", en="debt repayment"),
    "debt_issued": BilingualText(ar="الديون المصدرة", en="debt issued"),
    "net_change_in_cash": BilingualText(ar="صافي التغير في النقدية", en="net change in cash"),
    "beginning_cash": BilingualText(ar="النقدية أول المدة", en="beginning cash"),
    "ending_cash": BilingualText(ar="النقدية آخر المدة", en="ending cash"),
}


def inputs(*keys: str) -> FrozenSet[str]:
    return frozenset(keys)


def label(key: str) -> BilingualText:
    return LINE_ITEM_LABELS[key]
