"""Structural analyses: vertical shares, horizontal changes, index numbers and trends."""
from __future__ import annotations

from typing import List, Tuple

from finbench.domain.catalog import stats
from finbench.domain.catalog.definitions import (
    HIGHER,
    LOWER,
    NEUTRAL,
    AnalysisDefinition,
    Category,
    Direction,
    Scope,
    inputs,
    label,
)
from finbench.domain.models.results import BilingualText

# (line item, direction, reference share)
_ASSET_SHARES = (
    ("cash_and_equivalents", NEUTRAL, 0.10),
    ("accounts_receivable", NEUTRAL, 0.15),
    ("inventory", NEUTRAL, 0.15),
    ("current_assets", NEUTRAL, 0.45),
    ("fixed_assets", NEUTRAL, 0.40),
    ("intangible_assets", LOWER, 0.05),
    ("current_liabilities", LOWER, 0.25),
    ("long_term_debt", LOWER, 0.20),
    ("total_liabilities", LOWER, 0.50),
    ("total_equity", HIGHER, 0.50),
    ("retained_earnings", HIGHER, 0.20),
)

_REVENUE_SHARES = (
    ("cost_of_goods_sold", LOWER, 0.65),
    ("gross_profit", HIGHER, 0.35),
    ("operating_expenses", LOWER, 0.23),
    ("operating_income", HIGHER, 0.12),
    ("interest_expense", LOWER, 0.02),
    ("tax_expense", NEUTRAL, 0.03),
    ("net_income", HIGHER, 0.08),
    ("depreciation_amortization", NEUTRAL, 0.05),
)

_HORIZONTAL = (
    ("revenue", HIGHER),
    ("cost_of_goods_sold", LOWER),
    ("gross_profit", HIGHER),
    ("operating_expenses", LOWER),
    ("operating_income", HIGHER),
    ("net_income", HIGHER),
    ("total_assets", HIGHER),
    ("current_assets", NEUTRAL),
    ("total_liabilities", LOWER),
    ("total_equity", HIGHER),
    ("inventory", NEUTRAL),
    ("accounts_receivable", NEUTRAL),
)

_INDEXED = ("revenue", "net_income", "total_assets", "total_equity")
_COMPOUNDED = ("revenue", "net_income", "operating_income", "total_assets", "total_equity")
_TRENDED = ("revenue", "net_income", "total_assets")
_VARIABILITY = ("revenue", "net_income")


def _make(
    analysis_id: str,
    name: BilingualText,
    formula,
    required,
    direction: Direction,
    reference: float,
    scope: Scope = Scope.POINT,
    min_years: int = 1,
    level: str = "basic",
    unit: str = "ratio",
) -> AnalysisDefinition:
    return AnalysisDefinition(
        id=analysis_id,
        category=Category.STRUCTURAL,
        name=name,
        formula=formula,
        required_inputs=required,
        direction=direction,
        scope=scope,
        min_years=min_years,
        reference_average=reference,
        unit=unit,
        level=level,
    )


def _share(key: str, base: str):
    return lambda v: v[key] / v[base]


def _yoy(key: str):
    return lambda v: stats.change(v[key], v.prev(key))


def _index(key: str):
    def formula(v):
        values = v.series(key)
        return float(values[-1]) / float(values[0]) * 100.0

    return formula


def _cagr(key: str):
    return lambda v: stats.cagr(v.series(key))


def _trend(key: str):
    return lambda v: stats.normalized_slope(v.series(key))


def _variability(key: str):
    return lambda v: stats.coefficient_of_variation(v.series(key))


def _shift(numerator: str, denominator: str):
    return lambda v: v[numerator] / v[denominator] - v.prev(numerator) / v.prev(denominator)


def _vertical() -> List[AnalysisDefinition]:
    rows = []
    for key, direction, reference in _ASSET_SHARES:
        item = label(key)
        rows.append(
            _make(
                f"struct.vertical.{key}",
                BilingualText(ar=f"نسبة {item.ar} إلى إجمالي الأصول", en=f"Share of {item.en} in total assets"),
                _share(key, "total_assets"),
                inputs(key, "total_assets"),
                direction,
                reference,
            )
        )
    for key, direction, reference in _REVENUE_SHARES:
        item = label(key)
        rows.append(
            _make(
                f"struct.vertical.{key}",
                BilingualText(ar=f"نسبة {item.ar} إلى الإيرادات", en=f"Share of {item.en} in revenue"),
                _share(key, "revenue"),
                inputs(key, "revenue"),
                direction,
                reference,
            )
        )
    return rows


def _horizontal() -> List[AnalysisDefinition]:
    return [
        _make(
            f"struct.horizontal.{key}",
            BilingualText(ar=f"التغير السنوي في {label(key).ar}", en=f"Year-over-year change in {label(key).en}"),
            _yoy(key),
            inputs(key),
            direction,
            0.05,
            scope=Scope.CHANGE,
        )
        for key, direction in _HORIZONTAL
    ]


def _over_time() -> List[AnalysisDefinition]:
    rows = []
    for key in _INDEXED:
        item = label(key)
        rows.append(
            _make(
                f"struct.index.{key}",
                BilingualText(
                    ar=f"الرقم القياسي لـ{item.ar} (سنة الأساس = 100)",
                    en=f"Index number of {item.en} (base year = 100)",
                ),
                _index(key), inputs(key), HIGHER, 110.0,
                scope=Scope.TREND, level="intermediate", unit="index",
            )
        )
    for key in _COMPOUNDED:
        item = label(key)
        rows.append(
            _make(
                f"struct.cagr.{key}",
                BilingualText(ar=f"معدل النمو السنوي المركب لـ{item.ar}", en=f"Compound annual growth of {item.en}"),
                _cagr(key), inputs(key), HIGHER, 0.05,
                scope=Scope.TREND, level="intermediate",
            )
        )
    for key in _TRENDED:
        item = label(key)
        rows.append(
            _make(
                f"struct.trend.{key}",
                BilingualText(ar=f"الاتجاه العام لـ{item.ar}", en=f"Linear trend of {item.en}"),
                _trend(key), inputs(key), HIGHER, 0.05,
                scope=Scope.TREND, min_years=3, level="intermediate",
            )
        )
    rows.extend(
        [
            _make(
                "struct.shift.gross_margin",
                BilingualText(ar="التغير في هيكل مجمل الربح", en="Common-size shift in gross margin"),
                _shift("gross_profit", "revenue"), inputs("gross_profit", "revenue"), HIGHER, 0.005,
                scope=Scope.CHANGE, level="intermediate",
            ),
            _make(
                "struct.shift.net_margin",
                BilingualText(ar="التغير في هيكل صافي الربح", en="Common-size shift in net margin"),
                _shift("net_income", "revenue"), inputs("net_income", "revenue"), HIGHER, 0.005,
                scope=Scope.CHANGE, level="intermediate",
            ),
            _make(
                "struct.shift.equity_share",
                BilingualText(ar="التغير في حصة حقوق الملكية من الأصول", en="Common-size shift in equity share"),
                _shift("total_equity", "total_assets"), inputs("total_equity", "total_assets"), HIGHER, 0.005,
                scope=Scope.CHANGE, level="intermediate",
            ),
        ]
    )
    for key in _VARIABILITY:
        item = label(key)
        rows.append(
            _make(
                f"struct.variability.{key}",
                BilingualText(ar=f"معامل تذبذب {item.ar}", en=f"Variability of {item.en}"),
                _variability(key), inputs(key), LOWER, 0.15,
                scope=Scope.TREND, min_years=3, level="intermediate",
            )
        )
    return rows


DEFINITIONS: Tuple[AnalysisDefinition, ...] = tuple(_vertical() + _horizontal() + _over_time())
