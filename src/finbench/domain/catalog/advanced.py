"""Advanced diagnostics: distress scores, DuPont burdens, statistics, risk and anomaly checks."""
from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from finbench.domain.catalog import stats
from finbench.domain.catalog.definitions import (
    HIGHER,
    LOWER,
    NEUTRAL,
    AnalysisDefinition,
    Category,
    Direction,
    Formula,
    Scope,
    inputs,
)
from finbench.domain.models.results import BilingualText
from finbench.domain.window import ratio_series


def _adv(
    analysis_id: str,
    en: str,
    ar: str,
    formula: Formula,
    required,
    direction: Direction = HIGHER,
    reference: float = 1.0,
    scope: Scope = Scope.POINT,
    min_years: int = 1,
    unit: str = "ratio",
) -> AnalysisDefinition:
    return AnalysisDefinition(
        id=analysis_id,
        category=Category.ADVANCED,
        name=BilingualText(ar=ar, en=en),
        formula=formula,
        required_inputs=required,
        direction=direction,
        scope=scope,
        min_years=min_years,
        reference_average=reference,
        unit=unit,
    )


def _trend(analysis_id: str, en: str, ar: str, formula: Formula, required, direction: Direction,
           reference: float, min_years: int = 3, unit: str = "ratio") -> AnalysisDefinition:
    return _adv(analysis_id, en, ar, formula, required, direction, reference,
                scope=Scope.TREND, min_years=min_years, unit=unit)


def _change(analysis_id: str, en: str, ar: str, formula: Formula, required, direction: Direction,
            reference: float, unit: str = "ratio") -> AnalysisDefinition:
    return _adv(analysis_id, en, ar, formula, required, direction, reference, scope=Scope.CHANGE, unit=unit)


# -- distress and quality scores ------------------------------------------------------------


def _working_capital_to_assets(v) -> float:
    return (v["current_assets"] - v["current_liabilities"]) / v["total_assets"]


def _altman_z(v) -> float:
    market_value = v["share_price"] * v["shares_outstanding"]
    return (
        1.2 * _working_capital_to_assets(v)
        + 1.4 * v["retained_earnings"] / v["total_assets"]
        + 3.3 * v["operating_income"] / v["total_assets"]
        + 0.6 * market_value / v["total_liabilities"]
        + 1.0 * v["revenue"] / v["total_assets"]
    )


def _altman_z_private(v) -> float:
    return (
        0.717 * _working_capital_to_assets(v)
        + 0.847 * v["retained_earnings"] / v["total_assets"]
        + 3.107 * v["operating_income"] / v["total_assets"]
        + 0.420 * v["total_equity"] / v["total_liabilities"]
        + 0.998 * v["revenue"] / v["total_assets"]
    )


def _altman_z_emerging(v) -> float:
    return (
        3.25
        + 6.56 * _working_capital_to_assets(v)
        + 3.26 * v["retained_earnings"] / v["total_assets"]
        + 6.72 * v["operating_income"] / v["total_assets"]
        + 1.05 * v["total_equity"] / v["total_liabilities"]
    )


def _pretax(v) -> float:
    return v["net_income"] + v["tax_expense"]


def _springate(v) -> float:
    return (
        1.03 * _working_capital_to_assets(v)
        + 3.07 * v["operating_income"] / v["total_assets"]
        + 0.66 * _pretax(v) / v["current_liabilities"]
        + 0.4 * v["revenue"] / v["total_assets"]
    )


def _zmijewski(v) -> float:
    return (
        -4.3
        - 4.5 * v["net_income"] / v["total_assets"]
        + 5.7 * v["total_liabilities"] / v["total_assets"]
        - 0.004 * v["current_assets"] / v["current_liabilities"]
    )


def _taffler(v) -> float:
    return (
        0.53 * _pretax(v) / v["current_liabilities"]
        + 0.13 * v["current_assets"] / v["total_liabilities"]
        + 0.18 * v["current_liabilities"] / v["total_assets"]
        + 0.16 * v["revenue"] / v["total_assets"]
    )


def _piotroski(v) -> float:
    """Nine binary signals on profitability, funding and efficiency."""
    roa = v["net_income"] / v["total_assets"]
    prev_roa = v.prev("net_income") / v.prev("total_assets")
    signals = [
        roa > 0,
        v["operating_cash_flow"] > 0,
        roa > prev_roa,
        v["operating_cash_flow"] > v["net_income"],
        v["long_term_debt"] / v["total_assets"] < v.prev("long_term_debt") / v.prev("total_assets"),
        v["current_assets"] / v["current_liabilities"]
        > v.prev("current_assets") / v.prev("current_liabilities"),
        v["shares_outstanding"] <= v.prev("shares_outstanding"),
        v["gross_profit"] / v["revenue"] > v.prev("gross_profit") / v.prev("revenue"),
        v["revenue"] / v["total_assets"] > v.prev("revenue") / v.prev("total_assets"),
    ]
    return float(sum(1 for signal in signals if signal))


def _beneish(v) -> float:
    """Five-variable Beneish M-score."""
    dsri = (v["accounts_receivable"] / v["revenue"]) / (v.prev("accounts_receivable") / v.prev("revenue"))
    gmi = (v.prev("gross_profit") / v.prev("revenue")) / (v["gross_profit"] / v["revenue"])
    soft = 1.0 - (v["current_assets"] + v["fixed_assets"]) / v["total_assets"]
    prev_soft = 1.0 - (v.prev("current_assets") + v.prev("fixed_assets")) / v.prev("total_assets")
    aqi = soft / prev_soft
    sgi = v["revenue"] / v.prev("revenue")
    depreciation_rate = v["depreciation_amortization"] / (v["depreciation_amortization"] + v["fixed_assets"])
    prev_rate = v.prev("depreciation_amortization") / (
        v.prev("depreciation_amortization") + v.prev("fixed_assets")
    )
    depi = prev_rate / depreciation_rate
    return -6.065 + 0.823 * dsri + 0.906 * gmi + 0.593 * aqi + 0.717 * sgi + 0.107 * depi


_ALTMAN = ("current_assets", "current_liabilities", "total_assets", "retained_earnings", "operating_income")


def _scores() -> List[AnalysisDefinition]:
    return [
        _adv(
            "adv.altman_z", "Altman Z-score", "مؤشر ألتمان للتنبؤ بالتعثر",
            _altman_z,
            inputs(*_ALTMAN, "share_price", "shares_outstanding", "total_liabilities", "revenue"),
            reference=3.0, unit="score",
        ),
        _adv(
            "adv.altman_z_private", "Altman Z'-score (private firms)", "مؤشر ألتمان للشركات الخاصة",
            _altman_z_private,
            inputs(*_ALTMAN, "total_equity", "total_liabilities", "revenue"), reference=2.9, unit="score",
        ),
        _adv(
            "adv.altman_z_emerging", "Altman Z''-score (emerging markets)", "مؤشر ألتمان للأسواق الناشئة",
            _altman_z_emerging,
            inputs(*_ALTMAN, "total_equity", "total_liabilities"), reference=5.85, unit="score",
        ),
        _adv(
            "adv.springate", "Springate S-score", "مؤشر سبرينجيت",
            _springate,
            inputs(
                "current_assets", "current_liabilities", "total_assets", "operating_income",
                "net_income", "tax_expense", "revenue",
            ),
            reference=0.862, unit="score",
        ),
        _adv(
            "adv.zmijewski", "Zmijewski X-score", "مؤشر زميجوسكي",
            _zmijewski,
            inputs("net_income", "total_assets", "total_liabilities", "current_assets", "current_liabilities"),
            LOWER, reference=-1.5, unit="score",
        ),
        _adv(
            "adv.taffler", "Taffler Z-score", "مؤشر تافلر",
            _taffler,
            inputs(
                "net_income", "tax_expense", "current_liabilities", "current_assets",
                "total_liabilities", "total_assets", "revenue",
            ),
            reference=0.3, unit="score",
        ),
        _change(
            "adv.piotroski_f", "Piotroski F-score", "مؤشر بيوتروسكي",
            _piotroski,
            inputs(
                "net_income", "total_assets", "operating_cash_flow", "long_term_debt", "current_assets",
                "current_liabilities", "shares_outstanding", "gross_profit", "revenue",
            ),
            HIGHER, 5.0, unit="score",
        ),
        _change(
            "adv.beneish_m", "Beneish M-score", "مؤشر بينيش للتلاعب بالأرباح",
            _beneish,
            inputs(
                "accounts_receivable", "revenue", "gross_profit", "current_assets", "fixed_assets",
                "total_assets", "depreciation_amortization",
            ),
            LOWER, -2.22, unit="score",
        ),
    ]


# -- decomposition and growth capacity ------------------------------------------------------


def _retention(v) -> float:
    return 1.0 - v["dividends_paid"] / v["net_income"]


def _internal_growth(v) -> float:
    retained_return = v["net_income"] / v["total_assets"] * _retention(v)
    return retained_return / (1.0 - retained_return)


def _decomposition() -> List[AnalysisDefinition]:
    return [
        _adv(
            "adv.dupont.tax_burden", "DuPont tax burden", "عبء الضريبة (دوبونت)",
            lambda v: v["net_income"] / _pretax(v), inputs("net_income", "tax_expense"), reference=0.8,
        ),
        _adv(
            "adv.dupont.interest_burden", "DuPont interest burden", "عبء الفوائد (دوبونت)",
            lambda v: _pretax(v) / v["operating_income"],
            inputs("net_income", "tax_expense", "operating_income"), reference=0.85,
        ),
        _adv(
            "adv.sustainable_growth", "Sustainable growth rate", "معدل النمو المستدام",
            lambda v: v["net_income"] / v["total_equity"] * _retention(v),
            inputs("net_income", "total_equity", "dividends_paid"), reference=0.08,
        ),
        _adv(
            "adv.internal_growth", "Internal growth rate", "معدل النمو الداخلي",
            _internal_growth, inputs("net_income", "total_assets", "dividends_paid"), reference=0.04,
        ),
        _adv(
            "adv.financial_leverage_degree", "Degree of financial leverage", "درجة الرافعة المالية",
            lambda v: v["operating_income"] / (v["operating_income"] - v["interest_expense"]),
            inputs("operating_income", "interest_expense"), LOWER, reference=1.3, unit="times",
        ),
        _adv(
            "adv.combined_leverage_degree", "Degree of combined leverage", "درجة الرافعة الكلية",
            lambda v: (v["revenue"] - v["variable_costs"]) / (v["operating_income"] - v["interest_expense"]),
            inputs("revenue", "variable_costs", "operating_income", "interest_expense"),
            LOWER, reference=2.5, unit="times",
        ),
    ]


# -- statistical measures over the window ---------------------------------------------------


def _growth_gap_cagr(v) -> Optional[float]:
    revenue = stats.cagr(v.series("revenue"))
    assets = stats.cagr(v.series("total_assets"))
    if revenue is None or assets is None:
        return None
    return revenue - assets


def _acceleration(v) -> float:
    rates = stats.growth_rates(v.series("revenue"))
    return rates[-1] - rates[-2]


def _statistics() -> List[AnalysisDefinition]:
    return [
        _trend(
            "adv.stat.revenue_growth_volatility", "Revenue growth volatility", "تذبذب نمو الإيرادات",
            lambda v: stats.std(stats.growth_rates(v.series("revenue"))), inputs("revenue"), LOWER, 0.08,
        ),
        _trend(
            "adv.stat.net_income_growth_volatility", "Net income growth volatility", "تذبذب نمو صافي الربح",
            lambda v: stats.std(stats.growth_rates(v.series("net_income"))), inputs("net_income"), LOWER, 0.2,
        ),
        _trend(
            "adv.stat.revenue_trend_fit", "Revenue trend fit (R²)", "جودة توفيق اتجاه الإيرادات",
            lambda v: stats.r_squared(v.series("revenue")), inputs("revenue"), HIGHER, 0.7,
        ),
        _trend(
            "adv.stat.net_income_trend_fit", "Net income trend fit (R²)", "جودة توفيق اتجاه صافي الربح",
            lambda v: stats.r_squared(v.series("net_income")), inputs("net_income"), HIGHER, 0.6,
        ),
        _trend(
            "adv.stat.revenue_forecast_change", "Trend-implied revenue change next year",
            "التغير المتوقع في الإيرادات وفق الاتجاه",
            lambda v: stats.forecast_change(v.series("revenue")), inputs("revenue"), HIGHER, 0.05,
        ),
        _trend(
            "adv.stat.net_income_forecast_change", "Trend-implied net income change next year",
            "التغير المتوقع في صافي الربح وفق الاتجاه",
            lambda v: stats.forecast_change(v.series("net_income")), inputs("net_income"), HIGHER, 0.05,
        ),
        _trend(
            "adv.stat.net_margin_stability", "Net margin stability", "استقرار هامش صافي الربح",
            lambda v: stats.std(ratio_series(v, "net_income", "revenue")),
            inputs("net_income", "revenue"), LOWER, 0.02,
        ),
        _trend(
            "adv.stat.gross_margin_stability", "Gross margin stability", "استقرار هامش الربح الإجمالي",
            lambda v: stats.std(ratio_series(v, "gross_profit", "revenue")),
            inputs("gross_profit", "revenue"), LOWER, 0.02,
        ),
        _trend(
            "adv.stat.earnings_persistence", "Earnings persistence", "استمرارية الأرباح",
            lambda v: stats.autocorrelation(v.series("net_income")), inputs("net_income"), HIGHER, 0.5,
            min_years=4,
        ),
        _trend(
            "adv.stat.cash_income_correlation", "Operating cash flow and net income correlation",
            "الارتباط بين التدفق النقدي التشغيلي وصافي الربح",
            lambda v: stats.correlation(v.series("operating_cash_flow"), v.series("net_income")),
            inputs("operating_cash_flow", "net_income"), HIGHER, 0.6,
        ),
        _change(
            "adv.stat.operating_income_elasticity", "Operating income elasticity to revenue",
            "مرونة الربح التشغيلي بالنسبة للإيرادات",
            lambda v: stats.change(v["operating_income"], v.prev("operating_income"))
            / stats.change(v["revenue"], v.prev("revenue")),
            inputs("operating_income", "revenue"), NEUTRAL, 1.5, unit="times",
        ),
        _change(
            "adv.stat.growth_balance", "Revenue growth over asset growth", "توازن نمو الإيرادات مع نمو الأصول",
            lambda v: stats.change(v["revenue"], v.prev("revenue"))
            - stats.change(v["total_assets"], v.prev("total_assets")),
            inputs("revenue", "total_assets"), HIGHER, 0.01,
        ),
        _trend(
            "adv.stat.mean_revenue_growth", "Average revenue growth", "متوسط نمو الإيرادات",
            lambda v: float(np.mean(stats.growth_rates(v.series("revenue")))), inputs("revenue"), HIGHER, 0.05,
        ),
        _trend(
            "adv.stat.revenue_growth_acceleration", "Revenue growth acceleration", "تسارع نمو الإيرادات",
            _acceleration, inputs("revenue"), HIGHER, 0.01,
        ),
        _trend(
            "adv.stat.leverage_trend", "Leverage trend", "اتجاه الرفع المالي",
            lambda v: stats.slope(ratio_series(v, "total_liabilities", "total_assets")),
            inputs("total_liabilities", "total_assets"), LOWER, 0.01,
        ),
        _trend(
            "adv.stat.liquidity_trend", "Liquidity trend", "اتجاه السيولة",
            lambda v: stats.slope(ratio_series(v, "current_assets", "current_liabilities")),
            inputs("current_assets", "current_liabilities"), HIGHER, 0.05,
        ),
        _trend(
            "adv.stat.roe_trend", "Return on equity trend", "اتجاه العائد على حقوق الملكية",
            lambda v: stats.slope(ratio_series(v, "net_income", "total_equity")),
            inputs("net_income", "total_equity"), HIGHER, 0.005,
        ),
        _trend(
            "adv.stat.net_margin_trend", "Net margin trend", "اتجاه هامش صافي الربح",
            lambda v: stats.slope(ratio_series(v, "net_income", "revenue")),
            inputs("net_income", "revenue"), HIGHER, 0.005,
        ),
        _trend(
            "adv.stat.revenue_surprise", "Latest revenue standard score", "الدرجة المعيارية لآخر إيرادات",
            lambda v: stats.zscore_of_latest(v.series("revenue")), inputs("revenue"), NEUTRAL, 1.0, unit="score",
        ),
        _trend(
            "adv.stat.growth_gap_cagr", "Revenue CAGR over asset CAGR", "فجوة النمو المركب بين الإيرادات والأصول",
            _growth_gap_cagr, inputs("revenue", "total_assets"), HIGHER, 0.01, min_years=2,
        ),
    ]


# -- risk -----------------------------------------------------------------------------------


def _earnings_at_risk(v) -> float:
    values = v.series("net_income")
    mean = float(np.mean(values))
    return (mean - 1.65 * stats.std(values)) / abs(mean)


def _risk() -> List[AnalysisDefinition]:
    return [
        _adv(
            "adv.risk.cash_runway_months", "Cash runway in months of operating expenses",
            "عدد أشهر تغطية النقدية للمصروفات التشغيلية",
            lambda v: v["cash_and_equivalents"] / (v["operating_expenses"] / 12.0),
            inputs("cash_and_equivalents", "operating_expenses"), reference=3.0, unit="months",
        ),
        _adv(
            "adv.risk.liquidity_gap", "Liquidity gap", "فجوة السيولة",
            lambda v: (v["current_assets"] - v["current_liabilities"]) / v["current_liabilities"],
            inputs("current_assets", "current_liabilities"), reference=0.5,
        ),
        _adv(
            "adv.risk.short_term_debt_share", "Short-term share of financial debt", "حصة الديون قصيرة الأجل",
            lambda v: v["short_term_debt"] / (v["short_term_debt"] + v["long_term_debt"]),
            inputs("short_term_debt", "long_term_debt"), LOWER, reference=0.4,
        ),
        _trend(
            "adv.risk.earnings_at_risk", "Earnings at risk", "الأرباح المعرضة للمخاطر",
            _earnings_at_risk, inputs("net_income"), HIGHER, 0.5,
        ),
        _trend(
            "adv.risk.worst_revenue_growth", "Worst annual revenue change", "أسوأ تغير سنوي في الإيرادات",
            lambda v: min(stats.growth_rates(v.series("revenue"))), inputs("revenue"), HIGHER, -0.02,
        ),
        _adv(
            "adv.risk.interest_to_operating_cash", "Interest to operating cash flow", "الفوائد إلى التدفق النقدي التشغيلي",
            lambda v: v["interest_expense"] / v["operating_cash_flow"],
            inputs("interest_expense", "operating_cash_flow"), LOWER, reference=0.1,
        ),
        _adv(
            "adv.risk.fixed_charge_coverage", "Fixed charge coverage", "تغطية الأعباء الثابتة",
            lambda v: (v["operating_income"] + v["depreciation_amortization"])
            / (v["interest_expense"] + v["debt_repayment"]),
            inputs("operating_income", "depreciation_amortization", "interest_expense", "debt_repayment"),
            reference=2.0, unit="times",
        ),
        _adv(
            "adv.risk.tangible_equity_cushion", "Tangible equity to assets", "حقوق الملكية الملموسة إلى الأصول",
            lambda v: (v["total_equity"] - v["intangible_assets"]) / v["total_assets"],
            inputs("total_equity", "intangible_assets", "total_assets"), reference=0.4,
        ),
        _adv(
            "adv.risk.intangible_intensity", "Intangibles to equity", "الأصول غير الملموسة إلى حقوق الملكية",
            lambda v: v["intangible_assets"] / v["total_equity"],
            inputs("intangible_assets", "total_equity"), LOWER, reference=0.1,
        ),
        _trend(
            "adv.risk.operating_income_variability", "Operating income variability", "تذبذب الربح التشغيلي",
            lambda v: stats.coefficient_of_variation(v.series("operating_income")),
            inputs("operating_income"), LOWER, 0.25,
        ),
    ]


# -- anomaly and integrity checks -----------------------------------------------------------


def _accrual_quality(v) -> float:
    average_assets = (v["total_assets"] + v.prev("total_assets")) / 2.0
    return abs(v["net_income"] - v["operating_cash_flow"]) / average_assets


def _growth_gap(key: str, base: str):
    return lambda v: stats.change(v[key], v.prev(key)) - stats.change(v[base], v.prev(base))


def _detection() -> List[AnalysisDefinition]:
    return [
        _change(
            "adv.detect.accrual_quality", "Accrual quality gap", "فجوة جودة المستحقات",
            _accrual_quality, inputs("net_income", "operating_cash_flow", "total_assets"), LOWER, 0.03,
        ),
        _change(
            "adv.detect.receivables_growth_gap", "Receivables growth over revenue growth",
            "فجوة نمو الذمم المدينة عن نمو الإيرادات",
            _growth_gap("accounts_receivable", "revenue"), inputs("accounts_receivable", "revenue"), LOWER, 0.02,
        ),
        _change(
            "adv.detect.inventory_growth_gap", "Inventory growth over cost of sales growth",
            "فجوة نمو المخزون عن نمو تكلفة المبيعات",
            _growth_gap("inventory", "cost_of_goods_sold"), inputs("inventory", "cost_of_goods_sold"), LOWER, 0.02,
        ),
        _change(
            "adv.detect.gross_margin_jump", "Gross margin jump", "القفزة في هامش الربح الإجمالي",
            lambda v: abs(v["gross_profit"] / v["revenue"] - v.prev("gross_profit") / v.prev("revenue")),
            inputs("gross_profit", "revenue"), LOWER, 0.01,
        ),
        _change(
            "adv.detect.sales_cash_gap", "Operating cash growth over revenue growth",
            "فجوة نمو التدفق النقدي عن نمو الإيرادات",
            _growth_gap("operating_cash_flow", "revenue"), inputs("operating_cash_flow", "revenue"), HIGHER, 0.01,
        ),
        _adv(
            "adv.detect.benford_deviation", "Leading-digit deviation (Benford)", "الانحراف عن قانون بنفورد",
            lambda v: stats.benford_deviation(list(v.items().values())),
            inputs("revenue", "total_assets"), LOWER, reference=0.03,
        ),
        _adv(
            "adv.detect.balance_sheet_gap", "Balance sheet identity gap", "فجوة معادلة الميزانية",
            lambda v: abs(v["total_assets"] - v["total_liabilities"] - v["total_equity"]) / v["total_assets"],
            inputs("total_assets", "total_liabilities", "total_equity"), LOWER, reference=0.005,
        ),
        _adv(
            "adv.detect.cash_reconciliation_gap", "Cash reconciliation gap", "فجوة مطابقة النقدية",
            lambda v: abs(v["beginning_cash"] + v["net_change_in_cash"] - v["ending_cash"]) / abs(v["ending_cash"]),
            inputs("beginning_cash", "net_change_in_cash", "ending_cash"), LOWER, reference=0.005,
        ),
        _adv(
            "adv.detect.operating_income_reconciliation", "Operating income reconciliation gap",
            "فجوة مطابقة الربح التشغيلي",
            lambda v: abs(v["gross_profit"] - v["operating_expenses"] - v["operating_income"]) / v["revenue"],
            inputs("gross_profit", "operating_expenses", "operating_income", "revenue"), LOWER, reference=0.01,
        ),
    ]


DEFINITIONS: Tuple[AnalysisDefinition, ...] = tuple(
    _scores() + _decomposition() + _statistics() + _risk() + _detection()
)
