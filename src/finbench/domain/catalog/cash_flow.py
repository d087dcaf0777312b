"""Cash-flow and movement analyses: cash margins, coverage, capex, break-even and cash growth."""
from __future__ import annotations

from typing import Tuple

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


def _flow(
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
        category=Category.CASH_FLOW,
        name=BilingualText(ar=ar, en=en),
        formula=formula,
        required_inputs=required,
        direction=direction,
        scope=scope,
        min_years=min_years,
        reference_average=reference,
        unit=unit,
    )


def _fcf(v) -> float:
    return v["operating_cash_flow"] - v["capital_expenditures"]


def _prev_fcf(v) -> float:
    return v.prev("operating_cash_flow") - v.prev("capital_expenditures")


def _contribution(v) -> float:
    return v["revenue"] - v["variable_costs"]


def _working_capital(v) -> float:
    return v["current_assets"] - v["current_liabilities"]


def _prev_working_capital(v) -> float:
    return v.prev("current_assets") - v.prev("current_liabilities")


_FCF = ("operating_cash_flow", "capital_expenditures")
_BREAK_EVEN = ("revenue", "variable_costs", "fixed_costs")

DEFINITIONS: Tuple[AnalysisDefinition, ...] = (
    _flow(
        "flow.operating_cash_margin", "Operating cash flow margin", "هامش التدفق النقدي التشغيلي",
        lambda v: v["operating_cash_flow"] / v["revenue"],
        inputs("operating_cash_flow", "revenue"), reference=0.12,
    ),
    _flow(
        "flow.free_cash_flow_margin", "Free cash flow margin", "هامش التدفق النقدي الحر",
        lambda v: _fcf(v) / v["revenue"], inputs(*_FCF, "revenue"), reference=0.07,
    ),
    _flow(
        "flow.cash_earnings_quality", "Cash quality of earnings", "جودة الأرباح النقدية",
        lambda v: v["operating_cash_flow"] / v["net_income"],
        inputs("operating_cash_flow", "net_income"), reference=1.2, unit="times",
    ),
    _flow(
        "flow.capex_to_revenue", "Capital expenditures to revenue", "النفقات الرأسمالية إلى الإيرادات",
        lambda v: v["capital_expenditures"] / v["revenue"],
        inputs("capital_expenditures", "revenue"), NEUTRAL, reference=0.05,
    ),
    _flow(
        "flow.capex_to_depreciation", "Capital expenditures to depreciation", "النفقات الرأسمالية إلى الإهلاك",
        lambda v: v["capital_expenditures"] / v["depreciation_amortization"],
        inputs("capital_expenditures", "depreciation_amortization"), NEUTRAL, reference=1.2, unit="times",
    ),
    _flow(
        "flow.capex_coverage", "Capital expenditure coverage", "تغطية النفقات الرأسمالية",
        lambda v: v["operating_cash_flow"] / v["capital_expenditures"],
        inputs(*_FCF), reference=2.0, unit="times",
    ),
    _flow(
        "flow.cash_flow_to_debt", "Operating cash flow to total liabilities", "التدفق النقدي التشغيلي إلى إجمالي الخصوم",
        lambda v: v["operating_cash_flow"] / v["total_liabilities"],
        inputs("operating_cash_flow", "total_liabilities"), reference=0.2,
    ),
    _flow(
        "flow.cash_return_on_assets", "Cash return on assets", "العائد النقدي على الأصول",
        lambda v: v["operating_cash_flow"] / v["total_assets"],
        inputs("operating_cash_flow", "total_assets"), reference=0.08,
    ),
    _flow(
        "flow.cash_return_on_equity", "Cash return on equity", "العائد النقدي على حقوق الملكية",
        lambda v: v["operating_cash_flow"] / v["total_equity"],
        inputs("operating_cash_flow", "total_equity"), reference=0.15,
    ),
    _flow(
        "flow.dividend_coverage", "Dividend cash coverage", "التغطية النقدية للتوزيعات",
        lambda v: v["operating_cash_flow"] / v["dividends_paid"],
        inputs("operating_cash_flow", "dividends_paid"), reference=3.0, unit="times",
    ),
    _flow(
        "flow.free_cash_flow_to_equity", "Free cash flow to equity", "التدفق النقدي الحر إلى حقوق الملكية",
        lambda v: _fcf(v) / v["total_equity"], inputs(*_FCF, "total_equity"), reference=0.08,
    ),
    _flow(
        "flow.reinvestment_ratio", "Cash reinvestment ratio", "نسبة إعادة الاستثمار النقدي",
        lambda v: v["capital_expenditures"] / v["operating_cash_flow"],
        inputs(*_FCF), NEUTRAL, reference=0.5,
    ),
    _flow(
        "flow.financing_to_operating", "Financing flow to operating flow", "التدفق التمويلي إلى التدفق التشغيلي",
        lambda v: v["financing_cash_flow"] / v["operating_cash_flow"],
        inputs("financing_cash_flow", "operating_cash_flow"), NEUTRAL, reference=-0.3,
    ),
    _flow(
        "flow.investing_to_operating", "Investing outflow to operating flow", "التدفق الاستثماري إلى التدفق التشغيلي",
        lambda v: -v["investing_cash_flow"] / v["operating_cash_flow"],
        inputs("investing_cash_flow", "operating_cash_flow"), NEUTRAL, reference=0.6,
    ),
    _flow(
        "flow.net_cash_change_to_revenue", "Net change in cash to revenue", "صافي التغير في النقدية إلى الإيرادات",
        lambda v: v["net_change_in_cash"] / v["revenue"],
        inputs("net_change_in_cash", "revenue"), NEUTRAL, reference=0.02,
    ),
    _flow(
        "flow.cash_interest_coverage", "Cash interest coverage", "التغطية النقدية للفوائد",
        lambda v: (v["operating_cash_flow"] + v["interest_expense"]) / v["interest_expense"],
        inputs("operating_cash_flow", "interest_expense"), reference=6.0, unit="times",
    ),
    _flow(
        "flow.debt_payback_capacity", "Operating cash flow to financial debt", "التدفق النقدي التشغيلي إلى الديون التمويلية",
        lambda v: v["operating_cash_flow"] / (v["short_term_debt"] + v["long_term_debt"]),
        inputs("operating_cash_flow", "short_term_debt", "long_term_debt"), reference=0.3,
    ),
    _flow(
        "flow.free_cash_flow_yield", "Free cash flow yield", "عائد التدفق النقدي الحر",
        lambda v: _fcf(v) / (v["share_price"] * v["shares_outstanding"]),
        inputs(*_FCF, "share_price", "shares_outstanding"), reference=0.05,
    ),
    _flow(
        "flow.operating_cash_flow_per_share", "Operating cash flow per share", "التدفق النقدي التشغيلي للسهم",
        lambda v: v["operating_cash_flow"] / v["shares_outstanding"],
        inputs("operating_cash_flow", "shares_outstanding"), reference=1.5, unit="currency",
    ),
    _flow(
        "flow.free_cash_flow_per_share", "Free cash flow per share", "التدفق النقدي الحر للسهم",
        lambda v: _fcf(v) / v["shares_outstanding"],
        inputs(*_FCF, "shares_outstanding"), reference=1.0, unit="currency",
    ),
    _flow(
        "flow.defensive_interval", "Defensive interval", "فترة الحماية الدفاعية",
        lambda v: (v["cash_and_equivalents"] + v["accounts_receivable"]) / (v["operating_expenses"] / 365.0),
        inputs("cash_and_equivalents", "accounts_receivable", "operating_expenses"), reference=90.0, unit="days",
    ),
    _flow(
        "flow.working_capital_change", "Change in working capital to revenue", "التغير في رأس المال العامل إلى الإيرادات",
        lambda v: (_working_capital(v) - _prev_working_capital(v)) / v["revenue"],
        inputs("current_assets", "current_liabilities", "revenue"), NEUTRAL, reference=0.02,
        scope=Scope.CHANGE,
    ),
    _flow(
        "flow.operating_cash_flow_growth", "Operating cash flow growth", "نمو التدفق النقدي التشغيلي",
        lambda v: stats.change(v["operating_cash_flow"], v.prev("operating_cash_flow")),
        inputs("operating_cash_flow"), reference=0.05, scope=Scope.CHANGE,
    ),
    _flow(
        "flow.free_cash_flow_growth", "Free cash flow growth", "نمو التدفق النقدي الحر",
        lambda v: stats.change(_fcf(v), _prev_fcf(v)), inputs(*_FCF), reference=0.05, scope=Scope.CHANGE,
    ),
    _flow(
        "flow.cash_conversion_efficiency", "Cash conversion of operating income", "كفاءة تحويل الربح التشغيلي إلى نقد",
        lambda v: v["operating_cash_flow"] / v["operating_income"],
        inputs("operating_cash_flow", "operating_income"), reference=1.1, unit="times",
    ),
    _flow(
        "flow.accruals_ratio", "Accruals ratio", "نسبة المستحقات",
        lambda v: (v["net_income"] - v["operating_cash_flow"]) / v["total_assets"],
        inputs("net_income", "operating_cash_flow", "total_assets"), LOWER, reference=0.03,
    ),
    _flow(
        "flow.break_even_ratio", "Break-even revenue to revenue", "نسبة إيرادات التعادل إلى الإيرادات",
        lambda v: v["fixed_costs"] / _contribution(v), inputs(*_BREAK_EVEN), LOWER, reference=0.7,
    ),
    _flow(
        "flow.margin_of_safety", "Margin of safety", "هامش الأمان",
        lambda v: 1.0 - v["fixed_costs"] / _contribution(v), inputs(*_BREAK_EVEN), reference=0.3,
    ),
    _flow(
        "flow.contribution_margin", "Contribution margin ratio", "نسبة هامش المساهمة",
        lambda v: _contribution(v) / v["revenue"], inputs("revenue", "variable_costs"), reference=0.4,
    ),
    _flow(
        "flow.operating_leverage", "Degree of operating leverage", "درجة الرافعة التشغيلية",
        lambda v: _contribution(v) / (_contribution(v) - v["fixed_costs"]),
        inputs(*_BREAK_EVEN), NEUTRAL, reference=2.0, unit="times",
    ),
    _flow(
        "flow.fixed_cost_share", "Fixed cost share of total costs", "نسبة التكاليف الثابتة إلى إجمالي التكاليف",
        lambda v: v["fixed_costs"] / (v["fixed_costs"] + v["variable_costs"]),
        inputs("fixed_costs", "variable_costs"), NEUTRAL, reference=0.35,
    ),
    _flow(
        "flow.ending_cash_growth", "Growth in ending cash balance", "نمو رصيد النقدية آخر المدة",
        lambda v: stats.change(v["ending_cash"], v.prev("ending_cash")),
        inputs("ending_cash"), reference=0.05, scope=Scope.CHANGE,
    ),
    _flow(
        "flow.financing_dependency", "New borrowing to operating cash flow", "الاعتماد على الاقتراض الجديد",
        lambda v: v["debt_issued"] / v["operating_cash_flow"],
        inputs("debt_issued", "operating_cash_flow"), LOWER, reference=0.3,
    ),
    _flow(
        "flow.free_cash_flow_payout", "Dividends to free cash flow", "التوزيعات إلى التدفق النقدي الحر",
        lambda v: v["dividends_paid"] / _fcf(v), inputs(*_FCF, "dividends_paid"), NEUTRAL, reference=0.5,
    ),
    _flow(
        "flow.operating_cash_flow_variability", "Variability of operating cash flow", "تذبذب التدفق النقدي التشغيلي",
        lambda v: stats.coefficient_of_variation(v.series("operating_cash_flow")),
        inputs("operating_cash_flow"), LOWER, reference=0.2, scope=Scope.TREND, min_years=3,
    ),
    _flow(
        "flow.operating_cash_flow_cagr", "Compound growth of operating cash flow", "النمو المركب للتدفق النقدي التشغيلي",
        lambda v: stats.cagr(v.series("operating_cash_flow")),
        inputs("operating_cash_flow"), reference=0.05, scope=Scope.TREND,
    ),
)
