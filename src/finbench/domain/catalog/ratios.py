"""Classical financial ratios: liquidity, activity, leverage, profitability and market."""
from __future__ import annotations

from typing import Tuple

from finbench.domain.catalog.definitions import (
    HIGHER,
    LOWER,
    NEUTRAL,
    AnalysisDefinition,
    Category,
    Direction,
    Formula,
    inputs,
)
from finbench.domain.models.results import BilingualText

DAYS_PER_YEAR = 365.0


def _ratio(
    analysis_id: str,
    en: str,
    ar: str,
    formula: Formula,
    required,
    direction: Direction = HIGHER,
    reference: float = 1.0,
    unit: str = "ratio",
) -> AnalysisDefinition:
    return AnalysisDefinition(
        id=analysis_id,
        category=Category.CLASSICAL_RATIO,
        name=BilingualText(ar=ar, en=en),
        formula=formula,
        required_inputs=required,
        direction=direction,
        reference_average=reference,
        unit=unit,
    )


def _tax_rate(v) -> float:
    return v["tax_expense"] / (v["net_income"] + v["tax_expense"])


def _dso(v) -> float:
    return v["accounts_receivable"] / v["revenue"] * DAYS_PER_YEAR


def _dio(v) -> float:
    return v["inventory"] / v["cost_of_goods_sold"] * DAYS_PER_YEAR


def _dpo(v) -> float:
    return v["accounts_payable"] / v["cost_of_goods_sold"] * DAYS_PER_YEAR


def _liquidity() -> Tuple[AnalysisDefinition, ...]:
    return (
        _ratio(
            "ratio.current", "Current ratio", "نسبة التداول",
            lambda v: v["current_assets"] / v["current_liabilities"],
            inputs("current_assets", "current_liabilities"), reference=1.5,
        ),
        _ratio(
            "ratio.quick", "Quick ratio", "النسبة السريعة",
            lambda v: (v["current_assets"] - v["inventory"]) / v["current_liabilities"],
            inputs("current_assets", "inventory", "current_liabilities"), reference=1.0,
        ),
        _ratio(
            "ratio.cash", "Cash ratio", "نسبة النقدية",
            lambda v: v["cash_and_equivalents"] / v["current_liabilities"],
            inputs("cash_and_equivalents", "current_liabilities"), reference=0.5,
        ),
        _ratio(
            "ratio.operating_cash_flow", "Operating cash flow ratio", "نسبة التدفق النقدي التشغيلي",
            lambda v: v["operating_cash_flow"] / v["current_liabilities"],
            inputs("operating_cash_flow", "current_liabilities"), reference=0.4,
        ),
        _ratio(
            "ratio.working_capital_to_assets", "Working capital to total assets",
            "رأس المال العامل إلى إجمالي الأصول",
            lambda v: (v["current_assets"] - v["current_liabilities"]) / v["total_assets"],
            inputs("current_assets", "current_liabilities", "total_assets"), reference=0.2,
        ),
    )


def _activity() -> Tuple[AnalysisDefinition, ...]:
    return (
        _ratio(
            "ratio.inventory_turnover", "Inventory turnover", "معدل دوران المخزون",
            lambda v: v["cost_of_goods_sold"] / v["inventory"],
            inputs("cost_of_goods_sold", "inventory"), reference=6.0, unit="times",
        ),
        _ratio(
            "ratio.receivables_turnover", "Receivables turnover", "معدل دوران الذمم المدينة",
            lambda v: v["revenue"] / v["accounts_receivable"],
            inputs("revenue", "accounts_receivable"), reference=8.0, unit="times",
        ),
        _ratio(
            "ratio.days_sales_outstanding", "Days sales outstanding", "متوسط فترة التحصيل",
            _dso, inputs("accounts_receivable", "revenue"), LOWER, reference=45.0, unit="days",
        ),
        _ratio(
            "ratio.payables_turnover", "Payables turnover", "معدل دوران الذمم الدائنة",
            lambda v: v["cost_of_goods_sold"] / v["accounts_payable"],
            inputs("cost_of_goods_sold", "accounts_payable"), NEUTRAL, reference=8.0, unit="times",
        ),
        _ratio(
            "ratio.days_payables_outstanding", "Days payables outstanding", "متوسط فترة السداد",
            _dpo, inputs("accounts_payable", "cost_of_goods_sold"), NEUTRAL, reference=45.0, unit="days",
        ),
        _ratio(
            "ratio.days_inventory_outstanding", "Days inventory outstanding", "متوسط فترة التخزين",
            _dio, inputs("inventory", "cost_of_goods_sold"), LOWER, reference=60.0, unit="days",
        ),
        _ratio(
            "ratio.fixed_asset_turnover", "Fixed asset turnover", "معدل دوران الأصول الثابتة",
            lambda v: v["revenue"] / v["fixed_assets"],
            inputs("revenue", "fixed_assets"), reference=3.0, unit="times",
        ),
        _ratio(
            "ratio.total_asset_turnover", "Total asset turnover", "معدل دوران إجمالي الأصول",
            lambda v: v["revenue"] / v["total_assets"],
            inputs("revenue", "total_assets"), reference=1.0, unit="times",
        ),
        _ratio(
            "ratio.operating_cycle", "Operating cycle", "الدورة التشغيلية",
            lambda v: _dio(v) + _dso(v),
            inputs("inventory", "cost_of_goods_sold", "accounts_receivable", "revenue"),
            LOWER, reference=105.0, unit="days",
        ),
        _ratio(
            "ratio.cash_conversion_cycle", "Cash conversion cycle", "دورة التحويل النقدي",
            lambda v: _dio(v) + _dso(v) - _dpo(v),
            inputs("inventory", "cost_of_goods_sold", "accounts_receivable", "revenue", "accounts_payable"),
            LOWER, reference=60.0, unit="days",
        ),
        _ratio(
            "ratio.working_capital_turnover", "Working capital turnover", "معدل دوران رأس المال العامل",
            lambda v: v["revenue"] / (v["current_assets"] - v["current_liabilities"]),
            inputs("revenue", "current_assets", "current_liabilities"), reference=5.0, unit="times",
        ),
        _ratio(
            "ratio.equity_turnover", "Equity turnover", "معدل دوران حقوق الملكية",
            lambda v: v["revenue"] / v["total_equity"],
            inputs("revenue", "total_equity"), reference=2.0, unit="times",
        ),
    )


def _leverage() -> Tuple[AnalysisDefinition, ...]:
    return (
        _ratio(
            "ratio.debt_to_assets", "Debt to assets", "نسبة الديون إلى الأصول",
            lambda v: v["total_liabilities"] / v["total_assets"],
            inputs("total_liabilities", "total_assets"), LOWER, reference=0.5,
        ),
        _ratio(
            "ratio.debt_to_equity", "Debt to equity", "نسبة الديون إلى حقوق الملكية",
            lambda v: v["total_liabilities"] / v["total_equity"],
            inputs("total_liabilities", "total_equity"), LOWER, reference=1.0,
        ),
        _ratio(
            "ratio.interest_coverage", "Interest coverage", "معدل تغطية الفوائد",
            lambda v: v["operating_income"] / v["interest_expense"],
            inputs("operating_income", "interest_expense"), reference=5.0, unit="times",
        ),
        _ratio(
            "ratio.debt_service_coverage", "Debt service coverage", "نسبة تغطية خدمة الدين",
            lambda v: v["operating_cash_flow"] / (v["interest_expense"] + v["debt_repayment"]),
            inputs("operating_cash_flow", "interest_expense", "debt_repayment"), reference=1.5, unit="times",
        ),
        _ratio(
            "ratio.equity_to_assets", "Equity to assets", "نسبة حقوق الملكية إلى الأصول",
            lambda v: v["total_equity"] / v["total_assets"],
            inputs("total_equity", "total_assets"), reference=0.5,
        ),
        _ratio(
            "ratio.equity_multiplier", "Equity multiplier", "مضاعف حقوق الملكية",
            lambda v: v["total_assets"] / v["total_equity"],
            inputs("total_assets", "total_equity"), LOWER, reference=2.0, unit="times",
        ),
        _ratio(
            "ratio.long_term_debt_to_capital", "Long-term debt to capital",
            "الديون طويلة الأجل إلى رأس المال المستثمر",
            lambda v: v["long_term_debt"] / (v["long_term_debt"] + v["total_equity"]),
            inputs("long_term_debt", "total_equity"), LOWER, reference=0.3,
        ),
        _ratio(
            "ratio.financial_debt_to_equity", "Financial debt to equity", "الديون التمويلية إلى حقوق الملكية",
            lambda v: (v["short_term_debt"] + v["long_term_debt"]) / v["total_equity"],
            inputs("short_term_debt", "long_term_debt", "total_equity"), LOWER, reference=0.6,
        ),
        _ratio(
            "ratio.net_debt_to_ebitda", "Net debt to EBITDA", "صافي الدين إلى الأرباح قبل الفوائد والضرائب والإهلاك",
            lambda v: (v["short_term_debt"] + v["long_term_debt"] - v["cash_and_equivalents"])
            / (v["operating_income"] + v["depreciation_amortization"]),
            inputs(
                "short_term_debt", "long_term_debt", "cash_and_equivalents",
                "operating_income", "depreciation_amortization",
            ),
            LOWER, reference=2.0, unit="times",
        ),
    )


def _profitability() -> Tuple[AnalysisDefinition, ...]:
    return (
        _ratio(
            "ratio.gross_margin", "Gross margin", "هامش الربح الإجمالي",
            lambda v: v["gross_profit"] / v["revenue"],
            inputs("gross_profit", "revenue"), reference=0.35,
        ),
        _ratio(
            "ratio.operating_margin", "Operating margin", "هامش الربح التشغيلي",
            lambda v: v["operating_income"] / v["revenue"],
            inputs("operating_income", "revenue"), reference=0.12,
        ),
        _ratio(
            "ratio.net_margin", "Net margin", "هامش صافي الربح",
            lambda v: v["net_income"] / v["revenue"],
            inputs("net_income", "revenue"), reference=0.08,
        ),
        _ratio(
            "ratio.ebitda_margin", "EBITDA margin", "هامش الأرباح قبل الفوائد والضرائب والإهلاك",
            lambda v: (v["operating_income"] + v["depreciation_amortization"]) / v["revenue"],
            inputs("operating_income", "depreciation_amortization", "revenue"), reference=0.18,
        ),
        _ratio(
            "ratio.return_on_assets", "Return on assets", "العائد على الأصول",
            lambda v: v["net_income"] / v["total_assets"],
            inputs("net_income", "total_assets"), reference=0.06,
        ),
        _ratio(
            "ratio.return_on_equity", "Return on equity", "العائد على حقوق الملكية",
            lambda v: v["net_income"] / v["total_equity"],
            inputs("net_income", "total_equity"), reference=0.12,
        ),
        _ratio(
            "ratio.return_on_invested_capital", "Return on invested capital", "العائد على رأس المال المستثمر",
            lambda v: v["operating_income"] * (1.0 - _tax_rate(v))
            / (v["total_equity"] + v["short_term_debt"] + v["long_term_debt"]),
            inputs(
                "operating_income", "tax_expense", "net_income",
                "total_equity", "short_term_debt", "long_term_debt",
            ),
            reference=0.10,
        ),
        _ratio(
            "ratio.return_on_capital_employed", "Return on capital employed", "العائد على رأس المال المستخدم",
            lambda v: v["operating_income"] / (v["total_assets"] - v["current_liabilities"]),
            inputs("operating_income", "total_assets", "current_liabilities"), reference=0.12,
        ),
        _ratio(
            "ratio.effective_tax_rate", "Effective tax rate", "معدل الضريبة الفعلي",
            _tax_rate, inputs("tax_expense", "net_income"), NEUTRAL, reference=0.2,
        ),
        _ratio(
            "ratio.operating_expense_ratio", "Operating expense ratio", "نسبة المصروفات التشغيلية",
            lambda v: v["operating_expenses"] / v["revenue"],
            inputs("operating_expenses", "revenue"), LOWER, reference=0.23,
        ),
    )


def _market() -> Tuple[AnalysisDefinition, ...]:
    return (
        _ratio(
            "ratio.price_to_earnings", "Price to earnings", "مضاعف الربحية",
            lambda v: v["share_price"] / (v["net_income"] / v["shares_outstanding"]),
            inputs("share_price", "net_income", "shares_outstanding"), NEUTRAL, reference=15.0, unit="times",
        ),
        _ratio(
            "ratio.price_to_book", "Price to book", "مضاعف القيمة الدفترية",
            lambda v: v["share_price"] / (v["total_equity"] / v["shares_outstanding"]),
            inputs("share_price", "total_equity", "shares_outstanding"), NEUTRAL, reference=2.0, unit="times",
        ),
        _ratio(
            "ratio.dividend_yield", "Dividend yield", "عائد التوزيعات",
            lambda v: v["dividends_paid"] / v["shares_outstanding"] / v["share_price"],
            inputs("dividends_paid", "shares_outstanding", "share_price"), reference=0.03,
        ),
        _ratio(
            "ratio.earnings_per_share", "Earnings per share", "ربحية السهم",
            lambda v: v["net_income"] / v["shares_outstanding"],
            inputs("net_income", "shares_outstanding"), reference=1.0, unit="currency",
        ),
        _ratio(
            "ratio.book_value_per_share", "Book value per share", "القيمة الدفترية للسهم",
            lambda v: v["total_equity"] / v["shares_outstanding"],
            inputs("total_equity", "shares_outstanding"), reference=10.0, unit="currency",
        ),
        _ratio(
            "ratio.payout", "Dividend payout ratio", "نسبة توزيع الأرباح",
            lambda v: v["dividends_paid"] / v["net_income"],
            inputs("dividends_paid", "net_income"), NEUTRAL, reference=0.4,
        ),
        _ratio(
            "ratio.price_to_sales", "Price to sales", "مضاعف المبيعات",
            lambda v: v["share_price"] * v["shares_outstanding"] / v["revenue"],
            inputs("share_price", "shares_outstanding", "revenue"), NEUTRAL, reference=1.5, unit="times",
        ),
        _ratio(
            "ratio.earnings_yield", "Earnings yield", "عائد الأرباح",
            lambda v: v["net_income"] / (v["share_price"] * v["shares_outstanding"]),
            inputs("net_income", "share_price", "shares_outstanding"), reference=0.066,
        ),
    )


DEFINITIONS: Tuple[AnalysisDefinition, ...] = (
    _liquidity() + _activity() + _leverage() + _profitability() + _market()
)
