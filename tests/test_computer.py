from __future__ import annotations

import pytest

from conftest import make_statements
from finbench.domain.catalog import Category, get_catalog
from finbench.domain.catalog.definitions import AnalysisDefinition, Scope
from finbench.domain.models.financials import FinancialStatement
from finbench.domain.models.results import BilingualText, NotApplicable, Numeric
from finbench.domain.services.computer import RatioComputer
from finbench.domain.window import StatementWindow

computer = RatioComputer()


def window_of(statements) -> StatementWindow:
    return StatementWindow.from_statements(statements)


def custom(formula, required=("revenue",), scope=Scope.POINT, min_years=1) -> AnalysisDefinition:
    return AnalysisDefinition(
        id="test.custom",
        category=Category.ADVANCED,
        name=BilingualText(ar="مخصص", en="Custom"),
        formula=formula,
        required_inputs=frozenset(required),
        scope=scope,
        min_years=min_years,
    )


def test_point_analysis_yields_one_value_per_year():
    result = computer.compute(get_catalog().get("ratio.current"), window_of(make_statements())).result
    assert isinstance(result, Numeric)
    assert [point.fiscal_year for point in result.points] == [2021, 2022, 2023]
    assert all(point.value == pytest.approx(1.75) for point in result.points)


def test_missing_input_is_not_applicable():
    statements = make_statements(drop=("inventory",))
    computed = computer.compute(get_catalog().get("ratio.quick"), window_of(statements))
    assert computed.analysis_id == "ratio.quick"
    assert computed.result == NotApplicable("missing:inventory")


def test_missing_reason_names_first_key_in_sorted_order():
    statements = make_statements(drop=("inventory", "current_liabilities"))
    computed = computer.compute(get_catalog().get("ratio.quick"), window_of(statements))
    assert computed.result == NotApplicable("missing:current_liabilities")


def test_none_value_counts_as_missing():
    statements = [
        FinancialStatement("ACME", 2023, "balance_sheet", {"current_assets": 10.0, "current_liabilities": None}),
    ]
    computed = computer.compute(get_catalog().get("ratio.current"), window_of(statements))
    assert computed.result == NotApplicable("missing:current_liabilities")


def test_zero_denominator_is_undefined_division():
    statements = make_statements(overrides={"current_liabilities": 0.0})
    computed = computer.compute(get_catalog().get("ratio.current"), window_of(statements))
    assert computed.result == NotApplicable("undefined:division")


def test_earlier_year_division_error_drops_only_that_point():
    statements = make_statements(years=(2022, 2023))
    first = statements[0]
    patched = dict(first.line_items)
    patched["current_liabilities"] = 0.0
    statements[0] = FinancialStatement(first.company, first.fiscal_year, first.statement_type, patched)
    result = computer.compute(get_catalog().get("ratio.current"), window_of(statements)).result
    assert isinstance(result, Numeric)
    assert [point.fiscal_year for point in result.points] == [2023]


def test_trend_needs_enough_years():
    computed = computer.compute(get_catalog().get("struct.cagr.revenue"), window_of(make_statements(years=(2023,))))
    assert computed.result == NotApplicable("insufficient:years")


def test_trend_requires_inputs_in_every_year():
    statements = make_statements()
    first = statements[1]
    patched = {key: value for key, value in first.line_items.items() if key != "revenue"}
    statements[1] = FinancialStatement(first.company, first.fiscal_year, first.statement_type, patched)
    computed = computer.compute(get_catalog().get("struct.cagr.revenue"), window_of(statements))
    assert computed.result == NotApplicable("missing:revenue")


def test_change_analysis_uses_previous_year():
    result = computer.compute(
        get_catalog().get("struct.horizontal.revenue"), window_of(make_statements(years=(2022, 2023)))
    ).result
    assert isinstance(result, Numeric)
    assert len(result.points) == 1
    assert result.latest == pytest.approx(0.1)


def test_formula_returning_none_is_undefined_value():
    computed = computer.compute(custom(lambda v: None), window_of(make_statements()))
    assert computed.result == NotApplicable("undefined:value")


def test_non_finite_result_is_undefined_division():
    computed = computer.compute(custom(lambda v: float("inf")), window_of(make_statements()))
    assert computed.result == NotApplicable("undefined:division")


def test_unexpected_errors_propagate():
    def explode(view):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        computer.compute(custom(explode), window_of(make_statements()))


def test_computation_is_deterministic():
    window = window_of(make_statements())
    definition = get_catalog().get("adv.altman_z")
    assert computer.compute(definition, window) == computer.compute(definition, window)


def _blank_year(statements, year):
    return [
        FinancialStatement(item.company, item.fiscal_year, item.statement_type, {})
        if item.fiscal_year == year
        else item
        for item in statements
    ]


def test_empty_year_stays_in_the_window():
    window = window_of(_blank_year(make_statements(), 2022))
    assert window.years == (2021, 2022, 2023)

    change = computer.compute(get_catalog().get("struct.horizontal.revenue"), window)
    assert change.result == NotApplicable("missing:revenue")

    point = computer.compute(get_catalog().get("ratio.current"), window).result
    assert isinstance(point, Numeric)
    assert [item.fiscal_year for item in point.points] == [2021, 2023]


def test_undeclared_line_items_are_never_defaulted():
    with pytest.raises(KeyError):
        computer.compute(custom(lambda v: v["revenue"] + v["goodwill"]), window_of(make_statements()))
