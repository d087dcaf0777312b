"""Evaluate catalog formulas against a statement window."""
from __future__ import annotations

import logging
import math
from typing import List, Tuple, Union

import numpy as np

from finbench.domain.catalog.definitions import AnalysisDefinition, Scope
from finbench.domain.models.results import ComputedAnalysis, NotApplicable, Numeric, YearValue
from finbench.domain.window import StatementWindow

logger = logging.getLogger(__name__)

MISSING = "missing:{key}"
INSUFFICIENT_YEARS = "insufficient:years"
UNDEFINED_DIVISION = "undefined:division"
UNDEFINED_VALUE = "undefined:value"


class RatioComputer:
    """Turn one definition plus a window into ``Numeric`` or ``NotApplicable``.

    Missing inputs, too short a history and undefined arithmetic are data, not
    errors. Anything else a formula raises propagates to the caller.
    """

    def compute(self, definition: AnalysisDefinition, window: StatementWindow) -> ComputedAnalysis:
        years = window.years
        if len(years) < definition.min_years:
            return ComputedAnalysis(definition.id, NotApplicable(INSUFFICIENT_YEARS))

        missing = window.first_missing(definition.required_inputs, self._mandatory_years(definition, years))
        if missing is not None:
            return ComputedAnalysis(definition.id, NotApplicable(MISSING.format(key=missing)))

        latest = years[-1]
        points: List[YearValue] = []
        for year in self._years_to_evaluate(definition, window):
            outcome = self._evaluate(definition, window, year)
            if isinstance(outcome, NotApplicable):
                if year == latest:
                    return ComputedAnalysis(definition.id, outcome)
                logger.debug("%s undefined for %s (%s)", definition.id, year, outcome.reason)
                continue
            points.append(YearValue(fiscal_year=year, value=outcome))
        return ComputedAnalysis(definition.id, Numeric(points=tuple(points)))

    @staticmethod
    def _mandatory_years(definition: AnalysisDefinition, years: Tuple[int, ...]) -> Tuple[int, ...]:
        if definition.scope is Scope.TREND:
            return years
        if definition.scope is Scope.CHANGE:
            return years[-2:]
        return years[-1:]

    @staticmethod
    def _years_to_evaluate(definition: AnalysisDefinition, window: StatementWindow) -> List[int]:
        """Years with complete inputs, oldest first; the latest year is always included."""
        years = window.years
        if definition.scope is Scope.TREND:
            return [years[-1]]
        required = definition.required_inputs
        if definition.scope is Scope.CHANGE:
            return [
                year
                for previous, year in zip(years, years[1:])
                if window.first_missing(required, (previous, year)) is None
            ]
        return [year for year in years if window.first_missing(required, (year,)) is None]

    @staticmethod
    def _evaluate(
        definition: AnalysisDefinition, window: StatementWindow, year: int
    ) -> Union[float, NotApplicable]:
        with np.errstate(all="ignore"):
            try:
                value = definition.formula(window.view(year))
            except ZeroDivisionError:
                return NotApplicable(UNDEFINED_DIVISION)
        if value is None:
            return NotApplicable(UNDEFINED_VALUE)
        value = float(value)
        if not math.isfinite(value):
            return NotApplicable(UNDEFINED_DIVISION)
        return value
