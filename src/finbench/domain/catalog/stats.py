"""Small numpy helpers behind the trend and statistical analyses.

Helpers return ``None`` when a measure is not defined for the data (flat
series, non-positive CAGR endpoints) and let ``ZeroDivisionError`` escape for
zero denominators; the computer maps both to NotApplicable.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence

import numpy as np


def change(current: float, previous: float) -> float:
    """Relative change against the magnitude of the previous value."""
    return (current - previous) / abs(previous)


def growth_rates(values: Sequence[float]) -> List[float]:
    return [change(float(b), float(a)) for a, b in zip(values[:-1], values[1:])]


def cagr(values: Sequence[float]) -> Optional[float]:
    start, end = float(values[0]), float(values[-1])
    periods = len(values) - 1
    if periods < 1 or start <= 0 or end <= 0:
        return None
    return (end / start) ** (1.0 / periods) - 1.0


def _fit(values: Sequence[float]):
    y = np.asarray(values, dtype=float)
    x = np.arange(len(y), dtype=float)
    slope, intercept = np.polyfit(x, y, 1)
    return x, y, float(slope), float(intercept)


def normalized_slope(values: Sequence[float]) -> float:
    """Least-squares slope per year divided by the magnitude of the mean."""
    _, y, slope, _ = _fit(values)
    return slope / abs(float(np.mean(y)))


def slope(values: Sequence[float]) -> float:
    return _fit(values)[2]


def r_squared(values: Sequence[float]) -> Optional[float]:
    x, y, fitted_slope, intercept = _fit(values)
    total = float(np.sum((y - y.mean()) ** 2))
    if total == 0:
        return None
    residual = float(np.sum((y - (fitted_slope * x + intercept)) ** 2))
    return 1.0 - residual / total


def forecast_change(values: Sequence[float]) -> float:
    """Change implied by extrapolating the linear trend one year ahead."""
    x, y, fitted_slope, intercept = _fit(values)
    projected = fitted_slope * len(x) + intercept
    return change(projected, float(y[-1]))


def coefficient_of_variation(values: Sequence[float]) -> float:
    y = np.asarray(values, dtype=float)
    return float(np.std(y)) / abs(float(np.mean(y)))


def std(values: Sequence[float]) -> float:
    return float(np.std(np.asarray(values, dtype=float)))


def correlation(left: Sequence[float], right: Sequence[float]) -> Optional[float]:
    a = np.asarray(left, dtype=float)
    b = np.asarray(right, dtype=float)
    if len(a) < 2 or float(np.std(a)) == 0 or float(np.std(b)) == 0:
        return None
    return float(np.corrcoef(a, b)[0, 1])


def autocorrelation(values: Sequence[float]) -> Optional[float]:
    y = list(values)
    if len(y) < 3:
        return None
    return correlation(y[1:], y[:-1])


def zscore_of_latest(values: Sequence[float]) -> Optional[float]:
    y = np.asarray(values, dtype=float)
    spread = float(np.std(y))
    if spread == 0:
        return None
    return (float(y[-1]) - float(np.mean(y))) / spread


_BENFORD = np.array([math.log10(1 + 1 / digit) for digit in range(1, 10)])


def benford_deviation(values: Sequence[float]) -> Optional[float]:
    """Mean absolute deviation of leading-digit frequencies from Benford's law."""
    digits = []
    for value in values:
        magnitude = abs(float(value))
        if magnitude == 0 or not math.isfinite(magnitude):
            continue
        digits.append(int(f"{magnitude:e}"[0]))
    if len(digits) < 10:
        return None
    observed = np.bincount(digits, minlength=10)[1:] / len(digits)
    return float(np.mean(np.abs(observed - _BENFORD)))
