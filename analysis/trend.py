"""Ordinary least-squares trendline over a sample indexed by position."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from .errors import DegenerateWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TrendResult:
    slope: float
    intercept: float
    r_squared: float
    fitted: pd.Series

    def predict(self, x) -> np.ndarray:
        return self.intercept + self.slope * np.asarray(x, dtype=np.float64)

    def equation(self) -> str:
        return f"y = {self.slope:.4f}x + {self.intercept:.2f} (R² = {self.r_squared:.3f})"


def r_squared(actual: np.ndarray, predicted: np.ndarray) -> float:
    """``1 - SS_res / SS_tot``; ``0.0`` when ``actual`` has no spread."""
    actual = np.asarray(actual, dtype=np.float64)
    predicted = np.asarray(predicted, dtype=np.float64)
    ss_tot = float(np.sum((actual - actual.mean()) ** 2))
    if ss_tot == 0.0:
        return 0.0
    ss_res = float(np.sum((actual - predicted) ** 2))
    return 1.0 - ss_res / ss_tot


def fit_line(x: Sequence[float], y: Sequence[float], index=None) -> Optional[TrendResult]:
    """Fit ``y = slope * x + intercept``.

    Returns ``None`` (trend unavailable) for fewer than two points or when
    every ``x`` is identical.
    """
    x = np.asarray(x, dtype=np.float64).reshape(-1)
    y = np.asarray(y, dtype=np.float64).reshape(-1)
    if x.size != y.size:
        raise ValueError(f"x and y must have the same length, got {x.size} and {y.size}")

    n = x.size
    if n < 2:
        logger.debug("trend unavailable: %d point(s)", n)
        return None

    sum_x = float(x.sum())
    sum_y = float(y.sum())
    sum_xy = float(np.dot(x, y))
    sum_x2 = float(np.dot(x, x))
    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        logger.debug("trend unavailable: no spread in positions")
        return None

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    predicted = intercept + slope * x

    if index is None:
        index = pd.RangeIndex(n)
    fitted = pd.Series(predicted, index=index, name="trend")
    return TrendResult(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared(y, predicted),
        fitted=fitted,
    )


def fit_trend(values: Iterable[float], dates=None) -> Optional[TrendResult]:
    """Fit a trend against the 0-based position of each finite value.

    NaN values are dropped before ranking. ``dates``, when given, labels the
    fitted sequence for plotting and is filtered the same way.
    """
    y = np.asarray(values if isinstance(values, np.ndarray) else list(values), dtype=np.float64).reshape(-1)
    keep = np.isfinite(y)
    index = None
    if dates is not None:
        index = pd.DatetimeIndex(dates)
        if len(index) != y.size:
            raise ValueError(f"dates and values must have the same length, got {len(index)} and {y.size}")
        index = index[keep]
    y = y[keep]
    x = np.arange(y.size, dtype=np.float64)
    return fit_line(x, y, index=index)


def require_trend(values: Iterable[float], dates=None) -> TrendResult:
    """Like :func:`fit_trend` but raises :class:`DegenerateWindow` instead of returning ``None``."""
    result = fit_trend(values, dates)
    if result is None:
        raise DegenerateWindow("trend needs at least two points with distinct positions")
    return result
