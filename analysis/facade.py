"""Entry point the dashboard calls with a window and gets summaries back."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .errors import EmptySample
from .series import Series, SeriesWindow
from .spectral import Spectrum, estimate_spectrum
from .stats import DescriptiveStatsResult, describe
from .trend import TrendResult, fit_trend

logger = logging.getLogger(__name__)


class AnalysisFacade:
    """Stateless composition of statistics, trend and spectrum.

    Windowed operations only see the window's visible slice; the spectrum
    always covers the whole series.
    """

    def __init__(self, sample_rate: float = 1.0):
        self.sample_rate = sample_rate

    def summarize(self, window: SeriesWindow) -> DescriptiveStatsResult:
        if window.is_empty():
            raise EmptySample(f"window [{window.lo}, {window.hi}] contains no data")
        return describe(window.values)

    def summarize_series(self, series: Series) -> DescriptiveStatsResult:
        return describe(series.values)

    def summarize_pair(
        self, window_a: SeriesWindow, window_b: SeriesWindow
    ) -> Tuple[Optional[DescriptiveStatsResult], Optional[DescriptiveStatsResult]]:
        """Summaries for two windows; an empty side comes back as ``None``."""
        return self._summarize_or_none(window_a), self._summarize_or_none(window_b)

    def _summarize_or_none(self, window: SeriesWindow) -> Optional[DescriptiveStatsResult]:
        try:
            return self.summarize(window)
        except EmptySample as exc:
            logger.debug("no summary for %r: %s", window.series.title, exc)
            return None

    def fit_trend(self, window: SeriesWindow) -> Optional[TrendResult]:
        return fit_trend(window.values, dates=window.dates)

    def spectrum(self, series: Series, sample_rate: Optional[float] = None) -> Spectrum:
        rate = self.sample_rate if sample_rate is None else sample_rate
        # gaps are dropped, the remaining samples are treated as contiguous
        return estimate_spectrum(series.dropna().values, sample_rate=rate)
