"""Chart kinds, one view type per kind, and the analysis each view needs."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from analysis.errors import EmptySample
from analysis.facade import AnalysisFacade
from analysis.gauge import GaugeReading, gauge_reading
from analysis.histogram import HistogramResult, compute_histogram
from analysis.series import Series, SeriesWindow, SpectrogramGrid
from analysis.spectral import Spectrum
from analysis.stats import DescriptiveStatsResult
from analysis.trend import TrendResult

NO_DATA = "No data available"


class ChartKind(enum.Enum):
    TIME_SERIES = "timeSeries"
    MULTI_SERIES = "multiSeries"
    SPECTROGRAM = "spectrogram"
    PERIODOGRAM = "periodogram"
    HISTOGRAM = "histogram"
    GAUGE = "gauge"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ChartKind.TIME_SERIES: "Time Series",
    ChartKind.MULTI_SERIES: "Multi Time Series",
    ChartKind.SPECTROGRAM: "Spectrogram",
    ChartKind.PERIODOGRAM: "Periodogram",
    ChartKind.HISTOGRAM: "Histogram",
    ChartKind.GAUGE: "Gauge",
}


@dataclass(frozen=True)
class TimeSeriesView:
    window: SeriesWindow
    kind = ChartKind.TIME_SERIES


@dataclass(frozen=True)
class MultiSeriesView:
    window_a: SeriesWindow
    window_b: SeriesWindow
    kind = ChartKind.MULTI_SERIES


@dataclass(frozen=True)
class SpectrogramView:
    grid: SpectrogramGrid
    kind = ChartKind.SPECTROGRAM


@dataclass(frozen=True)
class PeriodogramView:
    series: Series
    kind = ChartKind.PERIODOGRAM


@dataclass(frozen=True)
class HistogramView:
    window: SeriesWindow
    bins: int = 20
    kind = ChartKind.HISTOGRAM


@dataclass(frozen=True)
class GaugeView:
    value: float
    kind = ChartKind.GAUGE


ChartView = Union[TimeSeriesView, MultiSeriesView, SpectrogramView, PeriodogramView, HistogramView, GaugeView]


@dataclass(frozen=True)
class ViewAnalysis:
    """Everything a view needs to display; fields a view does not use stay ``None``."""

    kind: ChartKind
    stats: Optional[DescriptiveStatsResult] = None
    pair_stats: Optional[Tuple[Optional[DescriptiveStatsResult], Optional[DescriptiveStatsResult]]] = None
    trend: Optional[TrendResult] = None
    pair_trends: Optional[Tuple[Optional[TrendResult], Optional[TrendResult]]] = None
    spectrum: Optional[Spectrum] = None
    histogram: Optional[HistogramResult] = None
    gauge: Optional[GaugeReading] = None
    power_range: Optional[Tuple[float, float]] = None
    message: Optional[str] = None


def analyze_view(view: ChartView, facade: AnalysisFacade) -> ViewAnalysis:
    """Run the analysis a view needs. Empty data yields a ``message``, never an exception."""
    if isinstance(view, TimeSeriesView):
        try:
            stats = facade.summarize(view.window)
        except EmptySample:
            return ViewAnalysis(kind=view.kind, message=NO_DATA)
        return ViewAnalysis(kind=view.kind, stats=stats, trend=facade.fit_trend(view.window))

    if isinstance(view, MultiSeriesView):
        pair = facade.summarize_pair(view.window_a, view.window_b)
        trends = (facade.fit_trend(view.window_a), facade.fit_trend(view.window_b))
        message = NO_DATA if pair == (None, None) else None
        return ViewAnalysis(kind=view.kind, pair_stats=pair, pair_trends=trends, message=message)

    if isinstance(view, SpectrogramView):
        if view.grid.power.size == 0:
            return ViewAnalysis(kind=view.kind, message=NO_DATA)
        return ViewAnalysis(kind=view.kind, power_range=view.grid.power_range())

    if isinstance(view, PeriodogramView):
        try:
            spectrum = facade.spectrum(view.series)
        except EmptySample:
            return ViewAnalysis(kind=view.kind, message=NO_DATA)
        return ViewAnalysis(kind=view.kind, spectrum=spectrum)

    if isinstance(view, HistogramView):
        try:
            hist = compute_histogram(view.window.values, mode="target", bins=view.bins)
        except EmptySample:
            return ViewAnalysis(kind=view.kind, message=NO_DATA)
        return ViewAnalysis(kind=view.kind, histogram=hist)

    if isinstance(view, GaugeView):
        return ViewAnalysis(kind=view.kind, gauge=gauge_reading(view.value))

    raise TypeError(f"Unsupported chart view: {type(view)!r}")


def make_view(
    kind: ChartKind,
    window: Optional[SeriesWindow] = None,
    window_b: Optional[SeriesWindow] = None,
    grid: Optional[SpectrogramGrid] = None,
    bins: int = 20,
    gauge_value: Optional[float] = None,
) -> ChartView:
    """Build the view variant for a dropdown selection from whatever the page holds."""
    if kind is ChartKind.TIME_SERIES:
        return TimeSeriesView(window=_require(window, kind, "a window"))
    if kind is ChartKind.MULTI_SERIES:
        return MultiSeriesView(
            window_a=_require(window, kind, "a first window"),
            window_b=_require(window_b, kind, "a second window"),
        )
    if kind is ChartKind.SPECTROGRAM:
        return SpectrogramView(grid=_require(grid, kind, "a spectrogram grid"))
    if kind is ChartKind.PERIODOGRAM:
        return PeriodogramView(series=_require(window, kind, "a series").series)
    if kind is ChartKind.HISTOGRAM:
        return HistogramView(window=_require(window, kind, "a window"), bins=int(bins))
    if kind is ChartKind.GAUGE:
        return GaugeView(value=float(_require(gauge_value, kind, "a gauge value")))
    raise TypeError(f"Unsupported chart kind: {kind!r}")


def _require(value, kind: ChartKind, what: str):
    if value is None:
        raise ValueError(f"{kind.label} view needs {what}")
    return value
