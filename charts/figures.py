"""Plotly figures for each chart view. Figures only display analysis results."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from analysis.gauge import DEFAULT_SECTIONS, GAUGE_MAXIMUM, GaugeReading, GaugeSection
from analysis.histogram import HistogramResult
from analysis.series import SeriesWindow, SpectrogramGrid
from analysis.spectral import Spectrum
from analysis.trend import TrendResult
from dashboard_config import MAX_PLOT_POINTS, SERIES_COLORS, SPECTROGRAM_COLORSCALE, TREND_COLOR

from .kinds import (
    ChartView,
    GaugeView,
    HistogramView,
    MultiSeriesView,
    PeriodogramView,
    SpectrogramView,
    TimeSeriesView,
    ViewAnalysis,
)


def _maybe_downsample(s: pd.Series, max_points: int = MAX_PLOT_POINTS) -> pd.Series:
    if len(s) <= max_points:
        return s
    stride = max(1, len(s) // max_points)
    return s.iloc[::stride]


def _axis_title(window: SeriesWindow) -> str:
    series = window.series
    if series.units:
        return f"{series.title or 'Value'} ({series.units})"
    return series.title or "Value"


def _base_layout(fig: go.Figure, **kwargs) -> go.Figure:
    fig.update_layout(
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0),
        margin=dict(l=40, r=20, t=40, b=40),
        **kwargs,
    )
    return fig


def _add_line(fig: go.Figure, window: SeriesWindow, color: str, name: str, max_points: int) -> None:
    s = _maybe_downsample(window.visible().to_pandas(), max_points)
    fig.add_trace(
        go.Scatter(
            x=s.index,
            y=s.to_numpy(),
            mode="lines",
            name=name,
            line=dict(color=color, width=2),
            hovertemplate="%{x|%Y-%m-%d}<br>%{y:.3f}<extra>%{fullData.name}</extra>",
        )
    )


def _add_trend(fig: go.Figure, trend: TrendResult, name: str = "Linear Trend") -> None:
    fig.add_trace(
        go.Scatter(
            x=trend.fitted.index,
            y=trend.fitted.to_numpy(),
            mode="lines",
            name=name,
            line=dict(color=TREND_COLOR, width=3, dash="dash"),
            hovertemplate="%{x|%Y-%m-%d}<br>%{y:.3f}<extra>trend</extra>",
        )
    )


def time_series_figure(
    window: SeriesWindow,
    trend: Optional[TrendResult] = None,
    max_points: int = MAX_PLOT_POINTS,
) -> go.Figure:
    fig = go.Figure()
    _add_line(fig, window, SERIES_COLORS[0], window.series.title or "value", max_points)
    if trend is not None:
        _add_trend(fig, trend)
        fig.add_annotation(
            text=trend.equation(),
            xref="paper", yref="paper", x=1.0, y=1.0,
            showarrow=False,
            font=dict(color=TREND_COLOR, size=16),
            bgcolor="white", bordercolor="lightgray",
        )
    fig.update_yaxes(title=_axis_title(window))
    fig.update_xaxes(title="Date", rangeslider=dict(visible=True))
    return _base_layout(fig, hovermode="x unified")


def multi_series_figure(
    window_a: SeriesWindow,
    window_b: SeriesWindow,
    trends: Sequence[Optional[TrendResult]] = (None, None),
    max_points: int = MAX_PLOT_POINTS,
) -> go.Figure:
    fig = go.Figure()
    for i, (window, trend) in enumerate(zip((window_a, window_b), trends)):
        name = window.series.title or f"Series {i + 1}"
        _add_line(fig, window, SERIES_COLORS[i % len(SERIES_COLORS)], name, max_points)
        if trend is not None:
            _add_trend(fig, trend, name=f"{name} trend")
    fig.update_yaxes(title="Value")
    fig.update_xaxes(title="Date", rangeslider=dict(visible=True))
    return _base_layout(fig, hovermode="x unified")


def spectrogram_figure(grid: SpectrogramGrid, colorscale: str = SPECTROGRAM_COLORSCALE) -> go.Figure:
    fig = go.Figure(
        go.Heatmap(
            x=grid.dates,
            y=grid.frequencies,
            z=grid.power,
            colorscale=colorscale,
            colorbar=dict(title="Intensity (dB)"),
            hovertemplate="%{x|%Y-%m-%d}<br>%{y:.3f} Hz<br>%{z:.3f}<extra></extra>",
        )
    )
    fig.update_xaxes(title="Time")
    fig.update_yaxes(title="Frequency (Hz)")
    return _base_layout(fig)


def periodogram_figure(spectrum: Spectrum, units: str = "") -> go.Figure:
    freqs = spectrum.frequencies()
    power = spectrum.powers()
    # log axis cannot show zero power
    y = np.where(power > 0, power, np.nan)
    fig = go.Figure(
        go.Scatter(
            x=freqs,
            y=y,
            mode="lines",
            name="periodogram",
            line=dict(color=SERIES_COLORS[0], width=2),
            hovertemplate="Frequency: %{x:.3f}<br>Power: %{y:.3f}<extra></extra>",
        )
    )
    unit_label = f" ({units}²/Hz)" if units else ""
    fig.update_xaxes(title="Frequency (Hz)")
    fig.update_yaxes(title=f"Power Spectral Density{unit_label} (Log scale)", type="log")
    return _base_layout(fig, hovermode="closest")


def histogram_figure(hist: HistogramResult, x_title: str = "Value") -> go.Figure:
    fig = go.Figure(
        go.Bar(
            x=hist.centers,
            y=hist.counts,
            width=np.diff(hist.edges),
            text=hist.labels(),
            marker_color=SERIES_COLORS[0],
            hovertemplate="bin=%{text}<br>count=%{y}<extra></extra>",
        )
    )
    fig.update_xaxes(title=x_title, showline=True, zeroline=False)
    fig.update_yaxes(title="Counts")
    return _base_layout(fig, hovermode="x", bargap=0.02)


def gauge_figure(
    reading: GaugeReading,
    sections: Sequence[GaugeSection] = DEFAULT_SECTIONS,
    maximum: float = GAUGE_MAXIMUM,
) -> go.Figure:
    steps = []
    lower = 0.0
    for section in sections:
        upper = maximum if math.isinf(section.limit) else min(section.limit, maximum)
        if upper > lower:
            steps.append(dict(range=[lower, upper], color=section.color))
        lower = upper
    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=reading.value,
            number=dict(suffix="°F", valueformat=".1f"),
            title=dict(text=f"WBGT: {reading.section.label}"),
            gauge=dict(
                axis=dict(range=[0, maximum]),
                bar=dict(color="black", thickness=0.15),
                steps=steps,
            ),
        )
    )
    return _base_layout(fig)


def figure_for(view: ChartView, analysis: ViewAnalysis, max_points: int = MAX_PLOT_POINTS) -> Optional[go.Figure]:
    """Figure for ``view``; ``None`` when the analysis produced nothing to draw."""
    if analysis.message is not None:
        return None
    if isinstance(view, TimeSeriesView):
        return time_series_figure(view.window, analysis.trend, max_points=max_points)
    if isinstance(view, MultiSeriesView):
        return multi_series_figure(view.window_a, view.window_b, analysis.pair_trends or (None, None), max_points)
    if isinstance(view, SpectrogramView):
        return spectrogram_figure(view.grid)
    if isinstance(view, PeriodogramView):
        return periodogram_figure(analysis.spectrum, units=view.series.units)
    if isinstance(view, HistogramView):
        return histogram_figure(analysis.histogram, x_title=_axis_title(view.window))
    if isinstance(view, GaugeView):
        return gauge_figure(analysis.gauge)
    raise TypeError(f"Unsupported chart view: {type(view)!r}")
