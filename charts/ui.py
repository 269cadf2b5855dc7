from __future__ import annotations

import datetime as dt
from typing import Optional, Sequence, Tuple

import pandas as pd
import streamlit as st

from analysis.errors import AnalysisError
from analysis.facade import AnalysisFacade
from analysis.series import Series, SeriesWindow
from analysis.stats import DescriptiveStatsResult, summary_frame
from analysis.trend import TrendResult
from dashboard_config import DATE_FORMAT

from .kinds import NO_DATA, ChartKind

STAT_LABELS = {
    "min": "Min",
    "q1": "Q1(25%)",
    "median": "Median(50%)",
    "mean": "Mean",
    "q3": "Q3(75%)",
    "max": "Max",
    "std_dev": "Std Dev",
    "variance": "Variance",
    "skewness": "Skewness",
    "kurtosis": "Kurtosis",
    "count": "Count",
}


def render_view_selector(
    kinds: Sequence[ChartKind] = tuple(ChartKind),
    key_prefix: str = "view",
) -> ChartKind:
    """Dropdown over the chart kinds; returns the selected enum member."""
    # widget state holds the plain string so presets stay JSON-friendly
    value = st.selectbox(
        "Chart",
        options=[k.value for k in kinds],
        index=0,
        format_func=lambda v: ChartKind(v).label,
        key=f"{key_prefix}_kind",
    )
    return ChartKind(value)


def _to_naive(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.tz_localize(None) if ts.tzinfo is not None else ts


def _to_py(ts: pd.Timestamp) -> dt.datetime:
    return _to_naive(ts).to_pydatetime()


def render_window_controls(
    series: Series,
    others: Sequence[Series] = (),
    key_prefix: str = "win",
) -> SeriesWindow:
    """Date-range slider spanning ``series`` and ``others``; returns the window on ``series``."""
    spans = [s.span() for s in (series, *others) if len(s) > 0]
    if not spans:
        return SeriesWindow.full(series)
    lo = min(_to_naive(a) for a, _ in spans)
    hi = max(_to_naive(b) for _, b in spans)
    if lo == hi:
        return SeriesWindow.full(series)

    start, end = st.slider(
        "Visible window",
        min_value=_to_py(lo),
        max_value=_to_py(hi),
        value=(_to_py(lo), _to_py(hi)),
        format="YYYY-MM-DD",
        key=f"{key_prefix}_range",
        help="Statistics and the trendline follow the selected range; the periodogram always uses the full series.",
    )
    try:
        return SeriesWindow(series=series, lo=start, hi=end)
    except AnalysisError as e:
        st.warning(str(e))
        return SeriesWindow.full(series)


def _format_window(window: SeriesWindow) -> str:
    if window.is_empty():
        return ""
    first, last = window.dates[0], window.dates[-1]
    return f"{first.strftime(DATE_FORMAT)} to {last.strftime(DATE_FORMAT)}"


def render_summary_panel(
    window: SeriesWindow,
    stats: Optional[DescriptiveStatsResult],
    decimals: int = 2,
) -> None:
    series = window.series
    st.subheader("Summary Statistics")
    if series.location is not None:
        st.markdown(f"**{series.location.label()}**")
    if series.units:
        st.markdown(f"**{series.title or 'Value'}** ({series.units})")
    if stats is None:
        st.info(NO_DATA)
        return
    st.caption(_format_window(window))
    rounded = stats.rounded(decimals)
    rows = [(STAT_LABELS[k], rounded[k]) for k in STAT_LABELS]
    st.table(pd.DataFrame(rows, columns=["Statistic", "Value"]).set_index("Statistic"))


def render_pair_summary(
    windows: Tuple[SeriesWindow, SeriesWindow],
    pair: Tuple[Optional[DescriptiveStatsResult], Optional[DescriptiveStatsResult]],
    decimals: int = 2,
) -> None:
    st.subheader("Summary Statistics")
    names = [w.series.title or f"Series {i + 1}" for i, w in enumerate(windows)]
    frame = summary_frame(dict(zip(names, pair))).round(decimals)
    frame.index = [STAT_LABELS.get(k, k) for k in frame.index]
    st.dataframe(frame)
    for name, res in zip(names, pair):
        if res is None:
            st.info(f"{name}: {NO_DATA}")


def render_trend_caption(trend: Optional[TrendResult]) -> None:
    if trend is None:
        st.caption("Trend unavailable for this window (needs at least two points).")
    else:
        st.caption(f"Linear trend: {trend.equation()}")


def render_live_panels(window: SeriesWindow, facade: AnalysisFacade, decimals: int = 2) -> None:
    """Window subscriber: recompute and redraw the stats panel and trend caption."""
    try:
        stats = facade.summarize(window)
    except AnalysisError:
        stats = None
    render_summary_panel(window, stats, decimals=decimals)
    render_trend_caption(facade.fit_trend(window))
