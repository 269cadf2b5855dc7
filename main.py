# -*- coding: utf-8 -*-
# Windowed Time-Series Dashboard (Streamlit + Plotly)
# Run with: streamlit run main.py
from __future__ import annotations
import json
from typing import Optional

import pandas as pd
import streamlit as st

import dashboard_config as cfg
from analysis.errors import AnalysisError
from analysis.facade import AnalysisFacade
from analysis.series import Series, SeriesWindow, SpectrogramGrid
from charts.figures import figure_for
from charts.kinds import ChartKind, analyze_view, make_view
from charts.signals import VisibleWindowFeed
from charts.ui import (
    render_live_panels,
    render_pair_summary,
    render_trend_caption,
    render_view_selector,
    render_window_controls,
)
from dataset_loader import (
    demo_series,
    demo_spectrogram,
    read_series_from_bytes,
    read_table_from_bytes,
    spectrogram_from_obj,
)
from scenario_state import apply_widget_state, dumps_preset, loads_preset

# ----------------------------------
# Page config
# ----------------------------------
st.set_page_config(page_title=cfg.PAGE_TITLE, layout="wide")
st.markdown("""
<h1 style="display:flex;align-items:center;gap:.5rem;margin:0">
  📈 Data Visualization
</h1>
<p style="color:#6b7280;margin:.25rem 0 0">
  Pick a chart, narrow the visible window, and read summary statistics and the linear trend
  for exactly what is on screen.
</p>
""", unsafe_allow_html=True)

with st.expander("Quick start", expanded=False):
    st.markdown("""
1) **Upload** a series (dashboard JSON, CSV/TSV, Excel or Parquet) or keep the demo data
2) Pick a **Chart** from the dropdown
3) Drag the **Visible window** slider: statistics and trendline follow it
4) The **Periodogram** always uses the full series
""")


# ----------------------------------
# Cached readers
# ----------------------------------

@st.cache_data(show_spinner=False)
def _read_series(name: str, data: bytes, value_col: Optional[str], dt_col: Optional[str]) -> Series:
    return read_series_from_bytes(name, data, value_col=value_col, dt_col=dt_col)


@st.cache_data(show_spinner=False)
def _table_columns(name: str, data: bytes) -> list:
    return list(read_table_from_bytes(name, data).columns)


@st.cache_data(show_spinner=False)
def _read_spectrogram(data: bytes) -> SpectrogramGrid:
    return spectrogram_from_obj(json.loads(data.decode("utf-8-sig")))


def _series_uploader(label: str, key: str) -> Optional[Series]:
    up = st.sidebar.file_uploader(label, type=["json", "csv", "tsv", "xls", "xlsx", "parquet"], key=key)
    if not up:
        return None
    name, data = up.name, up.getvalue()
    value_col = dt_col = None
    if not name.lower().endswith(".json"):
        try:
            cols = _table_columns(name, data)
        except Exception as e:
            st.sidebar.error(f"Read failed: {e}")
            return None
        dt_col = st.sidebar.selectbox("Datetime column", options=cols, key=f"{key}_dt")
        value_col = st.sidebar.selectbox(
            "Value column", options=[c for c in cols if c != dt_col], key=f"{key}_val"
        )
    try:
        return _read_series(name, data, value_col, dt_col)
    except Exception as e:
        st.sidebar.error(f"Read failed: {e}")
        return None


# ----------------------------------
# Sidebar - Presets (before any keyed widget is created)
# ----------------------------------
st.sidebar.header("💾 Presets")
preset_up = st.sidebar.file_uploader("Load preset (JSON)", type=["json"], key="preset_file")
if preset_up is not None and st.session_state.get("preset_applied") != preset_up.file_id:
    try:
        apply_widget_state(loads_preset(preset_up.getvalue().decode("utf-8")), st.session_state)
        st.session_state.preset_applied = preset_up.file_id
        st.rerun()
    except ValueError as e:
        st.sidebar.error(f"Preset rejected: {e}")

# ----------------------------------
# Sidebar - Data
# ----------------------------------
st.sidebar.header("📥 Data")
series_a = _series_uploader("Series", key="data_a")
series_b = _series_uploader("Second series (comparison)", key="data_b")
grid_up = st.sidebar.file_uploader("Spectrogram grid (JSON)", type=["json"], key="data_spec")

grid: Optional[SpectrogramGrid] = None
if grid_up:
    try:
        grid = _read_spectrogram(grid_up.getvalue())
    except Exception as e:
        st.sidebar.error(f"Read failed: {e}")

if series_a is None:
    st.sidebar.caption("No series uploaded; showing demo data.")
    series_a = demo_series()
if series_b is None:
    series_b = demo_series(seed=1, start="2024-03-01")
    series_b = Series(
        dates=series_b.dates,
        values=series_b.values - 5.0,
        title="Temperature (site 2)",
        units=series_b.units,
    )
if grid is None:
    grid = demo_spectrogram()

if len(series_a) == 0:
    st.warning("The uploaded series has no usable rows (all dates or values were missing).")
    st.stop()

st.sidebar.success(f"Loaded {len(series_a):,} points: {series_a.title or 'series'}")

# ----------------------------------
# View selection + controls
# ----------------------------------
facade = AnalysisFacade(sample_rate=cfg.DEFAULT_SAMPLE_RATE)
kind = render_view_selector()

window: Optional[SeriesWindow] = None
window_b: Optional[SeriesWindow] = None
bins = cfg.DEFAULT_BINS
gauge_value: Optional[float] = None

if kind in (ChartKind.TIME_SERIES, ChartKind.HISTOGRAM):
    window = render_window_controls(series_a, key_prefix="win")
elif kind is ChartKind.MULTI_SERIES:
    window = render_window_controls(series_a, others=[series_b], key_prefix="win_multi")
    try:
        window_b = SeriesWindow(series=series_b, lo=window.lo, hi=window.hi)
    except AnalysisError as e:
        st.warning(str(e))
        window_b = SeriesWindow.full(series_b)
elif kind is ChartKind.PERIODOGRAM:
    window = SeriesWindow.full(series_a)

if kind is ChartKind.HISTOGRAM:
    bins = st.slider("Number of Bins", cfg.MIN_BINS, cfg.MAX_BINS, cfg.DEFAULT_BINS, key="hist_bins")
if kind is ChartKind.GAUGE:
    gauge_value = st.number_input(
        "WBGT (°F)", min_value=0.0, max_value=150.0,
        value=float(cfg.DEFAULT_GAUGE_VALUE), step=0.5, key="gauge_value",
        help=", ".join(f"{s.label} up to {s.limit:g}" for s in cfg.GAUGE_SECTIONS[:-1]),
    )

# ----------------------------------
# Chart + panels
# ----------------------------------
try:
    view = make_view(kind, window=window, window_b=window_b, grid=grid, bins=bins, gauge_value=gauge_value)
except ValueError as e:
    st.error(str(e))
    st.stop()

analysis = analyze_view(view, facade)

chart_col, panel_col = st.columns([3, 1])

with panel_col:
    if kind is ChartKind.TIME_SERIES or kind is ChartKind.HISTOGRAM:
        feed = VisibleWindowFeed()
        feed.subscribe(lambda w: render_live_panels(w, facade, decimals=cfg.STATS_DECIMALS))
        feed.publish(window)
    elif kind is ChartKind.MULTI_SERIES:
        render_pair_summary((window, window_b), analysis.pair_stats, decimals=cfg.STATS_DECIMALS)
        for w, trend in zip((window, window_b), analysis.pair_trends):
            st.markdown(f"**{w.series.title or 'Series'}**")
            render_trend_caption(trend)
    elif kind is ChartKind.PERIODOGRAM and analysis.spectrum is not None:
        spectrum = analysis.spectrum
        st.subheader("Spectrum")
        st.caption(
            f"{spectrum.original_length:,} samples zero-padded to {spectrum.padded_length:,}; "
            f"bin spacing {spectrum.bin_spacing:.4g} cycles per sample."
        )
        peak = max(spectrum.points, key=lambda p: p.power) if len(spectrum) else None
        if peak is not None:
            st.metric("Peak frequency", f"{peak.frequency:.4g}", help=f"Bin {peak.frequency_index}")
    elif kind is ChartKind.GAUGE and analysis.gauge is not None:
        st.metric("Category", analysis.gauge.section.label)
        st.caption(f"Needle at {analysis.gauge.fraction:.0%} of the 0 to {cfg.GAUGE_MAX:g} °F scale.")
    elif kind is ChartKind.SPECTROGRAM and analysis.power_range is not None:
        lo, hi = analysis.power_range
        st.caption(f"Intensity range: {lo:.2f} to {hi:.2f} dB")

with chart_col:
    fig = figure_for(view, analysis, max_points=cfg.MAX_PLOT_POINTS)
    if fig is None:
        st.info(analysis.message or "Nothing to draw.")
    else:
        st.plotly_chart(fig, use_container_width=True, theme="streamlit")

with st.expander("Preset (copy to save the current view)", expanded=False):
    st.code(dumps_preset(st.session_state), language="json")

if window is not None and kind is not ChartKind.PERIODOGRAM:
    with st.expander("Visible data", expanded=False):
        st.dataframe(pd.DataFrame({"date": window.dates, "value": window.values}))
