import pandas as pd
import plotly.graph_objects as go
import pytest

from analysis.facade import AnalysisFacade
from analysis.series import Series, SeriesWindow, SpectrogramGrid
from charts.figures import figure_for, time_series_figure
from charts.kinds import (
    NO_DATA,
    ChartKind,
    GaugeView,
    HistogramView,
    MultiSeriesView,
    PeriodogramView,
    SpectrogramView,
    TimeSeriesView,
    analyze_view,
    make_view,
)
from charts.signals import VisibleWindowFeed


def _series(values, title="s"):
    return Series(dates=pd.date_range("2022-01-01", periods=len(values), freq="D"), values=values, title=title)


def _grid():
    return SpectrogramGrid(
        dates=pd.date_range("2022-01-01", periods=2),
        frequencies=[0.0, 0.5],
        power=[[1.0, 2.0], [3.0, 4.0]],
    )


def test_chart_kinds_have_labels():
    assert [k.label for k in ChartKind] == [
        "Time Series",
        "Multi Time Series",
        "Spectrogram",
        "Periodogram",
        "Histogram",
        "Gauge",
    ]
    assert ChartKind("periodogram") is ChartKind.PERIODOGRAM


def test_time_series_view_has_stats_and_trend():
    window = SeriesWindow.full(_series([1, 2, 3, 4, 5]))
    analysis = analyze_view(TimeSeriesView(window), AnalysisFacade())

    assert analysis.kind is ChartKind.TIME_SERIES
    assert analysis.stats.mean == 3
    assert analysis.trend.slope == pytest.approx(1.0)
    assert analysis.message is None


def test_empty_time_series_window_reports_no_data():
    window = SeriesWindow(_series([1, 2, 3]), lo="2030-01-01")
    analysis = analyze_view(TimeSeriesView(window), AnalysisFacade())

    assert analysis.stats is None
    assert analysis.message == NO_DATA
    assert figure_for(TimeSeriesView(window), analysis) is None


def test_multi_series_view_keeps_the_valid_side():
    a = SeriesWindow.full(_series([1, 2, 3], "a"))
    b = SeriesWindow(_series([4, 5, 6], "b"), lo="2030-01-01")
    analysis = analyze_view(MultiSeriesView(a, b), AnalysisFacade())

    left, right = analysis.pair_stats
    assert left.mean == 2
    assert right is None
    assert analysis.pair_trends[1] is None
    assert analysis.message is None


def test_periodogram_histogram_gauge_and_spectrogram_views():
    facade = AnalysisFacade()
    series = _series([1, 2, 3, 4, 5])

    periodogram = analyze_view(PeriodogramView(series), facade)
    assert len(periodogram.spectrum) == 2

    hist = analyze_view(HistogramView(SeriesWindow.full(series), bins=4), facade)
    assert hist.histogram.n_bins == 4
    assert hist.histogram.counts.sum() == 5

    gauge = analyze_view(GaugeView(80.0), facade)
    assert gauge.gauge.section.label == "Warning"

    spectrogram = analyze_view(SpectrogramView(_grid()), facade)
    assert spectrogram.power_range == (1.0, 4.0)


def test_unknown_view_is_rejected():
    with pytest.raises(TypeError):
        analyze_view("timeSeries", AnalysisFacade())


def test_make_view_builds_each_variant():
    series = _series([1, 2, 3, 4, 5])
    window = SeriesWindow(series, lo="2022-01-02", hi="2022-01-03")

    assert isinstance(make_view(ChartKind.TIME_SERIES, window=window), TimeSeriesView)
    assert isinstance(make_view(ChartKind.MULTI_SERIES, window=window, window_b=window), MultiSeriesView)
    assert isinstance(make_view(ChartKind.SPECTROGRAM, grid=_grid()), SpectrogramView)
    assert make_view(ChartKind.HISTOGRAM, window=window, bins=7).bins == 7
    assert make_view(ChartKind.GAUGE, gauge_value=70).value == 70.0

    periodogram = make_view(ChartKind.PERIODOGRAM, window=window)
    assert len(periodogram.series) == 5


def test_make_view_reports_missing_inputs():
    with pytest.raises(ValueError):
        make_view(ChartKind.TIME_SERIES)
    with pytest.raises(ValueError):
        make_view(ChartKind.SPECTROGRAM)
    with pytest.raises(ValueError):
        make_view(ChartKind.GAUGE)


def test_figures_for_each_view():
    facade = AnalysisFacade()
    series = _series([1, 2, 3, 4, 5, 3, 2])
    window = SeriesWindow.full(series)
    views = [
        TimeSeriesView(window),
        MultiSeriesView(window, window),
        SpectrogramView(_grid()),
        PeriodogramView(series),
        HistogramView(window, bins=3),
        GaugeView(74.0),
    ]

    for view in views:
        fig = figure_for(view, analyze_view(view, facade))
        assert isinstance(fig, go.Figure)

    pg = figure_for(views[3], analyze_view(views[3], facade))
    assert pg.layout.yaxis.type == "log"


def test_time_series_figure_draws_dashed_trend():
    window = SeriesWindow.full(_series([1, 2, 3, 4, 5]))
    trend = AnalysisFacade().fit_trend(window)

    fig = time_series_figure(window, trend)
    assert len(fig.data) == 2
    assert fig.data[1].line.dash == "dash"
    assert fig.layout.annotations[0].text == trend.equation()

    assert len(time_series_figure(window, None).data) == 1


def test_window_feed_pushes_to_subscribers_in_order():
    feed = VisibleWindowFeed()
    seen = []
    feed.subscribe(lambda w: seen.append(("first", len(w))))
    unsubscribe = feed.subscribe(lambda w: seen.append(("second", len(w))))

    series = _series([1, 2, 3])
    window = SeriesWindow(series, lo="2022-01-02")
    feed.publish(window)

    assert seen == [("first", 2), ("second", 2)]
    assert feed.current is window

    unsubscribe()
    feed.publish(SeriesWindow.full(series))
    assert seen[-1] == ("first", 3)
    assert len(seen) == 3


def test_periodogram_skips_missing_values():
    series = _series([1.0, 2.0, float("nan"), 4.0, 5.0])
    analysis = analyze_view(PeriodogramView(series), AnalysisFacade())

    assert analysis.message is None
    assert analysis.spectrum.original_length == 4
    assert len(analysis.spectrum) == 2


def test_periodogram_of_all_missing_values_reports_no_data():
    series = _series([float("nan"), float("nan")])
    analysis = analyze_view(PeriodogramView(series), AnalysisFacade())

    assert analysis.spectrum is None
    assert analysis.message == NO_DATA


def test_time_series_trend_ignores_missing_values_like_stats():
    series = _series([1.0, 2.0, float("nan"), 3.0, 4.0])
    analysis = analyze_view(TimeSeriesView(SeriesWindow.full(series)), AnalysisFacade())

    assert analysis.stats.count == 4
    assert analysis.trend.slope == pytest.approx(1.0)
    assert analysis.trend.intercept == pytest.approx(1.0)
    assert len(analysis.trend.fitted) == 4
    assert pd.Timestamp("2022-01-03") not in analysis.trend.fitted.index
