import numpy as np
import pandas as pd
import pytest

from analysis.errors import DegenerateWindow
from analysis.trend import fit_line, fit_trend, r_squared, require_trend


def test_perfect_line_is_recovered():
    x = np.arange(10)
    trend = fit_trend(3 * x + 2)

    assert trend.slope == pytest.approx(3.0)
    assert trend.intercept == pytest.approx(2.0)
    assert trend.r_squared == pytest.approx(1.0)


def test_fitted_sequence_is_aligned_to_dates():
    dates = pd.date_range("2022-01-01", periods=5, freq="D")
    trend = fit_trend([1, 2, 3, 4, 5], dates=dates)

    assert list(trend.fitted.index) == list(dates)
    assert trend.fitted.tolist() == pytest.approx([1, 2, 3, 4, 5])
    assert trend.equation() == "y = 1.0000x + 1.00 (R² = 1.000)"


def test_trend_unavailable_for_fewer_than_two_points():
    assert fit_trend([]) is None
    assert fit_trend([4.2]) is None


def test_trend_unavailable_when_all_positions_match():
    assert fit_line([2, 2, 2], [1, 5, 9]) is None


def test_constant_values_give_zero_r_squared():
    trend = fit_trend([4.0, 4.0, 4.0, 4.0])

    assert trend.slope == 0
    assert trend.intercept == 4.0
    assert trend.r_squared == 0.0


def test_noisy_fit_matches_numpy_polyfit():
    rng = np.random.default_rng(7)
    y = 0.5 * np.arange(40) - 3 + rng.normal(0, 2, 40)
    trend = fit_trend(y)
    slope, intercept = np.polyfit(np.arange(40), y, 1)

    assert trend.slope == pytest.approx(slope)
    assert trend.intercept == pytest.approx(intercept)
    assert 0.0 < trend.r_squared < 1.0


def test_r_squared_for_constant_actual_is_zero():
    assert r_squared([1, 1, 1], [0, 1, 2]) == 0.0


def test_fit_line_rejects_mismatched_lengths():
    with pytest.raises(ValueError):
        fit_line([0, 1, 2], [1, 2])


def test_require_trend_raises_degenerate_window():
    with pytest.raises(DegenerateWindow):
        require_trend([1.0])
    assert require_trend([1.0, 3.0]).slope == pytest.approx(2.0)


def test_missing_values_are_dropped_before_ranking():
    dates = pd.date_range("2022-01-01", periods=5, freq="D")
    trend = fit_trend([2.0, np.nan, 4.0, 6.0, np.nan], dates=dates)

    assert trend.slope == pytest.approx(2.0)
    assert trend.intercept == pytest.approx(2.0)
    assert list(trend.fitted.index) == [dates[0], dates[2], dates[3]]


def test_trend_unavailable_when_fewer_than_two_finite_values():
    assert fit_trend([np.nan, 3.0, np.nan]) is None
    with pytest.raises(ValueError):
        fit_trend([1.0, 2.0], dates=pd.date_range("2022-01-01", periods=3))
