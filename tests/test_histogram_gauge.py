import math

import numpy as np
import pytest

from analysis.errors import EmptySample
from analysis.gauge import DEFAULT_SECTIONS, classify, gauge_reading, needle_fraction
from analysis.histogram import compute_histogram


def test_target_bins_cover_range():
    hist = compute_histogram(range(11), mode="target", bins=5)

    assert hist.n_bins == 5
    assert hist.width == pytest.approx(2.0)
    assert hist.edges.tolist() == pytest.approx([0, 2, 4, 6, 8, 10])
    assert hist.counts.tolist() == [2, 2, 2, 2, 3]
    assert hist.centers.tolist() == pytest.approx([1, 3, 5, 7, 9])


def test_fixed_width_bins_extend_past_maximum():
    hist = compute_histogram(range(11), mode="width", width=3)

    assert hist.edges.tolist() == pytest.approx([0, 3, 6, 9, 12])
    assert hist.counts.sum() == 11


def test_auto_width_counts_every_value():
    rng = np.random.default_rng(3)
    values = rng.normal(0, 1, 500)
    hist = compute_histogram(values, mode="auto")

    assert hist.counts.sum() == 500
    assert hist.edges[0] == pytest.approx(values.min())
    assert hist.edges[-1] >= values.max()


def test_constant_values_fall_in_a_single_bin():
    hist = compute_histogram([5.0, 5.0, 5.0])

    assert hist.n_bins == 1
    assert hist.counts.tolist() == [3]


def test_labels_close_only_the_last_bin():
    hist = compute_histogram([0, 1, 2, 3, 4], mode="target", bins=2)

    labels = hist.labels()
    assert labels[0].endswith(")")
    assert labels[-1].endswith("]")


def test_histogram_errors():
    with pytest.raises(EmptySample):
        compute_histogram([])
    with pytest.raises(ValueError):
        compute_histogram([1, 2, 3], mode="nope")
    with pytest.raises(ValueError):
        compute_histogram([1, 2, 3], mode="width")
    with pytest.raises(ValueError):
        compute_histogram([1, 2, 3], mode="target", bins=0)


def test_gauge_sections_include_their_upper_limit():
    assert classify(60).label == "Safe"
    assert classify(72).label == "Safe"
    assert classify(72.1).label == "Caution"
    assert classify(84).label == "Danger"
    assert classify(100).label == "Extreme"
    assert math.isinf(DEFAULT_SECTIONS[-1].limit)


def test_needle_fraction_is_clamped():
    assert needle_fraction(45) == pytest.approx(0.5)
    assert needle_fraction(120) == 1.0
    assert needle_fraction(-5) == 0.0
    with pytest.raises(ValueError):
        needle_fraction(10, maximum=0)


def test_gauge_reading():
    reading = gauge_reading(78)

    assert reading.section.label == "Warning"
    assert reading.section.color == "orange"
    assert reading.fraction == pytest.approx(78 / 90)
    with pytest.raises(ValueError):
        gauge_reading(float("nan"))
