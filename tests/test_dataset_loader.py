import json

import numpy as np
import pandas as pd
import pytest

from dataset_loader import (
    demo_series,
    demo_spectrogram,
    get_debug_log,
    load_series_json,
    read_series_from_bytes,
    read_table_from_bytes,
    series_from_obj,
    spectrogram_from_obj,
)

SERIES_OBJ = {
    "title": "Temperature",
    "units": "°F",
    "location": {"name": "El Centro, CA", "latitude": 32.792, "longitude": -115.5631},
    "dates": ["2022-01-01", "2022-01-02", "2022-01-03"],
    "values": [70.0, 72.5, 71.0],
}


def test_series_from_obj_reads_metadata():
    series = series_from_obj(SERIES_OBJ)

    assert len(series) == 3
    assert series.title == "Temperature"
    assert series.units == "°F"
    assert series.location.label() == "El Centro, CA (32.7920° N, 115.5631° W)"
    assert series.values.tolist() == [70.0, 72.5, 71.0]


def test_series_from_obj_drops_bad_rows_and_sorts():
    obj = {
        "dates": ["2022-01-03", "not a date", "2022-01-01", "2022-01-02"],
        "values": [3, 99, 1, None],
    }

    series = series_from_obj(obj)

    assert series.dates.tolist() == [pd.Timestamp("2022-01-01"), pd.Timestamp("2022-01-03")]
    assert series.values.tolist() == [1.0, 3.0]


def test_series_from_obj_requires_matching_arrays():
    with pytest.raises(ValueError):
        series_from_obj({"dates": ["2022-01-01"], "values": [1, 2]})
    with pytest.raises(ValueError):
        series_from_obj({"values": [1, 2]})


def test_spectrogram_from_obj():
    grid = spectrogram_from_obj({
        "dates": ["2022-01-01", "2022-01-02"],
        "frequencies": [0.0, 0.25, 0.5],
        "power": [[1, 2], [3, 4], [5, 6]],
    })

    assert grid.power.shape == (3, 2)
    assert grid.power_range() == (1.0, 6.0)
    with pytest.raises(ValueError):
        spectrogram_from_obj({"dates": [], "power": []})


def test_load_series_json(tmp_path):
    path = tmp_path / "series.json"
    path.write_text(json.dumps(SERIES_OBJ), encoding="utf-8")

    series = load_series_json(str(path))

    assert len(series) == 3
    assert series.span() == (pd.Timestamp("2022-01-01"), pd.Timestamp("2022-01-03"))


def test_read_series_from_csv_bytes_picks_first_numeric_column():
    data = b"date;temp;humidity\n2022-01-02;5.5;40\n2022-01-01;4.0;42\n"

    series = read_series_from_bytes("obs.csv", data)

    assert series.title == "temp"
    assert series.values.tolist() == [4.0, 5.5]
    assert read_table_from_bytes("obs.csv", data).shape == (2, 3)


def test_read_series_from_json_bytes():
    series = read_series_from_bytes("s.json", json.dumps(SERIES_OBJ).encode("utf-8"))
    assert series.title == "Temperature"


def test_unsupported_extension():
    with pytest.raises(ValueError):
        read_table_from_bytes("data.txt", b"a,b\n1,2\n")


def test_debug_log_records_loads():
    get_debug_log(clear=True)
    series_from_obj(SERIES_OBJ)

    log = get_debug_log(clear=True)
    assert log[0]["event"] == "series_json"
    assert log[0]["kept"] == 3
    assert get_debug_log() == []


def test_demo_data_shapes():
    series = demo_series(periods=30)
    grid = demo_spectrogram(periods=10, n_freqs=8)

    assert len(series) == 30
    assert np.isfinite(series.values).all()
    assert grid.power.shape == (8, 10)
