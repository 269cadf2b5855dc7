# dataset_loader.py
# Loaders for dashboard datasets: the JSON series / spectrogram layouts and plain tables.
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional
import io
import json
import numpy as np
import pandas as pd

from analysis.series import Location, Series, SpectrogramGrid

# --- optional debug log ---
DEBUG_EVENTS: List[Dict[str, Any]] = []

def _dbg(event: str, **info):
    try:
        payload = {"event": event}
        for k, v in info.items():
            if isinstance(v, np.ndarray):
                payload[k] = {"dtype": str(v.dtype), "shape": list(v.shape)}
            else:
                payload[k] = v
        DEBUG_EVENTS.append(payload)
    except Exception:
        pass

def get_debug_log(clear: bool = False) -> List[Dict[str, Any]]:
    global DEBUG_EVENTS
    log = list(DEBUG_EVENTS)
    if clear:
        DEBUG_EVENTS = []
    return log

# --- small helpers ---
def _parse_dates(raw, date_format: Optional[str] = None) -> pd.DatetimeIndex:
    if date_format:
        return pd.DatetimeIndex(pd.to_datetime(list(raw), errors="coerce", format=date_format))
    return pd.DatetimeIndex(pd.to_datetime(list(raw), errors="coerce"))

def _location_from_obj(obj: Any) -> Optional[Location]:
    if not obj:
        return None
    if isinstance(obj, str):
        return Location(name=obj)
    lat = obj.get("latitude")
    lon = obj.get("longitude")
    return Location(
        name=str(obj.get("name", "")),
        latitude=float(lat) if lat is not None else None,
        longitude=float(lon) if lon is not None else None,
    )

def guess_datetime_col(df: pd.DataFrame) -> Optional[str]:
    cands = [c for c in df.columns if any(k in str(c).lower() for k in ("date", "time", "timestamp", "datetime", "ds"))]
    if cands:
        return cands[0]
    first = df.columns[0]
    try:
        pd.to_datetime(df[first], errors="raise")
        return first
    except Exception:
        return None

# --- JSON layouts ---
def series_from_obj(obj: Mapping[str, Any], date_format: Optional[str] = None) -> Series:
    """Build a Series from ``{"title", "units", "dates", "values", "location"}``.

    Rows with an unparseable date or a missing value are dropped.
    """
    if "dates" not in obj or "values" not in obj:
        raise ValueError("Series JSON needs 'dates' and 'values' arrays.")
    dates_raw = list(obj["dates"])
    values_raw = list(obj["values"])
    if len(dates_raw) != len(values_raw):
        raise ValueError(f"'dates' has {len(dates_raw)} entries but 'values' has {len(values_raw)}.")

    dates = _parse_dates(dates_raw, date_format)
    values = pd.to_numeric(pd.Series(values_raw, dtype="object"), errors="coerce").to_numpy(dtype=np.float64)
    series = Series(
        dates=dates,
        values=values,
        title=str(obj.get("title") or ""),
        units=str(obj.get("units") or ""),
        location=_location_from_obj(obj.get("location")),
    )
    clean = series.dropna()
    _dbg("series_json", rows=len(series), kept=len(clean), title=series.title)
    if len(clean) > 1 and not clean.dates.is_monotonic_increasing:
        # consumers assume non-decreasing time
        order = np.argsort(clean.dates.to_numpy(), kind="stable")
        clean = Series(
            dates=clean.dates[order],
            values=clean.values[order],
            title=clean.title,
            units=clean.units,
            location=clean.location,
        )
        _dbg("series_sorted", rows=len(clean))
    return clean

def spectrogram_from_obj(obj: Mapping[str, Any]) -> SpectrogramGrid:
    """Build a SpectrogramGrid from ``{"dates", "frequencies", "power"}``."""
    missing = [k for k in ("dates", "frequencies", "power") if k not in obj]
    if missing:
        raise ValueError(f"Spectrogram JSON is missing: {', '.join(missing)}.")
    power = np.asarray(obj["power"], dtype=np.float64)
    _dbg("spectrogram_json", power=power)
    return SpectrogramGrid(dates=_parse_dates(obj["dates"]), frequencies=obj["frequencies"], power=power)

def load_series_json(path: str, date_format: Optional[str] = None) -> Series:
    with open(path, "r", encoding="utf-8") as fh:
        return series_from_obj(json.load(fh), date_format)

def load_spectrogram_json(path: str) -> SpectrogramGrid:
    with open(path, "r", encoding="utf-8") as fh:
        return spectrogram_from_obj(json.load(fh))

# --- tables ---
def read_table_from_bytes(name: str, data: bytes, sheet: Optional[str] = None) -> pd.DataFrame:
    lname = name.lower()
    bio = io.BytesIO(data)

    if lname.endswith((".csv", ".tsv")):
        # Multiple separators and encodings to be robust to Windows exports
        seps = ["\t"] if lname.endswith(".tsv") else [",", ";", "\t", "|"]
        encs = ["utf-8", "utf-8-sig", "cp1252", "latin1"]
        last_err = None
        for sep in seps:
            for enc in encs:
                bio.seek(0)
                try:
                    df = pd.read_csv(bio, sep=sep, encoding=enc)
                except Exception as e:
                    last_err = e
                    continue
                if df.shape[1] > 1:
                    _dbg("table_csv", sep=sep, encoding=enc, rows=len(df), cols=df.shape[1])
                    return df
        raise RuntimeError(f"CSV/TSV parse failed for {name}. Last error: {last_err}")

    if lname.endswith(".parquet"):
        return pd.read_parquet(bio)

    if lname.endswith((".xls", ".xlsx")):
        return pd.read_excel(bio, sheet_name=sheet) if sheet else pd.read_excel(bio)

    raise ValueError(f"Unsupported table file: {name}. Use CSV, TSV, Excel or Parquet.")

def series_from_table(
    df: pd.DataFrame,
    value_col: str,
    dt_col: Optional[str] = None,
    units: str = "",
) -> Series:
    dt_col = dt_col or guess_datetime_col(df)
    if not dt_col:
        raise ValueError("No datetime column found; pick one explicitly.")
    if value_col not in df.columns:
        raise ValueError(f"Column {value_col!r} not found.")
    tmp = pd.DataFrame({
        "date": pd.to_datetime(df[dt_col], errors="coerce"),
        "value": pd.to_numeric(df[value_col], errors="coerce"),
    })
    tmp = tmp.dropna().sort_values("date", kind="stable")
    _dbg("series_table", rows=len(df), kept=len(tmp), value_col=value_col, dt_col=dt_col)
    return Series(dates=tmp["date"], values=tmp["value"].to_numpy(), title=str(value_col), units=units)

def read_series_from_bytes(
    name: str,
    data: bytes,
    value_col: Optional[str] = None,
    dt_col: Optional[str] = None,
    sheet: Optional[str] = None,
) -> Series:
    """Dispatch on extension: ``.json`` is the dashboard layout, anything else a table."""
    if name.lower().endswith(".json"):
        obj = json.loads(data.decode("utf-8-sig"))
        return series_from_obj(obj)
    df = read_table_from_bytes(name, data, sheet)
    if value_col is None:
        numeric = df.select_dtypes(include=[np.number]).columns.tolist()
        if not numeric:
            raise ValueError(f"{name} has no numeric column to plot.")
        value_col = numeric[0]
    return series_from_table(df, value_col, dt_col)

# --- demo data ---
def demo_series(periods: int = 365, start: str = "2024-01-01", seed: int = 0) -> Series:
    """Daily temperature-like series: seasonal cycle, slow drift and noise."""
    rng = np.random.default_rng(seed)
    t = np.arange(periods, dtype=np.float64)
    values = 75.0 + 15.0 * np.sin(2 * np.pi * (t - 100) / 365.0) + 0.01 * t + rng.normal(0.0, 2.0, periods)
    return Series(
        dates=pd.date_range(start, periods=periods, freq="D"),
        values=values,
        title="Temperature",
        units="°F",
        location=Location(name="El Centro, CA", latitude=32.7920, longitude=-115.5631),
    )

def demo_spectrogram(periods: int = 60, n_freqs: int = 32, start: str = "2024-01-01", seed: int = 0) -> SpectrogramGrid:
    rng = np.random.default_rng(seed)
    freqs = np.linspace(0.0, 0.5, n_freqs)
    t = np.arange(periods, dtype=np.float64)
    peak = 0.1 + 0.3 * t / max(periods - 1, 1)
    power = -20.0 * (freqs[:, None] - peak[None, :]) ** 2 / 0.01 + rng.normal(0.0, 1.0, (n_freqs, periods))
    return SpectrogramGrid(dates=pd.date_range(start, periods=periods, freq="D"), frequencies=freqs, power=power)
