"""Series, visible windows over them, and precomputed spectrogram grids."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .errors import InvalidRange

Bound = Optional[Union[str, dt.datetime, pd.Timestamp]]


@dataclass(frozen=True)
class Location:
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def label(self) -> str:
        """Return ``name`` plus a ``32.7920° N, 115.5631° W`` style suffix."""
        if self.latitude is None or self.longitude is None:
            return self.name
        ns = "N" if self.latitude >= 0 else "S"
        ew = "E" if self.longitude >= 0 else "W"
        return f"{self.name} ({abs(self.latitude):.4f}° {ns}, {abs(self.longitude):.4f}° {ew})"


@dataclass(frozen=True, eq=False)
class Series:
    """Timestamped numeric series; ``dates[i]`` belongs to ``values[i]``."""

    dates: pd.DatetimeIndex
    values: np.ndarray
    title: str = ""
    units: str = ""
    location: Optional[Location] = None

    def __post_init__(self):
        dates = pd.DatetimeIndex(pd.to_datetime(self.dates))
        values = np.asarray(self.values, dtype=np.float64).reshape(-1)
        if len(dates) != values.size:
            raise ValueError(
                f"dates and values must have the same length, got {len(dates)} and {values.size}"
            )
        object.__setattr__(self, "dates", dates)
        object.__setattr__(self, "values", values)

    def __len__(self) -> int:
        return int(self.values.size)

    @property
    def tz(self):
        return getattr(self.dates, "tz", None)

    def take(self, mask: np.ndarray) -> "Series":
        mask = np.asarray(mask, dtype=bool)
        return Series(
            dates=self.dates[mask],
            values=self.values[mask],
            title=self.title,
            units=self.units,
            location=self.location,
        )

    def dropna(self) -> "Series":
        """Drop rows whose value is NaN or whose timestamp is NaT."""
        mask = np.isfinite(self.values) & ~np.asarray(self.dates.isna())
        if mask.all():
            return self
        return self.take(mask)

    def to_pandas(self) -> pd.Series:
        return pd.Series(self.values, index=self.dates, name=self.title or "value")

    def span(self) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
        if len(self) == 0:
            return None, None
        return self.dates.min(), self.dates.max()


def _align_to_tz(ts: Bound, tz) -> Optional[pd.Timestamp]:
    if ts is None:
        return None
    ts = pd.Timestamp(ts)
    if tz is not None:
        return ts.tz_localize(tz) if ts.tzinfo is None else ts.tz_convert(tz)
    else:
        return ts.tz_localize(None) if ts.tzinfo is not None else ts


@dataclass(frozen=True, eq=False)
class SeriesWindow:
    """A series plus an inclusive ``[lo, hi]`` timestamp range.

    ``None`` for a bound means unbounded on that side. Bounds are aligned to
    the series timezone (naive bounds are localized, aware bounds converted).
    """

    series: Series
    lo: Bound = None
    hi: Bound = None
    _visible: Series = field(init=False, repr=False)

    def __post_init__(self):
        lo = _align_to_tz(self.lo, self.series.tz)
        hi = _align_to_tz(self.hi, self.series.tz)
        if lo is not None and hi is not None and lo > hi:
            raise InvalidRange(f"window start {lo} is after window end {hi}")
        object.__setattr__(self, "lo", lo)
        object.__setattr__(self, "hi", hi)

        dates = self.series.dates
        mask = np.ones(len(dates), dtype=bool)
        if lo is not None:
            mask &= np.asarray(dates >= lo)
        if hi is not None:
            mask &= np.asarray(dates <= hi)
        object.__setattr__(self, "_visible", self.series.take(mask))

    @classmethod
    def full(cls, series: Series) -> "SeriesWindow":
        return cls(series=series)

    def visible(self) -> Series:
        return self._visible

    @property
    def dates(self) -> pd.DatetimeIndex:
        return self._visible.dates

    @property
    def values(self) -> np.ndarray:
        return self._visible.values

    def positions(self) -> np.ndarray:
        """0-based rank of each visible point within this window."""
        return np.arange(len(self._visible), dtype=np.float64)

    def __len__(self) -> int:
        return len(self._visible)

    def is_empty(self) -> bool:
        return len(self._visible) == 0

    def with_range(self, lo: Bound, hi: Bound) -> "SeriesWindow":
        return SeriesWindow(series=self.series, lo=lo, hi=hi)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the range (not the data) into a JSON-friendly dict."""
        return {
            "lo": _ts_to_iso(self.lo),
            "up": _ts_to_iso(self.hi),
        }

    @classmethod
    def from_dict(cls, series: Series, data: Dict[str, Any]) -> "SeriesWindow":
        return cls(series=series, lo=_iso_to_ts(data.get("lo")), hi=_iso_to_ts(data.get("up")))


def _ts_to_iso(value: Optional[pd.Timestamp]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def _iso_to_ts(value: Optional[str]) -> Optional[pd.Timestamp]:
    if value in (None, ""):
        return None
    return pd.Timestamp(value)


@dataclass(frozen=True, eq=False)
class SpectrogramGrid:
    """Precomputed spectrogram: ``power[f][t]`` for frequency ``f`` at date ``t``."""

    dates: pd.DatetimeIndex
    frequencies: np.ndarray
    power: np.ndarray

    def __post_init__(self):
        dates = pd.DatetimeIndex(pd.to_datetime(self.dates))
        freqs = np.asarray(self.frequencies, dtype=np.float64).reshape(-1)
        power = np.asarray(self.power, dtype=np.float64)
        if power.ndim != 2:
            raise ValueError(f"power must be a 2-D grid, got {power.ndim} dimension(s)")
        expected = (freqs.size, len(dates))
        if power.shape != expected:
            raise ValueError(
                f"power grid shape {power.shape} does not match (frequencies, dates) = {expected}"
            )
        object.__setattr__(self, "dates", dates)
        object.__setattr__(self, "frequencies", freqs)
        object.__setattr__(self, "power", power)

    def power_range(self) -> Tuple[float, float]:
        if self.power.size == 0:
            raise ValueError("spectrogram grid is empty")
        return float(np.nanmin(self.power)), float(np.nanmax(self.power))


def series_from_arrays(
    dates: Sequence[Any],
    values: Sequence[float],
    title: str = "",
    units: str = "",
    location: Optional[Location] = None,
) -> Series:
    return Series(
        dates=pd.DatetimeIndex(pd.to_datetime(list(dates))),
        values=np.asarray(values, dtype=float),
        title=title,
        units=units,
        location=location,
    )
