"""Descriptive statistics over a numeric sample.

Quantiles use linear interpolation between order statistics (``h = (n-1)p``),
variance is the unbiased sample variance and the third/fourth moments are the
bias-corrected sample skewness and excess kurtosis.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from .errors import EmptySample

QUARTILES = (0.25, 0.5, 0.75)


@dataclass(frozen=True)
class DescriptiveStatsResult:
    count: int
    min: float
    max: float
    mean: float
    median: float
    q1: float
    q3: float
    variance: float
    std_dev: float
    skewness: float
    kurtosis: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def rounded(self, decimals: int = 2) -> Dict[str, float]:
        out: Dict[str, float] = {}
        for key, value in self.as_dict().items():
            out[key] = value if key == "count" else round(float(value), decimals)
        return out


def _as_sample(values: Iterable[float]) -> pd.Series:
    if isinstance(values, pd.Series):
        sample = pd.to_numeric(values, errors="coerce")
    elif isinstance(values, np.ndarray):
        sample = pd.Series(values.astype(np.float64).reshape(-1))
    else:
        sample = pd.Series(list(values), dtype=np.float64)
    return sample.dropna().astype(np.float64)


def _constant(sample: pd.Series) -> bool:
    return bool(sample.max() == sample.min())


def sample_skewness(sample: pd.Series) -> float:
    """Adjusted Fisher-Pearson skewness; NaN below three values or with no spread."""
    if sample.size < 3 or _constant(sample):
        return math.nan
    return float(sample.skew())


def sample_kurtosis(sample: pd.Series) -> float:
    """Bias-corrected excess kurtosis; NaN below four values or with no spread."""
    if sample.size < 4 or _constant(sample):
        return math.nan
    return float(sample.kurt())


def describe(values: Iterable[float]) -> DescriptiveStatsResult:
    """Summarize ``values``; NaN entries are ignored.

    Raises:
        EmptySample: if no finite value remains.
    """
    sample = _as_sample(values)
    n = int(sample.size)
    if n == 0:
        raise EmptySample("cannot summarize an empty sample")

    arr = sample.to_numpy()
    mean = float(arr.mean())
    q1, median, q3 = (float(q) for q in sample.quantile(list(QUARTILES), interpolation="linear"))
    variance = float(sample.var(ddof=1)) if n > 1 else 0.0

    return DescriptiveStatsResult(
        count=n,
        min=float(arr.min()),
        max=float(arr.max()),
        mean=mean,
        median=median,
        q1=q1,
        q3=q3,
        variance=variance,
        std_dev=math.sqrt(variance),
        skewness=sample_skewness(sample),
        kurtosis=sample_kurtosis(sample),
    )


def summary_frame(results: Mapping[str, Optional[DescriptiveStatsResult]]) -> pd.DataFrame:
    """One row per statistic, one column per named result (``None`` → NaN column)."""
    columns = {}
    for name, res in results.items():
        if res is None:
            columns[name] = pd.Series(np.nan, index=list(DescriptiveStatsResult.__dataclass_fields__))
        else:
            columns[name] = pd.Series(res.as_dict())
    return pd.DataFrame(columns)
