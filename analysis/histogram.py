"""Equal-width histogram binning for the Histogram view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from .errors import EmptySample

BIN_MODES = ("auto", "width", "target")


@dataclass(frozen=True, eq=False)
class HistogramResult:
    edges: np.ndarray
    counts: np.ndarray
    width: float
    mode: str

    @property
    def n_bins(self) -> int:
        return int(self.counts.size)

    @property
    def centers(self) -> np.ndarray:
        return (self.edges[:-1] + self.edges[1:]) / 2.0

    def labels(self) -> List[str]:
        """Interval labels; every bin is half-open except the last one."""
        left, right = self.edges[:-1], self.edges[1:]
        last = len(left) - 1
        return [
            f"[{lo:.6g}, {hi:.6g}{']' if i == last else ')'}"
            for i, (lo, hi) in enumerate(zip(left, right))
        ]


def auto_bin_width(x: np.ndarray) -> float:
    """Freedman-Diaconis width, falling back to Scott then Sturges."""
    x = x[np.isfinite(x)]
    n = x.size
    vmin, vmax = float(x.min()), float(x.max())
    if n < 2:
        return max(vmax - vmin, 1.0)
    iqr = np.subtract(*np.percentile(x, [75, 25]))
    if np.isfinite(iqr) and iqr > 0:
        h = 2.0 * iqr * (n ** (-1.0 / 3.0))
    else:
        sigma = np.nanstd(x, ddof=1)
        if np.isfinite(sigma) and sigma > 0:
            h = 3.5 * sigma * (n ** (-1.0 / 3.0))
        else:
            k = max(1, int(np.ceil(np.log2(n) + 1)))
            span = max(vmax - vmin, np.finfo(float).eps)
            h = span / k
    return max(float(h), np.finfo(float).eps)


def compute_histogram(
    values: Iterable[float],
    mode: str = "target",
    bins: int = 20,
    width: Optional[float] = None,
) -> HistogramResult:
    """Bin ``values`` into contiguous equal-width bins starting at the minimum.

    Raises:
        EmptySample: if no finite value is given.
        ValueError: on an unknown ``mode`` or a non-positive ``bins``/``width``.
    """
    if mode not in BIN_MODES:
        raise ValueError(f"Unknown binning mode: {mode!r}")
    arr = np.asarray(values if isinstance(values, np.ndarray) else list(values), dtype=np.float64)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        raise EmptySample("cannot build a histogram of an empty sample")

    vmin, vmax = float(arr.min()), float(arr.max())
    if vmin == vmax:
        w = 1.0 if width is None else float(width)
        edges = np.array([vmin - w / 2.0, vmin + w / 2.0])
        return HistogramResult(edges=edges, counts=np.array([arr.size]), width=w, mode=mode)

    if mode == "auto":
        w = auto_bin_width(arr)
    elif mode == "width":
        if width is None or width <= 0:
            raise ValueError(f"Bin width must be positive, got {width!r}")
        w = float(width)
    else:
        if int(bins) < 1:
            raise ValueError(f"Number of bins must be at least 1, got {bins!r}")
        w = (vmax - vmin) / int(bins)

    n_bins = max(1, int(np.ceil((vmax - vmin) / w)))
    edges = vmin + np.arange(n_bins + 1) * w
    if edges[-1] < vmax:
        edges = np.append(edges, edges[-1] + w)
    counts, _ = np.histogram(arr, bins=edges)
    return HistogramResult(edges=edges, counts=counts, width=w, mode=mode)
