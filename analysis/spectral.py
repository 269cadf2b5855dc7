"""One-sided power spectrum of a real sequence via a zero-padded FFT."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np

from .errors import EmptyInput


@dataclass(frozen=True)
class SpectrumPoint:
    frequency_index: int
    power: float
    frequency: float


@dataclass(frozen=True)
class Spectrum:
    points: Tuple[SpectrumPoint, ...]
    original_length: int
    padded_length: int
    sample_rate: float = 1.0

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    @property
    def bin_spacing(self) -> float:
        return self.sample_rate / self.padded_length

    def powers(self) -> np.ndarray:
        return np.array([p.power for p in self.points], dtype=np.float64)

    def frequencies(self) -> np.ndarray:
        return np.array([p.frequency for p in self.points], dtype=np.float64)


def _as_array(values: Iterable[float]) -> np.ndarray:
    if not isinstance(values, np.ndarray):
        values = list(values)
    return np.asarray(values, dtype=np.float64).reshape(-1)


def next_power_of_two(n: int) -> int:
    """Smallest power of two ``>= n`` (``1`` for ``n <= 1``)."""
    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def zero_pad(values: Iterable[float]) -> np.ndarray:
    arr = _as_array(values)
    m = next_power_of_two(arr.size)
    if m == arr.size:
        return arr
    out = np.zeros(m, dtype=np.float64)
    out[: arr.size] = arr
    return out


def estimate_spectrum(values: Iterable[float], sample_rate: float = 1.0) -> Spectrum:
    """Power ``|X[i]|^2`` for ``i`` in ``0 .. N//2 - 1``.

    ``N`` is the unpadded length; the transform runs on the sequence padded
    to the next power of two ``M``. ``frequency`` is ``i * sample_rate / M``,
    the spacing of the padded transform's bins.

    Raises:
        EmptyInput: if ``values`` is empty.
        ValueError: if ``values`` holds NaN/inf or ``sample_rate <= 0``.
    """
    arr = _as_array(values)
    n = arr.size
    if n == 0:
        raise EmptyInput("cannot compute a spectrum of an empty sequence")
    if not np.all(np.isfinite(arr)):
        raise ValueError("spectrum input contains NaN or infinite values")
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")

    padded = zero_pad(arr)
    m = padded.size
    coeffs = np.fft.fft(padded)

    half = n // 2
    power = coeffs.real[:half] ** 2 + coeffs.imag[:half] ** 2
    points: List[SpectrumPoint] = [
        SpectrumPoint(frequency_index=i, power=float(power[i]), frequency=i * sample_rate / m)
        for i in range(half)
    ]
    return Spectrum(points=tuple(points), original_length=n, padded_length=m, sample_rate=float(sample_rate))
