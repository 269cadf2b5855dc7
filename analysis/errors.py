"""Error taxonomy shared by the analysis modules."""

from __future__ import annotations


class AnalysisError(ValueError):
    """Base class for recoverable analysis failures."""


class EmptySample(AnalysisError):
    """Raised when a statistic is requested over zero values."""


class EmptyInput(EmptySample):
    """Raised when a spectrum is requested over zero values."""


class DegenerateWindow(AnalysisError):
    """A window with fewer than two points or no spread in its positions."""


class InvalidRange(AnalysisError):
    """A window range that cannot be applied, e.g. ``lo > hi``."""
