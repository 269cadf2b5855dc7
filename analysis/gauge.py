"""Heat-stress gauge: WBGT readings mapped onto coloured sections."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

GAUGE_MAXIMUM = 90.0


@dataclass(frozen=True)
class GaugeSection:
    limit: float
    color: str
    label: str


DEFAULT_SECTIONS = (
    GaugeSection(72.0, "green", "Safe"),
    GaugeSection(76.0, "yellow", "Caution"),
    GaugeSection(80.0, "orange", "Warning"),
    GaugeSection(84.0, "red", "Danger"),
    GaugeSection(math.inf, "gray", "Extreme"),
)


@dataclass(frozen=True)
class GaugeReading:
    value: float
    section: GaugeSection
    fraction: float


def classify(value: float, sections: Sequence[GaugeSection] = DEFAULT_SECTIONS) -> GaugeSection:
    """First section whose upper limit is ``>= value``."""
    if math.isnan(value):
        raise ValueError("cannot classify a NaN reading")
    for section in sections:
        if value <= section.limit:
            return section
    raise ValueError(f"no gauge section covers {value!r}")


def needle_fraction(value: float, maximum: float = GAUGE_MAXIMUM) -> float:
    if maximum <= 0:
        raise ValueError(f"gauge maximum must be positive, got {maximum!r}")
    return min(max(value / maximum, 0.0), 1.0)


def gauge_reading(
    value: float,
    sections: Sequence[GaugeSection] = DEFAULT_SECTIONS,
    maximum: float = GAUGE_MAXIMUM,
) -> GaugeReading:
    value = float(value)
    return GaugeReading(
        value=value,
        section=classify(value, sections),
        fraction=needle_fraction(value, maximum),
    )
