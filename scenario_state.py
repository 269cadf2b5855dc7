"""Save and restore dashboard presets (selected view, window, bins, gauge value)."""

from __future__ import annotations

import datetime as _dt
import enum
import json
from typing import Any, Dict, Mapping, MutableMapping, Sequence

import numpy as np
import pandas as pd


PRESET_WIDGET_PREFIXES: Sequence[str] = (
    "view_",
    "win_",
    "hist_",
    "gauge_",
)

PRESET_VERSION = 1


def json_safe_value(value: Any) -> Any:
    """Convert widget values to JSON-serialisable equivalents."""

    if isinstance(value, enum.Enum):
        return json_safe_value(value.value)
    if isinstance(value, (np.integer,)):
        return int(value)
    if isinstance(value, (np.floating,)):
        return float(value)
    if isinstance(value, (np.bool_,)):
        return bool(value)
    if isinstance(value, np.ndarray):
        return [json_safe_value(v) for v in value.tolist()]
    if isinstance(value, (pd.Timestamp, _dt.datetime, _dt.date, _dt.time)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [json_safe_value(v) for v in value]
    if isinstance(value, set):
        return [json_safe_value(v) for v in sorted(value)]
    if isinstance(value, dict):
        return {str(k): json_safe_value(v) for k, v in value.items()}
    return value


def collect_widget_state(
    session_state: Mapping[str, Any],
    prefixes: Sequence[str] = PRESET_WIDGET_PREFIXES,
) -> Dict[str, Any]:
    """Keep only the widget entries that belong in a preset."""

    saved: Dict[str, Any] = {}
    for key, value in session_state.items():
        if any(key.startswith(prefix) for prefix in prefixes):
            saved[key] = json_safe_value(value)
    return saved


def _revive(key: str, value: Any) -> Any:
    # date-range sliders round-trip as a pair of ISO strings
    if key.endswith("_range") and isinstance(value, list) and len(value) == 2:
        if all(isinstance(v, str) for v in value):
            return tuple(pd.Timestamp(v).to_pydatetime() for v in value)
    return value


def apply_widget_state(
    widget_state: Mapping[str, Any],
    session_state: MutableMapping[str, Any],
) -> None:
    """Populate ``session_state`` with persisted widget values."""

    for key, value in widget_state.items():
        session_state[key] = _revive(key, value)


def dumps_preset(session_state: Mapping[str, Any]) -> str:
    payload = {"version": PRESET_VERSION, "widgets": collect_widget_state(session_state)}
    return json.dumps(payload, indent=2, sort_keys=True)


def loads_preset(text: str) -> Dict[str, Any]:
    """Parse a preset produced by :func:`dumps_preset` and return its widget values."""
    payload = json.loads(text)
    if not isinstance(payload, dict) or "widgets" not in payload:
        raise ValueError("Not a dashboard preset: missing 'widgets'.")
    version = payload.get("version")
    if version != PRESET_VERSION:
        raise ValueError(f"Unsupported preset version: {version!r}")
    widgets = payload["widgets"]
    if not isinstance(widgets, dict):
        raise ValueError("Preset 'widgets' must be an object.")
    return widgets
