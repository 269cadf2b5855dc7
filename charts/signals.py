"""Publish/subscribe feed for the currently visible window."""

from __future__ import annotations

from typing import Callable, List, Optional

from analysis.series import SeriesWindow

WindowCallback = Callable[[SeriesWindow], None]


class VisibleWindowFeed:
    """Pushes each new visible window to its subscribers, synchronously and in order."""

    def __init__(self) -> None:
        self._subscribers: List[WindowCallback] = []
        self._current: Optional[SeriesWindow] = None

    @property
    def current(self) -> Optional[SeriesWindow]:
        return self._current

    def subscribe(self, callback: WindowCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, window: SeriesWindow) -> None:
        self._current = window
        for callback in list(self._subscribers):
            callback(window)
