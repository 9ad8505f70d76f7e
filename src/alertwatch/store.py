"""In-memory store for the current alert and the rolling history."""

from __future__ import annotations

from .constants import ALL_REGIONS, HISTORY_LIMIT
from .model import Alert
from .regions import filter_locations, matches


class AlertStore:
    def __init__(self, history_limit: int = HISTORY_LIMIT):
        self.history_limit = history_limit
        self._current: Alert | None = None
        self._history: tuple[Alert, ...] = ()

    @property
    def current(self) -> Alert | None:
        return self._current

    @property
    def history(self) -> tuple[Alert, ...]:
        return self._history

    def set_current(self, alert: Alert | None) -> None:
        self._current = alert

    def set_history(self, alerts: list[Alert]) -> None:
        self._history = tuple(alerts[: self.history_limit])

    def filtered_current(self, region_id: str = ALL_REGIONS) -> Alert | None:
        if self._current is None:
            return None
        if region_id == ALL_REGIONS:
            return self._current
        return self._current.with_locations(filter_locations(self._current.locations, region_id))

    def filtered_history(self, region_id: str = ALL_REGIONS) -> list[Alert]:
        return [a for a in self._history if matches(a.locations, region_id)]
