"""Demo mode: replay canned alerts on a timer."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging

from .constants import DEMO_ALERTS, DEMO_INTERVAL
from .model import Alert, ReconciliationEvent
from .timers import IntervalTimer

LOGGER = logging.getLogger(__name__)


def load_demo_alerts(payloads: Sequence[dict] = DEMO_ALERTS) -> tuple[Alert, ...]:
    return tuple(Alert.from_dict(p).as_synthetic() for p in payloads)


class DemoSimulator:
    def __init__(
        self,
        on_event: Callable[[ReconciliationEvent], None],
        alerts: Sequence[Alert] | None = None,
        interval: float = DEMO_INTERVAL,
    ):
        self.alerts = tuple(alerts) if alerts is not None else load_demo_alerts()
        if not self.alerts:
            raise ValueError("demo needs at least one alert")
        self.on_event = on_event
        self._index = 0
        self._timer = IntervalTimer(interval, self.advance, name="demo")

    @property
    def active(self) -> bool:
        return self._timer.active

    @property
    def index(self) -> int:
        return self._index

    def start(self) -> None:
        """(Re)start from the first alert; any running cycle is cancelled first."""

        self._timer.stop()
        self._index = 0
        self._timer.start()
        LOGGER.info("Demo mode started (%s alerts)", len(self.alerts))
        self._emit()

    def stop(self) -> None:
        if not self._timer.active:
            return
        self._timer.stop()
        LOGGER.info("Demo mode stopped at index %s", self._index)

    def advance(self) -> None:
        self._index = (self._index + 1) % len(self.alerts)
        self._emit()

    def _emit(self) -> None:
        alert = self.alerts[self._index]
        if not alert.synthetic:
            alert = alert.as_synthetic()
        self.on_event(ReconciliationEvent(alert, break_demo=False, synthetic=True))
