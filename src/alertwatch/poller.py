"""Live alert poller: fetch, dedupe by identity, emit reconciliation events."""

from __future__ import annotations

from collections.abc import Callable
import logging
from datetime import datetime

from .constants import POLL_INTERVAL, STATUS_ERROR
from .model import ConnectionStatus, ReconciliationEvent, now_local, parse_alert_body
from .timers import IntervalTimer
from .transport import AlertsClient, TransportError

LOGGER = logging.getLogger(__name__)


class Poller:
    def __init__(
        self,
        client: AlertsClient,
        on_event: Callable[[ReconciliationEvent], None],
        interval: float = POLL_INTERVAL,
        clock: Callable[[], datetime] = now_local,
    ):
        self.client = client
        self.on_event = on_event
        self.clock = clock
        self.status = ConnectionStatus()
        self._last_id: str | None = None
        self._in_flight = False
        self._timer = IntervalTimer(interval, self.poll, name="poll")

    @property
    def last_id(self) -> str | None:
        return self._last_id

    @property
    def running(self) -> bool:
        return self._timer.active

    def start(self) -> None:
        self._timer.start()
        self._timer.spawn(self.poll())

    async def stop(self) -> None:
        await self._timer.close()

    async def poll(self) -> bool:
        """Run one poll attempt; return True when an event was emitted."""

        if self._in_flight:
            LOGGER.debug("Previous poll still in flight; skipping tick")
            return False

        self._in_flight = True
        try:
            body = await self.client.fetch_current()
        except TransportError as exc:
            if self.status.state != STATUS_ERROR:
                LOGGER.warning("Alert poll failed: %s", exc)
            self.status = self.status.failed()
            return False
        finally:
            self._in_flight = False

        alert = parse_alert_body(body)
        self.status = self.status.connected(self.clock())

        identity = alert.id if alert is not None else None
        if identity == self._last_id:
            return False

        LOGGER.info("Live alert changed: %s -> %s", self._last_id, identity)
        self._last_id = identity
        self.on_event(ReconciliationEvent(alert, break_demo=False, synthetic=False))
        return True
