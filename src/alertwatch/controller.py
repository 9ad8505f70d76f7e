"""Composition root: merges live and demo events into the store and the map."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
import logging
from typing import Protocol

from .constants import ALL_REGIONS, REGIONS, ClientSettings
from .demo import DemoSimulator
from .model import Alert, ConnectionStatus, ReconciliationEvent, now_local
from .notify import PERMISSION_DEFAULT
from .poller import Poller
from .renderer import MarkerRenderer
from .store import AlertStore
from .timers import IntervalTimer
from .transport import AlertsClient, TransportError
from .views import AlertCardView, HistoryRow, active_count, build_alert_card, history_rows

LOGGER = logging.getLogger(__name__)


class AlertCue(Protocol):
    def play(self, alert: Alert) -> None: ...


class Notifier(Protocol):
    permission: str

    def request_permission(self) -> str: ...

    def notify(self, alert: Alert) -> None: ...


class Controller:
    """Reconciliation policy between the poller, the demo simulator and the store.

    Only this class writes to the ``AlertStore``. While the demo runs, a live
    alert stops it before being applied; a live "no alert" leaves it running.
    """

    def __init__(
        self,
        client: AlertsClient,
        renderer: MarkerRenderer,
        settings: ClientSettings | None = None,
        *,
        store: AlertStore | None = None,
        sound: AlertCue | None = None,
        notifier: Notifier | None = None,
        demo_alerts: list[Alert] | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self.settings = settings or ClientSettings()
        self.client = client
        self.renderer = renderer
        self.store = store or AlertStore()
        self.sound = sound
        self.notifier = notifier
        self.clock = clock
        self.region = ALL_REGIONS
        self.revision = 0
        self.history_refreshes = 0

        self.poller = Poller(client, self.handle_live, self.settings.poll_interval, clock=clock)
        self.demo = DemoSimulator(self.handle_demo, demo_alerts, self.settings.demo_interval)
        self._history_timer = IntervalTimer(
            self.settings.history_interval, self.refresh_history, name="history"
        )
        self._pending: set[asyncio.Task] = set()
        self._last_live: Alert | None = None

        if self.settings.region != ALL_REGIONS:
            self.select_region(self.settings.region)

    @property
    def is_demo(self) -> bool:
        return self.demo.active

    @property
    def status(self) -> ConnectionStatus:
        return self.poller.status

    async def start(self) -> None:
        if self.notifier is not None and self.notifier.permission == PERMISSION_DEFAULT:
            self.notifier.request_permission()
        self.poller.start()
        self._history_timer.start()
        self._schedule_history_refresh()

    async def stop(self) -> None:
        self.demo.stop()
        await self.poller.stop()
        await self._history_timer.close()
        await self.drain()

    async def drain(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def handle_live(self, event: ReconciliationEvent) -> None:
        self._last_live = event.alert

        if self.demo.active:
            if event.alert is None:
                LOGGER.debug("Live 'no alert' ignored while demo is running")
                return
            event = ReconciliationEvent(event.alert, break_demo=True)
        self._reconcile(event)

    def handle_demo(self, event: ReconciliationEvent) -> None:
        if not self.demo.active:
            LOGGER.debug("Dropping demo event after demo stopped")
            return
        self._reconcile(event)

    def _reconcile(self, event: ReconciliationEvent) -> None:
        if event.break_demo:
            # Cancel before applying so no synthetic tick can land afterwards.
            self.demo.stop()
            LOGGER.info("Live alert %s interrupted demo mode", event.alert.id)
        self._apply(event.alert)
        if event.alert is not None and not event.synthetic:
            self._schedule_history_refresh()

    def load_demo(self) -> None:
        self.demo.start()

    def stop_demo(self) -> None:
        if not self.demo.active:
            return
        self.demo.stop()
        self._apply(self._last_live)

    def select_region(self, region_id: str) -> None:
        if region_id not in REGIONS:
            raise ValueError(f"Unknown region '{region_id}'. Must be one of: {', '.join(REGIONS)}")
        self.region = region_id
        self.revision += 1
        self.render()

    def focus(self, name: str) -> bool:
        return self.renderer.focus(name)

    def render(self) -> int:
        return self.renderer.render(self.store.current, self.region)

    def _apply(self, alert: Alert | None) -> None:
        self.store.set_current(alert)
        self.revision += 1
        if alert is not None:
            if self.sound is not None:
                self.sound.play(alert)
            if self.notifier is not None:
                self.notifier.notify(alert)
        self.render()

    def _schedule_history_refresh(self) -> None:
        task = asyncio.get_running_loop().create_task(self.refresh_history())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def refresh_history(self) -> None:
        self.history_refreshes += 1
        try:
            items = await self.client.fetch_history()
        except TransportError as exc:
            LOGGER.warning("History refresh failed, keeping %s items: %s", len(self.store.history), exc)
            return
        self.store.set_history(items)
        self.revision += 1

    def card(self) -> AlertCardView | None:
        return build_alert_card(self.store.current, self.region, self.is_demo)

    def history(self) -> list[HistoryRow]:
        return history_rows(self.store.filtered_history(self.region), self.clock())

    def active_count(self) -> int:
        return active_count(self.store.current, self.region)
