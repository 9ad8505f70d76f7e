"""Client runtime loop: wires the controller and refreshes terminal/map output."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TextIO

from .constants import ClientSettings
from .controller import Controller
from .folium_map import FoliumMapSurface
from .notify import DesktopNotifier, SoundEmitter
from .renderer import MarkerRenderer
from .transport import AlertsClient
from .views import render_text

LOGGER = logging.getLogger(__name__)

OUTPUT_INTERVAL = 0.5


class ClientRunner:
    def __init__(self, settings: ClientSettings, demo: bool = False, out: TextIO | None = None):
        self.settings = settings
        self.demo = demo
        self.out = out
        self.surface = FoliumMapSurface()
        self.sound = SoundEmitter(enabled=settings.sound)
        self.client = AlertsClient(settings.base_url, settings.request_timeout)
        self.controller = Controller(
            self.client,
            MarkerRenderer(self.surface),
            settings,
            sound=self.sound,
            notifier=DesktopNotifier(enabled=settings.notifications),
        )
        self._stop = asyncio.Event()
        self._shown_revision = -1
        self._shown_status = None
        self._saved_map_revision = -1

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        handled = []
        for sig, handler in self._signal_handlers():
            try:
                loop.add_signal_handler(sig, handler)
            except (NotImplementedError, RuntimeError):
                continue
            handled.append(sig)

        await self.controller.start()
        if self.demo:
            self.controller.load_demo()
        LOGGER.info("Watching %s (region=%s)", self.settings.base_url, self.controller.region)

        try:
            while not self._stop.is_set():
                self.refresh_output()
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=OUTPUT_INTERVAL)
                except asyncio.TimeoutError:
                    pass
        finally:
            await self.controller.stop()
            await self.client.aclose()
            for sig in handled:
                loop.remove_signal_handler(sig)
            self.refresh_output()
            LOGGER.info("Client loop stopped")

    def _signal_handlers(self) -> list:
        handlers = [(signal.SIGINT, self._stop.set), (signal.SIGTERM, self._stop.set)]
        # SIGUSR1 and SIGWINCH are POSIX only.
        if hasattr(signal, "SIGUSR1"):
            handlers.append((signal.SIGUSR1, self.toggle_sound))
        if hasattr(signal, "SIGWINCH"):
            handlers.append((signal.SIGWINCH, self.controller.renderer.resize))
        return handlers

    def request_stop(self) -> None:
        self._stop.set()

    def toggle_sound(self) -> bool:
        enabled = self.sound.toggle()
        LOGGER.info("Alert sound %s", "on" if enabled else "off")
        return enabled

    def refresh_output(self) -> None:
        ctl = self.controller
        if ctl.revision != self._shown_revision or ctl.status.state != self._shown_status:
            self._shown_revision = ctl.revision
            self._shown_status = ctl.status.state
            print(
                render_text(
                    status=ctl.status,
                    region_id=ctl.region,
                    card=ctl.card(),
                    rows=ctl.history(),
                    count=ctl.active_count(),
                    is_demo=ctl.is_demo,
                ),
                file=self.out,
                flush=True,
            )
            print("", file=self.out, flush=True)

        path = self.settings.map_output
        if path is not None and self.surface.revision != self._saved_map_revision:
            try:
                self.surface.save(path)
            except OSError as exc:
                LOGGER.warning("Could not write map to %s: %s", path, exc)
            else:
                self._saved_map_revision = self.surface.revision


def run_foreground(settings: ClientSettings, demo: bool = False) -> None:
    runner = ClientRunner(settings, demo=demo)
    asyncio.run(runner.run())
