import asyncio
import itertools

import pytest

from alertwatch.model import Alert
from alertwatch.transport import TransportError


class FakeClient:
    """Serves queued current-alert bodies; an exception in the queue is raised."""

    def __init__(self, bodies=(), history=()):
        self.bodies = list(bodies)
        self.history_items = list(history)
        self.history_error: Exception | None = None
        self.current_calls = 0
        self.history_calls = 0
        self.gate: asyncio.Event | None = None

    async def fetch_current(self) -> str:
        self.current_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        body = self.bodies.pop(0) if self.bodies else "null"
        if isinstance(body, Exception):
            raise body
        return body

    async def fetch_history(self) -> list[Alert]:
        self.history_calls += 1
        if self.history_error is not None:
            raise self.history_error
        return list(self.history_items)

    async def aclose(self) -> None:
        pass


class FakeSurface:
    def __init__(self):
        self.markers: dict[int, dict] = {}
        self.added = 0
        self.fits: list = []
        self.views: list = []
        self.opened: list[int] = []
        self.fit_error: Exception | None = None
        self.resized = 0
        self._ids = itertools.count(1)

    def add_marker(self, position, *, color, popup_html):
        marker_id = next(self._ids)
        self.markers[marker_id] = {"position": position, "color": color, "popup": popup_html}
        self.added += 1
        return marker_id

    def remove_marker(self, marker):
        del self.markers[marker]

    def marker_position(self, marker):
        return self.markers[marker]["position"]

    def fit_bounds(self, bounds, *, max_zoom):
        if self.fit_error is not None:
            raise self.fit_error
        self.fits.append((bounds, max_zoom))

    def set_view(self, center, zoom):
        self.views.append((center, zoom))

    def open_popup(self, marker):
        self.opened.append(marker)

    def invalidate_size(self):
        self.resized += 1


class RecordingCue:
    def __init__(self):
        self.played: list[Alert] = []
        self.notified: list[Alert] = []
        self.permission = "default"
        self.permission_requests = 0

    def play(self, alert: Alert) -> None:
        self.played.append(alert)

    def request_permission(self) -> str:
        self.permission_requests += 1
        self.permission = "granted"
        return self.permission

    def notify(self, alert: Alert) -> None:
        self.notified.append(alert)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def cue() -> RecordingCue:
    return RecordingCue()


@pytest.fixture
def transport_error() -> TransportError:
    return TransportError("connection refused")


@pytest.fixture
def rocket_alert() -> Alert:
    return Alert(
        id="1",
        category="1",
        title="ירי רקטות",
        locations=("עזה", "אשקלון"),
    )
