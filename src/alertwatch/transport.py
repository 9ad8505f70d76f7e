"""HTTP access to the alert endpoints."""

from __future__ import annotations

import logging

import httpx

from .constants import ALERTS_PATH, DEFAULT_BASE_URL, HISTORY_PATH, REQUEST_TIMEOUT
from .model import Alert, parse_history

LOGGER = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """The endpoint could not be reached or answered with an error status."""


class AlertsClient:
    """Thin async wrapper over the two alert endpoints.

    Callers get raw text for the current alert so that body cleanup and
    "no alert" detection stay in one place (``model.parse_alert_body``).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Cache-Control": "no-store", "Accept": "application/json"},
        )

    async def _get_text(self, path: str) -> str:
        try:
            response = await self._client.get(path)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"GET {path} failed: {exc}") from exc
        return response.text

    async def fetch_current(self) -> str:
        return await self._get_text(ALERTS_PATH)

    async def fetch_history(self) -> list[Alert]:
        return parse_history(await self._get_text(HISTORY_PATH))

    async def aclose(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "AlertsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
