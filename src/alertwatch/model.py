"""Alert model, wire parsing and connection status."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
import json
import logging

from .constants import STATUS_CONNECTED, STATUS_CONNECTING, STATUS_ERROR, STATUS_TEXT

LOGGER = logging.getLogger(__name__)

BOM = "\ufeff"
NO_ALERT_MARKERS = {"", "null"}


class MalformedPayload(ValueError):
    """Body or item that cannot be read as an alert."""


def _optional_text(payload: dict, key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedPayload(f"'{key}' must be a string, got {type(value).__name__}")
    return value or None


@dataclass(slots=True, frozen=True)
class Alert:
    id: str
    category: str
    title: str
    locations: tuple[str, ...] = ()
    description: str | None = None
    occurred_at: str | None = None
    saved_at: str | None = None
    synthetic: bool = False

    @property
    def timestamp(self) -> str | None:
        return self.occurred_at or self.saved_at

    def as_synthetic(self) -> "Alert":
        return replace(self, synthetic=True)

    def with_locations(self, locations: tuple[str, ...]) -> "Alert":
        return replace(self, locations=locations)

    def to_dict(self) -> dict:
        payload: dict = {
            "id": self.id,
            "cat": self.category,
            "title": self.title,
            "data": list(self.locations),
        }
        if self.description:
            payload["desc"] = self.description
        if self.occurred_at:
            payload["alertDate"] = self.occurred_at
        if self.saved_at:
            payload["savedAt"] = self.saved_at
        if self.synthetic:
            payload["demo"] = True
        return payload

    @classmethod
    def from_dict(cls, payload: object) -> "Alert":
        if not isinstance(payload, dict):
            raise MalformedPayload(f"Expected an object, got {type(payload).__name__}")

        raw_id = payload.get("id")
        if raw_id is None or not str(raw_id).strip():
            raise MalformedPayload("Alert is missing 'id'")

        data = payload.get("data") or []
        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            raise MalformedPayload("'data' must be a list of location names")

        return cls(
            id=str(raw_id),
            category=str(payload.get("cat") or ""),
            title=str(payload.get("title") or ""),
            locations=tuple(data),
            description=_optional_text(payload, "desc"),
            occurred_at=_optional_text(payload, "alertDate"),
            saved_at=_optional_text(payload, "savedAt"),
            synthetic=bool(payload.get("demo", False)),
        )


@dataclass(slots=True, frozen=True)
class ReconciliationEvent:
    alert: Alert | None
    break_demo: bool = False
    synthetic: bool = False


@dataclass(slots=True, frozen=True)
class ConnectionStatus:
    state: str = STATUS_CONNECTING
    text: str = STATUS_TEXT[STATUS_CONNECTING]
    last_update: datetime | None = None

    def connected(self, at: datetime) -> "ConnectionStatus":
        return ConnectionStatus(STATUS_CONNECTED, STATUS_TEXT[STATUS_CONNECTED], at)

    def failed(self) -> "ConnectionStatus":
        return ConnectionStatus(STATUS_ERROR, STATUS_TEXT[STATUS_ERROR], self.last_update)


def now_local() -> datetime:
    return datetime.now(tz=timezone.utc).astimezone()


def clean_body(text: str) -> str:
    """Strip whitespace and byte-order marks around a response body."""

    return text.strip().lstrip(BOM).strip()


def parse_alert_body(text: str) -> Alert | None:
    """Read the current-alert body; anything that is not an alert means "no alert"."""

    body = clean_body(text)
    if body in NO_ALERT_MARKERS:
        return None
    try:
        return Alert.from_dict(json.loads(body))
    except (json.JSONDecodeError, MalformedPayload) as exc:
        LOGGER.debug("Treating unreadable alert body as no alert: %s", exc)
        return None


def parse_history(text: str) -> list[Alert]:
    body = clean_body(text)
    if not body:
        return []
    try:
        raw = json.loads(body)
    except json.JSONDecodeError as exc:
        LOGGER.warning("History body is not JSON: %s", exc)
        return []
    if not isinstance(raw, list):
        return []

    alerts: list[Alert] = []
    for item in raw:
        try:
            alerts.append(Alert.from_dict(item))
        except MalformedPayload as exc:
            LOGGER.debug("Skipping history item: %s", exc)
    return alerts
