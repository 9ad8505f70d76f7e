"""Read models for the sidebar, alert card and history list, plus a text rendering."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .constants import ALL_REGIONS, REGIONS, category_for
from .model import Alert, ConnectionStatus
from .regions import count_in_region, filter_locations

HISTORY_PREVIEW = 4
DEMO_BANNER = "⚠️ מצב דמו — הנתונים אינם אמיתיים"
NO_ACTIVE_ALERTS = "✓ אין אזעקות פעילות כרגע"
WAITING_FOR_ALERTS = "ממתין לאזעקות..."

try:
    SERVER_TZ = ZoneInfo("Asia/Jerusalem")
except ZoneInfoNotFoundError:
    SERVER_TZ = None


@dataclass(frozen=True)
class AlertCardView:
    alert_id: str
    icon: str
    color: str
    title: str
    description: str | None
    is_demo: bool
    locations: tuple[str, ...]
    hidden_count: int

    @property
    def empty_message(self) -> str | None:
        if self.locations:
            return None
        if self.hidden_count > 0:
            return f"אין יישובים מאזור זה ({self.hidden_count} ממוסננים)"
        return "אין יישובים בהתרעה"


@dataclass(frozen=True)
class HistoryRow:
    alert_id: str
    icon: str
    color: str
    title: str
    locations_text: str
    when: str
    is_demo: bool


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=SERVER_TZ) if SERVER_TZ else parsed.astimezone()
    return parsed


def relative_time(value: str | None, now: datetime) -> str:
    """Short Hebrew "time ago" label; empty when the timestamp is missing or unreadable."""

    if not value:
        return ""
    try:
        then = parse_timestamp(value)
    except (ValueError, TypeError):
        return ""

    minutes = int((now - then).total_seconds() // 60)
    if minutes < 1:
        return "עכשיו"
    if minutes < 60:
        return f"לפני {minutes} דק'"
    if minutes < 1440:
        return f"לפני {minutes // 60} ש'"
    local = then.astimezone(now.tzinfo) if now.tzinfo else then
    return f"{local.day}/{local.month}"


def active_count(alert: Alert | None, region_id: str = ALL_REGIONS) -> int:
    if alert is None:
        return 0
    return count_in_region(alert.locations, region_id)


def build_alert_card(alert: Alert | None, region_id: str = ALL_REGIONS, is_demo: bool = False) -> AlertCardView | None:
    if alert is None:
        return None
    cat = category_for(alert.category)
    shown = filter_locations(alert.locations, region_id)
    return AlertCardView(
        alert_id=alert.id,
        icon=cat.icon,
        color=cat.color,
        title=alert.title,
        description=alert.description,
        is_demo=is_demo or alert.synthetic,
        locations=shown,
        hidden_count=len(alert.locations) - len(shown),
    )


def locations_preview(locations: tuple[str, ...], limit: int = HISTORY_PREVIEW) -> str:
    text = "، ".join(locations[:limit])
    if len(locations) > limit:
        text += f" ועוד {len(locations) - limit}"
    return text


def history_rows(items: list[Alert], now: datetime) -> list[HistoryRow]:
    rows = []
    for item in items:
        cat = category_for(item.category)
        rows.append(
            HistoryRow(
                alert_id=item.id,
                icon=cat.icon,
                color=cat.color,
                title=item.title,
                locations_text=locations_preview(item.locations),
                when=relative_time(item.timestamp, now),
                is_demo=item.synthetic,
            )
        )
    return rows


def format_status(status: ConnectionStatus) -> str:
    if status.last_update is None:
        return status.text
    return f"{status.text} · {status.last_update:%H:%M:%S}"


def format_card(card: AlertCardView | None) -> list[str]:
    if card is None:
        return [NO_ACTIVE_ALERTS]

    tag = "[דמו] " if card.is_demo else ""
    lines = [f"{card.icon} {tag}{card.title} ({len(card.locations)} יישובים)"]
    if card.description:
        lines.append(f"   {card.description}")
    if card.empty_message:
        lines.append(f"   {card.empty_message}")
    else:
        lines.append("   " + ", ".join(card.locations))
        if card.hidden_count:
            lines.append(f"   +{card.hidden_count} באזורים אחרים")
    return lines


def format_history(rows: list[HistoryRow]) -> list[str]:
    if not rows:
        return [WAITING_FOR_ALERTS]
    lines = []
    for row in rows:
        tag = "[דמו] " if row.is_demo else ""
        when = f"  ({row.when})" if row.when else ""
        lines.append(f"{row.icon} {tag}{row.title}: {row.locations_text}{when}")
    return lines


def render_text(
    *,
    status: ConnectionStatus,
    region_id: str,
    card: AlertCardView | None,
    rows: list[HistoryRow],
    count: int,
    is_demo: bool,
    history_limit: int = 10,
) -> str:
    lines = [f"🚨 מפת אזעקות חיות · {format_status(status)}"]
    if is_demo:
        lines.append(DEMO_BANNER)
    lines.append(f"אזור: {REGIONS[region_id].label}")
    lines.append("")
    lines.append(f"אזעקות פעילות ({count})")
    lines.extend(format_card(card))
    lines.append("")
    lines.append(f"היסטוריה ({len(rows)})")
    lines.extend(format_history(rows[:history_limit]))
    return "\n".join(lines)
