from datetime import datetime, timedelta, timezone

import pytest

from alertwatch.model import Alert, ConnectionStatus
from alertwatch.views import (
    DEMO_BANNER,
    NO_ACTIVE_ALERTS,
    active_count,
    build_alert_card,
    format_status,
    history_rows,
    locations_preview,
    relative_time,
    render_text,
)

NOW = datetime(2025, 6, 13, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=20), "עכשיו"),
        (timedelta(minutes=5), "לפני 5 דק'"),
        (timedelta(hours=3, minutes=10), "לפני 3 ש'"),
        (timedelta(days=3), "10/6"),
    ],
)
def test_relative_time_buckets(delta: timedelta, expected: str) -> None:
    assert relative_time((NOW - delta).isoformat(), NOW) == expected


def test_relative_time_naive_server_time_is_jerusalem() -> None:
    # 14:55 in Jerusalem (UTC+3 in June) is 11:55 UTC.
    assert relative_time("2025-06-13 14:55:00", NOW) == "לפני 5 דק'"


@pytest.mark.parametrize("value", [None, "", "yesterday", 1718000000])
def test_relative_time_unreadable_is_empty(value) -> None:
    assert relative_time(value, NOW) == ""


def test_card_counts_hidden_locations() -> None:
    alert = Alert(id="1", category="1", title="t", locations=("שדרות", "חיפה", "עזה"))
    card = build_alert_card(alert, "haifa")

    assert card.locations == ("חיפה",)
    assert card.hidden_count == 2
    assert card.empty_message is None


def test_card_empty_messages() -> None:
    filtered = build_alert_card(Alert(id="1", category="1", title="t", locations=("שדרות",)), "north")
    assert filtered.empty_message == "אין יישובים מאזור זה (1 ממוסננים)"

    bare = build_alert_card(Alert(id="2", category="1", title="t"), "all")
    assert bare.empty_message == "אין יישובים בהתרעה"

    assert build_alert_card(None) is None


def test_card_marks_demo() -> None:
    alert = Alert(id="d", category="99", title="t", synthetic=True)
    card = build_alert_card(alert)
    assert card.is_demo
    assert card.icon == "⚠️"


def test_locations_preview_truncates() -> None:
    assert locations_preview(("א", "ב")) == "א، ב"
    assert locations_preview(("א", "ב", "ג", "ד", "ה", "ו")) == "א، ב، ג، ד ועוד 2"


def test_history_rows() -> None:
    items = [
        Alert(id="a", category="1", title="x", locations=("שדרות",), saved_at=(NOW - timedelta(minutes=2)).isoformat()),
        Alert(id="b", category="13", title="y", synthetic=True),
    ]
    rows = history_rows(items, NOW)
    assert [r.alert_id for r in rows] == ["a", "b"]
    assert rows[0].when == "לפני 2 דק'"
    assert rows[1].is_demo
    assert rows[1].when == ""


def test_active_count() -> None:
    alert = Alert(id="1", category="1", title="t", locations=("שדרות", "נתיבות", "חיפה"))
    assert active_count(None) == 0
    assert active_count(alert) == 3
    assert active_count(alert, "otef") == 2


def test_format_status() -> None:
    assert format_status(ConnectionStatus()) == "מתחבר..."
    assert format_status(ConnectionStatus().connected(NOW)) == "מחובר · 12:00:00"


def test_render_text_sections() -> None:
    text = render_text(
        status=ConnectionStatus(),
        region_id="all",
        card=None,
        rows=[],
        count=0,
        is_demo=True,
    )
    assert DEMO_BANNER in text
    assert NO_ACTIVE_ALERTS in text
    assert "כל הארץ" in text
