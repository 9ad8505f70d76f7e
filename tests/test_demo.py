import asyncio

import pytest

from alertwatch.constants import DEMO_ALERTS
from alertwatch.demo import DemoSimulator, load_demo_alerts


def test_demo_alerts_are_synthetic() -> None:
    alerts = load_demo_alerts()
    assert len(alerts) == len(DEMO_ALERTS) >= 3
    assert all(a.synthetic for a in alerts)


def test_empty_demo_list_rejected() -> None:
    with pytest.raises(ValueError):
        DemoSimulator(lambda e: None, alerts=[])


@pytest.mark.asyncio
async def test_start_emits_first_alert_immediately() -> None:
    events = []
    demo = DemoSimulator(events.append, interval=10)

    demo.start()
    try:
        assert demo.active
        assert demo.index == 0
        assert len(events) == 1
        assert events[0].alert.id == "demo-1"
        assert events[0].synthetic is True
        assert events[0].alert.synthetic is True
    finally:
        demo.stop()


@pytest.mark.asyncio
async def test_advance_cycles_modulo_length() -> None:
    events = []
    demo = DemoSimulator(events.append, interval=10)
    demo.start()
    for _ in range(len(DEMO_ALERTS)):
        demo.advance()
    demo.stop()

    ids = [e.alert.id for e in events]
    assert ids[: len(DEMO_ALERTS)] == [p["id"] for p in DEMO_ALERTS]
    assert ids[-1] == "demo-1"
    assert demo.index == 0


@pytest.mark.asyncio
async def test_timer_advances_once_per_interval() -> None:
    events = []
    demo = DemoSimulator(events.append, interval=0.1)

    demo.start()
    await asyncio.sleep(0.15)
    demo.stop()

    assert [e.alert.id for e in events] == ["demo-1", "demo-2"]
    assert demo.index == 1


@pytest.mark.asyncio
async def test_stop_is_idempotent_and_final() -> None:
    events = []
    demo = DemoSimulator(events.append, interval=0.05)

    demo.start()
    demo.stop()
    demo.stop()
    await asyncio.sleep(0.12)

    assert not demo.active
    assert len(events) == 1


@pytest.mark.asyncio
async def test_restart_resets_without_leaking_timer() -> None:
    events = []
    demo = DemoSimulator(events.append, interval=0.3)

    demo.start()
    demo.advance()
    demo.advance()
    assert demo.index == 2

    await asyncio.sleep(0.1)
    demo.start()
    assert demo.index == 0
    await asyncio.sleep(0.25)
    # The first timer would have fired at 0.3s; only the restarted one remains.
    assert [e.alert.id for e in events] == ["demo-1", "demo-2", "demo-3", "demo-1"]
    await asyncio.sleep(0.1)
    demo.stop()
    assert [e.alert.id for e in events][-1] == "demo-2"
    assert len(events) == 5
