import asyncio
import io
import signal

import pytest

from alertwatch import runner as runner_mod
from alertwatch.constants import ClientSettings
from alertwatch.model import Alert
from alertwatch.runner import ClientRunner

ROCKETS = '{"id":"1","cat":"1","title":"ירי רקטות","data":["שדרות","נתיבות"]}'


def _runner(monkeypatch, fake_client, tmp_path=None, **kwargs) -> ClientRunner:
    monkeypatch.setattr(runner_mod, "AlertsClient", lambda *args, **kw: fake_client)
    settings = ClientSettings(
        sound=False,
        notifications=False,
        map_output=(tmp_path / "map.html") if tmp_path else None,
        **kwargs,
    )
    return ClientRunner(settings, out=io.StringIO())


def test_refresh_output_prints_on_change(monkeypatch, fake_client) -> None:
    runner = _runner(monkeypatch, fake_client)

    runner.refresh_output()
    runner.refresh_output()
    assert runner.out.getvalue().count("מפת אזעקות חיות") == 1

    runner.controller.select_region("otef")
    runner.refresh_output()
    assert runner.out.getvalue().count("מפת אזעקות חיות") == 2
    assert "עוטף עזה" in runner.out.getvalue()


def test_map_written_when_markers_change(monkeypatch, fake_client, tmp_path) -> None:
    runner = _runner(monkeypatch, fake_client, tmp_path)
    runner.controller.renderer.place(Alert(id="1", category="1", title="t", locations=("שדרות",)))

    runner.refresh_output()
    path = tmp_path / "map.html"
    assert path.exists()

    path.unlink()
    runner.refresh_output()
    assert not path.exists()


@pytest.mark.asyncio
async def test_run_until_stopped(monkeypatch, fake_client) -> None:
    fake_client.bodies = [ROCKETS] * 200
    runner = _runner(monkeypatch, fake_client, poll_interval=0.05)

    task = asyncio.create_task(runner.run())
    await asyncio.sleep(0.2)
    runner.request_stop()
    await asyncio.wait_for(task, timeout=2)

    assert runner.controller.store.current.id == "1"
    assert not runner.controller.poller.running
    assert "ירי רקטות" in runner.out.getvalue()


def test_toggle_sound_mutes_controller_cue(monkeypatch, fake_client) -> None:
    runner = _runner(monkeypatch, fake_client)
    runner.sound.enabled = True

    assert runner.toggle_sound() is False
    assert runner.controller.sound is runner.sound
    assert runner.sound.enabled is False


def test_resize_signal_redraws_map(monkeypatch, fake_client) -> None:
    runner = _runner(monkeypatch, fake_client)
    winch = getattr(signal, "SIGWINCH", None)
    if winch is None:
        pytest.skip("no SIGWINCH on this platform")

    before = runner.surface.revision
    dict(runner._signal_handlers())[winch]()
    assert runner.surface.revision == before + 1
