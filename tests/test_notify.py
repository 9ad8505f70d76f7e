import io

from alertwatch import notify
from alertwatch.model import Alert
from alertwatch.notify import DesktopNotifier, SoundEmitter

ALERT = Alert(id="1", category="1", title="ירי רקטות", locations=("שדרות", "נתיבות", "ניר עם", "אשקלון"))


def test_sound_writes_bells() -> None:
    stream = io.StringIO()
    SoundEmitter(stream=stream).play(ALERT)
    assert stream.getvalue() == "\a" * 4


def test_sound_toggle_mutes() -> None:
    stream = io.StringIO()
    sound = SoundEmitter(stream=stream)
    assert sound.toggle() is False
    sound.play(ALERT)
    assert stream.getvalue() == ""


def test_permission_denied_without_notify_send(monkeypatch) -> None:
    monkeypatch.setattr(notify.shutil, "which", lambda cmd: None)
    notifier = DesktopNotifier()

    assert notifier.request_permission() == "denied"
    notifier.notify(ALERT)


def test_permission_resolved_once(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(notify.shutil, "which", lambda cmd: calls.append(cmd) or "/usr/bin/notify-send")
    notifier = DesktopNotifier()

    notifier.request_permission()
    notifier.request_permission()
    assert calls == ["notify-send"]
    assert notifier.permission == "granted"


def test_notify_spawns_with_first_three_locations(monkeypatch) -> None:
    spawned = []
    monkeypatch.setattr(notify.shutil, "which", lambda cmd: "/usr/bin/notify-send")
    monkeypatch.setattr(notify.subprocess, "Popen", lambda args, **kwargs: spawned.append(args))
    notifier = DesktopNotifier()
    notifier.request_permission()

    notifier.notify(ALERT)
    assert spawned == [["/usr/bin/notify-send", "🚨 ירי רקטות", "שדרות, נתיבות, ניר עם"]]


def test_notify_failure_is_swallowed(monkeypatch) -> None:
    def boom(args, **kwargs):
        raise OSError("no display")

    monkeypatch.setattr(notify.shutil, "which", lambda cmd: "/usr/bin/notify-send")
    monkeypatch.setattr(notify.subprocess, "Popen", boom)
    notifier = DesktopNotifier()
    notifier.request_permission()
    notifier.notify(ALERT)


def test_disabled_notifier_is_denied(monkeypatch) -> None:
    monkeypatch.setattr(notify.shutil, "which", lambda cmd: "/usr/bin/notify-send")
    assert DesktopNotifier(enabled=False).request_permission() == "denied"
