"""Best-effort audible and desktop alert cues."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from typing import TextIO

from .model import Alert

LOGGER = logging.getLogger(__name__)

PERMISSION_DEFAULT = "default"
PERMISSION_GRANTED = "granted"
PERMISSION_DENIED = "denied"


class SoundEmitter:
    """Terminal bell pattern; four beeps per alert like the siren cue."""

    beeps = 4

    def __init__(self, enabled: bool = True, stream: TextIO | None = None):
        self.enabled = enabled
        self.stream = stream

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled

    def play(self, alert: Alert) -> None:
        if not self.enabled:
            return
        stream = self.stream or sys.stdout
        try:
            stream.write("\a" * self.beeps)
            stream.flush()
        except (OSError, ValueError) as exc:
            LOGGER.debug("Bell failed: %s", exc)


class DesktopNotifier:
    def __init__(self, enabled: bool = True, command: str = "notify-send"):
        self.enabled = enabled
        self.command = command
        self.permission = PERMISSION_DEFAULT
        self._executable: str | None = None

    def request_permission(self) -> str:
        if self.permission != PERMISSION_DEFAULT:
            return self.permission
        self._executable = shutil.which(self.command) if self.enabled else None
        self.permission = PERMISSION_GRANTED if self._executable else PERMISSION_DENIED
        LOGGER.info("Desktop notifications %s", self.permission)
        return self.permission

    def notify(self, alert: Alert) -> None:
        if self.permission != PERMISSION_GRANTED or not self._executable:
            return
        body = ", ".join(alert.locations[:3])
        try:
            subprocess.Popen(
                [self._executable, f"🚨 {alert.title}", body],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            LOGGER.warning("Desktop notification failed: %s", exc)
