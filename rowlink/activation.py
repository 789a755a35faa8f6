"""Out-of-band triggers that bring the overlay up.

Both sources live on other threads or in signal context and only emit Qt
signals, so the controller is always driven from the Qt event loop.
"""

from __future__ import annotations

import logging
import signal
import socket
import time
from typing import Dict, Optional

from PyQt6 import QtCore

log = logging.getLogger(__name__)

QUIT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SignalActivation(QtCore.QObject):
    """SIGUSR1 shows the overlay, SIGINT/SIGTERM quit.

    Python only runs signal handlers when the interpreter gets control, which
    the Qt loop rarely gives it, so the wakeup fd is watched by a
    QSocketNotifier instead.
    """

    activated = QtCore.pyqtSignal()
    quit_requested = QtCore.pyqtSignal()

    def __init__(self, signum: int = signal.SIGUSR1, parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        self.signum = signum
        self._reader, self._writer = socket.socketpair()
        self._reader.setblocking(False)
        self._writer.setblocking(False)
        self._notifier = QtCore.QSocketNotifier(
            self._reader.fileno(), QtCore.QSocketNotifier.Type.Read, self
        )
        self._notifier.activated.connect(self._drain)
        self._previous_fd: Optional[int] = None
        self._previous_handlers: Dict[int, object] = {}

    def install(self) -> None:
        self._previous_fd = signal.set_wakeup_fd(self._writer.fileno())
        for signum in (self.signum, *QUIT_SIGNALS):
            # the handler only has to exist, the byte on the wakeup fd does the work
            self._previous_handlers[signum] = signal.signal(signum, lambda *_: None)
        log.info("Listening for signal %s", signal.Signals(self.signum).name)

    def uninstall(self) -> None:
        if self._previous_fd is None:
            return
        signal.set_wakeup_fd(self._previous_fd)
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()
        self._previous_fd = None
        self._notifier.setEnabled(False)
        self._reader.close()
        self._writer.close()

    def _drain(self, *_args) -> None:
        try:
            data = self._reader.recv(64)
        except BlockingIOError:
            return
        for signum in data:
            self.dispatch(signum)

    def dispatch(self, signum: int) -> None:
        if signum == self.signum:
            self.activated.emit()
        elif signum in QUIT_SIGNALS:
            self.quit_requested.emit()


class TapActivation(QtCore.QObject):
    """Shows the overlay on a short tap of a modifier key, e.g. left Alt."""

    activated = QtCore.pyqtSignal()

    def __init__(self, key_name: str, threshold: float = 0.4, parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        self.key_name = key_name
        self.threshold = threshold
        self.clock = time.monotonic
        self.last_press_time = 0.0
        self.potential_toggle = False
        self.listener = None
        self._key = None

    def start(self) -> None:
        from pynput import keyboard

        self._key = getattr(keyboard.Key, self.key_name, None)
        if self._key is None:
            raise ValueError(f"Unknown tap activation key: {self.key_name!r}")
        self.listener = keyboard.Listener(on_press=self.on_press, on_release=self.on_release)
        self.listener.start()
        log.info("Tap %s to show the overlay", self.key_name)

    def stop(self) -> None:
        if self.listener is not None:
            self.listener.stop()
            self.listener = None

    def on_press(self, key, *_args) -> None:
        if key == self._key:
            if not self.potential_toggle:
                self.potential_toggle = True
                self.last_press_time = self.clock()
            return
        # chord such as Alt+Tab, not a tap
        self.potential_toggle = False

    def on_release(self, key, *_args) -> None:
        if key != self._key:
            return
        if self.potential_toggle:
            duration = self.clock() - self.last_press_time
            if duration < self.threshold:
                self.activated.emit()
        self.potential_toggle = False
