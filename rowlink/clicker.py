"""Left click at an absolute point using relative pointer motion only.

Layer-shell compositors give no reliable absolute warp while overlay
surfaces are being swapped, so the pointer is first slammed into the top
left corner with a huge negative move and then moved by the target
coordinates.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from rowlink.geometry import ClickTarget

log = logging.getLogger(__name__)


class PointerPort(Protocol):
    def move_relative(self, dx: int, dy: int) -> None: ...

    def click(self) -> None: ...


class PynputPointer:
    def __init__(self, controller=None):
        # pynput selects its backend on import, which needs a display
        from pynput import mouse

        self.mouse_ctl = controller or mouse.Controller()
        self._button = mouse.Button.left

    def move_relative(self, dx: int, dy: int) -> None:
        self.mouse_ctl.move(dx, dy)

    def click(self) -> None:
        self.mouse_ctl.click(self._button)


@dataclass(frozen=True)
class ClickTimings:
    surface_destroy_ms: int = 60
    zero_ms: int = 5
    move_ms: int = 20
    clamp_offset: int = 10000


class ClickEmulator:
    def __init__(
        self,
        port: PointerPort,
        timings: ClickTimings = ClickTimings(),
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.port = port
        self.timings = timings
        self._sleep = sleep

    def perform(self, target: ClickTarget) -> None:
        x, y = target.rounded()
        t = self.timings
        log.debug("Clicking at (%d, %d)", x, y)
        # the interactive surface must be gone or it eats the click
        self._sleep(t.surface_destroy_ms / 1000)
        self._attempt("clamp", self.port.move_relative, -t.clamp_offset, -t.clamp_offset)
        self._sleep(t.zero_ms / 1000)
        self._attempt("move", self.port.move_relative, x, y)
        self._sleep(t.move_ms / 1000)
        self._attempt("click", self.port.click)

    def _attempt(self, step: str, fn: Callable[..., None], *args: int) -> None:
        try:
            fn(*args)
        except Exception as exc:  # noqa: BLE001 - injection is best effort, the user can retrigger
            log.warning("Pointer %s failed: %s", step, exc)


_STOP = object()


class ClickWorker:
    """Runs click sequences one after another on a single thread."""

    def __init__(self, emulator: ClickEmulator):
        self.emulator = emulator
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="rowlink-click", daemon=True)
        self._thread.start()

    def submit(self, target: ClickTarget) -> None:
        if self._thread is None:
            self.start()
        self._queue.put(target)

    def stop(self, timeout: Optional[float] = None) -> None:
        if self._thread is None:
            return
        self._queue.put(_STOP)
        self._thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            try:
                self.emulator.perform(item)  # type: ignore[arg-type]
            except Exception:  # noqa: BLE001 - one bad click must not stop the worker
                log.exception("Click at %s failed", item)
