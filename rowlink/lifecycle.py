from __future__ import annotations

import logging
from enum import Enum
from typing import Hashable, Protocol

log = logging.getLogger(__name__)


class SurfaceMode(Enum):
    INTERACTIVE = "interactive"
    GHOST = "ghost"


class SurfaceService(Protocol):
    def open(self, mode: SurfaceMode) -> Hashable: ...

    def close(self, handle: Hashable) -> None: ...

    def refresh(self, handle: Hashable) -> None: ...


class OverlayLifecycle:
    """Keeps exactly one overlay surface alive and swaps it on demand.

    A ghost surface is opened on construction, so there is always a handle
    to swap from. New surfaces are opened before the old one is closed;
    a gap with no surface would hand keyboard focus to another window.
    """

    def __init__(self, service: SurfaceService):
        self.service = service
        self.mode = SurfaceMode.GHOST
        self.handle = service.open(SurfaceMode.GHOST)

    @property
    def interactive(self) -> bool:
        return self.mode == SurfaceMode.INTERACTIVE

    def show_interactive(self) -> None:
        self._swap(SurfaceMode.INTERACTIVE)

    def show_ghost(self) -> None:
        self._swap(SurfaceMode.GHOST)

    def invalidate(self) -> None:
        self.service.refresh(self.handle)

    def _swap(self, mode: SurfaceMode) -> None:
        try:
            new_handle = self.service.open(mode)
        except Exception as exc:  # noqa: BLE001 - keep the live surface, the user can retrigger
            log.warning("Opening %s surface failed: %s", mode.value, exc)
            return
        old_handle, self.handle, self.mode = self.handle, new_handle, mode
        log.debug("Surface %s -> %s (%s)", old_handle, new_handle, mode.value)
        try:
            self.service.close(old_handle)
        except Exception as exc:  # noqa: BLE001 - stale surface is harmless, keep the new one
            log.warning("Closing surface %s failed: %s", old_handle, exc)
