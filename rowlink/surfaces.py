from __future__ import annotations

import itertools
import logging
from typing import Dict, Optional

from rowlink.config import Settings
from rowlink.geometry import GridGeometry
from rowlink.lifecycle import SurfaceMode
from rowlink.overlay import GridOverlay, KeyCallback
from rowlink.session import TargetingSession

log = logging.getLogger(__name__)


class QtSurfaceService:
    """Creates and destroys GridOverlay windows, addressed by integer handles."""

    def __init__(
        self,
        session: TargetingSession,
        geometry: GridGeometry,
        settings: Settings,
        on_key: Optional[KeyCallback] = None,
    ):
        self.session = session
        self.geometry = geometry
        self.settings = settings
        self.on_key = on_key
        self._ids = itertools.count(1)
        self._surfaces: Dict[int, GridOverlay] = {}

    def open(self, mode: SurfaceMode) -> int:
        handle = next(self._ids)
        surface = GridOverlay(
            self.session,
            self.geometry,
            self.settings.colors,
            self.settings.font_size,
            interactive=mode == SurfaceMode.INTERACTIVE,
            on_key=self._dispatch_key,
        )
        self._surfaces[handle] = surface
        surface.present()
        log.debug("Opened %s surface %d", mode.value, handle)
        return handle

    def close(self, handle: int) -> None:
        surface = self._surfaces.pop(handle)
        surface.dismiss()
        log.debug("Closed surface %d", handle)

    def refresh(self, handle: int) -> None:
        surface = self._surfaces.get(handle)
        if surface is not None:
            surface.update()

    def close_all(self) -> None:
        for handle in list(self._surfaces):
            self.close(handle)

    def _dispatch_key(self, key) -> None:
        if self.on_key is not None:
            self.on_key(key)
