#!/usr/bin/env python3
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6 import QtWidgets

from rowlink import __version__
from rowlink.activation import SignalActivation, TapActivation
from rowlink.clicker import ClickEmulator, ClickWorker, PynputPointer
from rowlink.config import ConfigError, Settings, load_settings, parse_screen_size
from rowlink.controller import TargetingController
from rowlink.geometry import GridGeometry
from rowlink.lifecycle import OverlayLifecycle
from rowlink.session import TargetingSession
from rowlink.surfaces import QtSurfaceService

log = logging.getLogger("rowlink")


def build_geometry(settings: Settings, app: QtWidgets.QApplication) -> GridGeometry:
    width, height = settings.screen_width, settings.screen_height
    if width is None or height is None:
        screen_geo = app.primaryScreen().geometry()
        width = width or screen_geo.width()
        height = height or screen_geo.height()
    return GridGeometry(
        screen_width=width,
        screen_height=height,
        grid_size=settings.grid_size,
        sub_rows=settings.sub_rows,
        sub_cols=settings.sub_cols,
        sub_padding=settings.sub_padding,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rowlink",
        description="Keyboard grid overlay that clicks where you point it. Send SIGUSR1 to show it.",
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON config file")
    parser.add_argument("--screen", default=None, metavar="WxH", help="override the screen size")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings(args.config)
    if args.screen:
        try:
            width, height = parse_screen_size(args.screen)
        except ConfigError as exc:
            log.error("%s", exc)
            return 2
        settings = dataclasses.replace(settings, screen_width=width, screen_height=height)

    app = QtWidgets.QApplication(sys.argv[:1])
    app.setQuitOnLastWindowClosed(False)

    geometry = build_geometry(settings, app)
    session = TargetingSession(geometry)
    worker = ClickWorker(ClickEmulator(PynputPointer(), settings.timings))
    worker.start()
    service = QtSurfaceService(session, geometry, settings)
    controller = TargetingController(session, OverlayLifecycle(service), worker.submit)
    service.on_key = controller.handle_key

    signals = SignalActivation()
    signals.activated.connect(controller.activate)
    signals.quit_requested.connect(app.quit)
    signals.install()

    tap = None
    if settings.tap_key:
        tap = TapActivation(settings.tap_key, settings.tap_threshold)
        tap.activated.connect(controller.activate)
        tap.start()

    def shutdown() -> None:
        if tap is not None:
            tap.stop()
        signals.uninstall()
        service.close_all()
        worker.stop(timeout=1.0)

    app.aboutToQuit.connect(shutdown)
    log.info(
        "Rowlink %s started (%dx%d, %dx%d grid).",
        __version__,
        geometry.screen_width,
        geometry.screen_height,
        geometry.grid_size,
        geometry.grid_size,
    )
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
