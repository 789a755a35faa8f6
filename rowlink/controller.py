from __future__ import annotations

import logging
from typing import Callable

from rowlink.geometry import ClickTarget
from rowlink.keys import LogicalKey
from rowlink.lifecycle import OverlayLifecycle
from rowlink.session import OutcomeKind, TargetingSession

log = logging.getLogger(__name__)


class TargetingController:
    """Single dispatcher for activations and key presses.

    Must only be driven from one thread (the Qt event loop); clicks are
    handed to ``submit_click`` which runs them elsewhere.
    """

    def __init__(
        self,
        session: TargetingSession,
        lifecycle: OverlayLifecycle,
        submit_click: Callable[[ClickTarget], None],
    ):
        self.session = session
        self.lifecycle = lifecycle
        self.submit_click = submit_click

    def activate(self) -> None:
        log.debug("Activation received")
        self.session.activate()
        self.lifecycle.show_interactive()

    def handle_key(self, key: LogicalKey) -> None:
        outcome = self.session.feed(key)
        if outcome.kind == OutcomeKind.PROGRESS:
            self.lifecycle.invalidate()
        elif outcome.kind == OutcomeKind.CANCELLED:
            self.lifecycle.show_ghost()
        elif outcome.kind == OutcomeKind.CLICK and outcome.target is not None:
            self.lifecycle.show_ghost()
            self.submit_click(outcome.target)
