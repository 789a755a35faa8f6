import os
import signal
import time

import pytest

QtCore = pytest.importorskip("PyQt6.QtCore")

from rowlink.activation import SignalActivation, TapActivation  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    yield app


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def build_tap(threshold: float = 0.4):
    tap = TapActivation("alt_l", threshold)
    tap._key = "ALT"
    tap.clock = FakeClock()
    fired: list = []
    tap.activated.connect(lambda: fired.append(True))
    return tap, fired


def test_quick_tap_activates(qapp) -> None:
    tap, fired = build_tap()
    tap.on_press("ALT")
    tap.clock.now += 0.1
    tap.on_release("ALT")
    assert fired == [True]


def test_long_hold_does_not_activate(qapp) -> None:
    tap, fired = build_tap()
    tap.on_press("ALT")
    tap.clock.now += 1.0
    tap.on_release("ALT")
    assert fired == []


def test_chord_does_not_activate(qapp) -> None:
    tap, fired = build_tap()
    tap.on_press("ALT")
    tap.on_press("TAB", False)
    tap.on_release("TAB", False)
    tap.on_release("ALT")
    assert fired == []


def test_key_repeat_keeps_first_press_time(qapp) -> None:
    tap, fired = build_tap()
    tap.on_press("ALT")
    tap.clock.now += 0.3
    tap.on_press("ALT")
    tap.clock.now += 0.3
    tap.on_release("ALT")
    assert fired == []


def test_dispatch_routes_signals(qapp) -> None:
    source = SignalActivation()
    activated: list = []
    quits: list = []
    source.activated.connect(lambda: activated.append(True))
    source.quit_requested.connect(lambda: quits.append(True))

    source.dispatch(signal.SIGUSR1)
    source.dispatch(signal.SIGTERM)
    source.dispatch(signal.SIGHUP)

    assert activated == [True]
    assert quits == [True]


def test_sigusr1_reaches_activated(qapp) -> None:
    source = SignalActivation()
    activated: list = []
    source.activated.connect(lambda: activated.append(True))
    previous = signal.getsignal(signal.SIGINT)
    source.install()
    try:
        os.kill(os.getpid(), signal.SIGUSR1)
        deadline = time.monotonic() + 2.0
        while not activated and time.monotonic() < deadline:
            source._drain()
            time.sleep(0.01)
    finally:
        source.uninstall()
    assert activated == [True]
    assert signal.getsignal(signal.SIGINT) is previous
