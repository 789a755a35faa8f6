import pytest

QtCore = pytest.importorskip("PyQt6.QtCore")
overlay = pytest.importorskip("rowlink.overlay")

from rowlink.keys import BACKSPACE, ESCAPE, SPACE, LogicalKey  # noqa: E402

Key = QtCore.Qt.Key


@pytest.mark.parametrize(
    "qt_key, text, expected",
    [
        (Key.Key_Escape, "\x1b", ESCAPE),
        (Key.Key_Space, " ", SPACE),
        (Key.Key_Backspace, "\x08", BACKSPACE),
        (Key.Key_A, "a", LogicalKey.of("A")),
        (Key.Key_Semicolon, ";", LogicalKey.of(";")),
        (Key.Key_Period, ".", LogicalKey.of(".")),
    ],
)
def test_key_from_qt(qt_key, text, expected) -> None:
    assert overlay.key_from_qt(qt_key.value, text) == expected


@pytest.mark.parametrize("qt_key", [Key.Key_Shift, Key.Key_Control, Key.Key_Return])
def test_keys_without_text_are_dropped(qt_key) -> None:
    text = "\r" if qt_key == Key.Key_Return else ""
    assert overlay.key_from_qt(qt_key.value, text) is None
