from __future__ import annotations

from typing import Callable, Dict, Optional

from PyQt6 import QtCore, QtGui, QtWidgets

from rowlink.geometry import GridGeometry, Rect
from rowlink.keys import BACKSPACE, ESCAPE, HOME_ROW, LETTERS, SPACE, SUBGRID_LABELS, LogicalKey
from rowlink.session import Phase, TargetingSession

KeyCallback = Callable[[LogicalKey], None]

LABEL_BG_COLOR = QtGui.QColor(0, 0, 0, 180)
HINT_BG_COLOR = QtGui.QColor(0, 0, 0, 150)
HINT_TEXT_COLOR = QtGui.QColor(255, 255, 255)

_NAMED_KEYS = {
    QtCore.Qt.Key.Key_Escape.value: ESCAPE,
    QtCore.Qt.Key.Key_Space.value: SPACE,
    QtCore.Qt.Key.Key_Backspace.value: BACKSPACE,
}


def key_from_qt(key: int, text: str) -> Optional[LogicalKey]:
    named = _NAMED_KEYS.get(int(key))
    if named is not None:
        return named
    if text and text.isprintable() and not text.isspace():
        return LogicalKey.of(text)
    return None


def _qrect(rect: Rect) -> QtCore.QRectF:
    return QtCore.QRectF(rect.x, rect.y, rect.width, rect.height)


class GridOverlay(QtWidgets.QWidget):
    """Full-screen overlay surface.

    Interactive surfaces draw the targeting grid and take the keyboard;
    ghost surfaces draw nothing and let every event through.
    """

    def __init__(
        self,
        session: TargetingSession,
        geometry: GridGeometry,
        colors: Dict[str, tuple],
        font_size: int,
        interactive: bool,
        on_key: Optional[KeyCallback] = None,
    ):
        super().__init__()
        self.session = session
        self.geometry = geometry
        self.colors = {name: QtGui.QColor(*rgba) for name, rgba in colors.items()}
        self.font_size = font_size
        self.interactive = interactive
        self.on_key = on_key

        flags = QtCore.Qt.WindowType.FramelessWindowHint | QtCore.Qt.WindowType.Tool
        if interactive:
            flags |= QtCore.Qt.WindowType.WindowStaysOnTopHint
        else:
            flags |= (
                QtCore.Qt.WindowType.WindowStaysOnBottomHint
                | QtCore.Qt.WindowType.WindowTransparentForInput
                | QtCore.Qt.WindowType.WindowDoesNotAcceptFocus
            )
            self.setAttribute(QtCore.Qt.WidgetAttribute.WA_ShowWithoutActivating)
        self.setWindowFlags(flags)
        self.setAttribute(QtCore.Qt.WidgetAttribute.WA_TranslucentBackground)
        # pointer always passes through to the windows below
        self.setAttribute(QtCore.Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.setFocusPolicy(
            QtCore.Qt.FocusPolicy.StrongFocus if interactive else QtCore.Qt.FocusPolicy.NoFocus
        )
        self.setGeometry(0, 0, int(geometry.screen_width), int(geometry.screen_height))

    def present(self) -> None:
        self.show()
        if self.interactive:
            self.raise_()
            self.activateWindow()
            self.setFocus()
            self.grabKeyboard()

    def dismiss(self) -> None:
        if self.interactive:
            self.releaseKeyboard()
        self.hide()
        self.close()
        self.deleteLater()

    def keyPressEvent(self, event):
        key = key_from_qt(event.key(), event.text())
        if key is None or self.on_key is None:
            return
        self.on_key(key)

    def paintEvent(self, event):
        if not self.interactive or not self.session.active:
            return
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing)
        try:
            if self.session.phase == Phase.ZOOMED:
                self.draw_subgrid(painter)
            else:
                self.draw_grid(painter)
            self.draw_status_hint(painter)
        finally:
            painter.end()

    def draw_status_hint(self, painter):
        if self.session.phase == Phase.ZOOMED:
            text = "Subgrid | Key: Click | Space: Cell center | Backspace: Back | ESC: Exit"
        else:
            text = "Grid Mode | A-Z A-Z: Select | Space: Screen center | ESC: Exit"
        font = QtGui.QFont("Arial", 12)
        painter.setFont(font)
        metrics = QtGui.QFontMetrics(font)
        rect = metrics.boundingRect(text)
        w, h = rect.width() + 20, rect.height() + 20
        x, y = self.width() - w - 20, 20
        painter.setBrush(HINT_BG_COLOR)
        painter.setPen(QtCore.Qt.PenStyle.NoPen)
        painter.drawRoundedRect(x, y, w, h, 5, 5)
        painter.setPen(HINT_TEXT_COLOR)
        painter.drawText(x + 10, y + 10 + metrics.ascent(), text)

    def draw_grid(self, painter):
        n = self.geometry.grid_size
        pending = self.session.pending_letters[0] if self.session.pending_letters else None
        painter.setFont(QtGui.QFont("Monospace", self.font_size, QtGui.QFont.Weight.Bold))
        border = QtGui.QPen(self.colors["grid_border"], 1)
        for r in range(n):
            for c in range(n):
                cell = _qrect(self.geometry.cell_rect(r, c))
                if pending is not None and LETTERS[r] == pending:
                    painter.fillRect(cell, self.colors["row_focus"])
                painter.setPen(border)
                painter.setBrush(QtCore.Qt.BrushStyle.NoBrush)
                painter.drawRect(cell)
                painter.setPen(self.colors["main_text"])
                painter.drawText(cell, QtCore.Qt.AlignmentFlag.AlignCenter, LETTERS[r] + LETTERS[c])

    def draw_subgrid(self, painter):
        row, col = self.session.selected_cell
        painter.fillRect(_qrect(self.geometry.cell_rect(row, col)), LABEL_BG_COLOR)
        painter.setFont(QtGui.QFont("Monospace", self.font_size))
        for r in range(self.geometry.sub_rows):
            color = self.colors["sub_home_row"] if r == HOME_ROW else self.colors["sub_default"]
            painter.setPen(color)
            for c in range(self.geometry.sub_cols):
                box = _qrect(self.geometry.subcell_rect(row, col, r, c))
                painter.drawText(box, QtCore.Qt.AlignmentFlag.AlignCenter, SUBGRID_LABELS[r][c])
