from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from rowlink.geometry import ClickTarget, GridGeometry
from rowlink.keys import LETTERS, LogicalKey, NamedKey, subgrid_index

log = logging.getLogger(__name__)


class Phase(Enum):
    IDLE = 0
    SELECTING = 1
    ZOOMED = 2


class OutcomeKind(Enum):
    IGNORED = 0
    PROGRESS = 1
    CANCELLED = 2
    CLICK = 3


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    target: Optional[ClickTarget] = None


IGNORED = Outcome(OutcomeKind.IGNORED)
PROGRESS = Outcome(OutcomeKind.PROGRESS)
CANCELLED = Outcome(OutcomeKind.CANCELLED)


class TargetingSession:
    """Selection progress of one overlay activation.

    Two letters pick a main cell (row, then column), one subgrid key picks
    the final point inside it. Escape abandons the session, Space clicks
    the current cell center (or the screen center before any cell).
    """

    def __init__(self, geometry: GridGeometry):
        self.geometry = geometry
        self.phase = Phase.IDLE
        self.pending_letters: List[str] = []
        self.selected_cell: Optional[Tuple[int, int]] = None

    @property
    def active(self) -> bool:
        return self.phase != Phase.IDLE

    def activate(self) -> None:
        self._enter(Phase.SELECTING)

    def reset(self) -> None:
        self._enter(Phase.IDLE)

    def feed(self, key: LogicalKey) -> Outcome:
        if self.phase == Phase.IDLE:
            return IGNORED
        if key.named == NamedKey.ESCAPE:
            self.reset()
            return CANCELLED
        if key.named == NamedKey.SPACE:
            return self._confirm()
        if key.named == NamedKey.BACKSPACE:
            return self._back()
        if self.phase == Phase.SELECTING:
            return self._select_letter(key.letter())
        return self._select_subcell(key.char)

    def _enter(self, phase: Phase, cell: Optional[Tuple[int, int]] = None) -> None:
        self.phase = phase
        self.pending_letters = []
        self.selected_cell = cell if phase == Phase.ZOOMED else None
        log.debug("Targeting phase -> %s cell=%s", phase.name, self.selected_cell)

    def _select_letter(self, letter: Optional[str]) -> Outcome:
        if letter is None or LETTERS.index(letter) >= self.geometry.grid_size:
            return IGNORED
        self.pending_letters.append(letter)
        if len(self.pending_letters) < 2:
            return PROGRESS
        first, second = self.pending_letters
        self._enter(Phase.ZOOMED, (LETTERS.index(first), LETTERS.index(second)))
        return PROGRESS

    def _select_subcell(self, char: Optional[str]) -> Outcome:
        index = subgrid_index(char)
        if index is None or self.selected_cell is None:
            return IGNORED
        sub_row, sub_col = index
        if sub_row >= self.geometry.sub_rows or sub_col >= self.geometry.sub_cols:
            return IGNORED
        row, col = self.selected_cell
        target = self.geometry.precision_target(row, col, sub_row, sub_col)
        self.reset()
        return Outcome(OutcomeKind.CLICK, target)

    def _confirm(self) -> Outcome:
        if self.selected_cell is not None:
            target = self.geometry.cell_center(*self.selected_cell)
        else:
            target = self.geometry.screen_center()
        self.reset()
        return Outcome(OutcomeKind.CLICK, target)

    def _back(self) -> Outcome:
        if self.phase == Phase.ZOOMED:
            self._enter(Phase.SELECTING)
            return PROGRESS
        if self.pending_letters:
            self.pending_letters.clear()
            return PROGRESS
        return IGNORED
