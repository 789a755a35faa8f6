from __future__ import annotations

from enum import Enum
from typing import Dict, NamedTuple, Optional, Tuple

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Three keyboard rows, middle one is the home row.
SUBGRID_LABELS: Tuple[Tuple[str, ...], ...] = (
    ("Q", "W", "E", "R", "U", "I", "O", "P"),
    ("A", "S", "D", "F", "J", "K", "L", ";"),
    ("Z", "X", "C", "V", "N", "M", ",", "."),
)
HOME_ROW = 1

_SUBGRID_INDEX: Dict[str, Tuple[int, int]] = {
    label: (r, c) for r, row in enumerate(SUBGRID_LABELS) for c, label in enumerate(row)
}


class NamedKey(Enum):
    ESCAPE = "escape"
    SPACE = "space"
    BACKSPACE = "backspace"


class LogicalKey(NamedTuple):
    named: Optional[NamedKey] = None
    char: Optional[str] = None

    @classmethod
    def of(cls, value: "NamedKey | str") -> "LogicalKey":
        if isinstance(value, NamedKey):
            return cls(named=value)
        if not value:
            raise ValueError("Character keys need a non-empty value")
        return cls(char=value[0].upper())

    def letter(self) -> Optional[str]:
        if self.char is not None and len(self.char) == 1 and self.char in LETTERS:
            return self.char
        return None


ESCAPE = LogicalKey.of(NamedKey.ESCAPE)
SPACE = LogicalKey.of(NamedKey.SPACE)
BACKSPACE = LogicalKey.of(NamedKey.BACKSPACE)


def subgrid_index(char: Optional[str]) -> Optional[Tuple[int, int]]:
    if not char:
        return None
    return _SUBGRID_INDEX.get(char.upper())
