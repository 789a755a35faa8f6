"""Grid coordinate math shared by the renderer and the click path."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Tuple


class ClickTarget(NamedTuple):
    x: float
    y: float

    def rounded(self) -> Tuple[int, int]:
        # half-up, round() would go to even on .5
        return math.floor(self.x + 0.5), math.floor(self.y + 0.5)


class Rect(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    def center(self) -> ClickTarget:
        return ClickTarget(self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class GridGeometry:
    screen_width: float
    screen_height: float
    grid_size: int = 26
    sub_rows: int = 3
    sub_cols: int = 8
    sub_padding: float = 4.0

    def __post_init__(self) -> None:
        if self.screen_width <= 0 or self.screen_height <= 0:
            raise ValueError(f"Screen size must be positive, got {self.screen_width}x{self.screen_height}")
        if not 1 <= self.grid_size <= 26:
            raise ValueError(f"grid_size must be within 1..26, got {self.grid_size}")
        if self.sub_rows < 1 or self.sub_cols < 1:
            raise ValueError("Subgrid needs at least one row and one column")

    @property
    def cell_size(self) -> Tuple[float, float]:
        return self.screen_width / self.grid_size, self.screen_height / self.grid_size

    def cell_rect(self, row: int, col: int) -> Rect:
        cell_w, cell_h = self.cell_size
        return Rect(col * cell_w, row * cell_h, cell_w, cell_h)

    def sub_size(self) -> Tuple[float, float]:
        cell_w, cell_h = self.cell_size
        inner_w = cell_w - self.sub_padding * 2
        inner_h = cell_h - self.sub_padding * 2
        return inner_w / self.sub_cols, inner_h / self.sub_rows

    def subcell_rect(self, row: int, col: int, sub_row: int, sub_col: int) -> Rect:
        """Box of one subgrid entry; the renderer draws labels at its center."""
        cell = self.cell_rect(row, col)
        sub_w, sub_h = self.sub_size()
        return Rect(
            cell.x + self.sub_padding + sub_col * sub_w,
            cell.y + self.sub_padding + sub_row * sub_h,
            sub_w,
            sub_h,
        )

    def precision_target(self, row: int, col: int, sub_row: int, sub_col: int) -> ClickTarget:
        return self.subcell_rect(row, col, sub_row, sub_col).center()

    def cell_center(self, row: int, col: int) -> ClickTarget:
        return self.cell_rect(row, col).center()

    def screen_center(self) -> ClickTarget:
        return ClickTarget(self.screen_width / 2, self.screen_height / 2)
