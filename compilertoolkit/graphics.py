"""Character-cell plotting screen."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

SCREEN_HEIGHT = 25
SCREEN_WIDTH = 80


@dataclass
class Limits:
    """A closed interval given by its low and high ends."""

    low: float = 0.0
    high: float = 0.0


def _round_half_away(value: float) -> int:
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


@dataclass
class Graphics:
    """A text screen onto which function points are plotted."""

    h_view: Limits = field(default_factory=lambda: Limits(-6.5, 6.5))
    v_view: Limits = field(default_factory=lambda: Limits(-3.5, 3.5))
    draw_axis: bool = True
    erase_plot: bool = True
    connect_dots: bool = False
    delta_x: float = field(init=False, default=0.0)
    delta_y: float = field(init=False, default=0.0)
    screen: list[list[str]] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        """Blank the screen and draw the axes when enabled."""
        self.delta_x = (self.h_view.high - self.h_view.low) / SCREEN_WIDTH
        self.delta_y = (self.v_view.high - self.v_view.low) / SCREEN_HEIGHT
        self.screen = [[" "] * SCREEN_WIDTH for _ in range(SCREEN_HEIGHT)]

        if not self.draw_axis:
            return

        column = int((0 - self.h_view.low) / self.delta_x)
        column_fits = 0 <= column < SCREEN_WIDTH
        if self.h_view.low <= 0 <= self.h_view.high and column_fits:
            for row in self.screen:
                row[column] = "|"

        row_index = SCREEN_HEIGHT - 1 - int((0 - self.v_view.low) / self.delta_y)
        if self.v_view.low <= 0 <= self.v_view.high and 0 <= row_index < SCREEN_HEIGHT:
            self.screen[row_index] = ["-"] * SCREEN_WIDTH
            if column_fits:
                self.screen[row_index][column] = "+"

    def render(self) -> str:
        """Return the screen as text, preceded by a newline."""
        return "\n" + "".join("".join(row) + "\n" for row in self.screen)

    def plot_point(self, x: float, y: float) -> bool:
        """Mark the cell for (x, y); return whether it fell on the screen."""
        column = _round_half_away((x - self.h_view.low) / self.delta_x)
        row = SCREEN_HEIGHT - _round_half_away((y - self.v_view.low) / self.delta_y)
        if 0 <= column < SCREEN_WIDTH and 0 <= row < SCREEN_HEIGHT:
            self.screen[row][column] = "*"
            return True
        return False