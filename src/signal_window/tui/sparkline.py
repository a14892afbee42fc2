"""Sparkline widget for a signal's window history.

Draws one column per sample using block or braille characters, stacked over
several rows for finer vertical resolution. Samples at or above a threshold
are drawn in a highlight color.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

from rich.text import Text
from textual.reactive import reactive
from textual.widgets import Static

if TYPE_CHECKING:
    from textual.app import RenderResult


class SparklineMode(Enum):
    """Character set used for the bars."""

    BLOCKS = "blocks"  # ▁▂▃▄▅▆▇█
    BRAILLE = "braille"  # ⡀⣀⣄⣤⣦⣶⣷⣿


class Sparkline(Static):
    """History chart for values in a fixed range.

    Levels available per column:
    - height=1: 8
    - height=2: 16 (bottom row fills first, then top)
    - height=4: 32

    Example:
        ```python
        sparkline = Sparkline(height=3, max_value=1.0, threshold=0.5)
        sparkline.data = meter.history
        ```
    """

    CHARS: dict[SparklineMode, str] = {
        SparklineMode.BLOCKS: " ▁▂▃▄▅▆▇█",
        SparklineMode.BRAILLE: " ⡀⣀⣄⣤⣦⣶⣷⣿",
    }
    LEVELS_PER_ROW = 8

    DEFAULT_CSS = """
    Sparkline {
        width: 1fr;
        height: auto;
    }
    """

    data: reactive[list[float]] = reactive(list, always_update=True)

    def __init__(
        self,
        height: int = 1,
        max_value: float = 1.0,
        min_value: float = 0.0,
        mode: SparklineMode = SparklineMode.BLOCKS,
        threshold: float | None = None,
        color: str = "",
        highlight_color: str = "",
        **kwargs,
    ) -> None:
        """Initialize sparkline.

        Args:
            height: Number of character rows (clamped to 1-4).
            max_value: Value drawn as a full column.
            min_value: Value drawn as an empty column.
            mode: Character set to use.
            threshold: Values at or above this use highlight_color.
            color: Rich style for ordinary values ("" for default).
            highlight_color: Rich style for values at or above threshold.
            **kwargs: Passed to Static.__init__
        """
        super().__init__(**kwargs)
        self._height = max(1, min(4, height))
        self._max_value = max_value if max_value > min_value else min_value + 1.0
        self._min_value = min_value
        self._mode = mode
        self._threshold = threshold
        self._color = color
        self._highlight_color = highlight_color

    @property
    def rows(self) -> int:
        return self._height

    def visible(self, width: int) -> Sequence[float]:
        """The newest values that fit in width columns."""
        if width <= 0:
            return self.data
        return self.data[-width:]

    def render(self) -> RenderResult:
        """Render the sparkline as Rich Text, newest value on the right."""
        width = self.size.width
        values = self.visible(width)
        if not values:
            return Text("\n".join(" " * max(1, width) for _ in range(self._height)))

        rows: list[Text] = [Text() for _ in range(self._height)]
        for value in values:
            style = self._style_for(value)
            for row_idx, char in enumerate(self._render_column(self._scale_value(value))):
                rows[row_idx].append(char, style=style)

        # rows are built bottom-up
        return Text("\n").join(reversed(rows))

    def _scale_value(self, value: float) -> int:
        """Scale a value to 0..(height * LEVELS_PER_ROW)."""
        total_levels = self._height * self.LEVELS_PER_ROW
        normalized = (value - self._min_value) / (self._max_value - self._min_value)
        normalized = max(0.0, min(1.0, normalized))
        return int(normalized * total_levels)

    def _render_column(self, level: int) -> list[str]:
        """Characters for one column, bottom row first."""
        chars = self.CHARS[self._mode]
        column = []
        for row in range(self._height):
            remaining = level - row * self.LEVELS_PER_ROW
            column.append(chars[max(0, min(self.LEVELS_PER_ROW, remaining))])
        return column

    def _style_for(self, value: float) -> str:
        if self._threshold is not None and value >= self._threshold:
            return self._highlight_color
        return self._color

    def watch_data(self, new_data: list[float]) -> None:
        """React to data changes by refreshing the widget."""
        self.refresh()
