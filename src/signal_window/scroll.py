"""Scroll position, direction, momentum and speed tracking.

Input comes from wheel notches and touch drags. A fast release after a drag
turns into momentum that decays every tick. Speed is the average of the
per-tick instantaneous speeds over a short trailing window.
"""

from dataclasses import dataclass
from enum import Enum

from signal_window.aggregator import SlidingWindowAggregator
from signal_window.config import ScrollConfig


class ScrollDirection(Enum):
    """Direction of the most recent position change."""

    NONE = "None"
    DOWN = "Down"
    UP = "Up"

    @property
    def state(self) -> int:
        """Numeric state: 0 none, 1 down, 2 up."""
        return {"None": 0, "Down": 1, "Up": 2}[self.value]


@dataclass(frozen=True)
class ScrollState:
    """Scroll readout for one tick."""

    position: float
    direction: ScrollDirection
    momentum: float
    touching: bool
    since_change: float  # seconds
    since_direction_change: float  # seconds
    speed: float  # pixels/second, absolute

    @property
    def state(self) -> int:
        return self.direction.state


class ScrollTracker:
    """Tracks a virtual scroll position driven by wheel and touch input."""

    def __init__(self, config: ScrollConfig | None = None, now_ms: float = 0.0) -> None:
        self.config = config or ScrollConfig()
        self.position = 0.0
        self.direction = ScrollDirection.NONE
        self.momentum = 0.0
        self.touching = False
        self.last_change_ms = now_ms
        self.last_direction_change_ms = now_ms

        self._speeds = SlidingWindowAggregator(
            window_length_ms=self.config.speed_window_ms,
            max_samples=self.config.speed_samples,
        )
        self._speed = 0.0
        self._last_position = 0.0
        self._last_speed_ms = now_ms

        self._touch_start_y = 0.0
        self._touch_prev_y = 0.0
        self._last_touch_y = 0.0
        self._last_touch_ms = now_ms

    def wheel(self, delta: float, now_ms: float) -> None:
        """Move one increment in the sign of the wheel delta."""
        previous = self.position
        self._last_speed_ms = now_ms
        if delta > 0:
            self.position += self.config.scroll_increment
        elif delta < 0:
            self.position -= self.config.scroll_increment
        self._update_direction(previous, now_ms)

    def touch_start(self, y: float, now_ms: float) -> None:
        self.touching = True
        self._last_speed_ms = now_ms
        self._last_position = self.position
        self._touch_start_y = y
        self._touch_prev_y = y
        self._last_touch_y = y
        self._last_touch_ms = now_ms
        self.momentum = 0.0

    def touch_move(self, y: float, now_ms: float) -> None:
        """Drag: finger moving up scrolls down."""
        previous = self.position
        self.position += (self._touch_prev_y - y) * self.config.touch_gain
        self._touch_prev_y = y
        self._last_touch_y = y
        self._last_touch_ms = now_ms
        self._update_direction(previous, now_ms)

    def touch_end(self, now_ms: float) -> None:
        """Release: a quick flick after the last move starts momentum."""
        self.touching = False
        elapsed = now_ms - self._last_touch_ms
        if 0 < elapsed < self.config.fling_max_ms:
            travel = self._last_touch_y - self._touch_start_y
            self.momentum = -(travel / elapsed) * self.config.fling_gain

    def tick(self, now_ms: float) -> ScrollState:
        """Advance one frame: update speed, apply momentum, clamp position."""
        elapsed = (now_ms - self._last_speed_ms) / 1000
        if elapsed > 0:
            self._speeds.record(now_ms, (self.position - self._last_position) / elapsed)
            average = self._speeds.snapshot(now_ms).average
            self._speed = average if average is not None else 0.0
            self._last_position = self.position
            self._last_speed_ms = now_ms

        if not self.touching and self.momentum != 0:
            previous = self.position
            self.position += self.momentum
            self.momentum *= self.config.momentum_decay
            if abs(self.momentum) < self.config.momentum_cutoff:
                self.momentum = 0.0
            self._update_direction(previous, now_ms)

        self.position = max(0.0, min(self.position, self.config.max_scroll))

        return ScrollState(
            position=self.position,
            direction=self.direction,
            momentum=self.momentum,
            touching=self.touching,
            since_change=(now_ms - self.last_change_ms) / 1000,
            since_direction_change=(now_ms - self.last_direction_change_ms) / 1000,
            speed=abs(self._speed),
        )

    def _update_direction(self, previous: float, now_ms: float) -> None:
        old_direction = self.direction
        if self.position > previous:
            self.direction = ScrollDirection.DOWN
        elif self.position < previous:
            self.direction = ScrollDirection.UP
        else:
            self.direction = ScrollDirection.NONE

        if self.position != previous:
            self.last_change_ms = now_ms
        if self.direction != old_direction:
            self.last_direction_change_ms = now_ms
