"""Single-tap and multi-touch tracking."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from signal_window.aggregator import AggregateState, SlidingWindowAggregator
from signal_window.config import TouchConfig


@dataclass(frozen=True)
class TouchPoint:
    """One active touch."""

    x: float
    y: float
    id: int | str | None = None


# =============================================================================
# Single tap
# =============================================================================


@dataclass(frozen=True)
class TapState:
    """Tap readout for one tick."""

    toggled: bool
    total: int
    since_last: float | None  # seconds, None before the first tap
    per_second: float
    last_position: tuple[float, float]
    previous_position: tuple[float, float]
    distance: float
    angle: float  # degrees, from previous to last


class TapTracker:
    """Counts taps/clicks and measures the geometry between the last two.

    The rate is a true sliding count: taps older than the interaction window
    (as seen from the snapshot time) no longer count.
    """

    def __init__(self, config: TouchConfig | None = None) -> None:
        self.config = config or TouchConfig()
        self._interactions = SlidingWindowAggregator(
            window_length_ms=self.config.interaction_window_ms,
        )
        self.toggled = False
        self.total = 0
        self.last_position = (0.0, 0.0)
        self.previous_position = (0.0, 0.0)

    def tap(self, x: float, y: float, now_ms: float) -> None:
        self.toggled = not self.toggled
        self.total += 1
        self.previous_position = self.last_position
        self.last_position = (x, y)
        self._interactions.record(now_ms, 1.0)

    def snapshot(self, now_ms: float) -> TapState:
        self._interactions.prune(now_ms)
        window_seconds = self.config.interaction_window_ms / 1000

        last_tap = self._interactions.last_timestamp
        since_last = (now_ms - last_tap) / 1000 if last_tap is not None else None

        (px, py), (lx, ly) = self.previous_position, self.last_position
        return TapState(
            toggled=self.toggled,
            total=self.total,
            since_last=since_last,
            per_second=len(self._interactions) / window_seconds,
            last_position=self.last_position,
            previous_position=self.previous_position,
            distance=math.hypot(lx - px, ly - py),
            angle=math.degrees(math.atan2(ly - py, lx - px)),
        )


# =============================================================================
# Multi-touch
# =============================================================================


@dataclass(frozen=True)
class PairDistance:
    """Distance between two touches, labelled "i-j" (1-based)."""

    pair: str
    distance: float


@dataclass(frozen=True)
class MultiTouchState:
    """Multi-touch readout for one tick."""

    points: tuple[TouchPoint, ...]
    total_touches: int
    since_last: float | None  # seconds
    distances: tuple[PairDistance, ...]
    total_length: float
    spread: AggregateState  # history of total_length


def pair_distances(points: Sequence[TouchPoint]) -> list[PairDistance]:
    """Distances between every pair of points, in (i, j) order with i < j."""
    result = []
    for i in range(len(points)):
        for j in range(i + 1, len(points)):
            a, b = points[i], points[j]
            result.append(
                PairDistance(pair=f"{i + 1}-{j + 1}", distance=math.hypot(b.x - a.x, b.y - a.y))
            )
    return result


class MultiTouchTracker:
    """Tracks active touch points and the total length between them."""

    def __init__(self, config: TouchConfig | None = None) -> None:
        self.config = config or TouchConfig()
        self._spread = SlidingWindowAggregator(max_samples=self.config.spread_history)
        self.total_touches = 0
        self._last_touch_ms: float | None = None

    def touch_started(self, now_ms: float) -> None:
        self.total_touches += 1
        self._last_touch_ms = now_ms

    def update(self, points: Sequence[TouchPoint], now_ms: float) -> MultiTouchState:
        """Take the current set of touches and compute the readout."""
        distances = pair_distances(points)
        total_length = math.fsum(d.distance for d in distances)
        self._spread.record(now_ms, total_length)

        since_last = None
        if self._last_touch_ms is not None:
            since_last = (now_ms - self._last_touch_ms) / 1000

        return MultiTouchState(
            points=tuple(points),
            total_touches=self.total_touches,
            since_last=since_last,
            distances=tuple(distances),
            total_length=total_length,
            spread=self._spread.snapshot(now_ms),
        )
