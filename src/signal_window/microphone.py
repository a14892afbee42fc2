"""Volume tracking for a polled microphone (or any 0-1 level) source.

Raw levels are amplified by a fixed scalar and capped at 1.0. Scaled levels
feed one aggregator that keeps the recent history, the all-time peak and the
loud event rate.
"""

import math
from dataclasses import dataclass

from signal_window.aggregator import AggregateState, SlidingWindowAggregator
from signal_window.config import MicrophoneConfig


@dataclass(frozen=True)
class VolumeState:
    """Volume readout for one tick."""

    raw_level: float | None
    scaled_level: float | None
    aggregate: AggregateState

    @property
    def loud_event_rate(self) -> float | None:
        return self.aggregate.rate

    @property
    def time_since_loud_event(self) -> float | None:
        return self.aggregate.time_since_last_qualifying


class VolumeMeter:
    """Volume meter with history, peak, average and loud event statistics."""

    def __init__(self, config: MicrophoneConfig | None = None) -> None:
        self.config = config or MicrophoneConfig()
        self.aggregator = SlidingWindowAggregator(
            window_length_ms=self.config.rate_window_ms,
            max_samples=self.config.history_length,
            qualifying_threshold=self.config.loud_threshold,
        )
        self._raw_level: float | None = None
        self._scaled_level: float | None = None

    def scale(self, level: float) -> float:
        """Amplify a raw level into the 0-1 display range."""
        return max(0.0, min(level * self.config.volume_scalar, 1.0))

    def update(self, timestamp_ms: float, level: float) -> float | None:
        """Record one raw level reading.

        Returns:
            The scaled level, or None if the reading was not finite (and so
            was dropped).
        """
        if not math.isfinite(level):
            # Let the aggregator count the rejection; readouts keep prior values
            self.aggregator.record(timestamp_ms, level)
            return None
        scaled = self.scale(level)
        before = self.aggregator.rejected_count
        self.aggregator.record(timestamp_ms, scaled)
        if self.aggregator.rejected_count != before:
            return None
        self._raw_level = level
        self._scaled_level = scaled
        return scaled

    def snapshot(self, now_ms: float) -> VolumeState:
        return VolumeState(
            raw_level=self._raw_level,
            scaled_level=self._scaled_level,
            aggregate=self.aggregator.snapshot(now_ms),
        )

    @property
    def history(self) -> list[float]:
        """Scaled levels currently in the window, oldest first."""
        return self.aggregator.values

    def reset(self) -> None:
        """Forget all readings, including the peak."""
        self.aggregator.clear()
        self._raw_level = None
        self._scaled_level = None
