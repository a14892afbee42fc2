"""Sliding-window aggregation for a single real-valued signal.

Samples are appended in time order and evicted from the front once they fall
outside the trailing time window or exceed the sample cap. Statistics are
derived on demand from whatever the window holds, except ``peak`` which is a
running maximum over every sample ever recorded.
"""

import math
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True)
class Sample:
    """Single observation. Timestamp is monotonic milliseconds."""

    timestamp: float
    value: float


@dataclass(frozen=True)
class AggregateState:
    """Derived statistics at one point in time.

    ``None`` means "no data yet" for that field. ``rate`` is also ``None``
    when qualifying-event tracking is disabled.
    """

    latest: float | None
    peak: float | None
    average: float | None
    count: int
    rate: float | None
    time_since_last_qualifying: float | None  # seconds
    qualifying_count: int = 0


def _mean(values: list[float]) -> float:
    """Mean of finite values that stays finite near the float limits."""
    n = len(values)
    try:
        return math.fsum(values) / n
    except OverflowError:
        return math.fsum(v / n for v in values)


class SlidingWindowAggregator:
    """Bounded history of one signal with rate/average/peak statistics.

    Either bound may be omitted, but not both. When both are set, a sample is
    evicted as soon as either bound is exceeded.

    Example:
        ```python
        agg = SlidingWindowAggregator(window_length_ms=5000, max_samples=100,
                                      qualifying_threshold=0.5)
        agg.record(1000, 0.8)
        state = agg.snapshot(1000)
        ```
    """

    def __init__(
        self,
        window_length_ms: float | None = None,
        max_samples: int | None = None,
        qualifying_threshold: float | None = None,
    ) -> None:
        if window_length_ms is None and max_samples is None:
            raise ValueError("At least one of window_length_ms or max_samples is required")
        if window_length_ms is not None and not (0 < window_length_ms < math.inf):
            raise ValueError(f"window_length_ms must be finite and > 0, got {window_length_ms}")
        if max_samples is not None and max_samples < 1:
            raise ValueError(f"max_samples must be >= 1, got {max_samples}")
        if qualifying_threshold is not None and window_length_ms is None:
            raise ValueError("qualifying_threshold requires window_length_ms for the rate divisor")

        self._window_length_ms = window_length_ms
        self._max_samples = max_samples
        self._threshold = qualifying_threshold
        self._samples: deque[Sample] = deque()
        self._peak: float | None = None
        self._last_timestamp: float | None = None
        self._qualifying_count = 0
        self._last_qualifying_timestamp: float | None = None
        self._rejected_count = 0

    def __len__(self) -> int:
        """Return number of samples in the window."""
        return len(self._samples)

    @property
    def window_length_ms(self) -> float | None:
        return self._window_length_ms

    @property
    def max_samples(self) -> int | None:
        return self._max_samples

    @property
    def qualifying_threshold(self) -> float | None:
        return self._threshold

    @property
    def samples(self) -> tuple[Sample, ...]:
        """Read-only access to the window (returns a copy)."""
        return tuple(self._samples)

    @property
    def values(self) -> list[float]:
        """Values in the window, oldest first."""
        return [s.value for s in self._samples]

    @property
    def last_timestamp(self) -> float | None:
        """Timestamp of the most recently accepted sample."""
        return self._last_timestamp

    @property
    def peak(self) -> float | None:
        return self._peak

    @property
    def qualifying_count(self) -> int:
        return self._qualifying_count

    @property
    def rejected_count(self) -> int:
        """Number of samples dropped as non-finite or out of order."""
        return self._rejected_count

    def record(self, timestamp: float, value: float) -> None:
        """Append a sample and evict whatever falls outside the bounds.

        Non-finite values and timestamps earlier than the last accepted one are
        dropped without raising.
        """
        if not (math.isfinite(value) and math.isfinite(timestamp)):
            self._rejected_count += 1
            return
        if self._last_timestamp is not None and timestamp < self._last_timestamp:
            self._rejected_count += 1
            return

        self._samples.append(Sample(timestamp=timestamp, value=value))
        self._last_timestamp = timestamp
        self._evict_older_than(timestamp)
        if self._max_samples is not None:
            while len(self._samples) > self._max_samples:
                self._samples.popleft()

        if self._peak is None or value > self._peak:
            self._peak = value

        if self._threshold is not None and value >= self._threshold:
            self._qualifying_count += 1
            self._last_qualifying_timestamp = timestamp

    def prune(self, now: float) -> None:
        """Evict samples older than the time window as seen from ``now``.

        Recording only evicts relative to the newest sample; this lets a
        consumer expire samples between records. No-op without a time bound.
        """
        if math.isfinite(now):
            self._evict_older_than(now)

    def snapshot(self, now: float) -> AggregateState:
        """Compute statistics for the current window.

        The window itself is left untouched. The qualifying count is zeroed
        once more than one window length has passed since the last qualifying
        sample; the rate reported by this call is computed before that reset.
        """
        latest: float | None = None
        average: float | None = None
        if self._samples:
            values = [s.value for s in self._samples]
            latest = values[-1]
            low, high = min(values), max(values)
            # Rounding can push the mean a ulp past the extremes
            average = min(max(_mean(values), low), high)

        rate: float | None = None
        since: float | None = None
        # The constructor guarantees a time window whenever a threshold is set
        if self._threshold is not None and self._window_length_ms is not None:
            rate = self._qualifying_count * 1000 / self._window_length_ms
            if self._last_qualifying_timestamp is not None:
                elapsed = now - self._last_qualifying_timestamp
                since = elapsed / 1000
                if elapsed > self._window_length_ms:
                    self._qualifying_count = 0

        return AggregateState(
            latest=latest,
            peak=self._peak,
            average=average,
            count=len(self._samples),
            rate=rate,
            time_since_last_qualifying=since,
            qualifying_count=self._qualifying_count,
        )

    def clear(self) -> None:
        """Empty the window and reset running statistics."""
        self._samples.clear()
        self._peak = None
        self._last_timestamp = None
        self._qualifying_count = 0
        self._last_qualifying_timestamp = None
        self._rejected_count = 0

    def _evict_older_than(self, reference: float) -> None:
        if self._window_length_ms is None:
            return
        cutoff = reference - self._window_length_ms
        while self._samples and self._samples[0].timestamp < cutoff:
            self._samples.popleft()
