"""Formatting utilities for consistent output across CLI and TUI."""

from signal_window.aggregator import AggregateState
from signal_window.microphone import VolumeState
from signal_window.scroll import ScrollState
from signal_window.touch import MultiTouchState, TapState

NOT_AVAILABLE = "N/A"


def format_value(value: float | None, digits: int = 3) -> str:
    """Format a reading with fixed decimals, or "N/A" when there is no data.

    Args:
        value: The reading, or None for "no data yet"
        digits: Decimal places

    Returns:
        Formatted string, e.g. "0.125" or "N/A"
    """
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.{digits}f}"


def format_seconds(value: float | None, digits: int = 2) -> str:
    """Format an elapsed time in seconds, e.g. "1.50 seconds" or "never"."""
    if value is None:
        return "never"
    return f"{value:.{digits}f} seconds"


def format_rate(value: float | None, unit: str = "events/second") -> str:
    """Format an event rate with its unit, or "N/A" when tracking is off."""
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.3f} {unit}"


def format_gauge(level: float | None, width: int = 40) -> str:
    """Render a 0-1 level as a fixed-width bar.

    Levels outside 0-1 are clamped; None renders an empty bar.
    """
    width = max(1, width)
    if level is None:
        filled = 0
    else:
        filled = round(max(0.0, min(1.0, level)) * width)
    return "█" * filled + "░" * (width - filled)


def readout_lines(state: AggregateState, title: str = "Signal") -> list[str]:
    """Build the text readout for one aggregate snapshot.

    Returns:
        One string per display line, title first.
    """
    return [
        f"{title} Data",
        f"  Current: {format_value(state.latest)}",
        f"  Peak: {format_value(state.peak)}",
        f"  Average: {format_value(state.average)}",
        f"  Samples in window: {state.count}",
        f"  Time since last qualifying event: {format_seconds(state.time_since_last_qualifying)}",
        f"  Qualifying event rate: {format_rate(state.rate)}",
    ]


def volume_readout_lines(state: VolumeState) -> list[str]:
    """Build the text readout for the volume meter."""
    agg = state.aggregate
    return [
        "Volume Data",
        f"  Raw Level: {format_value(state.raw_level)}",
        f"  Scaled Level: {format_value(state.scaled_level)}",
        f"  Peak Volume: {format_value(agg.peak)}",
        f"  Average Volume: {format_value(agg.average)}",
        f"  Time Since Last Loud Event: {format_seconds(state.time_since_loud_event)}",
        f"  Loud Event Rate: {format_rate(state.loud_event_rate)}",
        f"  Samples in window: {agg.count}",
    ]


def scroll_readout_lines(state: ScrollState) -> list[str]:
    """Build the text readout for the scroll tracker."""
    return [
        "Scroll Data",
        f"  Position: {state.position:.0f}",
        f"  Direction: {state.direction.value} (state {state.state})",
        f"  Momentum: {format_value(state.momentum, 2)}",
        f"  Touching: {'yes' if state.touching else 'no'}",
        f"  Time Since Change: {format_seconds(state.since_change)}",
        f"  Time Since Direction Change: {format_seconds(state.since_direction_change)}",
        f"  Speed: {state.speed:.1f} pixels/second",
    ]


def tap_readout_lines(state: TapState) -> list[str]:
    """Build the text readout for single taps."""
    lx, ly = state.last_position
    return [
        "Tap Data",
        f"  State: {'On' if state.toggled else 'Off'}",
        f"  Total Taps: {state.total}",
        f"  Time Since Last Tap: {format_seconds(state.since_last)}",
        f"  Taps Per Second: {format_rate(state.per_second, 'taps/second')}",
        f"  Last Position: ({lx:g}, {ly:g})",
        f"  Distance: {format_value(state.distance, 1)}",
        f"  Angle: {state.angle:.1f} degrees",
    ]


def touch_readout_lines(state: MultiTouchState) -> list[str]:
    """Build the text readout for active touches and the distances between them."""
    lines = [
        "Touch Data",
        f"  Active Touches: {len(state.points)}",
        f"  Total Touches: {state.total_touches}",
        f"  Time Since Last Touch: {format_seconds(state.since_last)}",
    ]
    lines.extend(f"  Distance {d.pair}: {d.distance:.1f}" for d in state.distances)
    lines.append(f"  Total Length: {state.total_length:.1f}")
    lines.append(f"  Average Spread: {format_value(state.spread.average, 1)}")
    return lines
