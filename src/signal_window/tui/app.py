"""Live dashboard for one level signal and the mouse pointer.

The app is the render surface: every tick it polls the source, records the
reading into the volume meter and redraws the gauge, history and readout from
a fresh snapshot. Wheel, click and press events feed the scroll, tap and touch
trackers, which are snapshotted on the same tick. Nothing here aggregates on
its own.
"""

from collections.abc import Callable
from typing import Any

import structlog
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.widgets import Footer, Label, Static

from signal_window import logging as console
from signal_window.config import Config
from signal_window.formatting import (
    format_gauge,
    format_value,
    scroll_readout_lines,
    tap_readout_lines,
    touch_readout_lines,
    volume_readout_lines,
)
from signal_window.microphone import VolumeMeter, VolumeState
from signal_window.scroll import ScrollState, ScrollTracker
from signal_window.session import InputSession, SessionState
from signal_window.sources import CpuLoadSource, LevelSource, SourceUnavailable, monotonic_ms
from signal_window.touch import (
    MultiTouchState,
    MultiTouchTracker,
    TapState,
    TapTracker,
    TouchPoint,
)
from signal_window.tui.sparkline import Sparkline, SparklineMode

log = structlog.get_logger()


class StatusBar(Static):
    """Session state and source name."""

    DEFAULT_CSS = """
    StatusBar {
        height: 3;
        padding: 0 1;
        border: solid yellow;
        border-title-align: left;
    }
    """

    def compose(self) -> ComposeResult:
        yield Label("", id="status-text")

    def on_mount(self) -> None:
        self.border_title = "SESSION"

    def show(self, session: InputSession, source_name: str) -> None:
        colors = self.app.config.tui.colors
        color = colors.streaming if session.streaming else colors.waiting
        self.styles.border = ("solid", color)
        try:
            self.query_one("#status-text", Label).update(
                f"{session.status_message}   [dim]source: {source_name}[/]"
            )
        except NoMatches:
            pass


class LevelGauge(Static):
    """Current scaled level as a horizontal bar."""

    DEFAULT_CSS = """
    LevelGauge {
        height: 1;
        padding: 0 1;
    }
    """

    def show(self, level: float | None, threshold: float) -> None:
        colors = self.app.config.tui.colors
        color = colors.loud if level is not None and level >= threshold else colors.level
        bar = format_gauge(level, self.app.config.tui.gauge_width)
        self.update(f"LEVEL [{color}]{bar}[/] {format_value(level)}")


class ReadoutPanel(Static):
    """Numeric readout, hidden with the space bar."""

    DEFAULT_CSS = """
    ReadoutPanel {
        height: auto;
        padding: 0 1;
        border: solid $primary;
    }
    """

    def show(self, state: VolumeState | None) -> None:
        if state is None:
            self.update("Waiting for data...")
            return
        self.update("\n".join(volume_readout_lines(state)))


class PointerPanel(Static):
    """One pointer readout (scroll, taps or touches)."""

    DEFAULT_CSS = """
    PointerPanel {
        width: 1fr;
        height: auto;
        padding: 0 1;
        border: solid $secondary;
    }
    """

    def show(self, lines: list[str]) -> None:
        self.update("\n".join(lines))


class SignalWindowApp(App):
    """Real-time level dashboard."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #history {
        border: solid $secondary;
        border-title-align: left;
    }

    #pointer {
        height: auto;
    }
    """

    BINDINGS = [
        ("s", "start", "Start"),
        ("space", "toggle_readout", "Readout"),
        ("c", "clear", "Clear"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: Config | None = None,
        source: LevelSource | None = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        super().__init__()
        self.config = config or Config.load()
        self.source = source or CpuLoadSource()
        self.session = InputSession()
        self.meter = VolumeMeter(self.config.microphone)
        self.show_readout = self.config.tui.show_readout
        self.ticks = 0
        self._clock = clock
        self._last_state: VolumeState | None = None

        self._held_point: TouchPoint | None = None
        self.scroll_state: ScrollState | None = None
        self.tap_state: TapState | None = None
        self.touch_state: MultiTouchState | None = None
        self._reset_pointer_trackers()

    def compose(self) -> ComposeResult:
        sp_config = self.config.tui.sparkline
        colors = self.config.tui.colors
        yield StatusBar(id="status")
        yield LevelGauge(id="gauge")
        yield Sparkline(
            height=sp_config.height,
            max_value=1.0,
            mode=SparklineMode(sp_config.mode),
            threshold=self.config.microphone.loud_threshold,
            color=colors.level,
            highlight_color=colors.loud,
            id="history",
        )
        yield ReadoutPanel(id="readout")
        with Horizontal(id="pointer"):
            yield PointerPanel(id="scroll")
            yield PointerPanel(id="taps")
            yield PointerPanel(id="touches")
        yield Footer()

    def on_mount(self) -> None:
        self.title = "signal-window"
        self.sub_title = f"{self.source.name} level"
        self.query_one("#history", Sparkline).border_title = "HISTORY"
        self.query_one("#readout", ReadoutPanel).display = self.show_readout
        self._refresh_status()
        self._refresh_readings(None)
        self._refresh_pointer(self._clock())
        self.set_interval(1 / self.config.system.frame_rate, self.tick)

    def action_start(self) -> None:
        """Start the session and open the source (the permission step)."""
        if self.session.state is SessionState.AWAITING_START:
            self.session.start()
        if self.session.state is not SessionState.AWAITING_PERMISSION:
            return
        try:
            self.source.open()
        except SourceUnavailable as e:
            self.session.deny(str(e))
            self.notify(f"Input unavailable: {e}", severity="error")
        else:
            self.session.grant()
        self._refresh_status()

    def action_toggle_readout(self) -> None:
        self.show_readout = not self.show_readout
        try:
            self.query_one("#readout", ReadoutPanel).display = self.show_readout
        except NoMatches:
            pass

    def action_clear(self) -> None:
        self.meter.reset()
        self._last_state = None
        self._refresh_readings(None)
        self._reset_pointer_trackers()
        self._refresh_pointer(self._clock())

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        self.record_wheel(1)

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        self.record_wheel(-1)

    def on_mouse_down(self, event: events.MouseDown) -> None:
        self.record_press(event.screen_x, event.screen_y)

    def on_mouse_up(self, event: events.MouseUp) -> None:
        self.record_release()

    def on_click(self, event: events.Click) -> None:
        self.record_tap(event.screen_x, event.screen_y)

    def record_wheel(self, delta: int) -> None:
        """One wheel notch; positive scrolls down."""
        self.scroll_tracker.wheel(delta, self._clock())

    def record_tap(self, x: float, y: float) -> None:
        self.tap_tracker.tap(x, y, self._clock())

    def record_press(self, x: float, y: float) -> None:
        """Pointer down: a single touch that also starts a scroll drag."""
        now = self._clock()
        self._held_point = TouchPoint(x, y, id=1)
        self.touch_tracker.touch_started(now)
        self.scroll_tracker.touch_start(y, now)

    def record_release(self) -> None:
        if self._held_point is None:
            return
        self._held_point = None
        self.scroll_tracker.touch_end(self._clock())

    def tick(self) -> None:
        """One frame: poll, record, snapshot, redraw."""
        self.ticks += 1
        now = self._clock()
        self._refresh_pointer(now)
        if self.session.state not in (SessionState.AWAITING_FIRST_SAMPLE, SessionState.STREAMING):
            return

        level = self._read_level()
        if level is None:
            return
        was_streaming = self.session.streaming
        if not self.session.poll(level):
            return
        if not was_streaming:
            self._refresh_status()

        self.meter.update(now, level)
        self._last_state = self.meter.snapshot(now)
        self._refresh_readings(self._last_state)

    def _read_level(self) -> float | None:
        try:
            return self.source.read()
        except SourceUnavailable as e:
            log.warning("source_read_failed", source=self.source.name, error=str(e))
            return None

    def _reset_pointer_trackers(self) -> None:
        self.scroll_tracker = ScrollTracker(self.config.scroll, now_ms=self._clock())
        self.tap_tracker = TapTracker(self.config.touch)
        self.touch_tracker = MultiTouchTracker(self.config.touch)
        self._held_point = None

    def _refresh_pointer(self, now: float) -> None:
        points = [self._held_point] if self._held_point is not None else []
        self.scroll_state = self.scroll_tracker.tick(now)
        self.tap_state = self.tap_tracker.snapshot(now)
        self.touch_state = self.touch_tracker.update(points, now)
        try:
            self.query_one("#scroll", PointerPanel).show(scroll_readout_lines(self.scroll_state))
            self.query_one("#taps", PointerPanel).show(tap_readout_lines(self.tap_state))
            self.query_one("#touches", PointerPanel).show(touch_readout_lines(self.touch_state))
        except NoMatches:
            pass

    def _refresh_status(self) -> None:
        try:
            self.query_one("#status", StatusBar).show(self.session, self.source.name)
        except NoMatches:
            pass

    def _refresh_readings(self, state: VolumeState | None) -> None:
        threshold = self.config.microphone.loud_threshold
        try:
            self.query_one("#gauge", LevelGauge).show(
                state.scaled_level if state else None, threshold
            )
            self.query_one("#history", Sparkline).data = self.meter.history
            self.query_one("#readout", ReadoutPanel).show(state)
        except NoMatches:
            pass


def run_tui(
    config: Config | None = None,
    source: LevelSource | None = None,
    **kwargs: Any,
) -> None:
    """Run the dashboard until the user quits."""
    app = SignalWindowApp(config, source, **kwargs)
    log.info("dashboard_starting", source=app.source.name)
    app.run()
    log.info("dashboard_stopped", ticks=app.ticks)
    console.dashboard_stopped(app.ticks)
