"""Terminal dashboard for signal-window."""

from signal_window.tui.app import SignalWindowApp, run_tui

__all__ = ["SignalWindowApp", "run_tui"]
