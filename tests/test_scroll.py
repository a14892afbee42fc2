"""Tests for scroll tracking."""

import pytest

from signal_window.config import ScrollConfig
from signal_window.scroll import ScrollDirection, ScrollTracker


class TestWheel:
    """Tests for wheel input."""

    def test_positive_delta_scrolls_down(self) -> None:
        tracker = ScrollTracker()
        tracker.wheel(3, now_ms=100)
        assert tracker.position == 1.0
        assert tracker.direction is ScrollDirection.DOWN
        assert tracker.direction.state == 1

    def test_negative_delta_scrolls_up(self) -> None:
        tracker = ScrollTracker(ScrollConfig(scroll_increment=10))
        tracker.wheel(1, now_ms=0)
        tracker.wheel(1, now_ms=10)
        tracker.wheel(-1, now_ms=20)
        assert tracker.position == 10.0
        assert tracker.direction is ScrollDirection.UP
        assert tracker.direction.state == 2

    def test_zero_delta_means_no_direction(self) -> None:
        tracker = ScrollTracker()
        tracker.wheel(1, now_ms=0)
        tracker.wheel(0, now_ms=50)
        assert tracker.direction is ScrollDirection.NONE
        assert tracker.last_direction_change_ms == 50
        assert tracker.last_change_ms == 0

    def test_position_clamped_on_tick(self) -> None:
        tracker = ScrollTracker()
        tracker.wheel(-1, now_ms=10)
        state = tracker.tick(now_ms=16)
        assert state.position == 0.0


class TestTouch:
    """Tests for touch drags and flings."""

    def test_drag_up_scrolls_down_with_gain(self) -> None:
        tracker = ScrollTracker()
        tracker.touch_start(500, now_ms=0)
        tracker.touch_move(450, now_ms=16)
        assert tracker.position == pytest.approx(60.0)
        assert tracker.direction is ScrollDirection.DOWN
        assert tracker.touching

    def test_touch_start_cancels_momentum(self) -> None:
        tracker = ScrollTracker()
        tracker.momentum = 12.0
        tracker.touch_start(100, now_ms=0)
        assert tracker.momentum == 0.0

    def test_quick_release_flings(self) -> None:
        tracker = ScrollTracker()
        tracker.touch_start(500, now_ms=0)
        tracker.touch_move(400, now_ms=50)
        tracker.touch_end(now_ms=100)
        # -(400 - 500) / 50 * 2
        assert tracker.momentum == pytest.approx(4.0)
        assert not tracker.touching

    def test_slow_release_does_not_fling(self) -> None:
        tracker = ScrollTracker()
        tracker.touch_start(500, now_ms=0)
        tracker.touch_move(400, now_ms=50)
        tracker.touch_end(now_ms=200)
        assert tracker.momentum == 0.0

    def test_release_in_same_millisecond_does_not_fling(self) -> None:
        tracker = ScrollTracker()
        tracker.touch_start(500, now_ms=0)
        tracker.touch_move(400, now_ms=50)
        tracker.touch_end(now_ms=50)
        assert tracker.momentum == 0.0


class TestMomentum:
    """Tests for per-tick momentum decay."""

    def test_momentum_moves_and_decays(self) -> None:
        tracker = ScrollTracker()
        tracker.position = 100.0
        tracker.momentum = 10.0
        state = tracker.tick(now_ms=16)
        assert state.position == pytest.approx(110.0)
        assert state.momentum == pytest.approx(9.5)
        assert state.direction is ScrollDirection.DOWN

    def test_small_momentum_stops(self) -> None:
        tracker = ScrollTracker()
        tracker.position = 100.0
        tracker.momentum = 0.1
        state = tracker.tick(now_ms=16)
        assert state.momentum == 0.0

    def test_momentum_paused_while_touching(self) -> None:
        tracker = ScrollTracker()
        tracker.touch_start(0, now_ms=0)
        tracker.momentum = 5.0
        state = tracker.tick(now_ms=16)
        assert state.momentum == 5.0
        assert state.position == 0.0

    def test_momentum_eventually_stops(self) -> None:
        tracker = ScrollTracker()
        tracker.position = 500.0
        tracker.momentum = -20.0
        for i in range(1, 200):
            state = tracker.tick(now_ms=i * 16)
        assert state.momentum == 0.0
        assert state.position < 500.0


class TestSpeed:
    """Tests for smoothed speed."""

    def test_speed_from_movement_between_ticks(self) -> None:
        tracker = ScrollTracker()
        tracker.tick(now_ms=0)
        tracker.position = 10.0
        state = tracker.tick(now_ms=100)
        assert state.speed == pytest.approx(100.0)

    def test_speed_is_averaged(self) -> None:
        tracker = ScrollTracker()
        tracker.position = 10.0
        tracker.tick(now_ms=100)  # 100 px/s
        state = tracker.tick(now_ms=200)  # 0 px/s
        assert state.speed == pytest.approx(50.0)

    def test_speed_window_forgets_old_motion(self) -> None:
        tracker = ScrollTracker()
        tracker.position = 10.0
        tracker.tick(now_ms=100)
        state = tracker.tick(now_ms=1000)
        assert state.speed == 0.0

    def test_speed_is_absolute(self) -> None:
        tracker = ScrollTracker()
        tracker.position = 50.0
        tracker.touch_start(0, now_ms=100)
        tracker.position = 40.0
        state = tracker.tick(now_ms=200)
        assert state.speed == pytest.approx(100.0)

    def test_no_speed_sample_when_no_time_passed(self) -> None:
        tracker = ScrollTracker()
        tracker.wheel(1, now_ms=100)
        state = tracker.tick(now_ms=100)
        assert state.speed == 0.0


def test_state_reports_elapsed_seconds() -> None:
    tracker = ScrollTracker(now_ms=0)
    tracker.wheel(1, now_ms=1000)
    state = tracker.tick(now_ms=3500)
    assert state.since_change == pytest.approx(2.5)
    assert state.since_direction_change == pytest.approx(2.5)
    assert state.state == 1
