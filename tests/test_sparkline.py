"""Tests for Sparkline widget."""

from signal_window.tui.sparkline import Sparkline, SparklineMode


class TestSparklineScaling:
    """Tests for value scaling to levels."""

    def test_scale_min_to_zero_level(self) -> None:
        sparkline = Sparkline(height=1)
        assert sparkline._scale_value(0.0) == 0

    def test_scale_max_to_max_level(self) -> None:
        """Max value scales to height * 8."""
        sparkline = Sparkline(height=3)
        assert sparkline._scale_value(1.0) == 24

    def test_scale_mid_value(self) -> None:
        sparkline = Sparkline(height=2)
        assert sparkline._scale_value(0.5) == 8

    def test_scale_clamps(self) -> None:
        sparkline = Sparkline(height=1, min_value=0.2)
        assert sparkline._scale_value(0.1) == 0
        assert sparkline._scale_value(5.0) == 8

    def test_height_clamped(self) -> None:
        assert Sparkline(height=9).rows == 4
        assert Sparkline(height=0).rows == 1

    def test_degenerate_range(self) -> None:
        """max <= min widens the range instead of dividing by zero."""
        sparkline = Sparkline(height=1, max_value=1.0, min_value=1.0)
        assert sparkline._scale_value(1.5) == 4


class TestSparklineColumns:
    """Tests for single column rendering."""

    def test_empty_column(self) -> None:
        assert Sparkline(height=2)._render_column(0) == [" ", " "]

    def test_full_bottom_row(self) -> None:
        """Level 8 fills the bottom row; chars[0] is the bottom."""
        assert Sparkline(height=2)._render_column(8) == ["█", " "]

    def test_partial_bottom_row(self) -> None:
        assert Sparkline(height=2)._render_column(4) == ["▄", " "]

    def test_overflow_to_top_row(self) -> None:
        assert Sparkline(height=2)._render_column(11) == ["█", "▃"]

    def test_braille_mode(self) -> None:
        sparkline = Sparkline(height=1, mode=SparklineMode.BRAILLE)
        assert sparkline._render_column(8) == ["⣿"]


class TestSparklineStyles:
    """Tests for threshold highlighting."""

    def test_threshold_highlight(self) -> None:
        sparkline = Sparkline(threshold=0.5, color="green", highlight_color="red")
        assert sparkline._style_for(0.49) == "green"
        assert sparkline._style_for(0.5) == "red"

    def test_no_threshold_uses_base_color(self) -> None:
        sparkline = Sparkline(color="green", highlight_color="red")
        assert sparkline._style_for(10.0) == "green"


class TestSparklineData:
    """Tests for data windowing."""

    def test_visible_keeps_newest(self) -> None:
        sparkline = Sparkline()
        sparkline.data = [0.1, 0.2, 0.3, 0.4]
        assert sparkline.visible(2) == [0.3, 0.4]

    def test_visible_without_width_shows_all(self) -> None:
        sparkline = Sparkline()
        sparkline.data = [0.1, 0.2]
        assert sparkline.visible(0) == [0.1, 0.2]
