"""Tests for configuration system."""

from pathlib import Path

import pytest

from signal_window.config import (
    Config,
    MicrophoneConfig,
    ScrollConfig,
    SparklineConfig,
    SystemConfig,
    TouchConfig,
)


def test_microphone_config_defaults():
    """MicrophoneConfig matches the classic volume meter constants."""
    config = MicrophoneConfig()
    assert config.volume_scalar == 5.0
    assert config.history_length == 100
    assert config.loud_threshold == 0.5
    assert config.rate_window_ms == 5000.0


def test_scroll_config_defaults():
    config = ScrollConfig()
    assert config.speed_window_ms == 300.0
    assert config.speed_samples == 10
    assert config.momentum_decay == 0.95
    assert config.max_scroll == 2000.0


def test_touch_and_system_defaults():
    assert TouchConfig().interaction_window_ms == 3000.0
    assert SystemConfig().frame_rate == 60
    assert SparklineConfig().mode == "blocks"


def test_config_paths():
    """Config provides correct paths."""
    config = Config()
    assert "signal-window" in str(config.config_dir)
    assert config.config_path.name == "config.toml"
    assert config.log_path.name == "signal-window.log"
    assert config.log_path.parent == config.state_dir


def test_load_missing_file_returns_defaults(tmp_path: Path):
    config = Config.load(tmp_path / "nope.toml")
    assert config == Config()


def test_save_and_load_round_trip_changed_values(tmp_path: Path):
    path = tmp_path / "sub" / "config.toml"
    config = Config()
    config.microphone.loud_threshold = 0.7
    config.scroll.speed_samples = 4
    config.tui.sparkline.mode = "braille"
    config.tui.show_readout = False
    config.save(path)

    loaded = Config.load(path)
    assert loaded.microphone.loud_threshold == 0.7
    assert loaded.scroll.speed_samples == 4
    assert loaded.tui.sparkline.mode == "braille"
    assert loaded.tui.show_readout is False


def test_save_writes_sections(tmp_path: Path):
    path = tmp_path / "config.toml"
    Config().save(path)
    content = path.read_text()
    assert "[microphone]" in content
    assert "[scroll]" in content
    assert "[tui.colors]" in content


def test_partial_file_uses_defaults(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text("[microphone]\nhistory_length = 20\n")
    config = Config.load(path)
    assert config.microphone.history_length == 20
    assert config.microphone.volume_scalar == 5.0
    assert config.scroll == ScrollConfig()


def test_invalid_toml_raises_value_error(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text("[microphone\n")
    with pytest.raises(ValueError, match="Failed to parse"):
        Config.load(path)


@pytest.mark.parametrize(
    "content, match",
    [
        ("[microphone]\nloud_threshold = 0\n", "loud_threshold"),
        ("[microphone]\nhistory_length = 0\n", "history_length"),
        ("[scroll]\nmomentum_decay = 1.5\n", "momentum_decay"),
        ("[scroll]\nspeed_samples = 0\n", "speed_samples"),
        ("[touch]\ninteraction_window_ms = -1\n", "interaction_window_ms"),
        ("[system]\nframe_rate = 0\n", "frame_rate"),
        ('[tui.sparkline]\nmode = "dots"\n', "sparkline mode"),
    ],
)
def test_invalid_values_raise(tmp_path: Path, content: str, match: str):
    path = tmp_path / "config.toml"
    path.write_text(content)
    with pytest.raises(ValueError, match=match):
        Config.load(path)
