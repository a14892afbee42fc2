"""Configuration system for signal-window."""

from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path

import tomlkit


@dataclass
class MicrophoneConfig:
    """Volume meter configuration.

    Levels are multiplied by volume_scalar and capped at 1.0 before they are
    recorded. A scaled level at or above loud_threshold counts as a loud event.
    """

    volume_scalar: float = 5.0  # Amplifies the raw level
    history_length: int = 100  # Number of scaled levels kept for average/history
    loud_threshold: float = 0.5  # Scaled level considered "loud"
    rate_window_ms: float = 5000.0  # Window for the loud event rate


@dataclass
class ScrollConfig:
    """Scroll tracking configuration (wheel, touch drag, momentum)."""

    scroll_increment: float = 1.0  # Pixels per wheel notch
    max_scroll: float = 2000.0  # Position is clamped to [0, max_scroll]
    touch_gain: float = 1.2  # Multiplier on finger travel while dragging
    momentum_decay: float = 0.95  # Momentum multiplier per tick
    momentum_cutoff: float = 0.1  # Momentum below this stops
    fling_max_ms: float = 100.0  # Release within this long after a move flings
    fling_gain: float = 2.0  # Multiplier on release velocity
    speed_window_ms: float = 300.0  # Time window for speed smoothing
    speed_samples: int = 10  # Max speed samples averaged


@dataclass
class TouchConfig:
    """Tap and multi-touch tracking configuration."""

    interaction_window_ms: float = 3000.0  # Window for interactions per second
    spread_history: int = 100  # Samples of multi-touch total length kept


@dataclass
class SystemConfig:
    """Runtime configuration."""

    frame_rate: int = 60  # Dashboard ticks per second
    # Log file rotation
    log_max_bytes: int = 5 * 1024 * 1024  # Max log file size (5MB)
    log_backup_count: int = 3  # Number of backup log files to keep


@dataclass
class SparklineConfig:
    """Configuration for the history sparkline in the dashboard."""

    height: int = 3  # Number of character rows (1-4). Each row adds 8 vertical levels.
    mode: str = "blocks"  # "blocks" or "braille"


@dataclass
class TUIColors:
    """Colors for the dashboard.

    Colors can be named ("red", "dim"), hex ("#FFA500") or Rich styles
    ("bold red"). Default palette: Dracula theme.
    """

    level: str = "#50fa7b"  # Dracula green - below threshold
    loud: str = "#ff5555"  # Dracula red - at or above threshold
    waiting: str = "#f1fa8c"  # Dracula yellow - session not streaming yet
    streaming: str = "#50fa7b"


@dataclass
class TUIConfig:
    """TUI-specific configuration."""

    colors: TUIColors = field(default_factory=TUIColors)
    sparkline: SparklineConfig = field(default_factory=SparklineConfig)
    show_readout: bool = True  # Toggled with the space bar
    gauge_width: int = 40  # Characters in the level gauge


VALID_SPARKLINE_MODES = {"blocks", "braille"}


def _dataclass_to_table(obj: object) -> tomlkit.items.Table:
    """Convert a dataclass instance to a tomlkit Table recursively."""
    table = tomlkit.table()
    for f in fields(obj):  # type: ignore[arg-type]
        value = getattr(obj, f.name)
        if is_dataclass(value) and not isinstance(value, type):
            table.add(f.name, _dataclass_to_table(value))
        else:
            table.add(f.name, value)
    return table


@dataclass
class Config:
    """Main configuration container."""

    microphone: MicrophoneConfig = field(default_factory=MicrophoneConfig)
    scroll: ScrollConfig = field(default_factory=ScrollConfig)
    touch: TouchConfig = field(default_factory=TouchConfig)
    system: SystemConfig = field(default_factory=SystemConfig)
    tui: TUIConfig = field(default_factory=TUIConfig)

    @property
    def config_dir(self) -> Path:
        """Configuration directory."""
        return Path.home() / ".config" / "signal-window"

    @property
    def config_path(self) -> Path:
        """Path to config file."""
        return self.config_dir / "config.toml"

    @property
    def state_dir(self) -> Path:
        """State directory for logs."""
        return Path.home() / ".local" / "state" / "signal-window"

    @property
    def log_path(self) -> Path:
        """JSON Lines log path."""
        return self.state_dir / "signal-window.log"

    def to_toml(self) -> str:
        """Render config as a TOML document."""
        doc = tomlkit.document()
        for name in ["microphone", "scroll", "touch", "system", "tui"]:
            doc.add(name, _dataclass_to_table(getattr(self, name)))
            doc.add(tomlkit.nl())
        return tomlkit.dumps(doc)

    def save(self, path: Path | None = None) -> None:
        """Save config to TOML file."""
        path = path or self.config_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_toml())

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load config from TOML file, returning defaults for missing values.

        All defaults come from the dataclass definitions, so Config() and
        Config.load() agree on every value the file leaves out.
        """
        defaults = cls()
        path = path or defaults.config_path
        if not path.exists():
            return defaults

        try:
            with open(path) as f:
                data = tomlkit.load(f)
        except tomlkit.exceptions.TOMLKitError as e:
            raise ValueError(f"Failed to parse config file {path}: {e}") from e

        return cls(
            microphone=_load_microphone_config(data.get("microphone", {})),
            scroll=_load_scroll_config(data.get("scroll", {})),
            touch=_load_touch_config(data.get("touch", {})),
            system=_load_system_config(data.get("system", {})),
            tui=_load_tui_config(data.get("tui", {})),
        )


def _require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ValueError(f"{name} must be > 0, got {value}")


def _load_microphone_config(data: dict) -> MicrophoneConfig:
    """Load microphone config from TOML data."""
    d = MicrophoneConfig()
    config = MicrophoneConfig(
        volume_scalar=data.get("volume_scalar", d.volume_scalar),
        history_length=data.get("history_length", d.history_length),
        loud_threshold=data.get("loud_threshold", d.loud_threshold),
        rate_window_ms=data.get("rate_window_ms", d.rate_window_ms),
    )
    _require_positive("volume_scalar", config.volume_scalar)
    if config.history_length < 1:
        raise ValueError(f"history_length must be >= 1, got {config.history_length}")
    if not 0 < config.loud_threshold <= 1:
        raise ValueError(f"loud_threshold must be in (0, 1], got {config.loud_threshold}")
    _require_positive("rate_window_ms", config.rate_window_ms)
    return config


def _load_scroll_config(data: dict) -> ScrollConfig:
    """Load scroll config from TOML data."""
    d = ScrollConfig()
    config = ScrollConfig(
        scroll_increment=data.get("scroll_increment", d.scroll_increment),
        max_scroll=data.get("max_scroll", d.max_scroll),
        touch_gain=data.get("touch_gain", d.touch_gain),
        momentum_decay=data.get("momentum_decay", d.momentum_decay),
        momentum_cutoff=data.get("momentum_cutoff", d.momentum_cutoff),
        fling_max_ms=data.get("fling_max_ms", d.fling_max_ms),
        fling_gain=data.get("fling_gain", d.fling_gain),
        speed_window_ms=data.get("speed_window_ms", d.speed_window_ms),
        speed_samples=data.get("speed_samples", d.speed_samples),
    )
    _require_positive("max_scroll", config.max_scroll)
    if not 0 <= config.momentum_decay < 1:
        raise ValueError(f"momentum_decay must be in [0, 1), got {config.momentum_decay}")
    _require_positive("speed_window_ms", config.speed_window_ms)
    if config.speed_samples < 1:
        raise ValueError(f"speed_samples must be >= 1, got {config.speed_samples}")
    return config


def _load_touch_config(data: dict) -> TouchConfig:
    """Load touch config from TOML data."""
    d = TouchConfig()
    config = TouchConfig(
        interaction_window_ms=data.get("interaction_window_ms", d.interaction_window_ms),
        spread_history=data.get("spread_history", d.spread_history),
    )
    _require_positive("interaction_window_ms", config.interaction_window_ms)
    if config.spread_history < 1:
        raise ValueError(f"spread_history must be >= 1, got {config.spread_history}")
    return config


def _load_system_config(data: dict) -> SystemConfig:
    """Load system config from TOML data."""
    d = SystemConfig()
    config = SystemConfig(
        frame_rate=data.get("frame_rate", d.frame_rate),
        log_max_bytes=data.get("log_max_bytes", d.log_max_bytes),
        log_backup_count=data.get("log_backup_count", d.log_backup_count),
    )
    if not 1 <= config.frame_rate <= 240:
        raise ValueError(f"frame_rate must be between 1 and 240, got {config.frame_rate}")
    return config


def _load_tui_config(data: dict) -> TUIConfig:
    """Load TUI config from TOML data.

    Handles nested [tui.colors] and [tui.sparkline] sections with defaults.
    """
    tui_defaults = TUIConfig()
    colors_data = data.get("colors", {})
    sparkline_data = data.get("sparkline", {})

    c = TUIColors()
    sp = SparklineConfig()

    mode = sparkline_data.get("mode", sp.mode)
    if mode not in VALID_SPARKLINE_MODES:
        raise ValueError(
            f"Invalid sparkline mode: {mode!r}. Must be one of {sorted(VALID_SPARKLINE_MODES)}"
        )

    return TUIConfig(
        colors=TUIColors(
            level=colors_data.get("level", c.level),
            loud=colors_data.get("loud", c.loud),
            waiting=colors_data.get("waiting", c.waiting),
            streaming=colors_data.get("streaming", c.streaming),
        ),
        sparkline=SparklineConfig(
            height=sparkline_data.get("height", sp.height),
            mode=mode,
        ),
        show_readout=data.get("show_readout", tui_defaults.show_readout),
        gauge_width=data.get("gauge_width", tui_defaults.gauge_width),
    )
