"""Shared test fixtures for signal-window."""

from pathlib import Path

import pytest
import structlog

from signal_window.aggregator import SlidingWindowAggregator


@pytest.fixture(autouse=True)
def quiet_structlog():
    """Keep structlog events out of captured stdout."""
    structlog.configure(
        processors=[],
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


def make_aggregator(
    window_length_ms: float | None = None,
    max_samples: int | None = None,
    qualifying_threshold: float | None = None,
) -> SlidingWindowAggregator:
    """Create an aggregator, defaulting to a 5s window when no bound is given."""
    if window_length_ms is None and max_samples is None:
        window_length_ms = 5000
    return SlidingWindowAggregator(
        window_length_ms=window_length_ms,
        max_samples=max_samples,
        qualifying_threshold=qualifying_threshold,
    )


def write_samples(path: Path, samples: list[tuple[float, float]]) -> Path:
    """Write samples as "timestamp,value" lines."""
    path.write_text("".join(f"{t},{v}\n" for t, v in samples))
    return path


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Sample file with a quiet stretch, two loud readings and a NaN."""
    path = tmp_path / "samples.csv"
    path.write_text(
        "# timestamp_ms,value\n"
        "0,0.1\n"
        "100,0.2\n"
        "200,0.8\n"
        "\n"
        "300,nan\n"
        "400,0.3\n"
        "500,0.6\n"
    )
    return path
