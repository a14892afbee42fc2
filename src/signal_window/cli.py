"""CLI commands for signal-window."""

from pathlib import Path

import click


@click.group()
@click.version_option(package_name="signal-window")
def main() -> None:
    """Aggregate and watch live input signals."""
    pass


@main.command()
@click.option(
    "--source",
    "source_name",
    type=click.Choice(["cpu", "file"]),
    default="cpu",
    show_default=True,
    help="Where levels come from",
)
@click.option(
    "--file",
    "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Sample file for --source file",
)
def watch(source_name: str, file_path: Path | None) -> None:
    """Launch the live dashboard."""
    from signal_window.config import Config
    from signal_window.logging import configure
    from signal_window.sources import CpuLoadSource, FileLevelSource
    from signal_window.tui import run_tui

    if source_name == "file" and file_path is None:
        raise click.UsageError("--source file requires --file PATH")

    config = _load_config()
    configure(config)
    source = FileLevelSource(file_path) if file_path is not None else CpuLoadSource()
    run_tui(config, source)


@main.command()
@click.argument(
    "file_path",
    metavar="FILE",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--window-ms", type=float, default=None, help="Time window in milliseconds")
@click.option("--max-samples", type=int, default=None, help="Maximum samples kept")
@click.option("--threshold", type=float, default=None, help="Qualifying event threshold")
@click.option("--every", "-n", type=int, default=0, help="Print a readout every N samples")
@click.option("--json", "as_json", is_flag=True, help="Print snapshots as JSON lines")
def replay(
    file_path: Path,
    window_ms: float | None,
    max_samples: int | None,
    threshold: float | None,
    every: int,
    as_json: bool,
) -> None:
    """Feed a sample file through an aggregator.

    FILE holds one "timestamp_ms,value" pair per line. Without any bound
    options the microphone defaults from the config file are used.
    """
    import json
    from dataclasses import asdict

    from signal_window import logging as console
    from signal_window.aggregator import SlidingWindowAggregator
    from signal_window.formatting import readout_lines
    from signal_window.sources import SampleFileError, read_samples

    if window_ms is None and max_samples is None:
        mic = _load_config().microphone
        window_ms = mic.rate_window_ms
        max_samples = mic.history_length
        if threshold is None:
            threshold = mic.loud_threshold

    try:
        aggregator = SlidingWindowAggregator(
            window_length_ms=window_ms,
            max_samples=max_samples,
            qualifying_threshold=threshold,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    try:
        samples = read_samples(file_path)
    except SampleFileError as e:
        raise click.ClickException(f"{file_path}: {e}") from e

    def emit(now: float) -> None:
        state = aggregator.snapshot(now)
        if as_json:
            click.echo(json.dumps({"timestamp": now, **asdict(state)}))
        else:
            click.echo("\n".join(readout_lines(state, title=f"t={now:g}ms")))

    if not as_json:
        console.replay_started(str(file_path))

    loud = 0
    for i, sample in enumerate(samples, start=1):
        before = aggregator.qualifying_count
        aggregator.record(sample.timestamp, sample.value)
        if aggregator.qualifying_count > before:
            loud += 1
        if every > 0 and i % every == 0:
            emit(sample.timestamp)

    if samples and (every <= 0 or len(samples) % every != 0):
        emit(aggregator.last_timestamp if aggregator.last_timestamp is not None else 0.0)
    elif not samples and not as_json:
        click.echo("No samples in file.")

    if not as_json:
        console.replay_summary(len(samples) - aggregator.rejected_count, aggregator.rejected_count)
        if threshold is not None:
            console.loud_events(loud, threshold)


@main.group("config")
def config_group() -> None:
    """Manage the configuration file."""
    pass


@config_group.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def config_init(force: bool) -> None:
    """Write a config file with default values."""
    from signal_window import logging as console
    from signal_window.config import Config

    config = Config()
    if config.config_path.exists() and not force:
        console.config_exists(str(config.config_path))
        return
    config.save()
    console.config_created(str(config.config_path))


@config_group.command("show")
def config_show() -> None:
    """Print the effective configuration as TOML."""
    config = _load_config()
    click.echo(config.to_toml(), nl=False)


@config_group.command("path")
def config_path() -> None:
    """Print the config file location."""
    from signal_window.config import Config

    click.echo(str(Config().config_path))


def _load_config():
    from signal_window.config import Config

    try:
        return Config.load()
    except ValueError as e:
        raise click.ClickException(str(e)) from e
