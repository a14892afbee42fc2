"""Input sources and the sample clock.

A level source is opened once (the point where a real device would ask for
permission) and then polled for a reading every tick.
"""

import re
import time
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Protocol

import psutil
import structlog

from signal_window.aggregator import Sample

log = structlog.get_logger()

_SEPARATOR = re.compile(r"[,\s]+")


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000


class SourceUnavailable(Exception):
    """Raised by LevelSource.open() when the input cannot be used."""


class SampleFileError(ValueError):
    """A sample file line could not be parsed."""


class LevelSource(Protocol):
    """Anything that yields a 0-1 level on demand."""

    name: str

    def open(self) -> None: ...

    def read(self) -> float: ...


class CpuLoadSource:
    """System-wide CPU load as a 0-1 level."""

    name = "cpu"

    def __init__(self) -> None:
        self._opened = False

    def open(self) -> None:
        try:
            # First call primes psutil's counters and always returns 0.0
            psutil.cpu_percent(interval=None)
        except (OSError, psutil.Error) as e:
            raise SourceUnavailable(f"cannot read CPU counters: {e}") from e
        self._opened = True
        log.info("source_opened", source=self.name)

    def read(self) -> float:
        if not self._opened:
            raise SourceUnavailable("source not opened")
        return psutil.cpu_percent(interval=None) / 100


class FileLevelSource:
    """Cycles through the values of a sample file, ignoring timestamps."""

    name = "file"

    def __init__(self, path: Path) -> None:
        self.path = path
        self._values: list[float] = []
        self._index = 0

    def open(self) -> None:
        try:
            self._values = [s.value for s in read_samples(self.path)]
        except OSError as e:
            raise SourceUnavailable(f"cannot read {self.path}: {e}") from e
        if not self._values:
            raise SourceUnavailable(f"{self.path} contains no samples")
        self._index = 0
        log.info("source_opened", source=self.name, path=str(self.path), samples=len(self._values))

    def read(self) -> float:
        if not self._values:
            raise SourceUnavailable("source not opened")
        value = self._values[self._index]
        self._index = (self._index + 1) % len(self._values)
        return value


def parse_sample_line(line: str) -> Sample | None:
    """Parse "timestamp_ms,value" (comma or whitespace separated).

    Returns None for blank lines and comments. Non-finite values such as
    "nan" parse fine; the aggregator decides what to do with them.
    """
    text = line.split("#", 1)[0].strip()
    if not text:
        return None
    parts = _SEPARATOR.split(text)
    if len(parts) != 2:
        raise ValueError(f"expected 2 fields, got {len(parts)}")
    return Sample(timestamp=float(parts[0]), value=float(parts[1]))


def iter_samples(lines: Iterable[str]) -> Iterator[Sample]:
    """Parse sample lines, reporting the 1-based line number on failure."""
    for lineno, line in enumerate(lines, start=1):
        try:
            sample = parse_sample_line(line)
        except ValueError as e:
            raise SampleFileError(f"line {lineno}: {e}: {line.strip()!r}") from e
        if sample is not None:
            yield sample


def read_samples(path: Path) -> list[Sample]:
    """Read every sample from a file."""
    with open(path, encoding="utf-8") as f:
        return list(iter_samples(f))
