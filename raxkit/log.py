"""Level-filtered logging to several text streams at once."""

from __future__ import annotations

import time
from enum import IntEnum
from typing import IO, Iterable

from .types import DEFAULT_PRECISION, RaxmlError

_START = time.monotonic()


def elapsed_seconds() -> float:
    """Seconds since the program's clock started."""
    return time.monotonic() - _START


class LogLevel(IntEnum):
    none = 0
    error = 1
    warning = 2
    result = 3
    info = 4
    progress = 5
    verbose = 6
    debug = 7


class LogElement(IntEnum):
    all = 0
    loglh = 1
    model = 2
    brlen = 3
    other = 4


def _to_text(value: object) -> str:
    # streams use fixed-point notation for floating point numbers
    if isinstance(value, float):
        return format(value, "f")
    return str(value)


class LogStream:
    """Fans each write out to every attached stream."""

    def __init__(self, streams: Iterable[IO[str]] | None = None) -> None:
        self.streams: list[IO[str]] = list(streams or [])

    def add_stream(self, stream: IO[str] | None) -> None:
        if stream is not None:
            self.streams.append(stream)

    def write(self, *args: object) -> "LogStream":
        text = "".join(_to_text(a) for a in args)
        for stream in self.streams:
            stream.write(text)
        return self


class Logging:
    """Log configuration: level, output streams and number precision."""

    def __init__(self) -> None:
        self.log_level = LogLevel.info
        self.is_master = True
        self.is_group_master = True
        self._logfile: IO[str] | None = None
        self._empty_stream = LogStream()
        self._full_stream = LogStream()
        self._precision: dict[LogElement, int] = {}

    def logstream(self, level: LogLevel, worker: bool = False) -> LogStream:
        if (self.is_master or (self.is_group_master and worker)) and level <= self.log_level:
            return self._full_stream
        return self._empty_stream

    def set_log_filename(self, fname: str, mode: str = "w") -> None:
        self.close()
        try:
            self._logfile = open(fname, mode, encoding="utf-8")
        except OSError as exc:
            raise RaxmlError(
                "Cannot open the log file for writing: " + str(fname)
                + "\nPlease make sure directory exists and you have write permissions for it!"
            ) from exc
        self._full_stream.add_stream(self._logfile)

    def add_log_stream(self, stream: IO[str] | None) -> None:
        self._full_stream.add_stream(stream)

    def close(self) -> None:
        if self._logfile is not None:
            self._full_stream.streams.remove(self._logfile)
            self._logfile.close()
            self._logfile = None

    def set_precision(self, prec: int, elem: LogElement = LogElement.all) -> None:
        self._precision[elem] = prec

    def set_precisions(self, prec_map: dict[LogElement, int]) -> None:
        self._precision = dict(prec_map)

    def precision(self, elem: LogElement) -> int:
        if elem in self._precision:
            return self._precision[elem]
        if LogElement.all in self._precision:
            return self._precision[LogElement.all]
        return DEFAULT_PRECISION


_LOGGER = Logging()


def logger() -> Logging:
    return _LOGGER


def format_timestamp(secs: float | None = None) -> str:
    """Format seconds (default: elapsed time) as hh:mm:ss."""
    if secs is None:
        secs = elapsed_seconds()
    hh, rest = divmod(int(secs), 3600)
    mm, ss = divmod(rest, 60)
    return f"{hh:02d}:{mm:02d}:{ss:02d}"


def format_progress(loglh: float, secs: float | None = None) -> str:
    prec = logger().precision(LogElement.loglh)
    return f"[{format_timestamp(secs)} {loglh:.{prec}f}] "