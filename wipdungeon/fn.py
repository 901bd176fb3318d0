"""Logging, number parsing and small file and time helpers."""

from __future__ import annotations

import enum
import re
import sys
import time
from pathlib import Path

__all__ = ["LogType", "log", "parse_int", "parse_uint", "read_file", "sleep"]

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1
_ULONG_LIMIT = 2**64
_UINT_LIMIT = 2**32

_INT_RE = re.compile(r"\s*([+-]?\d+)")


class LogType(enum.IntEnum):
    """Severity of a log message."""

    INFO = 0
    WARN = 1
    ERROR = 2
    FATAL = 3


def log(kind: LogType, message: str) -> None:
    """Write a message; INFO goes to stdout, anything worse to stderr.

    A FATAL message ends the program with exit status 1.
    """
    out = sys.stdout if kind < LogType.WARN else sys.stderr
    print(message, file=out)
    if kind == LogType.FATAL:
        raise SystemExit(1)


def _leading_integer(text: str) -> int:
    match = _INT_RE.match(text)
    if match is None:
        raise ValueError(f"no digits in {text!r}")
    return int(match.group(1))


def parse_int(text: str) -> int:
    """Parse the leading base-10 integer of ``text`` as a signed 64-bit value."""
    value = _leading_integer(text)
    if not _LONG_MIN <= value <= _LONG_MAX:
        log(LogType.ERROR, f"parse_int: {text!r} is out of range")
        raise ValueError(f"{text!r} is out of range")
    return value


def parse_uint(text: str) -> int:
    """Parse the leading base-10 integer of ``text`` as an unsigned 32-bit value.

    A leading minus sign wraps around, as unsigned conversion does.
    """
    value = _leading_integer(text)
    if abs(value) >= _ULONG_LIMIT:
        raise ValueError(f"{text!r} is out of range")
    if value < 0:
        value += _ULONG_LIMIT
    return value % _UINT_LIMIT


def read_file(path: str | Path) -> str:
    """Return the whole text of a file, logging and re-raising on failure."""
    try:
        return Path(path).read_text()
    except OSError as exc:
        log(LogType.ERROR, f"read_file: Couldn't open {path}: {exc.strerror}")
        raise


def sleep(seconds: float) -> None:
    """Sleep for ``seconds``; a negative duration is logged and skipped."""
    if seconds < 0:
        log(LogType.ERROR, "sleep: interrupted.")
        return
    time.sleep(seconds)