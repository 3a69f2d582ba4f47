"""Formatting utilities for status rendering."""

from __future__ import annotations

import math

from rich.spinner import Spinner


MICROSECOND = 1_000
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_BYTE_UNITS = ["B", "kB", "MB", "GB", "TB", "PB", "EB"]
_SPINNER = Spinner("dots")


def format_bytes(size: int) -> str:
    """Format a byte count with SI units, keeping at most four digits.

    Examples:
        >>> format_bytes(9)
        '9 B'
        >>> format_bytes(1500)
        '1.5 kB'
        >>> format_bytes(15_000_000)
        '15 MB'
    """
    if size < 10:
        return f"{size} B"
    value = float(size)
    for unit in _BYTE_UNITS[:-1]:
        if value < 1000.0:
            break
        value /= 1000.0
    else:
        unit = _BYTE_UNITS[-1]
    rounded = math.floor(value * 10 + 0.5) / 10
    if rounded < 10:
        return f"{rounded:.1f} {unit}"
    return f"{rounded:.0f} {unit}"


def _round(nanoseconds: int, multiple: int) -> int:
    # halves round away from zero
    quotient, remainder = divmod(abs(nanoseconds), multiple)
    if remainder * 2 >= multiple:
        quotient += 1
    return quotient * multiple if nanoseconds >= 0 else -quotient * multiple


def round_duration(nanoseconds: int) -> int:
    """Round a duration to coarser units as it grows.

    Over a minute rounds to seconds, over a second to 100ms, over a
    millisecond to milliseconds, anything shorter to 10ns.
    """
    magnitude = abs(nanoseconds)
    if magnitude > MINUTE:
        return _round(nanoseconds, SECOND)
    if magnitude > SECOND:
        return _round(nanoseconds, 100 * MILLISECOND)
    if magnitude > MILLISECOND:
        return _round(nanoseconds, MILLISECOND)
    return _round(nanoseconds, 10)


def _decimal(value: int, unit: int) -> str:
    whole, fraction = divmod(value, unit)
    if not fraction:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{fraction:0{width}d}".rstrip("0")


def format_duration(nanoseconds: int) -> str:
    """Format a duration in nanoseconds, e.g. ``1m1s``, ``1.5s``, ``12ms``.

    Durations of a second or more are split into hours, minutes and
    seconds; shorter ones use the largest unit that keeps a leading digit.
    """
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    value = abs(nanoseconds)
    if value < MICROSECOND:
        return f"{sign}{value}ns"
    if value < MILLISECOND:
        return f"{sign}{_decimal(value, MICROSECOND)}µs"
    if value < SECOND:
        return f"{sign}{_decimal(value, MILLISECOND)}ms"

    hours, rest = divmod(value, HOUR)
    minutes, rest = divmod(rest, MINUTE)
    seconds = f"{_decimal(rest, SECOND)}s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"


def spinner_frame(now: int) -> str:
    """Return the spinner glyph for a monotonic timestamp in nanoseconds."""
    index = int(now / MILLISECOND / _SPINNER.interval) % len(_SPINNER.frames)
    return _SPINNER.frames[index]
