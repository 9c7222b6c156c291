"""Duration and clock utilities.

Parses human-readable durations ("1m", "3h 42m 16s", "1.5 hours") into
milliseconds and renders milliseconds back into short text.
"""
import re
import time

from loguru import logger

from .errors import ParseError

logger = logger.bind(module="timers.duration")


_SECOND_MS = 1000
_MINUTE_MS = 60 * _SECOND_MS
_HOUR_MS = 60 * _MINUTE_MS
_DAY_MS = 24 * _HOUR_MS

UNIT_MS: dict[str, int] = {
    "ms": 1, "msec": 1, "msecs": 1, "millisecond": 1, "milliseconds": 1,
    "s": _SECOND_MS, "sec": _SECOND_MS, "secs": _SECOND_MS,
    "second": _SECOND_MS, "seconds": _SECOND_MS,
    "m": _MINUTE_MS, "min": _MINUTE_MS, "mins": _MINUTE_MS,
    "minute": _MINUTE_MS, "minutes": _MINUTE_MS,
    "h": _HOUR_MS, "hr": _HOUR_MS, "hrs": _HOUR_MS,
    "hour": _HOUR_MS, "hours": _HOUR_MS,
    "d": _DAY_MS, "day": _DAY_MS, "days": _DAY_MS,
    "w": 7 * _DAY_MS, "wk": 7 * _DAY_MS, "wks": 7 * _DAY_MS,
    "week": 7 * _DAY_MS, "weeks": 7 * _DAY_MS,
    "mo": 30 * _DAY_MS, "mos": 30 * _DAY_MS,
    "month": 30 * _DAY_MS, "months": 30 * _DAY_MS,
    "y": 365 * _DAY_MS, "yr": 365 * _DAY_MS, "yrs": 365 * _DAY_MS,
    "year": 365 * _DAY_MS, "years": 365 * _DAY_MS,
}

_TERM_RE = re.compile(r"(?P<number>\d+(?:\.\d*)?|\.\d+)\s*(?P<unit>[a-z]+)?")
_SEPARATOR_RE = re.compile(r"(?:\s+|,|\band\b)+")


def now_ms() -> int:
    """Get current timestamp in milliseconds."""
    return int(time.time() * 1000)


def parse_duration(text: str) -> int:
    """Parse a human-readable duration into milliseconds.

    Accepts one or more ``<number><unit>`` terms, optionally separated by
    spaces, commas or "and". A bare number on its own is read as seconds.

    Args:
        text: Duration text, e.g. "1m", "1h30m", "3h 42m 16s 6ms", "90"

    Returns:
        Duration in whole milliseconds (rounded)

    Raises:
        ParseError: If the text is empty or contains anything unrecognized
    """
    normalized = text.strip().lower()
    if not normalized:
        raise ParseError(text, "empty duration")

    total = 0.0
    terms = 0
    bare_number = False
    pos = 0

    while pos < len(normalized):
        separator = _SEPARATOR_RE.match(normalized, pos)
        if separator:
            pos = separator.end()
            if pos >= len(normalized):
                break

        match = _TERM_RE.match(normalized, pos)
        if not match:
            raise ParseError(text, f"unexpected text at '{normalized[pos:]}'")

        unit = match.group("unit")
        if unit is None:
            bare_number = True
            multiplier = _SECOND_MS
        elif unit in UNIT_MS:
            multiplier = UNIT_MS[unit]
        else:
            raise ParseError(text, f"unknown unit '{unit}'")

        total += float(match.group("number")) * multiplier
        terms += 1
        pos = match.end()

    if terms == 0:
        raise ParseError(text, "no duration terms")
    if bare_number and terms > 1:
        raise ParseError(text, "number without a unit")

    parsed = int(round(total))
    logger.debug(f"Duration '{text}' parsed to {parsed}ms")
    return parsed


def duration_to_human(duration_ms: int) -> str:
    """Render milliseconds as compact text, e.g. ``1h 2m 3s``.

    Negative values keep a leading minus sign; sub-second remainders are
    shown in ms only when the total is under a minute.
    """
    sign = "-" if duration_ms < 0 else ""
    remaining = abs(duration_ms)

    parts = []
    for unit, size in (("d", _DAY_MS), ("h", _HOUR_MS), ("m", _MINUTE_MS), ("s", _SECOND_MS)):
        amount, remaining = divmod(remaining, size)
        if amount:
            parts.append(f"{amount}{unit}")

    if remaining and abs(duration_ms) < _MINUTE_MS:
        parts.append(f"{remaining}ms")

    if not parts:
        return "0s"
    return sign + " ".join(parts)
