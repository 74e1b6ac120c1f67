"""
argparse types for promplot's time flags: lookback durations and evaluation times.
"""

import argparse
import re
from datetime import datetime, timedelta, timezone

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)([dhms])")
_DURATION_UNITS = {"d": 86400, "h": 3600, "m": 60, "s": 1}

# Default output of the Unix date command, e.g. "Mon Jan  2 15:04:05 UTC 2006"
_DATE_FORMATS = (
    "%a %b %d %H:%M:%S %Z %Y",
    "%a %b %d %H:%M:%S %Y",
)


def parse_duration(value: str) -> timedelta:
    """'5d12h34m56s' -> timedelta. Units d, h, m, s; each may appear once, largest first."""
    text = value.strip()
    if not text:
        raise argparse.ArgumentTypeError("empty duration")
    pos = 0
    seconds = 0.0
    seen: list[str] = []
    for m in _DURATION_PART.finditer(text):
        if m.start() != pos:
            break
        unit = m.group(2)
        if seen and list(_DURATION_UNITS).index(unit) <= list(_DURATION_UNITS).index(seen[-1]):
            raise argparse.ArgumentTypeError(f"invalid duration {value!r}: units out of order")
        seen.append(unit)
        seconds += float(m.group(1)) * _DURATION_UNITS[unit]
        pos = m.end()
    if pos != len(text):
        raise argparse.ArgumentTypeError(f"invalid duration {value!r} (expected e.g. 5d12h34m56s)")
    return timedelta(seconds=seconds)


def parse_time(value: str) -> datetime:
    """
    Parse an evaluation time into an aware datetime.
    Accepts Unix epoch seconds, ISO 8601, or the Unix date command's default format.
    Times without an offset are taken as local time.
    """
    text = value.strip()
    try:
        return datetime.fromtimestamp(float(text), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        pass

    parsed = None
    try:
        # fromisoformat only accepts a trailing "Z" from Python 3.11 on
        parsed = datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith("Z") else text)
    except ValueError:
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        raise argparse.ArgumentTypeError(
            f"invalid time {value!r} (expected e.g. 'Mon Jan  2 15:04:05 UTC 2006')"
        )
    if parsed.tzinfo is None:
        if " UTC " in f" {text} " or " GMT " in f" {text} ":
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone()
    return parsed
