"""Date/time parsing and layout-based formatting.

Layouts are written as the reference time ``Mon Jan 2 15:04:05 MST 2006``:
each component of that moment in a layout is replaced by the same component
of the formatted time, so ``"2006-01-02"`` renders ``2024-03-09`` and
``"Jan 2, 2006 3:04PM"`` renders ``Mar 9, 2024 6:30PM``. Names are always
English, independent of the process locale.

Naive datetimes are treated as UTC wherever a zone is rendered.
"""

from __future__ import annotations

import datetime
import re
from typing import Any, Callable

from viewfn.core.cast import to_text
from viewfn.core.value import Outcome

_MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
_WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)

_FALLBACK_LAYOUTS = [
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%m/%d/%Y",
]

# Longest alternatives first so "2006" wins over "2" and "15" over "1"
_LAYOUT_RE = re.compile(
    r"January|Jan|Monday|Mon|MST|2006|002|_2|Z07:00|Z0700|Z07|-07:00|-0700|-07"
    r"|[.,](?:0+|9+)(?!\d)|06|01|02|03|04|05|15|PM|pm|1|2|3|4|5"
)


def _parse_rfc3339(text: str) -> datetime.datetime | None:
    match = _RFC3339_RE.fullmatch(text)
    if match is None:
        return None

    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction, zone = match.group(7), match.group(8)
    micros = int((fraction or "0")[:6].ljust(6, "0"))

    if zone in ("Z", "z"):
        tz = datetime.timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset = datetime.timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
        tz = datetime.timezone(sign * offset)

    try:
        return datetime.datetime(year, month, day, hour, minute, second, micros, tzinfo=tz)
    except ValueError:
        return None


def as_time(value: Any) -> datetime.datetime | None:
    """Interpret a value as a datetime; Unset when it cannot be parsed.

    Accepts datetimes, dates (as midnight), RFC 3339 text with optional
    fractional seconds, ``YYYY-MM-DDTHH:MM:SS``, ``YYYY-MM-DD HH:MM:SS``,
    ``YYYY-MM-DD`` and ``MM/DD/YYYY``.
    """
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)
    if not isinstance(value, (str, bytes, bytearray)):
        return None

    text = to_text(value).strip()
    parsed = _parse_rfc3339(text)
    if parsed is not None:
        return parsed
    for layout in _FALLBACK_LAYOUTS:
        try:
            return datetime.datetime.strptime(text, layout)
        except ValueError:
            continue
    return None


def _offset(tm: datetime.datetime) -> datetime.timedelta:
    return tm.utcoffset() or datetime.timedelta(0)


def _zone(tm: datetime.datetime, colon: bool, with_minutes: bool = True, z: bool = False) -> str:
    offset = _offset(tm)
    if z and not offset:
        return "Z"
    total = int(offset.total_seconds()) // 60
    sign = "-" if total < 0 else "+"
    hours, minutes = divmod(abs(total), 60)
    if not with_minutes:
        return f"{sign}{hours:02d}"
    sep = ":" if colon else ""
    return f"{sign}{hours:02d}{sep}{minutes:02d}"


def _zone_name(tm: datetime.datetime) -> str:
    name = tm.tzname()
    if name:
        return name
    return "UTC" if tm.tzinfo is None else _zone(tm, colon=False)


def _fraction(token: str, tm: datetime.datetime) -> str:
    digits = f"{tm.microsecond:06d}000"[: len(token) - 1]
    if token[1] == "9":
        digits = digits.rstrip("0")
        return f"{token[0]}{digits}" if digits else ""
    return f"{token[0]}{digits}"


def _hour12(tm: datetime.datetime) -> int:
    return tm.hour % 12 or 12


_RENDERERS: dict[str, Callable[[datetime.datetime], str]] = {
    "January": lambda tm: _MONTHS[tm.month - 1],
    "Jan": lambda tm: _MONTHS[tm.month - 1][:3],
    "Monday": lambda tm: _WEEKDAYS[tm.weekday()],
    "Mon": lambda tm: _WEEKDAYS[tm.weekday()][:3],
    "MST": _zone_name,
    "2006": lambda tm: f"{tm.year:04d}",
    "06": lambda tm: f"{tm.year % 100:02d}",
    "01": lambda tm: f"{tm.month:02d}",
    "1": lambda tm: str(tm.month),
    "02": lambda tm: f"{tm.day:02d}",
    "_2": lambda tm: f"{tm.day:>2d}",
    "2": lambda tm: str(tm.day),
    "002": lambda tm: f"{tm.timetuple().tm_yday:03d}",
    "15": lambda tm: f"{tm.hour:02d}",
    "03": lambda tm: f"{_hour12(tm):02d}",
    "3": lambda tm: str(_hour12(tm)),
    "04": lambda tm: f"{tm.minute:02d}",
    "4": lambda tm: str(tm.minute),
    "05": lambda tm: f"{tm.second:02d}",
    "5": lambda tm: str(tm.second),
    "PM": lambda tm: "PM" if tm.hour >= 12 else "AM",
    "pm": lambda tm: "pm" if tm.hour >= 12 else "am",
    "Z07:00": lambda tm: _zone(tm, colon=True, z=True),
    "Z0700": lambda tm: _zone(tm, colon=False, z=True),
    "Z07": lambda tm: _zone(tm, colon=False, with_minutes=False, z=True),
    "-07:00": lambda tm: _zone(tm, colon=True),
    "-0700": lambda tm: _zone(tm, colon=False),
    "-07": lambda tm: _zone(tm, colon=False, with_minutes=False),
}


def _render_token(match: re.Match[str], tm: datetime.datetime) -> str:
    token = match.group(0)
    if token[0] in ".,":
        return _fraction(token, tm)
    return _RENDERERS[token](tm)


def format_(layout: Any, value: Any) -> str:
    """Render ``value`` (anything ``as_time`` accepts) with a reference layout.

    Returns "" when the value is not a time.
    """
    tm = as_time(value)
    if tm is None:
        return ""
    return _LAYOUT_RE.sub(lambda m: _render_token(m, tm), to_text(layout))


def now() -> datetime.datetime:
    """Current local time, timezone-aware."""
    return datetime.datetime.now().astimezone()


# Microseconds per unit
_DURATION_UNITS = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,  # U+00B5 micro sign
    "μs": 1.0,  # U+03BC greek mu
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}

_DURATION_PART_RE = re.compile(r"([0-9]*(?:\.[0-9]*)?)([^0-9.]+)")


def parse_duration(value: Any) -> Outcome:
    """Parse a duration such as ``"1h30m"``, ``"-1.5h"`` or ``"300ms"``.

    Each number needs a unit (ns, us, ms, s, m, h); the bare string "0" is
    also accepted.

    Returns:
        Outcome with a ``datetime.timedelta``, or an error message.
    """
    original = to_text(value)
    text = original
    sign = 1
    if text and text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return Outcome(datetime.timedelta(0))
    if not text:
        return Outcome.failure(f'invalid duration "{original}"')

    total = 0.0
    pos = 0
    while pos < len(text):
        part = _DURATION_PART_RE.match(text, pos)
        if part is None or part.group(1) in ("", "."):
            return Outcome.failure(f'invalid duration "{original}"')
        factor = _DURATION_UNITS.get(part.group(2))
        if factor is None:
            return Outcome.failure(f'unknown unit "{part.group(2)}" in duration "{original}"')
        total += float(part.group(1)) * factor
        pos = part.end()

    try:
        return Outcome(datetime.timedelta(microseconds=sign * total))
    except OverflowError as e:
        return Outcome.failure(e)
