# quickslot/core/times.py
"""
Naive local date/time helpers.

Times of day travel as zero-padded "HH:MM" strings, so comparing them as
strings gives chronological order. Weekdays are numbered Sunday=0 .. Saturday=6.
"""
from __future__ import annotations

import re
from datetime import date, timedelta

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
_HHMM_RE = re.compile(HHMM_PATTERN)


def is_hhmm(value: str) -> bool:
    return bool(_HHMM_RE.match(value or ""))


def normalize_hhmm(value: str) -> str:
    """Accept "HH:MM" or "HH:MM:SS" (what browsers send for <input type=time>)."""
    value = (value or "").strip()
    if len(value) == 8 and value[5] == ":":
        value = value[:5]
    if not is_hhmm(value):
        raise ValueError("time must be HH:MM (00:00-23:59)")
    return value


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def from_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def weekday_sun0(d: date) -> int:
    # date.weekday() is Monday=0
    return (d.weekday() + 1) % 7


def start_of_week(d: date) -> date:
    return d - timedelta(days=weekday_sun0(d))


def today() -> date:
    return date.today()


def format_long_date(d: date) -> str:
    """e.g. "Monday, January 6, 2025"."""
    return f"{d.strftime('%A')}, {d.strftime('%B')} {d.day}, {d.year}"
