"""
Minute-of-day interval helpers used by template validation, the slot
generator and manual slot checks.

Intervals are half-open: (start, end) covers start <= t < end, so two
back-to-back intervals do not overlap.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Tuple

Interval = Tuple[int, int]

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def to_minutes(t) -> int:
    if hasattr(t, "hour"):
        return int(t.hour) * 60 + int(t.minute)
    s = str(t)
    hh, mm = s[:5].split(":")
    return int(hh) * 60 + int(mm)


def parse_hhmm(value: str) -> time:
    m = _HHMM.match(value.strip())
    if not m:
        raise ValueError(f"Invalid time format {value!r}, expected HH:MM")
    return time(int(m.group(1)), int(m.group(2)))


def format_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    return a_start < b_end and b_start < a_end


def day_of_week(d: date) -> int:
    """0=Sun ... 6=Sat (date.weekday() is 0=Mon)."""
    return (d.weekday() + 1) % 7


def at_minutes(d: date, minutes: int) -> datetime:
    return datetime.combine(d, time.min) + timedelta(minutes=minutes)


def clip(interval: Interval, window: Interval) -> Interval | None:
    start = max(interval[0], window[0])
    end = min(interval[1], window[1])
    if start >= end:
        return None
    return (start, end)


def subtract(window: Interval, cuts: Iterable[Interval]) -> List[Interval]:
    """
    Remove every cut from window and return what is left, in order.

    Cuts may overlap each other or stick out of the window; only the part
    inside the window is removed. Empty remainders are dropped.
    """
    clipped = sorted(c for c in (clip(cut, window) for cut in cuts) if c is not None)

    out: List[Interval] = []
    cursor = window[0]
    for c_start, c_end in clipped:
        if c_start > cursor:
            out.append((cursor, c_start))
        cursor = max(cursor, c_end)
    if cursor < window[1]:
        out.append((cursor, window[1]))
    return out


def tile(window: Interval, length: int) -> List[Interval]:
    """Back-to-back intervals of exactly `length` minutes from the window start; the remainder is unused."""
    if length <= 0:
        raise ValueError("length must be positive")

    out: List[Interval] = []
    start = window[0]
    while start + length <= window[1]:
        out.append((start, start + length))
        start += length
    return out
