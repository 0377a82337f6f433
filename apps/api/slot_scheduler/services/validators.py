from datetime import time
from typing import Any, Iterable

from slot_scheduler.core.errors import ValidationError
from slot_scheduler.models.enums import BreakType
from slot_scheduler.scheduling.intervals import format_hhmm, overlaps, parse_hhmm, to_minutes

HEX_COLOR_LEN = 7


def validate_time_range(start: time, end: time) -> None:
    # No overnight templates: end must be after start on the same day
    if end <= start:
        raise ValidationError("template_time_range", "end_time must be after start_time")


def validate_days_of_week(days: Iterable[int]) -> list[int]:
    out = sorted(set(int(d) for d in days))
    if any(d < 0 or d > 6 for d in out):
        raise ValidationError("days_of_week_range", "days_of_week values must be between 0 (Sun) and 6 (Sat)")
    return out


def validate_color(color: str) -> str:
    c = color.strip()
    if len(c) != HEX_COLOR_LEN or not c.startswith("#"):
        raise ValidationError("color_format", f"color must look like #RRGGBB, got {color!r}")
    try:
        int(c[1:], 16)
    except ValueError:
        raise ValidationError("color_format", f"color must look like #RRGGBB, got {color!r}")
    return c.lower()


def normalize_breaks(start: time, end: time, breaks: Iterable[Any]) -> list[dict]:
    """
    Validate template breaks and return them in storage form, sorted by start.

    Each break must sit inside [start, end] and must not overlap another
    break. duration_minutes is always recomputed from the break times.
    """
    s_m = to_minutes(start)
    e_m = to_minutes(end)

    parsed: list[tuple[int, int, BreakType]] = []
    for b in breaks:
        b_start = b["start_time"] if isinstance(b, dict) else b.start_time
        b_end = b["end_time"] if isinstance(b, dict) else b.end_time
        b_type = b["type"] if isinstance(b, dict) else b.type

        try:
            b_s = to_minutes(parse_hhmm(b_start) if isinstance(b_start, str) else b_start)
            b_e = to_minutes(parse_hhmm(b_end) if isinstance(b_end, str) else b_end)
        except ValueError as e:
            raise ValidationError("break_time_format", str(e))

        try:
            b_type = BreakType(b_type)
        except ValueError:
            raise ValidationError("break_type", f"Unknown break type {b_type!r}")

        if b_e <= b_s:
            raise ValidationError(
                "break_time_range",
                f"Break {format_hhmm(b_s)}-{format_hhmm(b_e)} must end after it starts",
            )
        if b_s < s_m or b_e > e_m:
            raise ValidationError(
                "break_containment",
                f"Break {format_hhmm(b_s)}-{format_hhmm(b_e)} is outside the shift "
                f"{format_hhmm(s_m)}-{format_hhmm(e_m)}",
            )
        parsed.append((b_s, b_e, b_type))

    parsed.sort(key=lambda p: (p[0], p[1]))
    for (a_s, a_e, _), (b_s, b_e, _) in zip(parsed, parsed[1:]):
        if overlaps(a_s, a_e, b_s, b_e):
            raise ValidationError(
                "break_overlap",
                f"Break times cannot overlap: {format_hhmm(a_s)}-{format_hhmm(a_e)} "
                f"overlaps with {format_hhmm(b_s)}-{format_hhmm(b_e)}",
            )

    return [
        {
            "start_time": format_hhmm(b_s),
            "end_time": format_hhmm(b_e),
            "type": b_type.value,
            "duration_minutes": b_e - b_s,
        }
        for (b_s, b_e, b_type) in parsed
    ]
