"""Human-readable slot text and calendar booking payloads."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Iterable

from .time_blocks import MINUTES_PER_DAY, TimeBlock, minutes_to_time

WEEKDAY_NAMES: dict[str, tuple[str, ...]] = {
    "en": ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
    "ja": ("日", "月", "火", "水", "木", "金", "土"),
}
DEFAULT_LANGUAGE = "en"


def weekday_name(slot: TimeBlock, lang: str = DEFAULT_LANGUAGE) -> str:
    names = WEEKDAY_NAMES.get(lang, WEEKDAY_NAMES[DEFAULT_LANGUAGE])
    return names[(slot.date.weekday() + 1) % 7]


def format_slot(slot: TimeBlock, lang: str = DEFAULT_LANGUAGE) -> str:
    """Render ``MM/DD(Wkd) HH:MM ~ HH:MM``."""
    day = f"{slot.date.month:02d}/{slot.date.day:02d}"
    return f"{day}({weekday_name(slot, lang)}) {minutes_to_time(slot.start)} ~ {minutes_to_time(slot.end)}"


def format_slots(slots: Iterable[TimeBlock], lang: str = DEFAULT_LANGUAGE) -> str:
    return "\n".join(format_slot(slot, lang) for slot in slots)


def format_utc_offset(offset: timedelta) -> str:
    total_minutes = int(offset.total_seconds() // 60)
    sign = "+" if total_minutes >= 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def slot_date_time(slot: TimeBlock, minutes: int, utc_offset: timedelta) -> str:
    # RFC3339 has no 24:00; the end of the day is midnight of the next date.
    day = slot.date + timedelta(days=minutes // MINUTES_PER_DAY)
    clock = minutes_to_time(minutes % MINUTES_PER_DAY)
    return f"{day.isoformat()}T{clock}:00{format_utc_offset(utc_offset)}"


def booking_request(slot: TimeBlock, summary: str, utc_offset: timedelta) -> dict[str, Any]:
    """Event-creation body for a calendar provider (RFC3339 local time plus offset)."""
    return {
        "summary": summary,
        "start": {"dateTime": slot_date_time(slot, slot.start, utc_offset)},
        "end": {"dateTime": slot_date_time(slot, slot.end, utc_offset)},
    }


def numbered_summaries(base: str, count: int) -> list[str]:
    return [f"{base} ({index}/{count})" for index in range(1, count + 1)]
