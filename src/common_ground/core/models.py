"""Calendar event models consumed by the slot finder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import EventFormatError


@dataclass(frozen=True, slots=True)
class EventTime:
    """Either an all-day ``date`` or a timezone-aware ``date_time``."""

    date: date | None = None
    date_time: datetime | None = None

    def __post_init__(self) -> None:
        if (self.date is None) == (self.date_time is None):
            raise EventFormatError("EventTime needs exactly one of date or date_time")
        if self.date_time is not None and self.date_time.tzinfo is None:
            raise EventFormatError("EventTime date_time must be timezone-aware")

    @property
    def is_all_day(self) -> bool:
        return self.date_time is None

    def local(self, tz: tzinfo | None = None) -> datetime:
        if self.date_time is None:
            raise EventFormatError("All-day event times have no wall-clock instant")
        return self.date_time.astimezone(tz)

    @classmethod
    def from_api_dict(cls, payload: dict[str, Any]) -> "EventTime":
        if not isinstance(payload, dict):
            raise EventFormatError(f"Event time must be an object, got {type(payload).__name__}")
        raw_date_time = payload.get("dateTime")
        if raw_date_time:
            return cls(date_time=_parse_instant(str(raw_date_time), payload.get("timeZone")))
        raw_date = payload.get("date")
        if raw_date:
            try:
                return cls(date=date.fromisoformat(str(raw_date)))
            except ValueError as exc:
                raise EventFormatError(f"Invalid all-day date: {raw_date!r}") from exc
        raise EventFormatError("Event time carries neither 'date' nor 'dateTime'")


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    """A busy period fetched from a calendar provider."""

    start: EventTime
    end: EventTime
    summary: str = ""
    event_id: str = ""

    @property
    def is_all_day(self) -> bool:
        return self.start.is_all_day

    @classmethod
    def from_api_dict(cls, payload: dict[str, Any]) -> "CalendarEvent":
        if not isinstance(payload, dict):
            raise EventFormatError(f"Event must be an object, got {type(payload).__name__}")
        try:
            start_payload = payload["start"]
            end_payload = payload["end"]
        except KeyError as exc:
            raise EventFormatError(f"Event is missing '{exc.args[0]}'") from exc
        return cls(
            start=EventTime.from_api_dict(start_payload),
            end=EventTime.from_api_dict(end_payload),
            summary=str(payload.get("summary") or ""),
            event_id=str(payload.get("id") or ""),
        )


def _parse_instant(value: str, zone_name: Any = None) -> datetime:
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise EventFormatError(f"Invalid event dateTime: {value!r}") from exc
    if parsed.tzinfo is not None:
        return parsed
    if not zone_name:
        raise EventFormatError(f"Event dateTime has no offset and no timeZone: {value!r}")
    try:
        return parsed.replace(tzinfo=ZoneInfo(str(zone_name)))
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise EventFormatError(f"Unknown event timeZone: {zone_name!r}") from exc
