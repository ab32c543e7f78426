"""Convert calendar events into quantized busy blocks."""

from __future__ import annotations

import logging
from datetime import timedelta, tzinfo
from typing import Iterable

from .models import CalendarEvent
from .quantize import quantize_obstruction_minutes
from .time_blocks import MINUTES_PER_DAY, TimeBlock

LOGGER = logging.getLogger("common_ground.busy")


def all_day_blocks(event: CalendarEvent) -> list[TimeBlock]:
    """One full-day block per date in ``[start.date, end.date)``."""
    first = event.start.date
    if first is None:  # pragma: no cover - guarded by is_all_day
        return []
    last = event.end.date
    if last is None or last <= first:
        last = first + timedelta(days=1)
    blocks: list[TimeBlock] = []
    current = first
    while current < last:
        blocks.append(TimeBlock.full_day(current))
        current += timedelta(days=1)
    return blocks


def timed_block(event: CalendarEvent, tz: tzinfo | None = None) -> TimeBlock:
    """Busy block on the local start date of a timed event.

    The end is measured in minutes from the start date's midnight and capped
    at the end of that day; an event running past midnight is not carried into
    the following day.
    """
    start_local = event.start.local(tz)
    start_minutes = start_local.hour * 60 + start_local.minute
    if event.end.is_all_day:
        end_minutes = MINUTES_PER_DAY
    else:
        end_local = event.end.local(tz)
        day_offset = (end_local.date() - start_local.date()).days
        end_minutes = day_offset * MINUTES_PER_DAY + end_local.hour * 60 + end_local.minute
    return quantize_obstruction_minutes(start_local.date(), start_minutes, end_minutes)


def to_busy_blocks(events: Iterable[CalendarEvent], tz: tzinfo | None = None) -> list[TimeBlock]:
    busy: list[TimeBlock] = []
    for event in events:
        if event.is_all_day:
            blocks = all_day_blocks(event)
            if len(blocks) > 1:
                LOGGER.debug(
                    "Multi-day all-day event expanded",
                    extra={"event": "busy_all_day_multi", "summary": event.summary, "days": len(blocks)},
                )
            busy.extend(blocks)
            continue

        block = timed_block(event, tz)
        if block.is_empty:
            LOGGER.debug(
                "Dropping zero-length busy event",
                extra={"event": "busy_zero_length", "summary": event.summary, "date": block.date.isoformat()},
            )
            continue
        busy.append(block)
    return busy
