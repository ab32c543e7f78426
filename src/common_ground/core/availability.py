"""Per-day free time inside the working-hours window."""

from __future__ import annotations

import logging
from datetime import date, timedelta, tzinfo
from typing import Iterable, Sequence

from .busy_blocks import to_busy_blocks
from .models import CalendarEvent
from .policy import Exclusion, Policy
from .quantize import quantize_obstruction_minutes
from .time_blocks import TimeBlock, blocks_on, intersect_window, subtract_blocks

LOGGER = logging.getLogger("common_ground.availability")


def horizon_dates(policy: Policy) -> list[date]:
    """Dates from the search start that pass the weekday mask."""
    dates: list[date] = []
    for offset in range(policy.num_days_to_search):
        day = policy.search_start_date + timedelta(days=offset)
        if policy.allows_weekday(day):
            dates.append(day)
    return dates


def exclusion_blocks(exclusions: Iterable[Exclusion], day: date) -> list[TimeBlock]:
    blocks: list[TimeBlock] = []
    for exclusion in exclusions:
        block = quantize_obstruction_minutes(day, exclusion.start_minutes, exclusion.end_minutes)
        if not block.is_empty:
            blocks.append(block)
    return blocks


def free_blocks_for_day(policy: Policy, day: date, busy_blocks: Sequence[TimeBlock]) -> list[TimeBlock]:
    obstructions = blocks_on(busy_blocks, day) + exclusion_blocks(policy.exclusions, day)
    free = subtract_blocks([TimeBlock.full_day(day)], obstructions)
    return intersect_window(free, policy.window_start_minutes, policy.window_end_minutes)


def build_availability(
    policy: Policy,
    events: Iterable[CalendarEvent],
    tz: tzinfo | None = None,
) -> list[TimeBlock]:
    """Pool of free blocks across the search horizon, tagged by date."""
    busy_blocks = to_busy_blocks(events, tz)
    pool: list[TimeBlock] = []
    for day in horizon_dates(policy):
        day_blocks = free_blocks_for_day(policy, day, busy_blocks)
        LOGGER.debug(
            "Free blocks computed",
            extra={
                "event": "availability_day",
                "date": day.isoformat(),
                "blocks": [(block.start, block.end) for block in day_blocks],
            },
        )
        pool.extend(day_blocks)
    return pool
