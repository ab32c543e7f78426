"""Entry point tying busy blocks, availability and slot selection together."""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Iterable

from .availability import build_availability
from .models import CalendarEvent
from .policy import Policy
from .slot_selector import select_slots
from .time_blocks import TimeBlock

LOGGER = logging.getLogger("common_ground.finder")


def find_available_slots(
    policy: Policy,
    events: Iterable[CalendarEvent],
    tz: tzinfo | None = None,
) -> list[TimeBlock]:
    """Return up to ``policy.num_slots_required`` open slots in chronological order.

    ``events`` must already cover the whole search horizon. ``tz`` is the zone
    whose wall clock defines dates and minutes; ``None`` uses the host's
    local zone. No I/O happens here and the clock is never read.
    """
    events = list(events)
    LOGGER.info(
        "Finding available slots",
        extra={
            "event": "finder_start",
            "search_start_date": policy.search_start_date.isoformat(),
            "num_days_to_search": policy.num_days_to_search,
            "events": len(events),
        },
    )
    pool = build_availability(policy, events, tz)
    slots = select_slots(
        pool,
        policy.min_duration_minutes,
        policy.max_duration_minutes,
        policy.num_slots_required,
        policy.spread_days_target,
    )
    LOGGER.info(
        "Slot search finished",
        extra={
            "event": "finder_done",
            "pool": len(pool),
            "slots": len(slots),
            "required": policy.num_slots_required,
        },
    )
    return slots
