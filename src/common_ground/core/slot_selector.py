"""Pick the final meeting slots from the free-time pool."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Sequence

from .quantize import quantize_candidate_start
from .time_blocks import TimeBlock, sort_blocks

LOGGER = logging.getLogger("common_ground.selector")


def filter_by_min_duration(blocks: Iterable[TimeBlock], min_duration: int) -> list[TimeBlock]:
    return [block for block in blocks if block.duration >= min_duration]


def adjust_slot(block: TimeBlock, min_duration: int, max_duration: int) -> TimeBlock | None:
    """Snap the start onto the grid and cap the length at ``max_duration``.

    Returns ``None`` when the snapped or capped slot is shorter than
    ``min_duration``.
    """
    start = quantize_candidate_start(block.start)
    if block.end - start < min_duration:
        return None
    duration = min(block.end - start, max_duration)
    if duration < min_duration:
        return None
    return TimeBlock(date=block.date, start=start, end=start + duration)


def adjusted_candidates(pool: Iterable[TimeBlock], min_duration: int, max_duration: int) -> list[TimeBlock]:
    candidates: list[TimeBlock] = []
    for block in filter_by_min_duration(pool, min_duration):
        slot = adjust_slot(block, min_duration, max_duration)
        if slot is None:
            LOGGER.debug(
                "Block too short after snapping",
                extra={"event": "selector_block_dropped", "date": block.date.isoformat(), "start": block.start, "end": block.end},
            )
            continue
        candidates.append(slot)
    return sort_blocks(candidates)


def _pick_spread(ordered: Sequence[TimeBlock], num_required: int, spread_goal: int) -> list[TimeBlock]:
    picked: list[TimeBlock] = []
    set_aside: list[TimeBlock] = []
    used_dates: set[date] = set()

    for candidate in ordered:
        if len(picked) >= num_required:
            break
        if candidate.date not in used_dates:
            picked.append(candidate)
            used_dates.add(candidate.date)
            continue
        missing_dates = spread_goal - len(used_dates)
        open_after = num_required - len(picked) - 1
        if open_after >= missing_dates:
            picked.append(candidate)
        else:
            set_aside.append(candidate)

    if len(picked) < num_required:
        picked.extend(set_aside[: num_required - len(picked)])
    return picked


def select_slots(
    pool: Iterable[TimeBlock],
    min_duration: int,
    max_duration: int,
    num_required: int,
    spread_days_target: int,
) -> list[TimeBlock]:
    """Choose ``num_required`` slots, earliest first, spread over several days.

    Count wins over spread: once the slots still to fill are only enough for
    the days the spread target is missing, additional slots on an already used
    day are set aside in favour of the next unused day. A pool with fewer
    usable candidates than requested is returned whole.
    """
    candidates = adjusted_candidates(pool, min_duration, max_duration)
    if len(candidates) < num_required:
        LOGGER.info(
            "Fewer candidates than requested slots",
            extra={"event": "selector_short", "available": len(candidates), "required": num_required},
        )
        return candidates

    distinct_dates = len({candidate.date for candidate in candidates})
    spread_goal = max(0, min(spread_days_target, distinct_dates, num_required))
    picked = _pick_spread(candidates, num_required, spread_goal)
    result = sort_blocks(picked)[:num_required]
    LOGGER.debug(
        "Slots selected",
        extra={
            "event": "selector_done",
            "count": len(result),
            "dates": len({slot.date for slot in result}),
            "spread_goal": spread_goal,
        },
    )
    return result
