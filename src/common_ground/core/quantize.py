"""Snap block boundaries onto the 30-minute scheduling grid.

Obstructions (busy events, exclusions) only ever grow when snapped so that a
partially covered half hour is never offered. Candidate slots only ever
shrink: their start moves up to the next grid point.
"""

from __future__ import annotations

from datetime import date

from .time_blocks import TimeBlock

GRID_MINUTES = 30


def floor_to_grid(minutes: int) -> int:
    return minutes - (minutes % GRID_MINUTES)


def ceil_to_grid(minutes: int) -> int:
    remainder = minutes % GRID_MINUTES
    if remainder == 0:
        return minutes
    return minutes + (GRID_MINUTES - remainder)


def quantize_obstruction_minutes(
    day: date,
    start: int,
    end: int,
    had_duration: bool | None = None,
) -> TimeBlock:
    """Widen raw ``start``/``end`` minutes into a grid-aligned obstruction.

    ``had_duration`` states whether the source interval covered any time at
    all. It defaults to ``end > start`` and is passed explicitly for timed
    events whose end wraps past midnight. A block that collapses after
    snapping becomes a 30-minute block when the source had duration, and an
    empty block at the snapped start otherwise.
    """
    if had_duration is None:
        had_duration = end > start

    start = floor_to_grid(start)
    end = ceil_to_grid(end) if had_duration else start
    if had_duration and start >= end:
        end = start + GRID_MINUTES
    return TimeBlock.clamped(day, start, end)


def quantize_obstruction(block: TimeBlock) -> TimeBlock:
    return quantize_obstruction_minutes(block.date, block.start, block.end)


def quantize_candidate_start(minutes: int) -> int:
    return ceil_to_grid(minutes)
