from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True, slots=True)
class TimeBlock:
    """Half-open interval ``[start, end)`` in minutes since midnight on ``date``."""

    date: date
    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end <= MINUTES_PER_DAY:
            raise ValueError(
                f"TimeBlock bounds must satisfy 0 <= start <= end <= {MINUTES_PER_DAY}: "
                f"got {self.start}..{self.end}"
            )

    @classmethod
    def clamped(cls, day: date, start: int, end: int) -> "TimeBlock":
        """Build a block from untrusted bounds, collapsing inverted input to ``start``."""
        start = min(max(int(start), 0), MINUTES_PER_DAY)
        end = min(max(int(end), 0), MINUTES_PER_DAY)
        if end < start:
            end = start
        return cls(date=day, start=start, end=end)

    @classmethod
    def full_day(cls, day: date) -> "TimeBlock":
        return cls(date=day, start=0, end=MINUTES_PER_DAY)

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def overlaps(self, other: "TimeBlock") -> bool:
        return self.date == other.date and self.start < other.end and self.end > other.start

    def intersect(self, start: int, end: int) -> "TimeBlock | None":
        new_start = max(self.start, start)
        new_end = min(self.end, end)
        if new_end <= new_start:
            return None
        return TimeBlock(date=self.date, start=new_start, end=new_end)

    def as_tuple(self) -> tuple[date, int, int]:
        return (self.date, self.start, self.end)


def time_to_minutes(value: str) -> int:
    """Convert an ``HH:MM`` string to minutes since midnight."""
    hours_text, sep, minutes_text = value.strip().partition(":")
    if not sep:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    hours = int(hours_text)
    minutes = int(minutes_text)
    if not (0 <= hours <= 24 and 0 <= minutes < 60) or hours * 60 + minutes > MINUTES_PER_DAY:
        raise ValueError(f"Time of day out of range: {value!r}")
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def sort_blocks(blocks: Iterable[TimeBlock]) -> list[TimeBlock]:
    return sorted(blocks, key=lambda block: (block.date, block.start, block.end))


def _subtract_one(free: TimeBlock, obstruction: TimeBlock) -> list[TimeBlock]:
    if not free.overlaps(obstruction):
        return [free]
    # fully covered
    if obstruction.start <= free.start and obstruction.end >= free.end:
        return []
    # strictly inside: split
    if obstruction.start > free.start and obstruction.end < free.end:
        return [
            TimeBlock(date=free.date, start=free.start, end=obstruction.start),
            TimeBlock(date=free.date, start=obstruction.end, end=free.end),
        ]
    # overlaps the start
    if obstruction.start <= free.start:
        return [TimeBlock(date=free.date, start=obstruction.end, end=free.end)]
    # overlaps the end
    return [TimeBlock(date=free.date, start=free.start, end=obstruction.start)]


def subtract_blocks(free_blocks: Sequence[TimeBlock], obstructions: Sequence[TimeBlock]) -> list[TimeBlock]:
    """Remove every obstruction from the free blocks sharing its date.

    Obstructions are applied one after another, each against the output of the
    previous pass. Zero-length obstructions are ignored and zero-length
    remainders are dropped.
    """
    current = [block for block in free_blocks if not block.is_empty]
    for obstruction in obstructions:
        if obstruction.is_empty:
            continue
        remaining: list[TimeBlock] = []
        for free in current:
            remaining.extend(piece for piece in _subtract_one(free, obstruction) if not piece.is_empty)
        current = remaining
    return current


def intersect_window(blocks: Iterable[TimeBlock], window_start: int, window_end: int) -> list[TimeBlock]:
    results: list[TimeBlock] = []
    for block in blocks:
        clipped = block.intersect(window_start, window_end)
        if clipped is not None:
            results.append(clipped)
    return results


def blocks_on(blocks: Iterable[TimeBlock], day: date) -> list[TimeBlock]:
    return [block for block in blocks if block.date == day]
