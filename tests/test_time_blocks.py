from datetime import date

import pytest

from common_ground.core.time_blocks import (
    TimeBlock,
    intersect_window,
    minutes_to_time,
    sort_blocks,
    subtract_blocks,
    time_to_minutes,
)

DAY = date(2024, 6, 3)
NEXT_DAY = date(2024, 6, 4)


def block(start, end, day=DAY):
    return TimeBlock(date=day, start=start, end=end)


def test_duration_is_derived():
    assert block(540, 1080).duration == 540


def test_rejects_out_of_range_bounds():
    with pytest.raises(ValueError):
        TimeBlock(date=DAY, start=600, end=540)
    with pytest.raises(ValueError):
        TimeBlock(date=DAY, start=0, end=1441)


def test_clamped_collapses_inverted_input():
    assert TimeBlock.clamped(DAY, 600, 540) == block(600, 600)
    assert TimeBlock.clamped(DAY, -30, 2000) == block(0, 1440)


def test_lunch_splits_working_day():
    result = subtract_blocks([block(540, 1080)], [block(720, 780)])
    assert result == [block(540, 720), block(780, 1080)]


@pytest.mark.parametrize(
    ("obstruction", "expected"),
    [
        (block(0, 540), [block(540, 1080)]),
        (block(1080, 1200), [block(540, 1080)]),
        (block(480, 1200), []),
        (block(540, 1080), []),
        (block(480, 600), [block(600, 1080)]),
        (block(1020, 1200), [block(540, 1020)]),
    ],
)
def test_subtract_cases(obstruction, expected):
    assert subtract_blocks([block(540, 1080)], [obstruction]) == expected


def test_subtraction_partitions_free_block():
    free = block(540, 1080)
    obstruction = block(600, 690)
    pieces = subtract_blocks([free], [obstruction])
    covered = sum(piece.duration for piece in pieces) + (690 - 600)
    assert covered == free.duration
    assert not any(piece.overlaps(obstruction) for piece in pieces)


def test_non_overlapping_obstruction_leaves_blocks_unchanged():
    free = [block(540, 720), block(780, 1080)]
    assert subtract_blocks(free, [block(720, 780), block(0, 60, NEXT_DAY)]) == free


def test_obstructions_apply_to_current_state():
    result = subtract_blocks([block(0, 1440)], [block(600, 660), block(630, 720), block(900, 960)])
    assert result == [block(0, 600), block(720, 900), block(960, 1440)]


def test_other_dates_do_not_interact():
    result = subtract_blocks([block(540, 1080), block(540, 1080, NEXT_DAY)], [block(0, 1440, NEXT_DAY)])
    assert result == [block(540, 1080)]


def test_zero_length_obstruction_does_not_split():
    assert subtract_blocks([block(540, 1080)], [block(600, 600)]) == [block(540, 1080)]


def test_intersect_window_drops_blocks_outside():
    blocks = [block(0, 480), block(510, 700), block(1000, 1440)]
    assert intersect_window(blocks, 540, 1080) == [block(540, 700), block(1000, 1080)]


def test_sort_blocks_orders_by_date_then_start():
    unordered = [block(600, 660, NEXT_DAY), block(700, 760), block(540, 600)]
    assert sort_blocks(unordered) == [block(540, 600), block(700, 760), block(600, 660, NEXT_DAY)]


def test_time_conversions():
    assert time_to_minutes("09:30") == 570
    assert time_to_minutes("24:00") == 1440
    assert minutes_to_time(570) == "09:30"
    with pytest.raises(ValueError):
        time_to_minutes("25:00")
    with pytest.raises(ValueError):
        time_to_minutes("0930")
