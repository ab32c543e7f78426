from datetime import date, timedelta

from common_ground.core.formatting import (
    booking_request,
    format_slot,
    format_slots,
    format_utc_offset,
    numbered_summaries,
)
from common_ground.core.time_blocks import TimeBlock

SLOT = TimeBlock(date=date(2024, 6, 3), start=570, end=660)


def test_english_slot_text():
    assert format_slot(SLOT) == "06/03(Mon) 09:30 ~ 11:00"


def test_japanese_slot_text():
    assert format_slot(SLOT, "ja") == "06/03(月) 09:30 ~ 11:00"


def test_unknown_language_falls_back_to_english():
    assert format_slot(SLOT, "fr") == format_slot(SLOT, "en")


def test_slots_are_newline_joined():
    other = TimeBlock(date=date(2024, 6, 9), start=600, end=660)
    assert format_slots([SLOT, other]) == "06/03(Mon) 09:30 ~ 11:00\n06/09(Sun) 10:00 ~ 11:00"


def test_utc_offsets():
    assert format_utc_offset(timedelta(hours=9)) == "+09:00"
    assert format_utc_offset(timedelta(hours=-5, minutes=-30)) == "-05:30"
    assert format_utc_offset(timedelta(0)) == "+00:00"


def test_booking_request_body():
    body = booking_request(SLOT, "Sync (1/2)", timedelta(hours=9))
    assert body == {
        "summary": "Sync (1/2)",
        "start": {"dateTime": "2024-06-03T09:30:00+09:00"},
        "end": {"dateTime": "2024-06-03T11:00:00+09:00"},
    }


def test_booking_end_of_day_rolls_to_next_date():
    late = TimeBlock(date=date(2024, 6, 3), start=1380, end=1440)
    body = booking_request(late, "Late", timedelta(0))
    assert body["end"] == {"dateTime": "2024-06-04T00:00:00+00:00"}


def test_numbered_summaries():
    assert numbered_summaries("Interview", 3) == ["Interview (1/3)", "Interview (2/3)", "Interview (3/3)"]
