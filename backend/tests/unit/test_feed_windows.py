from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from pulse.domain.feed.windows import end_of_day, feed_status, today_window, week_window

TZ = ZoneInfo("Europe/Nicosia")


def test_today_window_spans_local_day() -> None:
	window = today_window(datetime(2024, 6, 11, 15, 30, tzinfo=TZ), TZ)

	assert window.start == datetime(2024, 6, 11, 0, 0, tzinfo=TZ)
	assert window.end == datetime(2024, 6, 11, 23, 59, 59, 999000, tzinfo=TZ)


@pytest.mark.parametrize("day", [10, 11, 12, 13])
def test_week_window_monday_to_thursday_is_upcoming_weekend(day: int) -> None:
	window = week_window(datetime(2024, 6, day, 9, 0, tzinfo=TZ), TZ)

	assert window.start == datetime(2024, 6, 14, 0, 0, tzinfo=TZ)
	assert window.end == datetime(2024, 6, 16, 23, 59, 59, 999000, tzinfo=TZ)


def test_week_window_on_tuesday() -> None:
	window = week_window(datetime(2024, 6, 11, 18, 45, tzinfo=TZ), TZ)

	assert window.start.weekday() == 4
	assert (window.start.hour, window.start.minute) == (0, 0)
	assert window.end.weekday() == 6


@pytest.mark.parametrize("day", [14, 15, 16])
def test_week_window_friday_to_sunday_runs_seven_days(day: int) -> None:
	now = datetime(2024, 6, day, 20, 0, tzinfo=TZ)
	window = week_window(now, TZ)

	assert window.start == datetime(2024, 6, day, 0, 0, tzinfo=TZ)
	assert window.end == datetime(2024, 6, day + 7, 23, 59, 59, 999000, tzinfo=TZ)


def test_week_window_converts_utc_input_to_feed_zone() -> None:
	# 22:30 UTC on Thursday is already Friday 01:30 in Nicosia
	now = datetime(2024, 6, 13, 22, 30, tzinfo=ZoneInfo("UTC"))
	window = week_window(now, TZ)

	assert window.start == datetime(2024, 6, 14, 0, 0, tzinfo=TZ)
	assert window.end == datetime(2024, 6, 21, 23, 59, 59, 999000, tzinfo=TZ)


def test_feed_status_transitions() -> None:
	start = datetime(2024, 6, 11, 18, 0, tzinfo=TZ)
	end = datetime(2024, 6, 11, 20, 0, tzinfo=TZ)

	assert feed_status(start, end, datetime(2024, 6, 11, 17, 0, tzinfo=TZ), TZ) == "upcoming"
	assert feed_status(start, end, datetime(2024, 6, 11, 19, 0, tzinfo=TZ), TZ) == "live"
	assert feed_status(start, end, datetime(2024, 6, 11, 21, 0, tzinfo=TZ), TZ) == "ended"


def test_feed_status_without_end_runs_to_end_of_start_day() -> None:
	start = datetime(2024, 6, 11, 18, 0, tzinfo=TZ)

	assert feed_status(start, None, datetime(2024, 6, 11, 23, 0, tzinfo=TZ), TZ) == "live"
	assert feed_status(start, None, datetime(2024, 6, 12, 0, 30, tzinfo=TZ), TZ) == "ended"


def test_feed_status_without_start_is_upcoming() -> None:
	assert feed_status(None, None, datetime(2024, 6, 11, tzinfo=TZ), TZ) == "upcoming"


def test_end_of_day_has_millisecond_precision() -> None:
	assert end_of_day(datetime(2024, 1, 1, 5, tzinfo=TZ)).microsecond == 999000
