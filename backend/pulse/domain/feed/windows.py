"""Calendar windows and item status for the feed.

All wall-clock arithmetic happens in the configured feed time zone; returned
datetimes are timezone-aware in that zone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from pulse.domain.feed.models import FeedStatus
from pulse.settings import settings

FRIDAY = 4


def feed_zone() -> ZoneInfo:
	return ZoneInfo(settings.feed_timezone)


def local_now(now: Optional[datetime] = None, tz: Optional[ZoneInfo] = None) -> datetime:
	tz = tz or feed_zone()
	value = now or datetime.now(timezone.utc)
	if value.tzinfo is None:
		return value.replace(tzinfo=tz)
	return value.astimezone(tz)


def start_of_day(value: datetime) -> datetime:
	return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime) -> datetime:
	return value.replace(hour=23, minute=59, second=59, microsecond=999000)


@dataclass(frozen=True, slots=True)
class TimeWindow:
	start: datetime
	end: datetime


def today_window(now: Optional[datetime] = None, tz: Optional[ZoneInfo] = None) -> TimeWindow:
	local = local_now(now, tz)
	return TimeWindow(start=start_of_day(local), end=end_of_day(local))


def week_window(now: Optional[datetime] = None, tz: Optional[ZoneInfo] = None) -> TimeWindow:
	"""The "this week" window.

	Monday to Thursday it is the coming weekend (Friday 00:00 to Sunday
	23:59:59.999). Friday to Sunday it is today through the end of the day
	seven days out.
	"""
	local = local_now(now, tz)
	weekday = local.weekday()
	if weekday < FRIDAY:
		friday = start_of_day(local + timedelta(days=FRIDAY - weekday))
		return TimeWindow(start=friday, end=end_of_day(friday + timedelta(days=2)))
	return TimeWindow(start=start_of_day(local), end=end_of_day(local + timedelta(days=7)))


def feed_status(
	start: Optional[datetime],
	end: Optional[datetime],
	now: Optional[datetime] = None,
	tz: Optional[ZoneInfo] = None,
) -> FeedStatus:
	"""Read-time status; an item without an end runs until the end of its start day."""
	if start is None:
		return "upcoming"
	current = local_now(now, tz)
	start_local = local_now(start, tz)
	if current < start_local:
		return "upcoming"
	finish = local_now(end, tz) if end is not None else end_of_day(start_local)
	if current <= finish:
		return "live"
	return "ended"


__all__ = [
	"TimeWindow",
	"end_of_day",
	"feed_status",
	"feed_zone",
	"local_now",
	"start_of_day",
	"today_window",
	"week_window",
]
