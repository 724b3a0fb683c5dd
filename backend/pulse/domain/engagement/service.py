"""Event joins, going/interested toggles and user-hosted activities."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

import ulid

from pulse.domain.engagement.repo import AttendanceCounts, EngagementRepository, EventJoin, NewActivity
from pulse.domain.engagement.schemas import CreateActivityRequest
from pulse.domain.exceptions import ValidationError
from pulse.domain.feed.windows import end_of_day, local_now, start_of_day
from pulse.domain.stream.models import StreamItemType
from pulse.domain.stream.service import ActivityStream
from pulse.infra.auth import AuthenticatedUser
from pulse.settings import settings

logger = logging.getLogger(__name__)

DEFAULT_VISIBILITY = "public"


def activity_span(
	start: datetime,
	end: Optional[datetime],
	*,
	all_day: bool,
	default_duration: Optional[timedelta] = None,
) -> tuple[datetime, datetime]:
	"""Normalise a requested start/end into an explicit span in the feed zone.

	All-day activities run from the start of the start date to the end of the
	end date (or start date). Timed activities without an end last the default
	duration.
	"""
	start_local = local_now(start)
	end_local = local_now(end) if end is not None else None
	if all_day:
		span = (start_of_day(start_local), end_of_day(end_local or start_local))
	else:
		duration = default_duration or timedelta(minutes=settings.activity_default_duration_minutes)
		span = (start_local, end_local or start_local + duration)
	if span[1] < span[0]:
		raise ValidationError("end_before_start")
	return span


class EngagementService:
	def __init__(self, repository: EngagementRepository | None = None, stream: Optional[ActivityStream] = None) -> None:
		self.repo = repository or EngagementRepository()
		self.stream = stream

	async def join_event(
		self,
		user_id: str,
		event_id: str,
		*,
		display_name: Optional[str] = None,
		avatar_url: Optional[str] = None,
	) -> EventJoin:
		result = await self.repo.join_event(event_id, user_id)
		if result.changed:
			logger.info("event joined event=%s user=%s going=%s", event_id, user_id, result.going_count)
			await self._post("join", user_id, result, display_name, avatar_url)
		return result

	async def leave_event(
		self,
		user_id: str,
		event_id: str,
		*,
		display_name: Optional[str] = None,
		avatar_url: Optional[str] = None,
	) -> EventJoin:
		result = await self.repo.leave_event(event_id, user_id)
		if result.changed:
			logger.info("event left event=%s user=%s going=%s", event_id, user_id, result.going_count)
			await self._post("leave", user_id, result, display_name, avatar_url)
		return result

	async def _post(
		self,
		item_type: StreamItemType,
		user_id: str,
		result: EventJoin,
		display_name: Optional[str],
		avatar_url: Optional[str],
	) -> None:
		if self.stream is None:
			return
		await self.stream.write(
			item_type,
			user_id,
			ref_id=f"{user_id}_{result.event_id}",
			display_name=display_name,
			avatar_url=avatar_url,
			target_id=result.event_id,
			target_type="event",
			target_title=result.event_title,
			region=result.region,
		)

	async def toggle_going(self, activity_id: str, user_id: str, is_currently_going: bool) -> AttendanceCounts:
		if is_currently_going:
			return await self.repo.remove_going(activity_id, user_id)
		return await self.repo.add_going(activity_id, user_id)

	async def toggle_interested(
		self,
		activity_id: str,
		user_id: str,
		is_currently_interested: bool,
	) -> AttendanceCounts:
		if is_currently_interested:
			return await self.repo.remove_interested(activity_id, user_id)
		return await self.repo.add_interested(activity_id, user_id)

	async def create_user_activity(self, host: AuthenticatedUser, payload: CreateActivityRequest) -> str:
		start, end = activity_span(payload.start_time, payload.end_time, all_day=payload.all_day)
		images = list(payload.images)
		activity = NewActivity(
			id=ulid.new().str,
			host_user_id=host.id,
			host_name=host.display_name,
			host_avatar_url=host.avatar_url,
			title=payload.title.strip(),
			description=(payload.description or "").strip() or None,
			category=payload.category,
			region=payload.region,
			listing_id=payload.listing_id,
			listing_title=payload.listing_title,
			freeform_location=payload.freeform_location,
			lat=payload.lat,
			lng=payload.lng,
			start_time=start,
			end_time=end,
			all_day=payload.all_day,
			images=images,
			cover_image=payload.cover_image or (images[0] if images else None),
			visibility=payload.visibility or DEFAULT_VISIBILITY,
		)
		activity_id = await self.repo.insert_activity(activity)
		logger.info("activity created id=%s host=%s all_day=%s", activity_id, host.id, payload.all_day)
		return activity_id


__all__ = ["EngagementService", "activity_span"]
