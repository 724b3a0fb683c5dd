"""Postgres access for event joins and activity attendance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pulse.domain.exceptions import NotFoundError
from pulse.infra.postgres import get_pool


@dataclass(slots=True)
class EventJoin:
	"""``joined`` is the membership after the call; ``changed`` is False when the call was a no-op."""

	event_id: str
	joined: bool
	going_count: int
	changed: bool = True
	event_title: Optional[str] = None
	region: Optional[str] = None


@dataclass(slots=True)
class AttendanceCounts:
	activity_id: str
	going_count: int
	interested_count: int


@dataclass(slots=True)
class NewActivity:
	id: str
	host_user_id: str
	host_name: Optional[str]
	host_avatar_url: Optional[str]
	title: str
	description: Optional[str]
	category: Optional[str]
	region: Optional[str]
	listing_id: Optional[str]
	listing_title: Optional[str]
	freeform_location: Optional[str]
	lat: Optional[float]
	lng: Optional[float]
	start_time: datetime
	end_time: datetime
	all_day: bool
	images: list[str]
	cover_image: Optional[str]
	visibility: str


class EngagementRepository:
	"""Thin data-access layer around asyncpg."""

	async def join_event(self, event_id: str, user_id: str) -> EventJoin:
		"""Record the join; ``going_count`` only moves when the join row is new."""
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				event = await conn.fetchrow("SELECT title, region FROM events WHERE id = $1", event_id)
				if event is None:
					raise NotFoundError("event_not_found")
				inserted = await conn.fetchval(
					"""
					INSERT INTO event_joins (event_id, user_id)
					VALUES ($1, $2)
					ON CONFLICT (event_id, user_id) DO NOTHING
					RETURNING event_id
					""",
					event_id,
					user_id,
				)
				if inserted is None:
					count = await conn.fetchval("SELECT going_count FROM events WHERE id = $1", event_id)
					return EventJoin(
						event_id=event_id,
						joined=True,
						going_count=int(count or 0),
						changed=False,
						event_title=event["title"],
						region=event["region"],
					)
				count = await conn.fetchval(
					"""
					UPDATE events
					SET going_count = going_count + 1
					WHERE id = $1
					RETURNING going_count
					""",
					event_id,
				)
		return EventJoin(
			event_id=event_id,
			joined=True,
			going_count=int(count or 0),
			event_title=event["title"],
			region=event["region"],
		)

	async def leave_event(self, event_id: str, user_id: str) -> EventJoin:
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				removed = await conn.fetchval(
					"DELETE FROM event_joins WHERE event_id = $1 AND user_id = $2 RETURNING event_id",
					event_id,
					user_id,
				)
				if removed is None:
					count = await conn.fetchval("SELECT going_count FROM events WHERE id = $1", event_id)
					if count is None:
						raise NotFoundError("event_not_found")
					return EventJoin(event_id=event_id, joined=False, going_count=int(count), changed=False)
				row = await conn.fetchrow(
					"""
					UPDATE events
					SET going_count = GREATEST(going_count - 1, 0)
					WHERE id = $1
					RETURNING going_count, title, region
					""",
					event_id,
				)
		return EventJoin(
			event_id=event_id,
			joined=False,
			going_count=int(row["going_count"]),
			event_title=row["title"],
			region=row["region"],
		)

	async def _update_attendance(self, activity_id: str, sql: str, user_id: str) -> AttendanceCounts:
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(sql, activity_id, user_id)
		if row is None:
			raise NotFoundError("activity_not_found")
		return AttendanceCounts(
			activity_id=activity_id,
			going_count=row["going_count"],
			interested_count=row["interested_count"],
		)

	async def remove_going(self, activity_id: str, user_id: str) -> AttendanceCounts:
		return await self._update_attendance(
			activity_id,
			"""
			UPDATE user_activities
			SET going = array_remove(going, $2),
				going_count = GREATEST(going_count - 1, 0)
			WHERE id = $1
			RETURNING going_count, interested_count
			""",
			user_id,
		)

	async def add_going(self, activity_id: str, user_id: str) -> AttendanceCounts:
		"""Add to ``going`` and drop from ``interested``; ``interested_count`` is left as is."""
		return await self._update_attendance(
			activity_id,
			"""
			UPDATE user_activities
			SET going = CASE WHEN $2 = ANY(going) THEN going ELSE array_append(going, $2) END,
				going_count = going_count + 1,
				interested = array_remove(interested, $2)
			WHERE id = $1
			RETURNING going_count, interested_count
			""",
			user_id,
		)

	async def remove_interested(self, activity_id: str, user_id: str) -> AttendanceCounts:
		return await self._update_attendance(
			activity_id,
			"""
			UPDATE user_activities
			SET interested = array_remove(interested, $2),
				interested_count = GREATEST(interested_count - 1, 0)
			WHERE id = $1
			RETURNING going_count, interested_count
			""",
			user_id,
		)

	async def add_interested(self, activity_id: str, user_id: str) -> AttendanceCounts:
		return await self._update_attendance(
			activity_id,
			"""
			UPDATE user_activities
			SET interested = CASE WHEN $2 = ANY(interested) THEN interested ELSE array_append(interested, $2) END,
				interested_count = interested_count + 1
			WHERE id = $1
			RETURNING going_count, interested_count
			""",
			user_id,
		)

	async def insert_activity(self, activity: NewActivity) -> str:
		"""Insert with the host as the only member of ``going``."""
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute(
				"""
				INSERT INTO user_activities (
					id, host_user_id, host_name, host_avatar_url, title, description, category, region,
					listing_id, listing_title, freeform_location, lat, lng, start_time, end_time, all_day,
					images, cover_image, visibility, going, going_count, interested, interested_count
				)
				VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14, $15, $16,
					$17, $18, $19, ARRAY[$2]::text[], 1, ARRAY[]::text[], 0)
				""",
				activity.id,
				activity.host_user_id,
				activity.host_name,
				activity.host_avatar_url,
				activity.title,
				activity.description,
				activity.category,
				activity.region,
				activity.listing_id,
				activity.listing_title,
				activity.freeform_location,
				activity.lat,
				activity.lng,
				activity.start_time,
				activity.end_time,
				activity.all_day,
				activity.images,
				activity.cover_image,
				activity.visibility,
			)
		return activity.id
