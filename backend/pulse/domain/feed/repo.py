"""Postgres queries backing the feed channels."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

import ulid

from pulse.domain.catalog.models import Coordinates
from pulse.domain.feed import policy
from pulse.domain.feed.models import (
	CuratedItem,
	CurationEntry,
	CurationUpsert,
	EventItem,
	FeedSection,
	UserActivityItem,
)
from pulse.infra.postgres import get_pool


def _coordinates(row: Mapping[str, Any]) -> Optional[Coordinates]:
	lat, lng = row.get("lat"), row.get("lng")
	if lat is None or lng is None:
		return None
	return Coordinates(lat=float(lat), lng=float(lng))


def _common(row: Mapping[str, Any]) -> dict[str, Any]:
	return {
		"id": str(row["id"]),
		"title": row["title"],
		"description": row.get("description"),
		"category": row.get("category"),
		"region": row.get("region"),
		"start_time": row.get("start_time"),
		"end_time": row.get("end_time"),
		"images": list(row.get("images") or []),
		"address": row.get("address"),
		"coordinates": _coordinates(row),
	}


def activity_from_row(row: Mapping[str, Any]) -> UserActivityItem:
	return UserActivityItem(
		**_common(row),
		host_user_id=row.get("host_user_id"),
		host_name=row.get("host_name"),
		host_avatar_url=row.get("host_avatar_url"),
		visibility=row.get("visibility") or "public",
		going_count=row.get("going_count") or 0,
		interested_count=row.get("interested_count") or 0,
		all_day=bool(row.get("all_day")),
	)


def event_from_row(row: Mapping[str, Any]) -> EventItem:
	price = row.get("price")
	return EventItem(
		**_common(row),
		venue_name=row.get("venue_name"),
		going_count=row.get("going_count") or 0,
		price=float(price) if price is not None else None,
	)


def curated_from_row(row: Mapping[str, Any]) -> CuratedItem:
	return CuratedItem(
		**_common(row),
		section=row["section"],
		priority=row.get("priority") or 0,
		link_url=row.get("link_url"),
		target_id=row.get("target_id"),
	)


def curation_entry_from_row(row: Mapping[str, Any]) -> CurationEntry:
	return CurationEntry(
		**curated_from_row(row).model_dump(exclude={"type", "status", "badges"}),
		enabled=bool(row.get("enabled", True)),
		starts_at=row.get("starts_at"),
		ends_at=row.get("ends_at"),
		created_by=row.get("created_by"),
		created_at=row.get("created_at"),
		updated_at=row.get("updated_at"),
	)


class FeedRepository:
	"""Access to activities, events and curated entries."""

	async def activities_starting_between(
		self,
		start: datetime,
		end: datetime,
		*,
		region: Optional[str] = None,
		limit: int = policy.WINDOW_QUERY_LIMIT,
	) -> list[UserActivityItem]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"""
				SELECT *
				FROM user_activities
				WHERE start_time >= $1 AND start_time <= $2
					AND ($3::text IS NULL OR region = $3)
				ORDER BY start_time ASC
				LIMIT $4
				""",
				start,
				end,
				region,
				limit,
			)
		return [activity_from_row(row) for row in rows]

	async def events_starting_between(
		self,
		start: datetime,
		end: datetime,
		*,
		region: Optional[str] = None,
		limit: int = policy.WINDOW_QUERY_LIMIT,
	) -> list[EventItem]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"""
				SELECT *
				FROM events
				WHERE start_time >= $1 AND start_time <= $2
					AND ($3::text IS NULL OR region = $3)
				ORDER BY start_time ASC
				LIMIT $4
				""",
				start,
				end,
				region,
				limit,
			)
		return [event_from_row(row) for row in rows]

	async def curated(
		self,
		section: FeedSection,
		*,
		limit: int = policy.CURATED_LIMIT,
		now: Optional[datetime] = None,
	) -> list[CuratedItem]:
		"""Enabled entries for ``section`` whose schedule covers ``now``, highest priority first."""
		now = now or datetime.now(timezone.utc)
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"""
				SELECT *
				FROM curated_feed_entries
				WHERE section = $1 AND enabled = TRUE
					AND (starts_at IS NULL OR starts_at <= $3)
					AND (ends_at IS NULL OR ends_at >= $3)
				ORDER BY priority DESC, created_at DESC
				LIMIT $2
				""",
				section,
				limit,
				now,
			)
		return [curated_from_row(row) for row in rows]

	async def curation_entries(self, *, now: datetime, limit: int = policy.CURATION_ADMIN_LIMIT) -> list[CurationEntry]:
		"""Enabled entries of every section whose schedule covers ``now``."""
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"""
				SELECT *
				FROM curated_feed_entries
				WHERE enabled = TRUE
					AND (starts_at IS NULL OR starts_at <= $1)
					AND (ends_at IS NULL OR ends_at >= $1)
				ORDER BY priority DESC, created_at DESC
				LIMIT $2
				""",
				now,
				limit,
			)
		return [curation_entry_from_row(row) for row in rows]

	async def upsert_curation(
		self,
		target_id: str,
		entry: CurationUpsert,
		*,
		title: str,
		admin_id: str,
	) -> tuple[CurationEntry, bool]:
		"""Insert or replace the entry for ``target_id``; ``created_by`` is kept from the first write.

		Returns the stored entry and whether it was newly created.
		"""
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(
				"""
				INSERT INTO curated_feed_entries (
					id, target_id, section, title, description, category, region,
					start_time, end_time, images, link_url, priority, enabled,
					starts_at, ends_at, created_by, updated_at
				)
				VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14, $15, $16, NOW())
				ON CONFLICT (target_id) WHERE target_id IS NOT NULL DO UPDATE SET
					section = EXCLUDED.section,
					title = EXCLUDED.title,
					description = EXCLUDED.description,
					category = EXCLUDED.category,
					region = EXCLUDED.region,
					start_time = EXCLUDED.start_time,
					end_time = EXCLUDED.end_time,
					images = EXCLUDED.images,
					link_url = EXCLUDED.link_url,
					priority = EXCLUDED.priority,
					enabled = EXCLUDED.enabled,
					starts_at = EXCLUDED.starts_at,
					ends_at = EXCLUDED.ends_at,
					updated_at = NOW()
				RETURNING *, (xmax = 0) AS inserted
				""",
				ulid.new().str,
				target_id,
				entry.section,
				title,
				entry.description,
				entry.category,
				entry.region,
				entry.start_time,
				entry.end_time,
				list(entry.images),
				entry.link_url,
				entry.priority,
				entry.enabled,
				entry.starts_at,
				entry.ends_at,
				admin_id,
			)
		return curation_entry_from_row(row), bool(row["inserted"])
