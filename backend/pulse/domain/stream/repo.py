"""Postgres access for the activity stream."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pulse.domain.stream.models import StreamItem
from pulse.infra.postgres import get_pool


class StreamRepository:
	async def insert(self, item: StreamItem) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute(
				"""
				INSERT INTO activity_stream (
					id, type, user_id, user_display_name, user_avatar_url,
					target_id, target_type, target_title, region, ref_id,
					created_at, expires_at
				)
				VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
				""",
				item.id,
				item.type,
				item.user_id,
				item.user_display_name,
				item.user_avatar_url,
				item.target_id,
				item.target_type,
				item.target_title,
				item.region,
				item.ref_id,
				item.created_at,
				item.expires_at,
			)

	async def recent(self, *, now: datetime, limit: int, region: Optional[str] = None) -> list[StreamItem]:
		"""Newest first, leaving out check-in items that expired by ``now``."""
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"""
				SELECT *
				FROM activity_stream
				WHERE (type <> 'checkin' OR expires_at IS NULL OR expires_at > $1)
					AND ($2::text IS NULL OR region = $2)
				ORDER BY created_at DESC, id DESC
				LIMIT $3
				""",
				now,
				region,
				limit,
			)
		return [StreamItem.from_row(row) for row in rows]
