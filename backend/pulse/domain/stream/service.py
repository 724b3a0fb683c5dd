"""Write and read the recent activity stream."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import ulid

from pulse.domain.stream.models import StreamItem, StreamItemType
from pulse.domain.stream.repo import StreamRepository
from pulse.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

DEFAULT_FEED_LIMIT = 50
MAX_FEED_LIMIT = 100


class ActivityStream:
	def __init__(self, repository: StreamRepository | None = None) -> None:
		self.repo = repository or StreamRepository()

	async def write(
		self,
		item_type: StreamItemType,
		user_id: str,
		*,
		ref_id: str,
		display_name: Optional[str] = None,
		avatar_url: Optional[str] = None,
		target_id: Optional[str] = None,
		target_type: Optional[str] = None,
		target_title: Optional[str] = None,
		region: Optional[str] = None,
		expires_at: Optional[datetime] = None,
		now: Optional[datetime] = None,
	) -> StreamItem:
		item = StreamItem(
			id=ulid.new().str,
			type=item_type,
			user_id=user_id,
			user_display_name=display_name,
			user_avatar_url=avatar_url,
			target_id=target_id,
			target_type=target_type,
			target_title=target_title,
			region=region,
			ref_id=ref_id,
			created_at=now or datetime.now(timezone.utc),
			expires_at=expires_at,
		)
		await self.repo.insert(item)
		obs_metrics.inc_stream_item(item_type)
		logger.debug("stream item written id=%s type=%s user=%s target=%s", item.id, item_type, user_id, target_id)
		return item

	async def active_feed(
		self,
		limit: int = DEFAULT_FEED_LIMIT,
		region: Optional[str] = None,
		*,
		now: Optional[datetime] = None,
	) -> list[StreamItem]:
		"""Newest items first; check-in items are dropped once their check-in expires."""
		limit = max(1, min(limit, MAX_FEED_LIMIT))
		return await self.repo.recent(now=now or datetime.now(timezone.utc), limit=limit, region=region)


__all__ = ["ActivityStream", "DEFAULT_FEED_LIMIT", "MAX_FEED_LIMIT"]
