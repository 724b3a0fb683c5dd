"""Append-only presence ledger stored in Redis.

Layout:
- ``checkin:{id}``            hash with the check-in fields (TTL = retention)
- ``checkins:by_expiry``      zset scored by expires_at (epoch ms)
- ``checkins:by_recorded``    zset scored by recorded_at (epoch ms)
- ``checkins:user:{user_id}`` zset of one user's check-ins scored by recorded_at

Check-ins are never updated or deleted by the service; they drop out of
``active()`` once expired and out of Redis once the retention horizon passes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import ulid

from pulse.domain.catalog.models import VenueType
from pulse.domain.presence.models import CheckIn, to_epoch_ms
from pulse.infra.events import EventBus
from pulse.infra.redis import redis_client
from pulse.obs import metrics as obs_metrics
from pulse.settings import settings

logger = logging.getLogger(__name__)

BY_EXPIRY_KEY = "checkins:by_expiry"
BY_RECORDED_KEY = "checkins:by_recorded"
TOPIC_CHECKIN_RECORDED = "checkins.recorded"

LIVE_SCAN_LIMIT = 100
TRENDING_SCAN_LIMIT = 200


def _checkin_key(checkin_id: str) -> str:
	return f"checkin:{checkin_id}"


def _user_key(user_id: str) -> str:
	return f"checkins:user:{user_id}"


class PresenceLedger:
	"""Records check-ins and answers time-window reads over them."""

	def __init__(
		self,
		*,
		redis=None,
		bus: Optional[EventBus] = None,
		window: Optional[timedelta] = None,
		retention_seconds: Optional[int] = None,
	) -> None:
		self._redis = redis if redis is not None else redis_client
		self._bus = bus
		self.window = window or timedelta(hours=settings.checkin_window_hours)
		self.retention_seconds = retention_seconds or settings.checkin_retention_seconds

	async def record(
		self,
		user_id: str,
		venue_id: str,
		venue_type: VenueType | str,
		display_name: Optional[str] = None,
		avatar_url: Optional[str] = None,
		*,
		now: Optional[datetime] = None,
	) -> CheckIn:
		"""Append a check-in. Repeated check-ins are legal and add presence weight."""
		now = now or datetime.now(timezone.utc)
		kind = venue_type.value if isinstance(venue_type, VenueType) else str(venue_type)
		check_in = CheckIn.new(
			id=ulid.new().str,
			venue_id=venue_id,
			venue_type=kind,
			user_id=user_id,
			recorded_at=now,
			window=self.window,
			user_display_name=display_name,
			user_avatar_url=avatar_url,
		)
		key = _checkin_key(check_in.id)
		user_key = _user_key(user_id)
		recorded_ms = to_epoch_ms(check_in.recorded_at)
		horizon_ms = to_epoch_ms(now) - self.retention_seconds * 1000
		async with self._redis.pipeline(transaction=True) as pipe:
			pipe.hset(key, mapping=check_in.to_mapping())
			pipe.expire(key, self.retention_seconds)
			pipe.zadd(BY_EXPIRY_KEY, {check_in.id: to_epoch_ms(check_in.expires_at)})
			pipe.zadd(BY_RECORDED_KEY, {check_in.id: recorded_ms})
			pipe.zadd(user_key, {check_in.id: recorded_ms})
			pipe.expire(user_key, self.retention_seconds)
			pipe.zremrangebyscore(BY_RECORDED_KEY, "-inf", horizon_ms)
			pipe.zremrangebyscore(BY_EXPIRY_KEY, "-inf", horizon_ms)
			pipe.zremrangebyscore(user_key, "-inf", horizon_ms)
			await pipe.execute()
		obs_metrics.inc_checkin(kind)
		logger.debug("check-in recorded id=%s venue=%s type=%s", check_in.id, venue_id, kind)
		if self._bus is not None:
			await self._bus.publish(TOPIC_CHECKIN_RECORDED, check_in)
		return check_in

	async def active(self, limit: int = LIVE_SCAN_LIMIT, *, now: Optional[datetime] = None) -> list[CheckIn]:
		"""Unexpired check-ins, ``expires_at`` descending, at most ``limit`` rows."""
		now_ms = to_epoch_ms(now or datetime.now(timezone.utc))
		ids = await self._redis.zrevrangebyscore(BY_EXPIRY_KEY, "+inf", f"({now_ms}", start=0, num=limit)
		return await self._load(ids)

	async def active_since(self, window_start: datetime, limit: int = TRENDING_SCAN_LIMIT) -> list[CheckIn]:
		"""Check-ins with ``recorded_at >= window_start``, newest first."""
		ids = await self._redis.zrevrangebyscore(
			BY_RECORDED_KEY, "+inf", to_epoch_ms(window_start), start=0, num=limit
		)
		return await self._load(ids)

	async def for_user(self, user_id: str, limit: int = 5) -> list[CheckIn]:
		"""A user's most recent check-ins regardless of expiry."""
		if limit <= 0:
			return []
		ids = await self._redis.zrevrange(_user_key(user_id), 0, limit - 1)
		return await self._load(ids)

	async def _load(self, ids: Iterable[str]) -> list[CheckIn]:
		ids = list(ids)
		if not ids:
			return []
		async with self._redis.pipeline(transaction=False) as pipe:
			for checkin_id in ids:
				pipe.hgetall(_checkin_key(checkin_id))
			rows = await pipe.execute()
		check_ins: list[CheckIn] = []
		for checkin_id, row in zip(ids, rows):
			# Hash already past retention while the index member lingers
			if not row:
				continue
			try:
				check_ins.append(CheckIn.from_mapping(row))
			except (KeyError, ValueError):
				logger.warning("skipping malformed check-in id=%s", checkin_id)
		return check_ins


__all__ = ["PresenceLedger", "TOPIC_CHECKIN_RECORDED", "LIVE_SCAN_LIMIT", "TRENDING_SCAN_LIMIT"]
