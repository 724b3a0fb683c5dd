from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from pulse.domain.feed.models import CurationUpsert
from pulse.domain.feed.repo import FeedRepository
from pulse.domain.stream.models import StreamItem
from pulse.domain.stream.repo import StreamRepository

pytestmark = pytest.mark.asyncio

NOW = datetime(2024, 6, 11, 12, 0, tzinfo=timezone.utc)


@pytest.mark.integration
async def test_curated_honours_schedule_window(postgres_pool):
	repo = FeedRepository()
	await repo.upsert_curation("live", CurationUpsert(section="today", priority=1), title="Live", admin_id="ops")
	await repo.upsert_curation(
		"future",
		CurationUpsert(section="today", priority=2, starts_at=NOW + timedelta(hours=1)),
		title="Future",
		admin_id="ops",
	)
	await repo.upsert_curation(
		"ended",
		CurationUpsert(section="today", priority=3, ends_at=NOW - timedelta(minutes=1)),
		title="Ended",
		admin_id="ops",
	)
	await repo.upsert_curation(
		"window",
		CurationUpsert(section="today", priority=4, starts_at=NOW - timedelta(hours=1), ends_at=NOW + timedelta(hours=1)),
		title="Window",
		admin_id="ops",
	)
	await repo.upsert_curation("off", CurationUpsert(section="today", enabled=False), title="Off", admin_id="ops")

	items = await repo.curated("today", now=NOW)

	assert [item.target_id for item in items] == ["window", "live"]
	assert [entry.target_id for entry in await repo.curation_entries(now=NOW)] == ["window", "live"]


@pytest.mark.integration
async def test_upsert_by_target_keeps_creator(postgres_pool):
	repo = FeedRepository()

	created, was_new = await repo.upsert_curation(
		"venue-1",
		CurationUpsert(section="featured", priority=10),
		title="Harbour",
		admin_id="ops-1",
	)
	updated, again_new = await repo.upsert_curation(
		"venue-1",
		CurationUpsert(section="featured", priority=90, region="kyrenia"),
		title="Harbour",
		admin_id="ops-2",
	)

	assert (was_new, again_new) == (True, False)
	assert updated.id == created.id
	assert updated.priority == 90
	assert updated.region == "kyrenia"
	assert updated.created_by == "ops-1"
	assert updated.updated_at >= created.updated_at
	async with postgres_pool.acquire() as conn:
		assert await conn.fetchval("SELECT COUNT(*) FROM curated_feed_entries") == 1


@pytest.mark.integration
async def test_stream_drops_expired_check_ins_newest_first(postgres_pool):
	repo = StreamRepository()

	def _item(item_id, item_type, minutes_ago, expires_in=None):
		return StreamItem(
			id=item_id,
			type=item_type,
			user_id="user-1",
			ref_id=item_id,
			region="kyrenia",
			created_at=NOW - timedelta(minutes=minutes_ago),
			expires_at=NOW + timedelta(minutes=expires_in) if expires_in is not None else None,
		)

	await repo.insert(_item("old-join", "join", 300))
	await repo.insert(_item("expired", "checkin", 250, expires_in=-10))
	await repo.insert(_item("live", "checkin", 30, expires_in=210))
	await repo.insert(_item("leave", "leave", 5))

	items = await repo.recent(now=NOW, limit=10)

	assert [item.id for item in items] == ["leave", "live", "old-join"]
	assert [item.id for item in await repo.recent(now=NOW, limit=2)] == ["leave", "live"]
	assert await repo.recent(now=NOW, limit=10, region="nicosia") == []
