from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from pulse.domain.stream.models import StreamItem
from pulse.domain.stream.service import MAX_FEED_LIMIT, ActivityStream

NOW = datetime(2024, 6, 11, 12, 0, tzinfo=timezone.utc)


class _FakeStreamRepo:
	def __init__(self) -> None:
		self.items: list[StreamItem] = []
		self.queries: list[tuple[datetime, int, Optional[str]]] = []

	async def insert(self, item: StreamItem) -> None:
		self.items.append(item)

	async def recent(self, *, now, limit, region=None):
		self.queries.append((now, limit, region))
		return list(reversed(self.items))[:limit]


@pytest.mark.asyncio
async def test_write_check_in_item_carries_expiry() -> None:
	repo = _FakeStreamRepo()
	stream = ActivityStream(repo)

	item = await stream.write(
		"checkin",
		"user-1",
		ref_id="chk-1",
		display_name="Ana",
		target_id="venue-1",
		target_type="place",
		target_title="Old Harbour",
		region="kyrenia",
		expires_at=NOW + timedelta(hours=4),
		now=NOW,
	)

	assert repo.items == [item]
	assert item.type == "checkin"
	assert item.created_at == NOW
	assert item.expires_at == NOW + timedelta(hours=4)
	assert item.user_display_name == "Ana"
	assert len(item.id) == 26


@pytest.mark.asyncio
async def test_join_items_do_not_expire() -> None:
	stream = ActivityStream(_FakeStreamRepo())

	item = await stream.write("join", "user-1", ref_id="user-1_evt-1", target_id="evt-1", target_type="event")

	assert item.expires_at is None
	assert item.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_active_feed_is_newest_first_and_clamps_limit() -> None:
	repo = _FakeStreamRepo()
	stream = ActivityStream(repo)
	first = await stream.write("join", "user-1", ref_id="a", now=NOW)
	second = await stream.write("leave", "user-1", ref_id="b", now=NOW + timedelta(minutes=1))

	items = await stream.active_feed(500, "kyrenia", now=NOW)

	assert [item.id for item in items] == [second.id, first.id]
	assert repo.queries == [(NOW, MAX_FEED_LIMIT, "kyrenia")]
