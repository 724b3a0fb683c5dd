from __future__ import annotations

import pytest

from pulse.domain.credibility.models import Rank, StampOptions
from pulse.domain.credibility.repo import CredibilityRepository
from pulse.domain.credibility.service import CredibilityService

pytestmark = pytest.mark.asyncio


@pytest.mark.integration
async def test_repeated_award_scores_once(postgres_pool):
	service = CredibilityService(repository=CredibilityRepository())

	first = await service.award_stamp("user-1", "venue-1", "place", "Old Harbour")
	second = await service.award_stamp("user-1", "venue-1", "place", "Old Harbour")

	assert first is not None
	assert second is None
	profile = await service.get_user_credibility("user-1")
	assert profile.credibility_score == 1
	assert profile.total_stamps == 1
	assert await service.get_stamps_count("user-1") == 1


@pytest.mark.integration
async def test_award_stores_default_icon_and_options(postgres_pool):
	service = CredibilityService(repository=CredibilityRepository())

	await service.award_stamp(
		"user-1",
		"act-1",
		"activity",
		"Beach run",
		StampOptions(category="sports", region="kyrenia", source_check_in_id="chk-1"),
	)

	[stamp] = await service.get_user_stamps("user-1")
	assert stamp.icon == "⚡"
	assert stamp.region == "kyrenia"
	assert stamp.source_check_in_id == "chk-1"
	assert [s.venue_id for s in await service.get_stamps_by_category("user-1", "sports")] == ["act-1"]


@pytest.mark.integration
async def test_score_crosses_rank_threshold(postgres_pool):
	service = CredibilityService(repository=CredibilityRepository())

	for index in range(10):
		await service.award_stamp("user-1", f"venue-{index}", "place", f"Venue {index}")

	profile = await service.get_user_credibility("user-1")
	assert profile.credibility_score == 10
	assert profile.rank is Rank.LOCAL


@pytest.mark.integration
async def test_check_in_count_creates_then_increments(postgres_pool):
	service = CredibilityService(repository=CredibilityRepository())

	created = await service.increment_check_in_count("user-1")
	again = await service.increment_check_in_count("user-1")

	assert (created.total_check_ins, created.credibility_score, created.rank) == (1, 0, Rank.EXPLORER)
	assert again.total_check_ins == 2


@pytest.mark.integration
async def test_leaderboard_orders_by_score(postgres_pool):
	service = CredibilityService(repository=CredibilityRepository())
	await service.update_user_credibility("user-low", 2)
	await service.update_user_credibility("user-high", 30)

	leaders = await service.get_leaderboard(10)

	assert [p.user_id for p in leaders] == ["user-high", "user-low"]
	assert leaders[0].rank is Rank.INSIDER
