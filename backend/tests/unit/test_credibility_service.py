from datetime import datetime, timezone
from typing import Optional

import pytest

from pulse.domain.credibility.models import Rank, Stamp, StampOptions, UserCredibilityProfile
from pulse.domain.credibility.service import CredibilityService


class _FakeRepo:
	def __init__(self) -> None:
		self.stamps: list[Stamp] = []
		self.profiles: dict[str, UserCredibilityProfile] = {}

	async def has_stamp(self, user_id: str, venue_id: str) -> bool:
		return any(s.user_id == user_id and s.venue_id == venue_id for s in self.stamps)

	async def insert_stamp(self, **fields) -> str:
		stamp_id = f"stamp-{len(self.stamps) + 1}"
		self.stamps.append(Stamp(id=stamp_id, earned_at=datetime.now(timezone.utc), **fields))
		return stamp_id

	async def get_profile(self, user_id: str) -> Optional[UserCredibilityProfile]:
		profile = self.profiles.get(user_id)
		if profile is None:
			return None
		return UserCredibilityProfile(**vars(profile))

	async def put_profile(self, user_id: str, **fields) -> UserCredibilityProfile:
		self.profiles[user_id] = UserCredibilityProfile(user_id=user_id, **fields)
		return self.profiles[user_id]

	async def add_score(self, user_id: str, delta: int, rank: Rank) -> Optional[UserCredibilityProfile]:
		profile = self.profiles.get(user_id)
		if profile is None:
			return None
		profile.credibility_score += delta
		profile.total_stamps += 1
		profile.rank = rank
		return profile

	async def add_check_in(self, user_id: str) -> Optional[UserCredibilityProfile]:
		profile = self.profiles.get(user_id)
		if profile is None:
			return None
		profile.total_check_ins += 1
		return profile


@pytest.fixture
def repo() -> _FakeRepo:
	return _FakeRepo()


class _RecordingNotifier(list):
	async def emit_stamp_earned(self, *args, **kwargs) -> None:
		self.append(("stamp:earned", args, kwargs))

	async def emit_rank_up(self, *args, **kwargs) -> None:
		self.append(("rank:up", args, kwargs))


@pytest.fixture
def emitted() -> _RecordingNotifier:
	return _RecordingNotifier()


@pytest.mark.asyncio
async def test_award_stamp_is_idempotent_per_user_and_venue(repo: _FakeRepo, emitted) -> None:
	service = CredibilityService(repository=repo, notifier=emitted)

	first = await service.award_stamp("u1", "venue-1", "place", "Harbour Cafe")
	second = await service.award_stamp("u1", "venue-1", "place", "Harbour Cafe")

	assert first is not None
	assert second is None
	assert len(repo.stamps) == 1
	profile = repo.profiles["u1"]
	assert profile.credibility_score == 1
	assert profile.total_stamps == 1
	assert [name for name, *_ in emitted] == ["stamp:earned"]


@pytest.mark.asyncio
async def test_award_stamp_uses_default_icon_unless_given(repo: _FakeRepo, emitted) -> None:
	service = CredibilityService(repository=repo, notifier=emitted)

	await service.award_stamp("u1", "evt-1", "event", "Jazz Night")
	await service.award_stamp("u1", "place-1", "place", "Castle", StampOptions(icon="🏰", region="kyrenia"))

	assert repo.stamps[0].icon == "🎉"
	assert repo.stamps[1].icon == "🏰"
	assert repo.stamps[1].region == "kyrenia"


@pytest.mark.asyncio
async def test_first_update_creates_profile(repo: _FakeRepo, emitted) -> None:
	service = CredibilityService(repository=repo, notifier=emitted)

	profile = await service.update_user_credibility("new-user", 3)

	assert profile.credibility_score == 3
	assert profile.total_stamps == 1
	assert profile.total_check_ins == 0
	assert profile.rank is Rank.EXPLORER


@pytest.mark.asyncio
async def test_crossing_threshold_changes_rank_and_notifies(repo: _FakeRepo, emitted) -> None:
	repo.profiles["u1"] = UserCredibilityProfile(user_id="u1", credibility_score=9, total_stamps=9)
	service = CredibilityService(repository=repo, notifier=emitted)

	profile = await service.update_user_credibility("u1", 1)

	assert profile.credibility_score == 10
	assert profile.rank is Rank.LOCAL
	assert emitted == [("rank:up", ("u1", Rank.EXPLORER, Rank.LOCAL, 10), {})]


@pytest.mark.asyncio
async def test_increment_check_in_count_creates_explorer_profile(repo: _FakeRepo) -> None:
	service = CredibilityService(repository=repo)

	created = await service.increment_check_in_count("u1")
	again = await service.increment_check_in_count("u1")

	assert created.credibility_score == 0
	assert created.rank is Rank.EXPLORER
	assert again.total_check_ins == 2


@pytest.mark.asyncio
async def test_unknown_user_has_no_credibility(repo: _FakeRepo) -> None:
	service = CredibilityService(repository=repo)
	assert await service.get_user_credibility("nobody") is None


@pytest.mark.asyncio
async def test_awards_without_notifier(repo: _FakeRepo) -> None:
	repo.profiles["u1"] = UserCredibilityProfile(user_id="u1", credibility_score=9, total_stamps=9)
	service = CredibilityService(repository=repo)

	stamp = await service.award_stamp("u1", "venue-1", "place", "Harbour Cafe")

	assert stamp is not None
	assert repo.profiles["u1"].rank is Rank.LOCAL
