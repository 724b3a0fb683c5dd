from dataclasses import replace
from unittest.mock import AsyncMock

import pytest
import socketio

from pulse.domain.credibility.models import Rank, UserCredibilityProfile
from pulse.domain.credibility.service import CredibilityService
from pulse.domain.credibility.sockets import CredibilityNamespace


@pytest.fixture
def namespace():
	server = socketio.AsyncServer(async_mode="asgi")
	ns = CredibilityNamespace()
	server.register_namespace(ns)
	ns.emit = AsyncMock()
	ns.enter_room = AsyncMock()
	ns.leave_room = AsyncMock()
	return ns


@pytest.mark.asyncio
async def test_connect_requires_user(namespace) -> None:
	with pytest.raises(ConnectionRefusedError):
		await namespace.trigger_event("connect", "sid-1", {"asgi.scope": {"headers": []}})


@pytest.mark.asyncio
async def test_connect_joins_user_room_from_header(namespace) -> None:
	scope = {"headers": [(b"x-user-id", b"user-1")]}

	await namespace.trigger_event("connect", "sid-1", {"asgi.scope": scope})

	namespace.enter_room.assert_awaited_once_with("sid-1", "user:user-1")


@pytest.mark.asyncio
async def test_emitters_target_user_room(namespace) -> None:
	await namespace.emit_stamp_earned(
		"user-1",
		stamp_id="stamp-1",
		venue_id="venue-1",
		venue_type="place",
		venue_name="Old Harbour",
		icon="📍",
	)
	await namespace.emit_rank_up("user-1", Rank.EXPLORER, Rank.LOCAL, 10)

	first, second = namespace.emit.await_args_list
	assert first.args[0] == "stamp:earned"
	assert first.args[1]["venue_name"] == "Old Harbour"
	assert first.kwargs["room"] == "user:user-1"
	assert second.args[0] == "rank:up"
	assert second.args[1] == {"previous_rank": "Explorer", "rank": "Local", "credibility_score": 10}
	assert second.kwargs["room"] == "user:user-1"


@pytest.mark.asyncio
async def test_service_notifies_through_namespace(namespace) -> None:
	profile = UserCredibilityProfile(user_id="user-1", credibility_score=9, total_stamps=9, rank=Rank.EXPLORER)

	class _Repo:
		async def has_stamp(self, user_id, venue_id):
			return False

		async def insert_stamp(self, **fields):
			return "stamp-1"

		async def get_profile(self, user_id):
			return profile

		async def add_score(self, user_id, delta, rank):
			return replace(profile, credibility_score=profile.credibility_score + delta, rank=rank)

	service = CredibilityService(repository=_Repo(), notifier=namespace)

	await service.award_stamp("user-1", "venue-1", "place", "Old Harbour")

	events = [call.args[0] for call in namespace.emit.await_args_list]
	assert events == ["rank:up", "stamp:earned"]
