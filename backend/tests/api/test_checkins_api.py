from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from pulse.api.deps import get_checkin_service
from pulse.domain.presence.models import CheckIn
from pulse.domain.presence.service import CheckInOutcome
from pulse.main import app

RECORDED = datetime(2024, 6, 11, 9, 0, tzinfo=timezone.utc)


def _check_in(user_id: str, venue_id: str, venue_type: str = "place") -> CheckIn:
	return CheckIn.new(
		id="01HZZCHECKIN",
		venue_id=venue_id,
		venue_type=venue_type,
		user_id=user_id,
		recorded_at=RECORDED,
		window=timedelta(hours=3),
	)


class _StubCheckInService:
	def __init__(self) -> None:
		self.calls: list[tuple[str, str, str]] = []

	async def check_in(self, user, venue_id, venue_type):
		self.calls.append((user.id, venue_id, venue_type.value))
		return CheckInOutcome(check_in=_check_in(user.id, venue_id, venue_type.value), stamp_id="stamp-1")

	async def active(self, limit=100):
		return [_check_in("user-2", "venue-1")]

	async def my_check_ins(self, user_id, limit=5):
		return [_check_in(user_id, "venue-3")][:limit]


@pytest.fixture
def stub_service():
	service = _StubCheckInService()
	app.dependency_overrides[get_checkin_service] = lambda: service
	yield service
	app.dependency_overrides.pop(get_checkin_service, None)


@pytest.mark.asyncio
async def test_create_check_in(api_client: AsyncClient, stub_service) -> None:
	response = await api_client.post(
		"/checkins",
		json={"venue_id": "venue-1", "venue_type": "event"},
		headers={"X-User-Id": "user-1", "X-User-Name": "Ana"},
	)

	assert response.status_code == 201
	body = response.json()
	assert body["stamp_id"] == "stamp-1"
	assert body["check_in"]["venue_id"] == "venue-1"
	assert body["check_in"]["venue_type"] == "event"
	assert stub_service.calls == [("user-1", "venue-1", "event")]


@pytest.mark.asyncio
async def test_venue_type_defaults_to_place(api_client: AsyncClient, stub_service) -> None:
	response = await api_client.post("/checkins", json={"venue_id": "venue-1"}, headers={"X-User-Id": "user-1"})

	assert response.status_code == 201
	assert stub_service.calls[0][2] == "place"


@pytest.mark.asyncio
async def test_create_check_in_requires_identity(api_client: AsyncClient, stub_service) -> None:
	response = await api_client.post("/checkins", json={"venue_id": "venue-1"})

	assert response.status_code == 401
	assert response.json()["detail"] == "missing_identity"
	assert stub_service.calls == []


@pytest.mark.asyncio
async def test_unknown_venue_type_is_rejected(api_client: AsyncClient, stub_service) -> None:
	response = await api_client.post(
		"/checkins",
		json={"venue_id": "venue-1", "venue_type": "spaceship"},
		headers={"X-User-Id": "user-1"},
	)

	assert response.status_code == 422
	assert response.json()["detail"] == "validation_error"


@pytest.mark.asyncio
async def test_active_and_mine(api_client: AsyncClient, stub_service) -> None:
	active = await api_client.get("/checkins/active")
	mine = await api_client.get("/checkins/me", headers={"X-User-Id": "user-1"})

	assert active.status_code == 200
	assert [item["user_id"] for item in active.json()] == ["user-2"]
	assert mine.status_code == 200
	assert mine.json()[0]["venue_id"] == "venue-3"
