import pytest
from httpx import AsyncClient

from pulse.api.deps import get_engagement_service
from pulse.domain.engagement.repo import AttendanceCounts, EventJoin
from pulse.domain.exceptions import NotFoundError, ValidationError
from pulse.main import app

USER = {"X-User-Id": "user-1"}


class _StubEngagement:
	async def join_event(self, user_id, event_id, *, display_name=None, avatar_url=None):
		if event_id == "missing":
			raise NotFoundError("event_not_found")
		return EventJoin(event_id=event_id, joined=True, going_count=4)

	async def leave_event(self, user_id, event_id, *, display_name=None, avatar_url=None):
		return EventJoin(event_id=event_id, joined=False, going_count=3)

	async def toggle_going(self, activity_id, user_id, is_currently_going):
		going = 0 if is_currently_going else 1
		return AttendanceCounts(activity_id=activity_id, going_count=going, interested_count=2)

	async def toggle_interested(self, activity_id, user_id, is_currently_interested):
		return AttendanceCounts(activity_id=activity_id, going_count=1, interested_count=3)

	async def create_user_activity(self, host, payload):
		if payload.end_time is not None and payload.end_time < payload.start_time:
			raise ValidationError("end_before_start")
		return "act-new"


@pytest.fixture(autouse=True)
def stub_engagement():
	service = _StubEngagement()
	app.dependency_overrides[get_engagement_service] = lambda: service
	yield service
	app.dependency_overrides.pop(get_engagement_service, None)


@pytest.mark.asyncio
async def test_join_event(api_client: AsyncClient) -> None:
	response = await api_client.post("/events/evt-1/join", headers=USER)

	assert response.status_code == 200
	assert response.json() == {"event_id": "evt-1", "joined": True, "going_count": 4}


@pytest.mark.asyncio
async def test_join_missing_event_maps_to_404(api_client: AsyncClient) -> None:
	response = await api_client.post("/events/missing/join", headers=USER)

	assert response.status_code == 404
	body = response.json()
	assert body["detail"] == "event_not_found"
	assert "request_id" in body


@pytest.mark.asyncio
async def test_leave_event(api_client: AsyncClient) -> None:
	response = await api_client.delete("/events/evt-1/join", headers=USER)

	assert response.status_code == 200
	assert response.json()["joined"] is False


@pytest.mark.asyncio
async def test_toggle_going(api_client: AsyncClient) -> None:
	response = await api_client.post(
		"/activities/act-1/going",
		json={"is_currently_going": True},
		headers=USER,
	)

	assert response.status_code == 200
	assert response.json() == {"activity_id": "act-1", "going_count": 0, "interested_count": 2}


@pytest.mark.asyncio
async def test_toggle_interested(api_client: AsyncClient) -> None:
	response = await api_client.post(
		"/activities/act-1/interested",
		json={"is_currently_interested": False},
		headers=USER,
	)

	assert response.status_code == 200
	assert response.json()["interested_count"] == 3


@pytest.mark.asyncio
async def test_create_activity(api_client: AsyncClient) -> None:
	response = await api_client.post(
		"/activities",
		json={"title": "Sunset swim", "start_time": "2024-06-11T16:00:00+03:00"},
		headers=USER,
	)

	assert response.status_code == 201
	assert response.json() == {"id": "act-new"}


@pytest.mark.asyncio
async def test_create_activity_rejects_inverted_span(api_client: AsyncClient) -> None:
	response = await api_client.post(
		"/activities",
		json={
			"title": "Backwards",
			"start_time": "2024-06-11T16:00:00+03:00",
			"end_time": "2024-06-11T15:00:00+03:00",
		},
		headers=USER,
	)

	assert response.status_code == 422
	assert response.json()["detail"] == "end_before_start"


@pytest.mark.asyncio
async def test_engagement_requires_identity(api_client: AsyncClient) -> None:
	response = await api_client.post("/events/evt-1/join")

	assert response.status_code == 401
