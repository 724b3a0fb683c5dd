import pytest
from httpx import AsyncClient

from pulse.settings import settings


@pytest.fixture
def metrics_settings():
	original_public = settings.obs_metrics_public
	original_token = settings.obs_admin_token
	try:
		yield settings
	finally:
		settings.obs_metrics_public = original_public
		settings.obs_admin_token = original_token


@pytest.mark.asyncio
async def test_liveness(api_client: AsyncClient) -> None:
	response = await api_client.get("/health/live")

	assert response.status_code == 200
	assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_metrics_forbidden_without_token(api_client: AsyncClient, metrics_settings) -> None:
	metrics_settings.obs_metrics_public = False
	metrics_settings.obs_admin_token = "secret"

	response = await api_client.get("/metrics")

	assert response.status_code == 403


@pytest.mark.asyncio
async def test_metrics_fail_closed_without_configured_token(api_client: AsyncClient, metrics_settings) -> None:
	metrics_settings.obs_metrics_public = False
	metrics_settings.obs_admin_token = None

	response = await api_client.get("/metrics", headers={"X-Admin-Token": "anything"})

	assert response.status_code == 403
	assert response.json()["detail"] == "admin_token_not_configured"


@pytest.mark.asyncio
async def test_metrics_with_bearer_token(api_client: AsyncClient, metrics_settings) -> None:
	metrics_settings.obs_metrics_public = False
	metrics_settings.obs_admin_token = "secret"

	response = await api_client.get("/metrics", headers={"Authorization": "Bearer secret"})

	assert response.status_code == 200
	assert "pulse_checkins_recorded" in response.text
