import pytest
from httpx import AsyncClient

from pulse.api.deps import get_feed_composer
from pulse.domain.feed.models import ConnectFeedResult, CuratedItem, LiveVenueView
from pulse.main import app


class _StubComposer:
	def __init__(self) -> None:
		self.regions: list = []

	async def compose_feed(self, region=None, *, now=None):
		self.regions.append(region)
		return ConnectFeedResult(
			live_now=[LiveVenueView(venue_id="v1", venue_type="place", title="Harbour", check_in_count=6, badges=["Hot Spot"])],
			today_items=[CuratedItem(id="c1", title="Street food", section="today")],
			failed_channels=["trending"],
		)

	async def featured_items(self, region=None, *, now=None):
		return [CuratedItem(id="c2", title="Museum night", section="featured")]


@pytest.fixture
def stub_composer():
	composer = _StubComposer()
	app.dependency_overrides[get_feed_composer] = lambda: composer
	yield composer
	app.dependency_overrides.pop(get_feed_composer, None)


@pytest.mark.asyncio
async def test_feed_returns_all_channels(api_client: AsyncClient, stub_composer) -> None:
	response = await api_client.get("/feed", params={"region": "kyrenia"})

	assert response.status_code == 200
	body = response.json()
	for key in ("live_now", "today_items", "week_items", "trending_items", "featured_items"):
		assert isinstance(body[key], list)
	assert body["live_now"][0]["badges"] == ["Hot Spot"]
	assert body["today_items"][0]["type"] == "curated"
	assert body["failed_channels"] == ["trending"]
	assert stub_composer.regions == ["kyrenia"]


@pytest.mark.asyncio
async def test_single_channel_endpoint(api_client: AsyncClient, stub_composer) -> None:
	response = await api_client.get("/feed/featured")

	assert response.status_code == 200
	assert [item["id"] for item in response.json()] == ["c2"]
