import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from fakeredis.aioredis import FakeRedis

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from pulse.infra import postgres
from pulse.main import app
from pulse.settings import settings


@pytest_asyncio.fixture(autouse=True)
async def fake_redis():
	from pulse.infra.redis import redis_client, set_redis_client

	original = redis_client.client
	client = FakeRedis(decode_responses=True)
	set_redis_client(client)
	try:
		yield client
	finally:
		set_redis_client(original)
		await client.flushall()


@pytest.fixture(autouse=True)
def patch_postgres(monkeypatch):
	async def _noop():
		return None

	monkeypatch.setattr(postgres, "init_pool", _noop)
	monkeypatch.setattr(postgres, "close_pool", _noop)


@pytest.fixture(autouse=True)
def force_test_settings():
	original_env = settings.environment
	original_tz = settings.feed_timezone
	settings.environment = "dev"
	settings.feed_timezone = "Europe/Nicosia"
	try:
		yield
	finally:
		settings.environment = original_env
		settings.feed_timezone = original_tz


@pytest.fixture
def fixed_now():
	return datetime(2024, 6, 11, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
