from __future__ import annotations

from pathlib import Path
from typing import AsyncIterator, Iterator

import asyncpg
import pytest
import pytest_asyncio

from pulse.infra import postgres

REPO_ROOT = Path(__file__).resolve().parents[3]
MIGRATIONS_DIR = REPO_ROOT / "infra" / "migrations"


@pytest.fixture(scope="module")
def postgres_container() -> Iterator["PostgresContainer"]:
	testcontainers = pytest.importorskip(
		"testcontainers.postgres",
		reason="testcontainers.postgres is required for integration tests",
	)
	container = testcontainers.PostgresContainer("postgres:16-alpine")
	try:
		container.start()
	except Exception as exc:  # pragma: no cover - environment without docker
		pytest.skip(f"unable to start postgres container: {exc}")
	try:
		yield container
	finally:
		container.stop()


async def _run_migrations(pool: asyncpg.Pool) -> None:
	async with pool.acquire() as conn:
		await conn.execute("DROP SCHEMA IF EXISTS public CASCADE")
		await conn.execute("CREATE SCHEMA public")
		await conn.execute("GRANT ALL ON SCHEMA public TO PUBLIC")
		for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
			await conn.execute(path.read_text(encoding="utf-8"))


@pytest_asyncio.fixture(scope="function")
async def postgres_pool(postgres_container) -> AsyncIterator[asyncpg.Pool]:
	url = postgres_container.get_connection_url().replace("postgresql+psycopg2", "postgresql")
	pool = await asyncpg.create_pool(dsn=url, min_size=1, max_size=4)
	await _run_migrations(pool)
	postgres.set_pool(pool)
	try:
		yield pool
	finally:
		postgres.set_pool(None)
		await pool.close()
