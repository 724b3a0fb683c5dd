"""Liveness and readiness probes.

Readiness gates on Redis (the presence ledger) and Postgres (credibility,
feed sources, attendance) plus the applied schema version. The catalog is
not probed: venue lookups already degrade per item.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from time import perf_counter
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from pulse.domain.presence.ledger import BY_EXPIRY_KEY
from pulse.infra import postgres
from pulse.infra.redis import redis_client
from pulse.obs import metrics
from pulse.settings import settings

LOGGER = logging.getLogger(__name__)


async def _probe(name: str, work: Callable[[], Awaitable[Any]], timeout: float) -> Tuple[Dict[str, Any], Any]:
	start = perf_counter()
	try:
		value = await asyncio.wait_for(work(), timeout=timeout)
	except Exception as exc:  # pragma: no cover - depends on runtime
		LOGGER.warning("%s readiness probe failed", name, exc_info=True)
		return {"ok": False, "error": str(exc)}, None
	return {"ok": True, "latency_ms": round((perf_counter() - start) * 1000, 2)}, value


async def _redis_status(timeout: float = 0.2) -> Dict[str, Any]:
	now_ms = int(datetime.now(timezone.utc).timestamp() * 1000)

	async def _work() -> int:
		await redis_client.ping()
		return await redis_client.zcount(BY_EXPIRY_KEY, f"({now_ms}", "+inf")

	state, active = await _probe("redis", _work, timeout)
	metrics.mark_redis(state["ok"])
	if state["ok"]:
		state["active_check_ins"] = int(active or 0)
	return state


async def _postgres_status(timeout: float = 0.3) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
	async def _work() -> Optional[str]:
		pool = await postgres.get_pool()
		async with pool.acquire() as conn:
			return await conn.fetchval("SELECT version FROM schema_migrations ORDER BY version DESC LIMIT 1")

	state, version = await _probe("postgres", _work, timeout)
	metrics.mark_postgres(state["ok"])
	if not state["ok"]:
		return state, None
	return state, _migration_status(version, settings.health_min_migration)


def _migration_status(version: Optional[str], min_version: str) -> Dict[str, Any]:
	if version is None:
		return {"ok": False, "error": "no_migrations"}
	current = str(version)
	return {"ok": current >= min_version, "version": current, "required": min_version}


async def liveness() -> Dict[str, Any]:
	return {"status": "ok"}


async def readiness() -> Tuple[int, Dict[str, Any]]:
	redis_state, (postgres_state, migration_state) = await asyncio.gather(_redis_status(), _postgres_status())
	migration_state = migration_state or {"ok": False, "error": "pool_unavailable"}
	ok = bool(redis_state["ok"] and postgres_state["ok"] and migration_state["ok"])
	return (
		200 if ok else 503,
		{
			"status": "ok" if ok else "degraded",
			"checks": {
				"redis": redis_state,
				"postgres": postgres_state,
				"migrations": migration_state,
			},
		},
	)
