"""Full-snapshot subscription over active check-ins.

Every subscriber receives the complete active set (``expires_at`` descending)
once on subscribe and again after each recorded check-in. There are no deltas.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
import logging
from typing import Awaitable, Callable, Dict, Optional, Union

from pulse.domain.presence.ledger import LIVE_SCAN_LIMIT, TOPIC_CHECKIN_RECORDED, PresenceLedger
from pulse.domain.presence.models import CheckIn
from pulse.infra.events import EventBus, Unsubscribe
from pulse.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[list[CheckIn]], Union[None, Awaitable[None]]]


class PresenceHub:
	def __init__(self, ledger: PresenceLedger, bus: EventBus, *, limit: int = LIVE_SCAN_LIMIT) -> None:
		self._ledger = ledger
		self._bus = bus
		self._limit = limit
		self._listeners: Dict[int, SnapshotListener] = {}
		self._ids = itertools.count(1)
		self._bus_unsubscribe: Optional[Unsubscribe] = None

	def start(self) -> None:
		"""Begin listening for recorded check-ins on the bus."""
		if self._bus_unsubscribe is None:
			self._bus_unsubscribe = self._bus.subscribe(TOPIC_CHECKIN_RECORDED, self._on_recorded)

	def stop(self) -> None:
		if self._bus_unsubscribe is not None:
			self._bus_unsubscribe()
			self._bus_unsubscribe = None

	@property
	def subscriber_count(self) -> int:
		return len(self._listeners)

	async def subscribe(self, on_update: SnapshotListener) -> Unsubscribe:
		"""Register ``on_update`` and push the current snapshot to it immediately.

		If the initial snapshot cannot be read the registration is undone and
		the error propagates.
		"""
		self.start()
		token = next(self._ids)
		self._listeners[token] = on_update
		obs_metrics.PRESENCE_SUBSCRIBERS.inc()

		def _unsubscribe() -> None:
			if self._listeners.pop(token, None) is not None:
				obs_metrics.PRESENCE_SUBSCRIBERS.dec()

		try:
			snapshot = await self.snapshot()
		except Exception:
			_unsubscribe()
			raise
		await self._deliver(token, on_update, snapshot)
		return _unsubscribe

	async def snapshot(self) -> list[CheckIn]:
		return await self._ledger.active(self._limit)

	async def push(self) -> None:
		"""Send the current active set to every subscriber."""
		if not self._listeners:
			return
		snapshot = await self.snapshot()
		listeners = list(self._listeners.items())
		await asyncio.gather(*(self._deliver(token, listener, snapshot) for token, listener in listeners))

	async def _on_recorded(self, _check_in: CheckIn) -> None:
		await self.push()

	async def _deliver(self, token: int, listener: SnapshotListener, snapshot: list[CheckIn]) -> None:
		try:
			outcome = listener(list(snapshot))
			if inspect.isawaitable(outcome):
				await outcome
		except Exception:
			logger.exception("presence listener failed token=%s", token)
			return
		obs_metrics.PRESENCE_PUSHES.inc()


__all__ = ["PresenceHub", "SnapshotListener"]
