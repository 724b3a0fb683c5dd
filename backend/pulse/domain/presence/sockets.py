"""Socket.IO namespace streaming active check-in snapshots."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import socketio

from pulse.domain.presence.hub import PresenceHub
from pulse.domain.presence.models import CheckIn
from pulse.domain.presence.schemas import CheckInResponse
from pulse.infra.events import Unsubscribe
from pulse.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

SNAPSHOT_EVENT = "checkins:snapshot"


def snapshot_payload(check_ins: list[CheckIn]) -> dict:
	return {
		"items": [CheckInResponse.from_model(item).model_dump(mode="json") for item in check_ins],
		"count": len(check_ins),
	}


class CheckInsNamespace(socketio.AsyncNamespace):
	"""One hub subscription per connected sid on ``/checkins``."""

	def __init__(self, hub: PresenceHub) -> None:
		super().__init__("/checkins")
		self._hub = hub
		self._subscriptions: Dict[str, Unsubscribe] = {}

	async def on_connect(self, sid: str, environ: dict, auth: Optional[dict] = None) -> None:
		async def _push(check_ins: list[CheckIn]) -> None:
			await self.emit(SNAPSHOT_EVENT, snapshot_payload(check_ins), to=sid)

		self._subscriptions[sid] = await self._hub.subscribe(_push)
		obs_metrics.socket_connected(self.namespace)
		logger.debug("checkins subscriber connected sid=%s", sid)

	async def on_disconnect(self, sid: str) -> None:
		unsubscribe = self._subscriptions.pop(sid, None)
		if unsubscribe is not None:
			unsubscribe()
			obs_metrics.socket_disconnected(self.namespace)

	async def on_refresh(self, sid: str, data: Optional[dict] = None) -> None:
		"""Client-initiated resend of the current snapshot."""
		check_ins = await self._hub.snapshot()
		await self.emit(SNAPSHOT_EVENT, snapshot_payload(check_ins), to=sid)


__all__ = ["CheckInsNamespace", "SNAPSHOT_EVENT", "snapshot_payload"]
