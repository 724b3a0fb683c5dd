"""Socket.IO namespace for stamp and rank notifications."""

from __future__ import annotations

from typing import Dict, Optional, Protocol

import socketio

from pulse.domain.credibility.models import Rank
from pulse.obs import metrics as obs_metrics


class CredibilityNotifier(Protocol):
    async def emit_stamp_earned(
        self,
        user_id: str,
        *,
        stamp_id: str,
        venue_id: str,
        venue_type: str,
        venue_name: str,
        icon: str,
    ) -> None:
        ...

    async def emit_rank_up(self, user_id: str, previous: Rank, current: Rank, score: int) -> None:
        ...


class CredibilityNamespace(socketio.AsyncNamespace):
    """Per-user rooms on ``/credibility``."""

    def __init__(self) -> None:
        super().__init__("/credibility")
        self._users: Dict[str, str] = {}

    async def on_connect(self, sid: str, environ: dict, auth: Optional[dict] = None) -> None:
        try:
            user_id = self._get_user_id(environ, auth)
        except ValueError:
            raise ConnectionRefusedError("unauthorized") from None
        self._users[sid] = user_id
        obs_metrics.socket_connected(self.namespace)
        await self.enter_room(sid, self.user_room(user_id))

    async def on_disconnect(self, sid: str) -> None:
        user_id = self._users.pop(sid, None)
        if user_id:
            obs_metrics.socket_disconnected(self.namespace)
            await self.leave_room(sid, self.user_room(user_id))

    def _get_user_id(self, environ: dict, auth: Optional[dict]) -> str:
        scope = environ.get("asgi.scope", environ)
        auth_payload = auth or scope.get("auth") or {}
        user_id = auth_payload.get("userId") or auth_payload.get("user_id")
        if not user_id:
            user_id = _header(scope, "x-user-id")
        if not user_id:
            raise ValueError("missing_user_id")
        return str(user_id)

    @staticmethod
    def user_room(user_id: str) -> str:
        return f"user:{user_id}"

    async def emit_stamp_earned(
        self,
        user_id: str,
        *,
        stamp_id: str,
        venue_id: str,
        venue_type: str,
        venue_name: str,
        icon: str,
    ) -> None:
        payload = {
            "stamp_id": stamp_id,
            "venue_id": venue_id,
            "venue_type": venue_type,
            "venue_name": venue_name,
            "icon": icon,
        }
        await self.emit("stamp:earned", payload, room=self.user_room(user_id))

    async def emit_rank_up(self, user_id: str, previous: Rank, current: Rank, score: int) -> None:
        payload = {"previous_rank": previous.value, "rank": current.value, "credibility_score": score}
        await self.emit("rank:up", payload, room=self.user_room(user_id))


def _header(scope: dict, name: str) -> Optional[str]:
    target = name.encode().lower()
    for key, value in scope.get("headers", []):
        if key.lower() == target:
            return value.decode()
    return None
