"""Caller identity for FastAPI endpoints.

Authentication happens upstream; the gateway forwards the verified user as
X-User-* headers and this module only turns them into an AuthenticatedUser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException, status


@dataclass(slots=True)
class AuthenticatedUser:
	id: str
	display_name: Optional[str] = None
	avatar_url: Optional[str] = None


async def get_current_user(
	x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
	x_user_name: Optional[str] = Header(default=None, alias="X-User-Name"),
	x_user_avatar: Optional[str] = Header(default=None, alias="X-User-Avatar"),
) -> AuthenticatedUser:
	user_id = (x_user_id or "").strip()
	if not user_id:
		raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="missing_identity")
	return AuthenticatedUser(
		id=user_id,
		display_name=(x_user_name or "").strip() or None,
		avatar_url=(x_user_avatar or "").strip() or None,
	)
