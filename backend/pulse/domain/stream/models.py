"""Items of the recent activity stream."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict

StreamItemType = Literal["checkin", "join", "leave"]


class StreamItem(BaseModel):
	"""One thing a user did: checked in somewhere, joined or left an event.

	Check-in items carry the check-in's ``expires_at`` and drop out of the
	stream once it passes; join and leave items never expire.
	"""

	id: str
	type: StreamItemType
	user_id: str
	user_display_name: Optional[str] = None
	user_avatar_url: Optional[str] = None
	target_id: Optional[str] = None
	target_type: Optional[str] = None
	target_title: Optional[str] = None
	region: Optional[str] = None
	ref_id: str
	created_at: datetime
	expires_at: Optional[datetime] = None

	model_config = ConfigDict(extra="ignore")

	@classmethod
	def from_row(cls, row: Mapping[str, Any]) -> "StreamItem":
		return cls(**dict(row))


__all__ = ["StreamItem", "StreamItemType"]
