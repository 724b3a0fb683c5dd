"""Pydantic schemas for check-in endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from pulse.domain.catalog.models import VenueType
from pulse.domain.presence.models import CheckIn


class CheckInRequest(BaseModel):
	venue_id: str = Field(..., min_length=1, max_length=128)
	venue_type: VenueType = VenueType.PLACE


class CheckInResponse(BaseModel):
	id: str
	venue_id: str
	venue_type: str
	user_id: str
	user_display_name: Optional[str] = None
	user_avatar_url: Optional[str] = None
	recorded_at: datetime
	expires_at: datetime

	@classmethod
	def from_model(cls, check_in: CheckIn) -> "CheckInResponse":
		return cls(
			id=check_in.id,
			venue_id=check_in.venue_id,
			venue_type=check_in.venue_type,
			user_id=check_in.user_id,
			user_display_name=check_in.user_display_name,
			user_avatar_url=check_in.user_avatar_url,
			recorded_at=check_in.recorded_at,
			expires_at=check_in.expires_at,
		)


class CheckInCreated(BaseModel):
	check_in: CheckInResponse
	stamp_id: Optional[str] = None
