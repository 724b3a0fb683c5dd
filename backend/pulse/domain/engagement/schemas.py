"""Pydantic schemas for engagement endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Visibility = Literal["public", "friends", "private"]


class CreateActivityRequest(BaseModel):
	"""A user-hosted activity as submitted by the client."""

	title: str = Field(..., min_length=1, max_length=140)
	description: Optional[str] = Field(default=None, max_length=4000)
	category: Optional[str] = None
	region: Optional[str] = None
	listing_id: Optional[str] = None
	listing_title: Optional[str] = None
	freeform_location: Optional[str] = None
	lat: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
	lng: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
	start_time: datetime
	end_time: Optional[datetime] = None
	all_day: bool = False
	images: list[str] = Field(default_factory=list, max_length=3)
	cover_image: Optional[str] = None
	visibility: Optional[Visibility] = None


class ActivityCreated(BaseModel):
	id: str


class ToggleGoingRequest(BaseModel):
	is_currently_going: bool


class ToggleInterestedRequest(BaseModel):
	is_currently_interested: bool


class AttendanceResponse(BaseModel):
	activity_id: str
	going_count: int
	interested_count: int


class EventJoinResponse(BaseModel):
	event_id: str
	joined: bool
	going_count: int
