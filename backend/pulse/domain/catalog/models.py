"""Venue metadata shapes returned by the external catalog service."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VenueType(str, Enum):
	"""Kinds of visitable entities a check-in can point at."""

	PLACE = "place"
	EVENT = "event"
	ACTIVITY = "activity"
	EXPERIENCE = "experience"


class Coordinates(BaseModel):
	lat: float
	lng: float


class VenueMetadata(BaseModel):
	"""Display metadata resolved for a single ``(venue_id, venue_type)``."""

	title: str
	category: Optional[str] = None
	region: Optional[str] = None
	images: list[str] = Field(default_factory=list)
	coordinates: Optional[Coordinates] = None
	address: Optional[str] = None
	rating: Optional[float] = None
	review_count: int = 0

	model_config = ConfigDict(extra="ignore")


class Listing(VenueMetadata):
	"""A catalog listing as returned by the browse endpoint."""

	id: str
	type: VenueType = VenueType.PLACE
	description: Optional[str] = None
