"""Feed item variants and aggregated venue views."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from pulse.domain.catalog.models import Coordinates, VenueType

FeedStatus = Literal["upcoming", "live", "ended"]
FeedSection = Literal["today", "week", "featured"]


class FeedItemBase(BaseModel):
	id: str
	title: str
	description: Optional[str] = None
	category: Optional[str] = None
	region: Optional[str] = None
	start_time: Optional[datetime] = None
	end_time: Optional[datetime] = None
	images: list[str] = Field(default_factory=list)
	address: Optional[str] = None
	coordinates: Optional[Coordinates] = None
	status: FeedStatus = "upcoming"
	badges: list[str] = Field(default_factory=list)

	model_config = ConfigDict(extra="ignore")


class UserActivityItem(FeedItemBase):
	type: Literal["userActivity"] = "userActivity"
	host_user_id: Optional[str] = None
	host_name: Optional[str] = None
	host_avatar_url: Optional[str] = None
	visibility: str = "public"
	going_count: int = 0
	interested_count: int = 0
	all_day: bool = False


class EventItem(FeedItemBase):
	type: Literal["event"] = "event"
	venue_name: Optional[str] = None
	going_count: int = 0
	price: Optional[float] = None


class CuratedItem(FeedItemBase):
	type: Literal["curated"] = "curated"
	section: FeedSection
	priority: int = 0
	link_url: Optional[str] = None
	target_id: Optional[str] = None


class ListingItem(FeedItemBase):
	type: Literal["listing"] = "listing"
	venue_type: str = "place"
	rating: Optional[float] = None
	review_count: int = 0


FeedItem = Annotated[
	Union[UserActivityItem, EventItem, CuratedItem, ListingItem],
	Field(discriminator="type"),
]


class CheckInSummary(BaseModel):
	"""Compact check-in shown on a live venue card."""

	id: str
	user_id: str
	user_display_name: Optional[str] = None
	user_avatar_url: Optional[str] = None
	recorded_at: datetime
	expires_at: datetime


class LiveVenueView(BaseModel):
	venue_id: str
	venue_type: str
	title: str
	category: Optional[str] = None
	region: Optional[str] = None
	coordinates: Optional[Coordinates] = None
	images: list[str] = Field(default_factory=list)
	check_in_count: int
	recent_check_ins: list[CheckInSummary] = Field(default_factory=list)
	badges: list[str] = Field(default_factory=list)


class TrendingVenueView(BaseModel):
	venue_id: str
	venue_type: str
	title: str
	category: Optional[str] = None
	region: Optional[str] = None
	coordinates: Optional[Coordinates] = None
	images: list[str] = Field(default_factory=list)
	address: Optional[str] = None
	rating: Optional[float] = None
	heat_score: int
	recent_check_ins: int
	recent_reviews: int
	badges: list[str] = Field(default_factory=list)


class ConnectFeedResult(BaseModel):
	"""The five feed channels; a degraded channel is an empty list, never null."""

	live_now: list[LiveVenueView] = Field(default_factory=list)
	today_items: list[FeedItem] = Field(default_factory=list)
	week_items: list[FeedItem] = Field(default_factory=list)
	trending_items: list[TrendingVenueView] = Field(default_factory=list)
	featured_items: list[FeedItem] = Field(default_factory=list)
	failed_channels: list[str] = Field(default_factory=list)


class CurationEntry(CuratedItem):
	"""A curated entry as administered, including its schedule and audit fields."""

	enabled: bool = True
	starts_at: Optional[datetime] = None
	ends_at: Optional[datetime] = None
	created_by: Optional[str] = None
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None


class CurationUpsert(BaseModel):
	"""Admin payload for creating or replacing the curated entry of a target."""

	section: FeedSection
	title: Optional[str] = Field(default=None, min_length=1, max_length=140)
	target_type: Optional[VenueType] = None
	description: Optional[str] = Field(default=None, max_length=4000)
	category: Optional[str] = None
	region: Optional[str] = None
	start_time: Optional[datetime] = None
	end_time: Optional[datetime] = None
	images: list[str] = Field(default_factory=list, max_length=5)
	link_url: Optional[str] = None
	priority: int = 0
	enabled: bool = True
	starts_at: Optional[datetime] = None
	ends_at: Optional[datetime] = None


__all__ = [
	"CheckInSummary",
	"ConnectFeedResult",
	"CuratedItem",
	"CurationEntry",
	"CurationUpsert",
	"EventItem",
	"FeedItem",
	"FeedItemBase",
	"FeedSection",
	"FeedStatus",
	"ListingItem",
	"LiveVenueView",
	"TrendingVenueView",
	"UserActivityItem",
]
