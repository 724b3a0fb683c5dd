"""Five-channel feed composition.

Channels are computed concurrently and independently; a channel that raises
degrades to an empty list and is reported in ``failed_channels``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Awaitable, Iterable, Optional, Sequence, TypeVar

from pulse.domain.catalog.client import CatalogClient
from pulse.domain.catalog.models import Listing
from pulse.domain.feed import policy
from pulse.domain.feed.models import (
	ConnectFeedResult,
	CuratedItem,
	FeedItemBase,
	ListingItem,
	LiveVenueView,
	TrendingVenueView,
	UserActivityItem,
)
from pulse.domain.feed.repo import FeedRepository
from pulse.domain.feed.windows import feed_status, today_window, week_window
from pulse.domain.presence.aggregator import PresenceAggregator
from pulse.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")
ItemT = TypeVar("ItemT", bound=FeedItemBase)


def curated_matches(region: Optional[str], item: CuratedItem) -> bool:
	"""Curated entries without a region match every region."""
	return not region or not item.region or item.region == region


def sort_by_start(items: Iterable[ItemT]) -> list[ItemT]:
	"""Ascending by start time; undated items first, in their original order."""
	return sorted(
		items,
		key=lambda item: (item.start_time is not None, item.start_time.timestamp() if item.start_time else 0.0),
	)


def with_status(items: Iterable[ItemT], now: Optional[datetime] = None) -> list[ItemT]:
	return [item.model_copy(update={"status": feed_status(item.start_time, item.end_time, now)}) for item in items]


def listing_item(listing: Listing) -> ListingItem:
	return ListingItem(
		id=listing.id,
		title=listing.title,
		description=listing.description,
		category=listing.category,
		region=listing.region,
		images=list(listing.images),
		address=listing.address,
		coordinates=listing.coordinates,
		venue_type=listing.type.value,
		rating=listing.rating,
		review_count=listing.review_count,
		badges=[policy.TOP_RATED_BADGE],
	)


class FeedComposer:
	def __init__(self, aggregator: PresenceAggregator, repository: FeedRepository, catalog: CatalogClient) -> None:
		self.aggregator = aggregator
		self.repo = repository
		self.catalog = catalog

	async def compose_feed(self, region: Optional[str] = None, *, now: Optional[datetime] = None) -> ConnectFeedResult:
		"""Build all five channels; never raises for a channel failure."""
		started = time.perf_counter()
		failed: list[str] = []
		live, today, week, trending, featured = await asyncio.gather(
			self._guard("live", self.live_now(region, now=now), failed),
			self._guard("today", self.today_items(region, now=now), failed),
			self._guard("week", self.week_items(region, now=now), failed),
			self._guard("trending", self.trending_items(region, now=now), failed),
			self._guard("featured", self.featured_items(region, now=now), failed),
		)
		obs_metrics.FEED_COMPOSE_LATENCY.observe(time.perf_counter() - started)
		return ConnectFeedResult(
			live_now=live,
			today_items=today,
			week_items=week,
			trending_items=trending,
			featured_items=featured,
			failed_channels=[channel for channel in policy.CHANNELS if channel in failed],
		)

	async def _guard(self, channel: str, work: Awaitable[Sequence[T]], failed: list[str]) -> list[T]:
		try:
			return list(await work)
		except Exception:
			logger.exception("feed channel failed channel=%s", channel)
			obs_metrics.inc_channel_failure(channel)
			failed.append(channel)
			return []

	async def live_now(self, region: Optional[str] = None, *, now: Optional[datetime] = None) -> list[LiveVenueView]:
		result = await self.aggregator.live_venues(region, now=now)
		return result.items

	async def today_items(self, region: Optional[str] = None, *, now: Optional[datetime] = None) -> list[FeedItemBase]:
		window = today_window(now)
		activities, events, curated = await asyncio.gather(
			self.repo.activities_starting_between(window.start, window.end, region=region),
			self.repo.events_starting_between(window.start, window.end, region=region),
			self.repo.curated("today", now=now),
		)
		items: list[FeedItemBase] = [*activities, *events]
		items.extend(item for item in curated if curated_matches(region, item))
		return sort_by_start(with_status(items, now))

	async def week_items(self, region: Optional[str] = None, *, now: Optional[datetime] = None) -> list[FeedItemBase]:
		window = week_window(now)
		events, curated = await asyncio.gather(
			self.repo.events_starting_between(window.start, window.end, region=region),
			self.repo.curated("week", now=now),
		)
		items: list[FeedItemBase] = [*events]
		items.extend(item for item in curated if curated_matches(region, item))
		return sort_by_start(with_status(items, now))

	async def trending_items(
		self,
		region: Optional[str] = None,
		*,
		now: Optional[datetime] = None,
	) -> list[TrendingVenueView]:
		result = await self.aggregator.trending(region, now=now)
		return result.items

	async def featured_items(self, region: Optional[str] = None, *, now: Optional[datetime] = None) -> list[FeedItemBase]:
		curated = [item for item in await self.repo.curated("featured", now=now) if curated_matches(region, item)]
		items: list[FeedItemBase] = with_status(curated[: policy.FEATURED_LIMIT], now)
		if len(items) >= policy.FEATURED_LIMIT:
			return items
		listings = await self.catalog.list_listings(region=region, limit=policy.FEATURED_LIMIT)
		top_rated = [listing for listing in listings if (listing.rating or 0) >= policy.FEATURED_MIN_RATING]
		items.extend(listing_item(listing) for listing in top_rated[: policy.FEATURED_LIMIT - len(items)])
		return items

	async def quick_activities(
		self,
		region: Optional[str] = None,
		*,
		now: Optional[datetime] = None,
	) -> list[UserActivityItem]:
		window = today_window(now)
		activities = await self.repo.activities_starting_between(window.start, window.end, region=region)
		return sort_by_start(with_status(activities, now))


__all__ = ["FeedComposer", "curated_matches", "listing_item", "sort_by_start", "with_status"]
