"""Live and trending venue views built from the presence ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

from pulse.domain.catalog.client import CatalogClient
from pulse.domain.catalog.hydration import HydrationResult, resolve_many
from pulse.domain.feed import policy
from pulse.domain.feed.models import CheckInSummary, LiveVenueView, TrendingVenueView
from pulse.domain.presence.ledger import LIVE_SCAN_LIMIT, TRENDING_SCAN_LIMIT, PresenceLedger
from pulse.domain.presence.models import CheckIn

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VenueGroup:
	venue_id: str
	venue_type: str
	count: int = 0
	recent: list[CheckIn] = field(default_factory=list)


def group_by_venue(check_ins: Iterable[CheckIn], *, recent_limit: int = policy.RECENT_CHECK_INS_PER_VENUE) -> list[VenueGroup]:
	"""Group check-ins by venue in first-seen order.

	The first check-in seen fixes the group's ``venue_type``; ``recent`` keeps
	the first ``recent_limit`` check-ins in input order.
	"""
	groups: dict[str, VenueGroup] = {}
	for check_in in check_ins:
		group = groups.get(check_in.venue_id)
		if group is None:
			group = VenueGroup(venue_id=check_in.venue_id, venue_type=check_in.venue_type)
			groups[check_in.venue_id] = group
		group.count += 1
		if len(group.recent) < recent_limit:
			group.recent.append(check_in)
	return list(groups.values())


def _summary(check_in: CheckIn) -> CheckInSummary:
	return CheckInSummary(
		id=check_in.id,
		user_id=check_in.user_id,
		user_display_name=check_in.user_display_name,
		user_avatar_url=check_in.user_avatar_url,
		recorded_at=check_in.recorded_at,
		expires_at=check_in.expires_at,
	)


def _region_matches(region: Optional[str], candidate: Optional[str]) -> bool:
	return not region or candidate == region


class PresenceAggregator:
	def __init__(self, ledger: PresenceLedger, catalog: CatalogClient) -> None:
		self._ledger = ledger
		self._catalog = catalog

	async def live_venues(
		self,
		region: Optional[str] = None,
		*,
		now: Optional[datetime] = None,
	) -> HydrationResult[LiveVenueView]:
		check_ins = await self._ledger.active(LIVE_SCAN_LIMIT, now=now)
		groups = group_by_venue(check_ins)
		resolutions = await resolve_many(self._catalog, [(g.venue_id, g.venue_type) for g in groups])
		result: HydrationResult[LiveVenueView] = HydrationResult()
		for group, resolution in zip(groups, resolutions):
			if resolution.skipped is not None:
				result.skipped.append(resolution.skipped)
				continue
			meta = resolution.metadata
			if not _region_matches(region, meta.region):
				continue
			badges = [policy.HOT_SPOT_BADGE] if group.count >= policy.HOT_SPOT_THRESHOLD else []
			result.items.append(
				LiveVenueView(
					venue_id=group.venue_id,
					venue_type=group.venue_type,
					title=meta.title,
					category=meta.category,
					region=meta.region,
					coordinates=meta.coordinates,
					images=list(meta.images),
					check_in_count=group.count,
					recent_check_ins=[_summary(c) for c in group.recent],
					badges=badges,
				)
			)
		result.items.sort(key=lambda view: view.check_in_count, reverse=True)
		return result

	async def trending(
		self,
		region: Optional[str] = None,
		*,
		now: Optional[datetime] = None,
	) -> HydrationResult[TrendingVenueView]:
		now = now or datetime.now(timezone.utc)
		check_ins = await self._ledger.active_since(now - policy.TRENDING_LOOKBACK, TRENDING_SCAN_LIMIT)
		groups = [g for g in group_by_venue(check_ins) if g.count >= policy.TRENDING_MIN_CHECK_INS]
		resolutions = await resolve_many(self._catalog, [(g.venue_id, g.venue_type) for g in groups])
		result: HydrationResult[TrendingVenueView] = HydrationResult()
		for group, resolution in zip(groups, resolutions):
			if resolution.skipped is not None:
				result.skipped.append(resolution.skipped)
				continue
			meta = resolution.metadata
			if not _region_matches(region, meta.region):
				continue
			badges = [policy.HOT_RIGHT_NOW_BADGE] if group.count >= policy.HOT_RIGHT_NOW_THRESHOLD else []
			result.items.append(
				TrendingVenueView(
					venue_id=group.venue_id,
					venue_type=group.venue_type,
					title=meta.title,
					category=meta.category,
					region=meta.region,
					coordinates=meta.coordinates,
					images=list(meta.images),
					address=meta.address,
					rating=meta.rating,
					heat_score=policy.heat_score(group.count, meta.review_count),
					recent_check_ins=group.count,
					recent_reviews=meta.review_count,
					badges=badges,
				)
			)
		result.items.sort(key=lambda view: view.heat_score, reverse=True)
		del result.items[policy.TRENDING_LIMIT:]
		return result


__all__ = ["PresenceAggregator", "VenueGroup", "group_by_venue"]
