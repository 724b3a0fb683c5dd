"""Best-effort venue hydration.

Each venue is resolved independently; a lookup that raises or comes back empty
turns into a ``SkippedVenue`` instead of aborting the surrounding aggregation.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Generic, Literal, Optional, Sequence, TypeVar

from pulse.domain.catalog.client import CatalogClient
from pulse.domain.catalog.models import VenueMetadata, VenueType
from pulse.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

SkipReason = Literal["not_found", "lookup_failed"]


@dataclass(slots=True)
class SkippedVenue:
	venue_id: str
	venue_type: str
	reason: SkipReason
	error: Optional[str] = None


@dataclass(slots=True)
class Resolution:
	"""Outcome of one catalog lookup: metadata on success, a skip otherwise."""

	venue_id: str
	venue_type: str
	metadata: Optional[VenueMetadata] = None
	skipped: Optional[SkippedVenue] = None

	@property
	def ok(self) -> bool:
		return self.metadata is not None


@dataclass
class HydrationResult(Generic[T]):
	items: list[T] = field(default_factory=list)
	skipped: list[SkippedVenue] = field(default_factory=list)


async def resolve_one(catalog: CatalogClient, venue_id: str, venue_type: VenueType | str) -> Resolution:
	kind = venue_type.value if isinstance(venue_type, VenueType) else str(venue_type)
	try:
		metadata = await catalog.resolve_venue(venue_id, venue_type)
	except Exception as exc:
		logger.warning("venue lookup failed venue_id=%s type=%s", venue_id, kind, exc_info=True)
		obs_metrics.inc_hydration_skipped("lookup_failed")
		return Resolution(
			venue_id=venue_id,
			venue_type=kind,
			skipped=SkippedVenue(venue_id=venue_id, venue_type=kind, reason="lookup_failed", error=repr(exc)),
		)
	if metadata is None:
		logger.warning("venue not found in catalog venue_id=%s type=%s", venue_id, kind)
		obs_metrics.inc_hydration_skipped("not_found")
		return Resolution(
			venue_id=venue_id,
			venue_type=kind,
			skipped=SkippedVenue(venue_id=venue_id, venue_type=kind, reason="not_found"),
		)
	return Resolution(venue_id=venue_id, venue_type=kind, metadata=metadata)


async def resolve_many(
	catalog: CatalogClient,
	venues: Sequence[tuple[str, VenueType | str]],
) -> list[Resolution]:
	"""Resolve venues concurrently; output order matches ``venues``."""
	return list(await asyncio.gather(*(resolve_one(catalog, vid, vtype) for vid, vtype in venues)))


__all__ = ["HydrationResult", "Resolution", "SkippedVenue", "resolve_many", "resolve_one"]
