"""User-facing check-in flow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from pulse.domain.catalog.client import CatalogClient
from pulse.domain.catalog.hydration import resolve_one
from pulse.domain.catalog.models import VenueType
from pulse.domain.credibility.models import StampOptions
from pulse.domain.credibility.service import CredibilityService
from pulse.domain.presence.ledger import LIVE_SCAN_LIMIT, PresenceLedger
from pulse.domain.presence.models import CheckIn
from pulse.domain.stream.service import ActivityStream
from pulse.infra.auth import AuthenticatedUser

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CheckInOutcome:
	check_in: CheckIn
	stamp_id: Optional[str]


class CheckInService:
	"""Record a check-in, update the user's credibility for it and post it to the activity stream."""

	def __init__(
		self,
		ledger: PresenceLedger,
		credibility: CredibilityService,
		catalog: CatalogClient,
		stream: Optional[ActivityStream] = None,
	) -> None:
		self.ledger = ledger
		self.credibility = credibility
		self.catalog = catalog
		self.stream = stream

	async def check_in(self, user: AuthenticatedUser, venue_id: str, venue_type: VenueType) -> CheckInOutcome:
		check_in = await self.ledger.record(
			user.id,
			venue_id,
			venue_type,
			display_name=user.display_name,
			avatar_url=user.avatar_url,
		)
		await self.credibility.increment_check_in_count(user.id)

		resolution = await resolve_one(self.catalog, venue_id, venue_type)
		options = StampOptions(source_check_in_id=check_in.id)
		venue_name = venue_id
		if resolution.metadata is not None:
			meta = resolution.metadata
			venue_name = meta.title
			options.venue_address = meta.address
			options.category = meta.category
			options.region = meta.region

		stamp_id = await self.credibility.award_stamp(user.id, venue_id, venue_type, venue_name, options)
		if self.stream is not None:
			await self.stream.write(
				"checkin",
				user.id,
				ref_id=check_in.id,
				display_name=user.display_name,
				avatar_url=user.avatar_url,
				target_id=venue_id,
				target_type=check_in.venue_type,
				target_title=venue_name if resolution.metadata is not None else None,
				region=options.region,
				expires_at=check_in.expires_at,
				now=check_in.recorded_at,
			)
		return CheckInOutcome(check_in=check_in, stamp_id=stamp_id)

	async def active(self, limit: int = LIVE_SCAN_LIMIT) -> list[CheckIn]:
		return await self.ledger.active(limit)

	async def my_check_ins(self, user_id: str, limit: int = 5) -> list[CheckIn]:
		return await self.ledger.for_user(user_id, limit)


__all__ = ["CheckInOutcome", "CheckInService"]
