"""Admin management of curated feed entries."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from pulse.domain.catalog.client import CatalogClient
from pulse.domain.catalog.hydration import resolve_one
from pulse.domain.exceptions import ValidationError
from pulse.domain.feed.models import CurationEntry, CurationUpsert
from pulse.domain.feed.repo import FeedRepository

logger = logging.getLogger(__name__)


class CurationService:
	"""List the entries on air and upsert entries by their target id.

	When the payload names a ``target_type`` the catalog fills in a missing
	title, region or category for the target.
	"""

	def __init__(self, repository: FeedRepository | None = None, catalog: Optional[CatalogClient] = None) -> None:
		self.repo = repository or FeedRepository()
		self.catalog = catalog

	async def list_entries(self, *, now: Optional[datetime] = None) -> list[CurationEntry]:
		return await self.repo.curation_entries(now=now or datetime.now(timezone.utc))

	async def upsert(self, target_id: str, payload: CurationUpsert, *, admin_id: str) -> CurationEntry:
		if payload.starts_at and payload.ends_at and payload.ends_at < payload.starts_at:
			raise ValidationError("ends_before_starts")

		title = payload.title
		if self.catalog is not None and payload.target_type is not None:
			resolution = await resolve_one(self.catalog, target_id, payload.target_type)
			if resolution.metadata is not None:
				meta = resolution.metadata
				title = title or meta.title
				payload = payload.model_copy(
					update={
						"region": payload.region or meta.region,
						"category": payload.category or meta.category,
					}
				)
		if not title:
			raise ValidationError("title_required")

		entry, created = await self.repo.upsert_curation(target_id, payload, title=title, admin_id=admin_id)
		logger.info(
			"curation %s target=%s section=%s admin=%s",
			"created" if created else "updated",
			target_id,
			payload.section,
			admin_id,
		)
		return entry


__all__ = ["CurationService"]
