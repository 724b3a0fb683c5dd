"""Client for the external catalog/listings service.

The catalog owns venue display metadata; this service only ever reads it, one
venue at a time (there is no batch contract).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

import httpx

from pulse.domain.catalog.models import Listing, VenueMetadata, VenueType
from pulse.settings import settings


class CatalogClient(Protocol):
	async def resolve_venue(self, venue_id: str, venue_type: VenueType | str) -> Optional[VenueMetadata]:
		...

	async def list_listings(self, *, region: Optional[str] = None, limit: int = 10) -> list[Listing]:
		...


_CAMEL_KEYS = {"reviewCount": "review_count"}


def _normalise(payload: Mapping[str, Any]) -> dict[str, Any]:
	data = {_CAMEL_KEYS.get(key, key): value for key, value in payload.items()}
	data["title"] = data.get("title") or data.get("name") or "Unknown"
	if data.get("review_count") is None:
		data["review_count"] = 0
	if data.get("images") is None:
		data["images"] = []
	return data


def parse_venue(payload: Mapping[str, Any]) -> VenueMetadata:
	return VenueMetadata.model_validate(_normalise(payload))


def parse_listing(payload: Mapping[str, Any]) -> Listing:
	return Listing.model_validate(_normalise(payload))


@dataclass
class HttpCatalogClient:
	"""Catalog client backed by the listings HTTP API."""

	http: httpx.AsyncClient
	base_url: str = settings.catalog_base_url

	async def resolve_venue(self, venue_id: str, venue_type: VenueType | str) -> Optional[VenueMetadata]:
		kind = venue_type.value if isinstance(venue_type, VenueType) else str(venue_type)
		response = await self.http.get(f"{self.base_url.rstrip('/')}/listings/{kind}/{venue_id}")
		if response.status_code == httpx.codes.NOT_FOUND:
			return None
		response.raise_for_status()
		body = response.json()
		if not body:
			return None
		return parse_venue(body)

	async def list_listings(self, *, region: Optional[str] = None, limit: int = 10) -> list[Listing]:
		params: dict[str, Any] = {"limit": limit}
		if region:
			params["region"] = region
		response = await self.http.get(f"{self.base_url.rstrip('/')}/listings", params=params)
		response.raise_for_status()
		body = response.json()
		items = body.get("items", []) if isinstance(body, dict) else body
		return [parse_listing(item) for item in items]


def build_http_client() -> httpx.AsyncClient:
	return httpx.AsyncClient(timeout=settings.catalog_timeout_seconds)
