"""Domain models for the presence ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, MutableMapping, Optional


def to_epoch_ms(value: datetime) -> int:
	return int(value.timestamp() * 1000)


def from_epoch_ms(value: int | str) -> datetime:
	return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


@dataclass(slots=True, frozen=True)
class CheckIn:
	"""A presence claim by a user at a venue, valid until ``expires_at``."""

	id: str
	venue_id: str
	venue_type: str
	user_id: str
	recorded_at: datetime
	expires_at: datetime
	user_display_name: Optional[str] = None
	user_avatar_url: Optional[str] = None

	@classmethod
	def new(
		cls,
		*,
		id: str,
		venue_id: str,
		venue_type: str,
		user_id: str,
		recorded_at: datetime,
		window: timedelta,
		user_display_name: Optional[str] = None,
		user_avatar_url: Optional[str] = None,
	) -> "CheckIn":
		return cls(
			id=id,
			venue_id=venue_id,
			venue_type=venue_type,
			user_id=user_id,
			recorded_at=recorded_at,
			expires_at=recorded_at + window,
			user_display_name=user_display_name,
			user_avatar_url=user_avatar_url,
		)

	@classmethod
	def from_mapping(cls, mapping: Mapping[str, Any]) -> "CheckIn":
		"""Construct a check-in from its Redis hash."""
		return cls(
			id=str(mapping["id"]),
			venue_id=str(mapping["venue_id"]),
			venue_type=str(mapping["venue_type"]),
			user_id=str(mapping["user_id"]),
			recorded_at=from_epoch_ms(mapping["recorded_at"]),
			expires_at=from_epoch_ms(mapping["expires_at"]),
			user_display_name=mapping.get("user_display_name") or None,
			user_avatar_url=mapping.get("user_avatar_url") or None,
		)

	def to_mapping(self) -> MutableMapping[str, str | int]:
		"""Serialise into a mapping suitable for HSET (empty strings for absent fields)."""
		return {
			"id": self.id,
			"venue_id": self.venue_id,
			"venue_type": self.venue_type,
			"user_id": self.user_id,
			"user_display_name": self.user_display_name or "",
			"user_avatar_url": self.user_avatar_url or "",
			"recorded_at": to_epoch_ms(self.recorded_at),
			"expires_at": to_epoch_ms(self.expires_at),
		}
