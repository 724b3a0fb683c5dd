"""Domain models for stamps and credibility."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from pulse.domain.catalog.models import VenueType


class Rank(str, Enum):
    EXPLORER = "Explorer"
    LOCAL = "Local"
    INSIDER = "Insider"
    AMBASSADOR = "Ambassador"
    LEGEND = "Legend"


# Minimum credibility score for each rank, lowest first
RANK_THRESHOLDS = {
    Rank.EXPLORER: 0,
    Rank.LOCAL: 10,
    Rank.INSIDER: 25,
    Rank.AMBASSADOR: 50,
    Rank.LEGEND: 100,
}

DEFAULT_ICONS = {
    VenueType.PLACE: "📍",
    VenueType.EVENT: "🎉",
    VenueType.ACTIVITY: "⚡",
    VenueType.EXPERIENCE: "✨",
}

POINTS_PER_STAMP = 1


def rank_of(score: int) -> Rank:
    """Highest rank whose threshold ``score`` reaches."""
    for rank, threshold in sorted(RANK_THRESHOLDS.items(), key=lambda item: item[1], reverse=True):
        if score >= threshold:
            return rank
    return Rank.EXPLORER


def default_icon_for(venue_type: VenueType | str) -> str:
    try:
        return DEFAULT_ICONS[VenueType(venue_type)]
    except ValueError:
        return DEFAULT_ICONS[VenueType.PLACE]


@dataclass
class StampOptions:
    venue_address: Optional[str] = None
    category: Optional[str] = None
    region: Optional[str] = None
    icon: Optional[str] = None
    source_check_in_id: Optional[str] = None


@dataclass
class Stamp:
    id: str
    user_id: str
    venue_id: str
    venue_type: str
    venue_name: str
    icon: str
    earned_at: datetime
    venue_address: Optional[str] = None
    category: Optional[str] = None
    region: Optional[str] = None
    source_check_in_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Stamp":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            venue_id=str(row["venue_id"]),
            venue_type=str(row["venue_type"]),
            venue_name=row["venue_name"],
            icon=row["icon"],
            earned_at=row["earned_at"],
            venue_address=row.get("venue_address"),
            category=row.get("category"),
            region=row.get("region"),
            source_check_in_id=row.get("source_check_in_id"),
        )


@dataclass
class UserCredibilityProfile:
    user_id: str
    credibility_score: int = 0
    total_check_ins: int = 0
    total_stamps: int = 0
    rank: Rank = Rank.EXPLORER
    last_updated: Optional[datetime] = None

    @property
    def next_rank(self) -> Optional[Rank]:
        ordered = list(RANK_THRESHOLDS)
        index = ordered.index(self.rank)
        if index + 1 >= len(ordered):
            return None
        return ordered[index + 1]

    @property
    def points_to_next_rank(self) -> Optional[int]:
        upcoming = self.next_rank
        if upcoming is None:
            return None
        return max(0, RANK_THRESHOLDS[upcoming] - self.credibility_score)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserCredibilityProfile":
        return cls(
            user_id=str(row["user_id"]),
            credibility_score=row.get("credibility_score") or 0,
            total_check_ins=row.get("total_check_ins") or 0,
            total_stamps=row.get("total_stamps") or 0,
            rank=Rank(row.get("rank") or Rank.EXPLORER.value),
            last_updated=row.get("last_updated"),
        )
