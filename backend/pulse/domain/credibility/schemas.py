"""Pydantic schemas for credibility endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from pulse.domain.credibility.models import Stamp, UserCredibilityProfile


class StampResponse(BaseModel):
    id: str
    user_id: str
    venue_id: str
    venue_type: str
    venue_name: str
    venue_address: Optional[str] = None
    category: Optional[str] = None
    region: Optional[str] = None
    icon: str
    earned_at: datetime
    source_check_in_id: Optional[str] = None

    @classmethod
    def from_model(cls, stamp: Stamp) -> "StampResponse":
        return cls(
            id=stamp.id,
            user_id=stamp.user_id,
            venue_id=stamp.venue_id,
            venue_type=stamp.venue_type,
            venue_name=stamp.venue_name,
            venue_address=stamp.venue_address,
            category=stamp.category,
            region=stamp.region,
            icon=stamp.icon,
            earned_at=stamp.earned_at,
            source_check_in_id=stamp.source_check_in_id,
        )


class CredibilityResponse(BaseModel):
    user_id: str
    credibility_score: int
    total_check_ins: int = Field(ge=0)
    total_stamps: int = Field(ge=0)
    rank: str
    next_rank: Optional[str] = None
    points_to_next_rank: Optional[int] = None
    last_updated: Optional[datetime] = None

    @classmethod
    def from_model(cls, profile: UserCredibilityProfile) -> "CredibilityResponse":
        upcoming = profile.next_rank
        return cls(
            user_id=profile.user_id,
            credibility_score=profile.credibility_score,
            total_check_ins=profile.total_check_ins,
            total_stamps=profile.total_stamps,
            rank=profile.rank.value,
            next_rank=upcoming.value if upcoming else None,
            points_to_next_rank=profile.points_to_next_rank,
            last_updated=profile.last_updated,
        )


class StampListResponse(BaseModel):
    items: list[StampResponse]
    count: int
