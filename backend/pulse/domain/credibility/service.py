"""Stamps and credibility scoring."""

from __future__ import annotations

import logging
from typing import Optional

from pulse.domain.catalog.models import VenueType
from pulse.domain.credibility.models import (
    POINTS_PER_STAMP,
    Rank,
    Stamp,
    StampOptions,
    UserCredibilityProfile,
    default_icon_for,
    rank_of,
)
from pulse.domain.credibility.repo import CredibilityRepository
from pulse.domain.credibility.sockets import CredibilityNotifier
from pulse.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class CredibilityService:
    """Awards stamps and keeps the per-user credibility profile current."""

    def __init__(
        self,
        repository: CredibilityRepository | None = None,
        notifier: Optional[CredibilityNotifier] = None,
    ) -> None:
        self.repo = repository or CredibilityRepository()
        self.notifier = notifier

    async def award_stamp(
        self,
        user_id: str,
        venue_id: str,
        venue_type: VenueType | str,
        venue_name: str,
        options: Optional[StampOptions] = None,
    ) -> Optional[str]:
        """Award the stamp for ``(user_id, venue_id)``.

        Returns the new stamp id, or ``None`` when the user already holds it.
        """
        options = options or StampOptions()
        kind = venue_type.value if isinstance(venue_type, VenueType) else str(venue_type)

        # The existence check and the insert are separate statements; two
        # concurrent awards for the same pair can both pass the check.
        if await self.repo.has_stamp(user_id, venue_id):
            obs_metrics.inc_stamp_award("duplicate")
            return None

        icon = options.icon or default_icon_for(kind)
        stamp_id = await self.repo.insert_stamp(
            user_id=user_id,
            venue_id=venue_id,
            venue_type=kind,
            venue_name=venue_name,
            icon=icon,
            venue_address=options.venue_address,
            category=options.category,
            region=options.region,
            source_check_in_id=options.source_check_in_id,
        )
        obs_metrics.inc_stamp_award("awarded")
        logger.info("stamp awarded user=%s venue=%s stamp=%s", user_id, venue_id, stamp_id)

        await self.update_user_credibility(user_id, POINTS_PER_STAMP)
        if self.notifier is not None:
            await self.notifier.emit_stamp_earned(
                user_id,
                stamp_id=stamp_id,
                venue_id=venue_id,
                venue_type=kind,
                venue_name=venue_name,
                icon=icon,
            )
        return stamp_id

    async def update_user_credibility(self, user_id: str, delta: int = POINTS_PER_STAMP) -> UserCredibilityProfile:
        current = await self.repo.get_profile(user_id)
        if current is None:
            # Whole-row write: a profile created concurrently is overwritten.
            return await self.repo.put_profile(
                user_id,
                credibility_score=delta,
                total_check_ins=0,
                total_stamps=1,
                rank=rank_of(delta),
            )

        # Score and stamp count are incremented atomically, but rank comes from
        # the score read above and can lag one update behind under concurrency.
        new_rank = rank_of(current.credibility_score + delta)
        updated = await self.repo.add_score(user_id, delta, new_rank)
        if updated is None:
            return await self.repo.put_profile(
                user_id,
                credibility_score=delta,
                total_check_ins=0,
                total_stamps=1,
                rank=rank_of(delta),
            )
        if updated.rank != current.rank:
            await self._rank_changed(user_id, current.rank, updated)
        return updated

    async def increment_check_in_count(self, user_id: str) -> UserCredibilityProfile:
        updated = await self.repo.add_check_in(user_id)
        if updated is not None:
            return updated
        return await self.repo.put_profile(
            user_id,
            credibility_score=0,
            total_check_ins=1,
            total_stamps=0,
            rank=Rank.EXPLORER,
        )

    async def _rank_changed(self, user_id: str, previous: Rank, profile: UserCredibilityProfile) -> None:
        obs_metrics.inc_rank_change(profile.rank.value)
        logger.info("rank changed user=%s from=%s to=%s", user_id, previous.value, profile.rank.value)
        if self.notifier is not None:
            await self.notifier.emit_rank_up(user_id, previous, profile.rank, profile.credibility_score)

    # --- Reads -----------------------------------------------------------

    async def get_user_credibility(self, user_id: str) -> Optional[UserCredibilityProfile]:
        return await self.repo.get_profile(user_id)

    async def get_user_stamps(self, user_id: str) -> list[Stamp]:
        return await self.repo.list_user_stamps(user_id)

    async def get_stamps_by_category(self, user_id: str, category: str) -> list[Stamp]:
        return await self.repo.list_user_stamps(user_id, category=category)

    async def get_stamps_count(self, user_id: str) -> int:
        return await self.repo.count_stamps(user_id)

    async def has_stamp(self, user_id: str, venue_id: str) -> bool:
        return await self.repo.has_stamp(user_id, venue_id)

    async def get_recent_stamps(self, limit: int = 10) -> list[Stamp]:
        return await self.repo.recent_stamps(limit)

    async def get_leaderboard(self, limit: int = 10) -> list[UserCredibilityProfile]:
        return await self.repo.leaderboard(limit)
