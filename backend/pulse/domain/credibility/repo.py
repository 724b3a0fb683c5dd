"""Postgres access for stamps and credibility profiles."""

from __future__ import annotations

from typing import Optional

import ulid

from pulse.domain.credibility.models import Rank, Stamp, UserCredibilityProfile
from pulse.infra.postgres import get_pool

_STAMP_COLUMNS = """
    id, user_id, venue_id, venue_type, venue_name, venue_address, category,
    region, icon, earned_at, source_check_in_id
"""

_PROFILE_COLUMNS = """
    user_id, credibility_score, total_check_ins, total_stamps, rank, last_updated
"""


class CredibilityRepository:
    """Thin data-access layer around asyncpg."""

    # --- Stamps ----------------------------------------------------------

    async def has_stamp(self, user_id: str, venue_id: str) -> bool:
        pool = await get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT 1 FROM stamps
                WHERE user_id = $1 AND venue_id = $2
                LIMIT 1
                """,
                user_id,
                venue_id,
            )
        return row is not None

    async def insert_stamp(
        self,
        *,
        user_id: str,
        venue_id: str,
        venue_type: str,
        venue_name: str,
        icon: str,
        venue_address: Optional[str] = None,
        category: Optional[str] = None,
        region: Optional[str] = None,
        source_check_in_id: Optional[str] = None,
    ) -> str:
        stamp_id = ulid.new().str
        pool = await get_pool()
        async with pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO stamps (id, user_id, venue_id, venue_type, venue_name, venue_address,
                    category, region, icon, source_check_in_id)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                """,
                stamp_id,
                user_id,
                venue_id,
                venue_type,
                venue_name,
                venue_address,
                category,
                region,
                icon,
                source_check_in_id,
            )
        return stamp_id

    async def list_user_stamps(self, user_id: str, *, category: Optional[str] = None) -> list[Stamp]:
        pool = await get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {_STAMP_COLUMNS}
                FROM stamps
                WHERE user_id = $1 AND ($2::text IS NULL OR category = $2)
                ORDER BY earned_at DESC
                """,
                user_id,
                category,
            )
        return [Stamp.from_row(row) for row in rows]

    async def count_stamps(self, user_id: str) -> int:
        pool = await get_pool()
        async with pool.acquire() as conn:
            value = await conn.fetchval("SELECT COUNT(*) FROM stamps WHERE user_id = $1", user_id)
        return int(value or 0)

    async def recent_stamps(self, limit: int) -> list[Stamp]:
        pool = await get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {_STAMP_COLUMNS}
                FROM stamps
                ORDER BY earned_at DESC
                LIMIT $1
                """,
                limit,
            )
        return [Stamp.from_row(row) for row in rows]

    # --- Profiles --------------------------------------------------------

    async def get_profile(self, user_id: str) -> Optional[UserCredibilityProfile]:
        pool = await get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_PROFILE_COLUMNS} FROM user_credibility WHERE user_id = $1",
                user_id,
            )
        return UserCredibilityProfile.from_row(row) if row else None

    async def put_profile(
        self,
        user_id: str,
        *,
        credibility_score: int,
        total_check_ins: int,
        total_stamps: int,
        rank: Rank,
    ) -> UserCredibilityProfile:
        """Write a whole profile row, replacing any row that appeared concurrently."""
        pool = await get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO user_credibility (user_id, credibility_score, total_check_ins, total_stamps, rank, last_updated)
                VALUES ($1, $2, $3, $4, $5, NOW())
                ON CONFLICT (user_id) DO UPDATE
                SET credibility_score = EXCLUDED.credibility_score,
                    total_check_ins = EXCLUDED.total_check_ins,
                    total_stamps = EXCLUDED.total_stamps,
                    rank = EXCLUDED.rank,
                    last_updated = NOW()
                RETURNING {_PROFILE_COLUMNS}
                """,
                user_id,
                credibility_score,
                total_check_ins,
                total_stamps,
                rank.value,
            )
        return UserCredibilityProfile.from_row(row)

    async def add_score(self, user_id: str, delta: int, rank: Rank) -> Optional[UserCredibilityProfile]:
        """Increment score and stamp count in one statement and set ``rank``."""
        pool = await get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE user_credibility
                SET credibility_score = credibility_score + $2,
                    total_stamps = total_stamps + 1,
                    rank = $3,
                    last_updated = NOW()
                WHERE user_id = $1
                RETURNING {_PROFILE_COLUMNS}
                """,
                user_id,
                delta,
                rank.value,
            )
        return UserCredibilityProfile.from_row(row) if row else None

    async def add_check_in(self, user_id: str) -> Optional[UserCredibilityProfile]:
        pool = await get_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE user_credibility
                SET total_check_ins = total_check_ins + 1,
                    last_updated = NOW()
                WHERE user_id = $1
                RETURNING {_PROFILE_COLUMNS}
                """,
                user_id,
            )
        return UserCredibilityProfile.from_row(row) if row else None

    async def leaderboard(self, limit: int) -> list[UserCredibilityProfile]:
        pool = await get_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {_PROFILE_COLUMNS}
                FROM user_credibility
                ORDER BY credibility_score DESC, last_updated ASC
                LIMIT $1
                """,
                limit,
            )
        return [UserCredibilityProfile.from_row(row) for row in rows]
