import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import ulid

# Add backend to path to import pulse modules
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "backend"))

from pulse.domain.feed.windows import start_of_day, week_window
from pulse.infra.postgres import close_pool, get_pool
from pulse.settings import settings

REGION = os.environ.get("SEED_REGION", "kyrenia")

CURATED = [
	("today", "Harbour street food market", "food", 30, 18, 4),
	("today", "Sunset yoga on the pier", "wellness", 20, 19, 1),
	("week", "Old town jazz night", "music", 50, 21, 3),
	("week", "Castle open-air cinema", "film", 40, 20, 2),
	("featured", "Best meze in the bay", "food", 90, None, None),
	("featured", "Hidden coves guide", "outdoors", 80, None, None),
]

EVENTS = [
	("Beach volleyball cup", "sports", 0, 10, 6),
	("Wine tasting evening", "food", 0, 19, 3),
	("Weekend craft fair", "market", 4, 11, 7),
]


def _at(base: datetime, day_offset: int, hour: int) -> datetime:
	return start_of_day(base + timedelta(days=day_offset)) + timedelta(hours=hour)


async def seed_curated(conn, now: datetime) -> None:
	weekend = week_window(now).start
	for section, title, category, priority, hour, hours in CURATED:
		start = end = None
		if hour is not None:
			base = now if section == "today" else weekend
			start = _at(base, 0, hour)
			end = start + timedelta(hours=hours)
		await conn.execute(
			"""
			INSERT INTO curated_feed_entries (id, section, title, category, region, start_time, end_time, priority)
			VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
			""",
			ulid.new().str,
			section,
			title,
			category,
			REGION,
			start,
			end,
			priority,
		)
	print(f"Seeded {len(CURATED)} curated entries")


async def seed_events(conn, now: datetime) -> None:
	for title, category, day_offset, hour, hours in EVENTS:
		start = _at(now, day_offset, hour)
		await conn.execute(
			"""
			INSERT INTO events (id, title, category, region, start_time, end_time)
			VALUES ($1, $2, $3, $4, $5, $6)
			""",
			ulid.new().str,
			title,
			category,
			REGION,
			start,
			start + timedelta(hours=hours),
		)
	print(f"Seeded {len(EVENTS)} events")


async def main() -> None:
	print("Connecting to database...")
	now = datetime.now(timezone.utc).astimezone(ZoneInfo(settings.feed_timezone))
	pool = await get_pool()
	try:
		async with pool.acquire() as conn:
			async with conn.transaction():
				await seed_curated(conn, now)
				await seed_events(conn, now)
	finally:
		await close_pool()


if __name__ == "__main__":
	asyncio.run(main())
