"""Feed tunables: thresholds, caps and badge text."""

from __future__ import annotations

from datetime import timedelta

HOT_SPOT_BADGE = "Hot Spot"
HOT_RIGHT_NOW_BADGE = "Hot Right Now"
TOP_RATED_BADGE = "Top Rated"

HOT_SPOT_THRESHOLD = 5
HOT_RIGHT_NOW_THRESHOLD = 5

RECENT_CHECK_INS_PER_VENUE = 5

TRENDING_LOOKBACK = timedelta(hours=24)
TRENDING_MIN_CHECK_INS = 2
TRENDING_CHECK_IN_WEIGHT = 2
TRENDING_LIMIT = 10

FEATURED_LIMIT = 10
FEATURED_MIN_RATING = 4.0

CURATED_LIMIT = 10
CURATION_ADMIN_LIMIT = 100
WINDOW_QUERY_LIMIT = 20

CHANNELS = ("live", "today", "week", "trending", "featured")


def heat_score(check_in_count: int, review_count: int) -> int:
	return check_in_count * TRENDING_CHECK_IN_WEIGHT + review_count
