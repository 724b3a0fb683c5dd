"""Recent activity stream."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from pulse.api.deps import get_activity_stream
from pulse.domain.stream.models import StreamItem
from pulse.domain.stream.service import DEFAULT_FEED_LIMIT, MAX_FEED_LIMIT, ActivityStream

router = APIRouter(tags=["activity"])


@router.get("/activity", response_model=list[StreamItem])
async def activity_feed(
	limit: int = Query(default=DEFAULT_FEED_LIMIT, ge=1, le=MAX_FEED_LIMIT),
	region: Optional[str] = Query(default=None, max_length=64),
	stream: ActivityStream = Depends(get_activity_stream),
) -> list[StreamItem]:
	return await stream.active_feed(limit, region)
