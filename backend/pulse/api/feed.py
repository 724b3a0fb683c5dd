"""Feed endpoints: the composed feed and each channel on its own."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from pulse.api.deps import get_feed_composer
from pulse.domain.feed.composer import FeedComposer
from pulse.domain.feed.models import ConnectFeedResult, FeedItem, LiveVenueView, TrendingVenueView, UserActivityItem

router = APIRouter(prefix="/feed", tags=["feed"])

RegionQuery = Query(default=None, max_length=64)


@router.get("", response_model=ConnectFeedResult)
async def compose_feed(
	region: Optional[str] = RegionQuery,
	composer: FeedComposer = Depends(get_feed_composer),
) -> ConnectFeedResult:
	return await composer.compose_feed(region)


@router.get("/live", response_model=list[LiveVenueView])
async def live_now(region: Optional[str] = RegionQuery, composer: FeedComposer = Depends(get_feed_composer)):
	return await composer.live_now(region)


@router.get("/today", response_model=list[FeedItem])
async def today_items(region: Optional[str] = RegionQuery, composer: FeedComposer = Depends(get_feed_composer)):
	return await composer.today_items(region)


@router.get("/week", response_model=list[FeedItem])
async def week_items(region: Optional[str] = RegionQuery, composer: FeedComposer = Depends(get_feed_composer)):
	return await composer.week_items(region)


@router.get("/trending", response_model=list[TrendingVenueView])
async def trending_items(region: Optional[str] = RegionQuery, composer: FeedComposer = Depends(get_feed_composer)):
	return await composer.trending_items(region)


@router.get("/featured", response_model=list[FeedItem])
async def featured_items(region: Optional[str] = RegionQuery, composer: FeedComposer = Depends(get_feed_composer)):
	return await composer.featured_items(region)


@router.get("/quick-activities", response_model=list[UserActivityItem])
async def quick_activities(region: Optional[str] = RegionQuery, composer: FeedComposer = Depends(get_feed_composer)):
	return await composer.quick_activities(region)
