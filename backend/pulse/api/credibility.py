"""Stamps and credibility endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from pulse.api.deps import get_credibility_service
from pulse.domain.credibility.schemas import CredibilityResponse, StampListResponse, StampResponse
from pulse.domain.credibility.service import CredibilityService
from pulse.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["credibility"])


@router.get("/credibility/me", response_model=Optional[CredibilityResponse])
async def my_credibility(
	user: AuthenticatedUser = Depends(get_current_user),
	service: CredibilityService = Depends(get_credibility_service),
) -> Optional[CredibilityResponse]:
	profile = await service.get_user_credibility(user.id)
	return CredibilityResponse.from_model(profile) if profile else None


@router.get("/credibility/leaderboard", response_model=list[CredibilityResponse])
async def leaderboard(
	limit: int = Query(default=10, ge=1, le=100),
	service: CredibilityService = Depends(get_credibility_service),
) -> list[CredibilityResponse]:
	return [CredibilityResponse.from_model(profile) for profile in await service.get_leaderboard(limit)]


@router.get("/credibility/{user_id}", response_model=Optional[CredibilityResponse])
async def user_credibility(
	user_id: str,
	service: CredibilityService = Depends(get_credibility_service),
) -> Optional[CredibilityResponse]:
	profile = await service.get_user_credibility(user_id)
	return CredibilityResponse.from_model(profile) if profile else None


@router.get("/credibility/{user_id}/stamps", response_model=StampListResponse)
async def user_stamps(
	user_id: str,
	category: Optional[str] = Query(default=None, max_length=64),
	service: CredibilityService = Depends(get_credibility_service),
) -> StampListResponse:
	if category:
		stamps = await service.get_stamps_by_category(user_id, category)
	else:
		stamps = await service.get_user_stamps(user_id)
	return StampListResponse(items=[StampResponse.from_model(stamp) for stamp in stamps], count=len(stamps))


@router.get("/stamps/recent", response_model=list[StampResponse])
async def recent_stamps(
	limit: int = Query(default=10, ge=1, le=100),
	service: CredibilityService = Depends(get_credibility_service),
) -> list[StampResponse]:
	return [StampResponse.from_model(stamp) for stamp in await service.get_recent_stamps(limit)]


@router.get("/credibility/{user_id}/stamps/count")
async def user_stamp_count(
	user_id: str,
	service: CredibilityService = Depends(get_credibility_service),
) -> dict[str, object]:
	return {"user_id": user_id, "count": await service.get_stamps_count(user_id)}
