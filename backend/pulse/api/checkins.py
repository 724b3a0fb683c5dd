"""Check-in endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from pulse.api.deps import get_checkin_service
from pulse.domain.presence.schemas import CheckInCreated, CheckInRequest, CheckInResponse
from pulse.domain.presence.service import CheckInService
from pulse.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/checkins", tags=["checkins"])


@router.post("", response_model=CheckInCreated, status_code=status.HTTP_201_CREATED)
async def create_check_in(
	payload: CheckInRequest,
	user: AuthenticatedUser = Depends(get_current_user),
	service: CheckInService = Depends(get_checkin_service),
) -> CheckInCreated:
	outcome = await service.check_in(user, payload.venue_id, payload.venue_type)
	return CheckInCreated(check_in=CheckInResponse.from_model(outcome.check_in), stamp_id=outcome.stamp_id)


@router.get("/active", response_model=list[CheckInResponse])
async def active_check_ins(
	limit: int = Query(default=100, ge=1, le=100),
	service: CheckInService = Depends(get_checkin_service),
) -> list[CheckInResponse]:
	return [CheckInResponse.from_model(item) for item in await service.active(limit)]


@router.get("/me", response_model=list[CheckInResponse])
async def my_check_ins(
	limit: int = Query(default=5, ge=1, le=50),
	user: AuthenticatedUser = Depends(get_current_user),
	service: CheckInService = Depends(get_checkin_service),
) -> list[CheckInResponse]:
	return [CheckInResponse.from_model(item) for item in await service.my_check_ins(user.id, limit)]
