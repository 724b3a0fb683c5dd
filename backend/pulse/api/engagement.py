"""Event joins, activity attendance and activity creation."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from pulse.api.deps import get_engagement_service
from pulse.domain.engagement.schemas import (
	ActivityCreated,
	AttendanceResponse,
	CreateActivityRequest,
	EventJoinResponse,
	ToggleGoingRequest,
	ToggleInterestedRequest,
)
from pulse.domain.engagement.service import EngagementService
from pulse.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["engagement"])


@router.post("/events/{event_id}/join", response_model=EventJoinResponse)
async def join_event(
	event_id: str,
	user: AuthenticatedUser = Depends(get_current_user),
	service: EngagementService = Depends(get_engagement_service),
) -> EventJoinResponse:
	result = await service.join_event(user.id, event_id, display_name=user.display_name, avatar_url=user.avatar_url)
	return EventJoinResponse(event_id=result.event_id, joined=result.joined, going_count=result.going_count)


@router.delete("/events/{event_id}/join", response_model=EventJoinResponse)
async def leave_event(
	event_id: str,
	user: AuthenticatedUser = Depends(get_current_user),
	service: EngagementService = Depends(get_engagement_service),
) -> EventJoinResponse:
	result = await service.leave_event(user.id, event_id, display_name=user.display_name, avatar_url=user.avatar_url)
	return EventJoinResponse(event_id=result.event_id, joined=result.joined, going_count=result.going_count)


@router.post("/activities", response_model=ActivityCreated, status_code=status.HTTP_201_CREATED)
async def create_activity(
	payload: CreateActivityRequest,
	user: AuthenticatedUser = Depends(get_current_user),
	service: EngagementService = Depends(get_engagement_service),
) -> ActivityCreated:
	return ActivityCreated(id=await service.create_user_activity(user, payload))


@router.post("/activities/{activity_id}/going", response_model=AttendanceResponse)
async def toggle_going(
	activity_id: str,
	payload: ToggleGoingRequest,
	user: AuthenticatedUser = Depends(get_current_user),
	service: EngagementService = Depends(get_engagement_service),
) -> AttendanceResponse:
	counts = await service.toggle_going(activity_id, user.id, payload.is_currently_going)
	return AttendanceResponse(
		activity_id=counts.activity_id,
		going_count=counts.going_count,
		interested_count=counts.interested_count,
	)


@router.post("/activities/{activity_id}/interested", response_model=AttendanceResponse)
async def toggle_interested(
	activity_id: str,
	payload: ToggleInterestedRequest,
	user: AuthenticatedUser = Depends(get_current_user),
	service: EngagementService = Depends(get_engagement_service),
) -> AttendanceResponse:
	counts = await service.toggle_interested(activity_id, user.id, payload.is_currently_interested)
	return AttendanceResponse(
		activity_id=counts.activity_id,
		going_count=counts.going_count,
		interested_count=counts.interested_count,
	)
