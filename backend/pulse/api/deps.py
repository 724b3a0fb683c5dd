"""FastAPI dependencies resolving the services built at startup."""

from __future__ import annotations

from fastapi import Request

from pulse.domain.credibility.service import CredibilityService
from pulse.domain.engagement.service import EngagementService
from pulse.domain.feed.composer import FeedComposer
from pulse.domain.feed.curation import CurationService
from pulse.domain.presence.service import CheckInService
from pulse.domain.stream.service import ActivityStream


def get_checkin_service(request: Request) -> CheckInService:
	return request.app.state.checkin_service


def get_credibility_service(request: Request) -> CredibilityService:
	return request.app.state.credibility_service


def get_feed_composer(request: Request) -> FeedComposer:
	return request.app.state.feed_composer


def get_engagement_service(request: Request) -> EngagementService:
	return request.app.state.engagement_service


def get_curation_service(request: Request) -> CurationService:
	return request.app.state.curation_service


def get_activity_stream(request: Request) -> ActivityStream:
	return request.app.state.activity_stream
