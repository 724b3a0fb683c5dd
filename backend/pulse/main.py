"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pulse.api import activity, checkins, credibility, curation, engagement, feed, ops
from pulse.api.errors import install_error_handlers
from pulse.domain.catalog.client import HttpCatalogClient, build_http_client
from pulse.domain.credibility.service import CredibilityService
from pulse.domain.credibility.sockets import CredibilityNamespace
from pulse.domain.engagement.service import EngagementService
from pulse.domain.feed.composer import FeedComposer
from pulse.domain.feed.curation import CurationService
from pulse.domain.feed.repo import FeedRepository
from pulse.domain.presence.aggregator import PresenceAggregator
from pulse.domain.presence.hub import PresenceHub
from pulse.domain.presence.ledger import PresenceLedger
from pulse.domain.presence.service import CheckInService
from pulse.domain.presence.sockets import CheckInsNamespace
from pulse.domain.stream.service import ActivityStream
from pulse.infra import postgres
from pulse.infra.events import EventBus
from pulse.obs import init as obs_init
from pulse.settings import settings

bus = EventBus()
http_client = build_http_client()
catalog = HttpCatalogClient(http=http_client, base_url=settings.catalog_base_url)
ledger = PresenceLedger(bus=bus)
hub = PresenceHub(ledger, bus)
credibility_namespace = CredibilityNamespace()
credibility_service = CredibilityService(notifier=credibility_namespace)
stream = ActivityStream()
feed_repo = FeedRepository()


@asynccontextmanager
async def lifespan(app: FastAPI):
	await postgres.init_pool()
	hub.start()
	try:
		yield
	finally:
		hub.stop()
		await http_client.aclose()
		await postgres.close_pool()


app = FastAPI(
	title="Venue Pulse",
	lifespan=lifespan,
	docs_url=None if settings.is_prod() else "/docs",
	redoc_url=None if settings.is_prod() else "/redoc",
)
install_error_handlers(app)

app.state.checkin_service = CheckInService(ledger, credibility_service, catalog, stream)
app.state.credibility_service = credibility_service
app.state.feed_composer = FeedComposer(PresenceAggregator(ledger, catalog), feed_repo, catalog)
app.state.curation_service = CurationService(feed_repo, catalog)
app.state.activity_stream = stream
app.state.engagement_service = EngagementService(stream=stream)
app.state.presence_hub = hub

allow_origins = list(settings.cors_allow_origins)
if not allow_origins:
	allow_origins = ["http://localhost:3000"] if settings.is_dev() else []

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins=allow_origins)
sio.register_namespace(CheckInsNamespace(hub))
sio.register_namespace(credibility_namespace)
socket_app = socketio.ASGIApp(sio, other_asgi_app=app)
obs_init(app)

app.include_router(checkins.router)
app.include_router(feed.router)
app.include_router(credibility.router)
app.include_router(engagement.router)
app.include_router(activity.router)
app.include_router(curation.router)
app.include_router(ops.router)
