"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

import logging

from prometheus_client import Counter, Gauge, Histogram

log = logging.getLogger(__name__)


REQUEST_COUNTER = Counter(
	"pulse_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"pulse_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

SOCKET_CLIENTS = Gauge(
	"pulse_socketio_clients",
	"Active Socket.IO clients per namespace",
	["namespace"],
)

CHECKINS_RECORDED = Counter(
	"pulse_checkins_recorded_total",
	"Check-ins appended to the presence ledger",
	["venue_type"],
)

PRESENCE_SUBSCRIBERS = Gauge(
	"pulse_presence_subscribers",
	"Active presence snapshot subscriptions",
)

PRESENCE_PUSHES = Counter(
	"pulse_presence_snapshot_pushes_total",
	"Active check-in snapshots delivered to subscribers",
)

STAMP_AWARDS = Counter(
	"pulse_stamp_awards_total",
	"Stamp award attempts by outcome",
	["outcome"],
)

RANK_CHANGES = Counter(
	"pulse_rank_changes_total",
	"Credibility rank transitions",
	["rank"],
)

FEED_COMPOSE_LATENCY = Histogram(
	"pulse_feed_compose_duration_seconds",
	"Time spent composing the five-channel feed",
	buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

FEED_CHANNEL_FAILURES = Counter(
	"pulse_feed_channel_failures_total",
	"Feed channels that degraded to an empty slot",
	["channel"],
)

VENUE_HYDRATION_SKIPPED = Counter(
	"pulse_venue_hydration_skipped_total",
	"Venues dropped because catalog metadata could not be resolved",
	["reason"],
)

STREAM_ITEMS = Counter(
	"pulse_activity_stream_items_total",
	"Items written to the recent activity stream",
	["type"],
)

REDIS_UP = Gauge("pulse_redis_up", "Redis readiness (1 = ok)")
POSTGRES_UP = Gauge("pulse_postgres_up", "Postgres readiness (1 = ok)")


def observe_request(route: str, method: str, status: int, seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(seconds)


def socket_connected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace=namespace).inc()


def socket_disconnected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace=namespace).dec()


def inc_checkin(venue_type: str) -> None:
	CHECKINS_RECORDED.labels(venue_type=venue_type).inc()


def inc_stamp_award(outcome: str) -> None:
	STAMP_AWARDS.labels(outcome=outcome).inc()


def inc_rank_change(rank: str) -> None:
	RANK_CHANGES.labels(rank=rank).inc()


def inc_channel_failure(channel: str) -> None:
	FEED_CHANNEL_FAILURES.labels(channel=channel).inc()


def inc_hydration_skipped(reason: str) -> None:
	VENUE_HYDRATION_SKIPPED.labels(reason=reason).inc()


def inc_stream_item(item_type: str) -> None:
	STREAM_ITEMS.labels(type=item_type).inc()


def mark_redis(ok: bool) -> None:
	REDIS_UP.set(1.0 if ok else 0.0)


def mark_postgres(ok: bool) -> None:
	POSTGRES_UP.set(1.0 if ok else 0.0)
