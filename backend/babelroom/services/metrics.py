"""Prometheus metrics instrumentation for the translation relay.

Exposes metrics for monitoring cache effectiveness, provider health and
fan-out volume. Metrics are exposed via HTTP on METRICS_PORT when it is
set to a non-zero value.

Metrics exported:
- translation_cache_lookups_total: Counter of cache lookups by result
- translation_cache_evictions_total: Counter of removed entries by reason
- translation_provider_attempts_total: Counter of provider calls by status
- translation_latency_seconds: Histogram of successful provider call time
- relay_events_emitted_total: Counter of outbound relay events by kind
- relay_active_rooms / relay_active_sessions: Gauges of live state

Usage:
    from babelroom.services.metrics import start_metrics_server, cache_lookups

    start_metrics_server(port=8001)
    cache_lookups.labels(result='hit').inc()
"""

from prometheus_client import Histogram, Counter, Gauge, start_http_server
import logging

logger = logging.getLogger(__name__)

# Cache effectiveness
cache_lookups = Counter(
    'translation_cache_lookups_total',
    'Translation cache lookups',
    labelnames=['result']  # result: hit, miss
)

cache_evictions = Counter(
    'translation_cache_evictions_total',
    'Translation cache entries removed',
    labelnames=['reason']  # reason: capacity, expired
)

# Provider health
provider_attempts = Counter(
    'translation_provider_attempts_total',
    'Translation provider calls',
    labelnames=['provider', 'status']  # status: success, error, timeout, empty
)

translation_latency = Histogram(
    'translation_latency_seconds',
    'Time spent in a successful provider call',
    labelnames=['provider']
)

# Fan-out volume
relay_events = Counter(
    'relay_events_emitted_total',
    'Outbound events emitted by the relay',
    labelnames=['kind']  # kind: translated, passthrough, degraded
)

active_rooms_gauge = Gauge(
    'relay_active_rooms',
    'Number of rooms with at least one member'
)

active_sessions_gauge = Gauge(
    'relay_active_sessions',
    'Number of connections currently in a room'
)


def start_metrics_server(port: int = 8001):
    """Start Prometheus metrics HTTP server."""
    try:
        start_http_server(port)
        logger.info(f"✅ Metrics server started on port {port}")
    except Exception as e:
        logger.error(f"❌ Failed to start metrics server: {e}")
