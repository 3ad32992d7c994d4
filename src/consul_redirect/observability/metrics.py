"""Prometheus metrics for consul-redirect.

Usage::

    from consul_redirect.observability.metrics import RESOLUTIONS_TOTAL

    RESOLUTIONS_TOTAL.labels(outcome="single_redirect").inc()
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# ---------------------------------------------------------------------------
# HTTP request metrics
# ---------------------------------------------------------------------------

HTTP_REQUESTS_TOTAL = Counter(
    "http_server_requests_total",
    "Total HTTP requests by method, handler, and status code.",
    labelnames=["method", "handler", "status"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_server_request_duration_seconds",
    "HTTP request latency in seconds.",
    labelnames=["method", "handler"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

HTTP_REQUESTS_IN_FLIGHT = Gauge(
    "http_server_requests_in_flight",
    "Number of HTTP requests currently being processed.",
    registry=REGISTRY,
)

# ---------------------------------------------------------------------------
# Resolution metrics
# ---------------------------------------------------------------------------

RESOLUTIONS_TOTAL = Counter(
    "consul_redirect_resolutions_total",
    "Hostname resolutions by outcome kind.",
    labelnames=["outcome"],
    registry=REGISTRY,
)

CATALOG_QUERY_DURATION_SECONDS = Histogram(
    "consul_redirect_catalog_query_duration_seconds",
    "Latency of Consul catalog service queries.",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=REGISTRY,
)


def metrics_text() -> tuple[bytes, str]:
    """Return the exposition payload and its content type."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
