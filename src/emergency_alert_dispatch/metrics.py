"""Prometheus metrics for alert dispatch."""

from __future__ import annotations

import logging

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

DISPATCH_TOTAL = Counter(
    "alert_dispatch_total",
    "Total number of dispatches by aggregate outcome",
    ["category", "outcome"],
)

DELIVERIES_TOTAL = Counter(
    "alert_deliveries_total",
    "Total number of per-recipient delivery attempts",
    ["category", "status"],
)

DISPATCH_DURATION = Histogram(
    "alert_dispatch_duration_seconds",
    "Wall time of a full dispatch including pacing",
    ["category"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)


def start_metrics_server(port: int) -> None:
    """Expose metrics over HTTP on the given port."""
    start_http_server(port)
    logger.info(f"Metrics server listening on port {port}")
