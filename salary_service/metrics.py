"""
Prometheus metrics for Salary Service.

Tracks HTTP traffic and record store operations.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "salary_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "salary_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0)
)

# Store metrics
store_operations_total = Counter(
    "salary_store_operations_total",
    "Total record store operations",
    ["operation", "status"]
)

store_entries = Gauge(
    "salary_store_entries",
    "Salary entries currently held in memory"
)


def track_request_metrics(method: str, endpoint: str, status_code: int, duration: float):
    """Track HTTP request metrics."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


def track_store_operation(operation: str, success: bool):
    """Track record store operations."""
    status = "success" if success else "failure"
    store_operations_total.labels(operation=operation, status=status).inc()


def update_entry_count(count: int):
    """Update the in-memory entry gauge."""
    store_entries.set(count)


async def metrics_endpoint():
    """
    Prometheus metrics endpoint.

    Returns:
        Response with Prometheus metrics in text format
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
