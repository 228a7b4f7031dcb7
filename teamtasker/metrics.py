"""
Prometheus metrics for the task tracker.

Tracks HTTP requests, page views and task/member operations.
"""

from fastapi import Response
from prometheus_client import (CONTENT_TYPE_LATEST, Counter, Gauge, Histogram,
                               generate_latest)

# Request metrics
http_requests_total = Counter(
    "teamtasker_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "teamtasker_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

page_views_total = Counter("teamtasker_page_views_total", "Total page views", ["page"])

# Domain metrics
task_operations_total = Counter(
    "teamtasker_task_operations_total",
    "Total task and member operations",
    ["operation", "status"],
)

open_tasks = Gauge("teamtasker_open_tasks", "Number of tasks not yet completed")


def track_request_metrics(
    method: str, endpoint: str, status_code: int, duration: float
):
    """Track HTTP request metrics."""
    http_requests_total.labels(
        method=method, endpoint=endpoint, status=status_code
    ).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
        duration
    )


def track_page_view(page: str):
    page_views_total.labels(page=page).inc()


def track_task_operation(operation: str, success: bool):
    """Track a task or member operation."""
    status = "success" if success else "failure"
    task_operations_total.labels(operation=operation, status=status).inc()


def update_open_tasks(count: int):
    open_tasks.set(count)


async def metrics_endpoint():
    """
    Prometheus metrics endpoint.

    Returns:
        Response with Prometheus metrics in text format
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
