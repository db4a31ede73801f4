"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Store metrics
store_operations = Counter(
    'store_operations_total',
    'Total data file operations',
    ['operation']  # load, save
)

store_errors = Counter(
    'store_errors_total',
    'Data file operations that failed',
    ['operation']
)

store_latency = Histogram(
    'store_latency_seconds',
    'Data file operation latency',
    ['operation'],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5]
)

# Repository metrics
mutations = Counter(
    'mutations_total',
    'Repository mutations',
    ['entity', 'operation', 'status']  # success, not_found, invalid, error
)

# Event bus metrics
bus_publications = Counter(
    'bus_publications_total',
    'Payloads published on the event bus',
    ['topic']
)

bus_dropped = Counter(
    'bus_dropped_total',
    'Payloads discarded from full subscriber queues',
    ['topic']
)

active_subscriptions = Gauge(
    'bus_active_subscriptions',
    'Currently registered subscribers',
    ['topic']
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_store_operation(operation: str, seconds: float, failed: bool = False):
    """Record a load/save against the data file."""
    store_operations.labels(operation=operation).inc()
    store_latency.labels(operation=operation).observe(seconds)
    if failed:
        store_errors.labels(operation=operation).inc()


def record_mutation(entity: str, operation: str, status: str):
    """Record repository mutation. Status: success, not_found, invalid, error"""
    mutations.labels(entity=entity, operation=operation, status=status).inc()


def record_publication(topic: str, dropped: int = 0):
    bus_publications.labels(topic=topic).inc()
    if dropped:
        bus_dropped.labels(topic=topic).inc(dropped)


def set_subscriber_count(topic: str, count: int):
    active_subscriptions.labels(topic=topic).set(count)
