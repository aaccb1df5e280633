"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from fastapi import Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

# Reservation metrics
reservation_outcomes = Counter(
    'ticket_reservations_total',
    'Ticket reservation attempts by terminal state',
    ['status']  # reserved, capacity_exceeded, unknown_reference, bad_request, error
)

reservation_latency = Histogram(
    'ticket_reservation_latency_seconds',
    'End-to-end reservation latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Admission control metrics
admission_lock_wait = Histogram(
    'admission_lock_wait_seconds',
    'Time spent waiting for a per-event admission lock',
    ['strategy'],
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)

admission_timeouts = Counter(
    'admission_lock_timeouts_total',
    'Admission attempts that gave up waiting for the event lock',
    ['strategy']
)

redis_lock_errors = Counter(
    'redis_admission_lock_errors_total',
    'Redis failures while taking or releasing an admission lock',
    ['phase']  # acquire, release
)

# Database metrics
store_errors = Counter(
    'store_errors_total',
    'Storage failures surfaced as StoreError',
    ['operation']
)

# Cache metrics
cache_operations = Counter(
    'event_cache_operations_total',
    'Event cache operations',
    ['operation', 'result']  # get/set, hit/miss/error
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_reservation(status: str):
    """Record a reservation outcome."""
    reservation_outcomes.labels(status=status).inc()


def record_store_error(operation: str):
    store_errors.labels(operation=operation).inc()


def record_cache_operation(operation: str, result: str):
    cache_operations.labels(operation=operation, result=result).inc()
