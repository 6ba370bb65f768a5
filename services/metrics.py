"""
Prometheus Metrics Module
Version: 1.0.0

Provides application metrics for monitoring.

Usage:
    from services.metrics import record_booking_operation

    record_booking_operation("create", "success")
"""
from prometheus_client import Counter, Histogram, Gauge, Info, REGISTRY
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response


# =============================================================================
# APPLICATION INFO
# =============================================================================

APP_INFO = Info(
    'bookings_app',
    'Application information'
)


# =============================================================================
# REQUEST METRICS
# =============================================================================

REQUEST_DURATION = Histogram(
    'bookings_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0]
)

REQUEST_COUNT = Counter(
    'bookings_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)


# =============================================================================
# BOOKING METRICS
# =============================================================================

BOOKING_OPERATIONS_TOTAL = Counter(
    'bookings_operations_total',
    'Booking service operations',
    ['operation', 'outcome']  # outcome: success, validation_error, not_found, ...
)

BOOKINGS_STORED = Gauge(
    'bookings_stored',
    'Number of bookings currently held in the store'
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def set_app_info(version: str, environment: str):
    """Set application info metrics."""
    APP_INFO.info({
        'version': version,
        'environment': environment
    })


def record_request(method: str, endpoint: str, status_code: int, duration_seconds: float):
    """Record a served HTTP request."""
    labels = dict(method=method, endpoint=endpoint, status_code=str(status_code))
    REQUEST_COUNT.labels(**labels).inc()
    REQUEST_DURATION.labels(**labels).observe(duration_seconds)


def record_booking_operation(operation: str, outcome: str):
    BOOKING_OPERATIONS_TOTAL.labels(operation=operation, outcome=outcome).inc()


def set_bookings_stored(count: int):
    BOOKINGS_STORED.set(count)


def get_metrics() -> Response:
    """Generate Prometheus metrics response."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )
