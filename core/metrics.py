"""
Prometheus metrics for the license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued",
)

licenses_reissued_total = Counter(
    "licenses_reissued_total",
    "Total license keys rotated",
)

license_status_changes_total = Counter(
    "license_status_changes_total",
    "Total license status changes",
    ["status"],
)

# Activation metrics
license_activations_total = Counter(
    "license_activations_total",
    "Activation requests by outcome",
    ["result"],
)

license_activations_released_total = Counter(
    "license_activations_released_total",
    "Total activations released",
    ["reason"],
)

activation_count_drift_total = Counter(
    "activation_count_drift_total",
    "Licenses found with a cached activation count different from the live count",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
