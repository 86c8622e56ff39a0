"""Prometheus metric inventory.

Every metric the service exports is declared here; the modules that own
the behavior import and increment them at the point of action.  Scraped
from GET /metrics.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Assessment metrics
# ---------------------------------------------------------------------------

ASSESSMENT_SETS_GENERATED = Counter(
    "assessment_sets_generated_total",
    "Question sets drawn from the question bank",
    ["result"],  # "full", "short" (fewer than requested), "empty"
)

SUBMISSIONS = Counter(
    "submissions_total",
    "Assessment submissions handled by the API",
    ["outcome"],  # "created", "replayed", "conflict"
)

SESSION_EVENTS = Counter(
    "session_events_total",
    "Timed session lifecycle and anti-cheat signals",
    # "started", "submitted", "auto_submitted", "submit_failed",
    # "visibility_warning", "fullscreen_failed"
    ["event"],
)

CACHE_OPERATIONS = Counter(
    "cache_operations_total",
    "Cache get operations by result",
    ["operation"],  # "hit" or "miss"
)
