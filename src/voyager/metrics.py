"""Prometheus metrics for voice routing."""

from prometheus_client import Counter, Histogram

route_attempts = Counter(
    'voyager_route_attempts_total',
    'Voice routing attempts by terminal outcome',
    ['outcome']
)

interpreter_failures = Counter(
    'voyager_interpreter_failures_total',
    'Remote interpreter failures that fell back to local search',
    ['kind']
)

interpreter_duration = Histogram(
    'voyager_interpreter_duration_seconds',
    'Remote interpreter call duration in seconds',
    buckets=[0.1, 0.25, 0.5, 0.75, 1.0, 1.5, 2.0, 3.0, 5.0, 10.0]
)

search_requests = Counter(
    'voyager_search_requests_total',
    'Local search requests by status',
    ['status']
)
