"""
Prometheus metrics configuration
"""
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

# ============================================================================
# Contract Decorator Metrics
# ============================================================================

contract_decorator_resolutions_total = Counter(
    'contract_decorator_resolutions_total',
    'Total number of contract decorator resolutions',
    ['imported', 'outcome']  # outcome: 'success', 'interface_not_found', 'incompatible'
)

contract_decorators_loaded = Counter(
    'contract_decorators_loaded_total',
    'Contract decorators and interfaces loaded from disk',
    ['kind', 'status']  # kind: 'contract', 'interface'; status: 'loaded', 'skipped'
)

decoded_events_total = Counter(
    'decoded_events_total',
    'Total number of decoded event logs',
    ['status']
)

# ============================================================================
# Database Metrics
# ============================================================================

db_queries_total = Counter(
    'db_queries_total',
    'Total number of database queries',
    ['operation']
)


def get_metrics() -> bytes:
    """Render all registered metrics in Prometheus exposition format"""
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
