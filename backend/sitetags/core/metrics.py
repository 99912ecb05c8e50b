"""
Prometheus metrics configuration
"""
import os

from prometheus_client import (CONTENT_TYPE_LATEST, Counter, Histogram,
                               generate_latest)
from prometheus_client.multiprocess import MultiProcessCollector
from prometheus_client.registry import REGISTRY, CollectorRegistry

# Check if we're in multiprocess mode
if os.environ.get('PROMETHEUS_MULTIPROC_DIR'):
    _exposition_registry = CollectorRegistry()
    MultiProcessCollector(_exposition_registry)
else:
    _exposition_registry = REGISTRY

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

http_errors_total = Counter(
    'http_errors_total',
    'Total number of HTTP errors',
    ['method', 'endpoint', 'status_code', 'error_type']
)

# ============================================================================
# Catalog Metrics
# ============================================================================

catalog_entries_total = Counter(
    'catalog_entries_total',
    'Total number of entries created in the catalog',
    ['kind']  # kind: 'site', 'tag'
)

catalog_endorsements_total = Counter(
    'catalog_endorsements_total',
    'Total number of endorsement attempts',
    ['kind', 'direction', 'status']  # direction: 'positive', 'negative'
)

catalog_endorsement_weight_total = Counter(
    'catalog_endorsement_weight_total',
    'Total weight added by successful endorsements',
    ['kind', 'direction']
)

catalog_payments_burned_total = Counter(
    'catalog_payments_burned_total',
    'Total payment amount irrevocably burned',
    ['sink']
)


def record_entry_created(kind: str):
    catalog_entries_total.labels(kind=kind).inc()


def observe_endorsement(kind: str, positive: bool, status: str, weight_added: int = 0):
    """
    Record an endorsement attempt

    Args:
        kind: 'site' or 'tag'
        positive: endorsement direction
        status: 'success' or the error kind that aborted it
        weight_added: amount + budget credited on success
    """
    direction = "positive" if positive else "negative"
    catalog_endorsements_total.labels(kind=kind, direction=direction, status=status).inc()
    if weight_added:
        # prometheus counters are floats; huge weights lose precision here only
        catalog_endorsement_weight_total.labels(kind=kind, direction=direction).inc(float(weight_added))


def record_burn(sink: str, amount: int):
    if amount:
        catalog_payments_burned_total.labels(sink=sink).inc(float(amount))


def get_metrics():
    """
    Get Prometheus metrics in text format

    Returns:
        bytes: Metrics in Prometheus text format
    """
    return generate_latest(_exposition_registry)


def get_metrics_content_type():
    return CONTENT_TYPE_LATEST
