"""
Prometheus metrics collection for crm-quality

This module provides metrics instrumentation for monitoring
mapping resolution, record validation and cleansing job health.
"""
import os
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# MAPPING METRICS
# =======================

mapping_suggestions_total = Counter(
    name="crm_quality_mapping_suggestions_total",
    documentation="Total number of field mapping suggestions produced",
    labelnames=["tier"],  # tier: exact, pattern, similarity
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

records_processed_total = Counter(
    name="crm_quality_records_processed_total",
    documentation="Total number of records evaluated by cleansing jobs",
    labelnames=["object_type", "status"],  # status: valid, invalid
    registry=REGISTRY,
)

validation_issues_total = Counter(
    name="crm_quality_validation_issues_total",
    documentation="Total number of validation issues recorded",
    labelnames=["object_type", "error_kind", "field_name"],
    registry=REGISTRY,
)

duplicates_detected_total = Counter(
    name="crm_quality_duplicates_detected_total",
    documentation="Total number of job-wide duplicate records detected",
    labelnames=["object_type"],
    registry=REGISTRY,
)

quality_score = Gauge(
    name="crm_quality_overall_quality_score",
    documentation="Overall quality percentage of the most recently finished job",
    labelnames=["object_type"],
    registry=REGISTRY,
)

# =======================
# JOB METRICS
# =======================

batch_size = Histogram(
    name="crm_quality_batch_size_records",
    documentation="Number of records in each processed batch",
    labelnames=["object_type"],
    buckets=[10, 50, 100, 500, 1000, 5000, 10000, 50000],
    registry=REGISTRY,
)

jobs_finished_total = Counter(
    name="crm_quality_jobs_finished_total",
    documentation="Total number of cleansing jobs reaching a terminal state",
    labelnames=["object_type", "status"],  # status: completed, completed_with_errors, failed
    registry=REGISTRY,
)

persistence_failures_total = Counter(
    name="crm_quality_persistence_failures_total",
    documentation="Total number of checkpoint or issue writes that failed",
    labelnames=["operation"],  # operation: checkpoint, issues
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Lazy import: binding a port is only wanted when the endpoint is enabled
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)
