"""Prometheus metrics for the static site deployer."""

from __future__ import annotations

import logging

from prometheus_client import REGISTRY, Counter, Histogram, push_to_gateway

logger = logging.getLogger(__name__)

# Pipeline metrics
pipeline_runs_total = Counter(
    "static_site_deployer_pipeline_runs_total",
    "Total number of pipeline runs",
    ["pipeline", "result"],
)

pipeline_duration_seconds = Histogram(
    "static_site_deployer_pipeline_duration_seconds",
    "Duration of pipeline runs in seconds",
    ["pipeline"],
    buckets=[1.0, 5.0, 30.0, 60.0, 300.0, 900.0, 1800.0, 3600.0],
)

step_total = Counter(
    "static_site_deployer_step_total",
    "Total number of pipeline steps executed",
    ["pipeline", "step", "result"],
)

# API call metrics
api_call_total = Counter(
    "static_site_deployer_api_call_total",
    "Total number of AWS API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "static_site_deployer_api_call_duration_seconds",
    "Duration of AWS API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

rate_limit_hits_total = Counter(
    "static_site_deployer_rate_limit_hits_total",
    "Total number of throttling responses from AWS",
    ["api_type"],
)

# Certificate issuance
certificate_polls_total = Counter(
    "static_site_deployer_certificate_polls_total",
    "Certificate status observations while waiting for issuance",
    ["status"],
)

# Sync
objects_synced_total = Counter(
    "static_site_deployer_objects_synced_total",
    "Objects uploaded or deleted while mirroring a directory",
    ["action"],
)


def push_metrics(gateway: str | None, job: str) -> None:
    """Push the default registry to a Pushgateway if one is configured.

    A failed push is logged and otherwise ignored; the deployment has already
    finished by the time metrics are pushed.
    """
    if not gateway:
        return
    try:
        push_to_gateway(gateway, job=job, registry=REGISTRY)
    except Exception as e:
        # a malformed gateway address raises ValueError from http.client
        logger.warning(f"Failed to push metrics to {gateway}: {e}")
