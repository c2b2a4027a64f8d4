"""
Prometheus Metrics Module

Authorization metrics exposed at the /metrics endpoint.
"""

import time

from prometheus_client import Counter, Gauge, Info

# =============================================================================
# Application Info
# =============================================================================

APP_INFO = Info("entitlement_engine_app", "Entitlement engine information")


def set_app_info(version: str, environment: str) -> None:
    """Set application info labels."""
    APP_INFO.info({"version": version, "environment": environment})


APP_UPTIME_SECONDS = Gauge(
    "entitlement_engine_uptime_seconds",
    "Application uptime in seconds",
)

# =============================================================================
# Usage Cache Metrics
# =============================================================================

USAGE_CACHE_HITS_TOTAL = Counter(
    "entitlement_engine_usage_cache_hits_total",
    "Usage counter lookups served from the cache",
    ["resource_type"],
)

USAGE_CACHE_MISSES_TOTAL = Counter(
    "entitlement_engine_usage_cache_misses_total",
    "Usage counter lookups that called the counting collaborator",
    ["resource_type"],
)

USAGE_CACHE_ENTRIES = Gauge(
    "entitlement_engine_usage_cache_entries",
    "Number of cached usage counters",
)

# =============================================================================
# Decision Metrics
# =============================================================================

AUTHORIZATION_DECISIONS_TOTAL = Counter(
    "entitlement_engine_authorization_decisions_total",
    "Authorization decisions by component and outcome",
    ["component", "outcome"],
)

USAGE_CHECKS_DEGRADED_TOTAL = Counter(
    "entitlement_engine_usage_checks_degraded_total",
    "Usage checks that failed open after a collaborator error",
    ["resource_type"],
)


def record_cache_hit(resource_type: str) -> None:
    """Record a usage cache hit."""
    USAGE_CACHE_HITS_TOTAL.labels(resource_type=resource_type).inc()


def record_cache_miss(resource_type: str) -> None:
    """Record a usage cache miss."""
    USAGE_CACHE_MISSES_TOTAL.labels(resource_type=resource_type).inc()


def update_cache_size(size: int) -> None:
    USAGE_CACHE_ENTRIES.set(size)


def record_decision(component: str, allowed: bool) -> None:
    """Record an allow/deny outcome for a component (permission, feature, usage, tenant, resource)."""
    AUTHORIZATION_DECISIONS_TOTAL.labels(component=component, outcome="allow" if allowed else "deny").inc()


def record_degraded_usage_check(resource_type: str) -> None:
    USAGE_CHECKS_DEGRADED_TOTAL.labels(resource_type=resource_type).inc()


def update_uptime(start_time: float) -> None:
    """Update application uptime."""
    APP_UPTIME_SECONDS.set(time.time() - start_time)
