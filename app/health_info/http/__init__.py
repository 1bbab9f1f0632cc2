"""
HTTP endpoints for diagnostics.

Provides:
- /health: liveness probe
- /info: application, runtime and git build details
- /metrics: process uptime, memory and CPU usage
"""

from health_info.http.health import get_health_routes, health_check
from health_info.http.info import (
    HealthInfoState,
    build_info,
    get_info_routes,
    info_endpoint,
)
from health_info.http.metrics import (
    collect_process_metrics,
    get_metrics_routes,
    metrics_endpoint,
)

__all__ = [
    "get_health_routes",
    "health_check",
    "HealthInfoState",
    "build_info",
    "get_info_routes",
    "info_endpoint",
    "collect_process_metrics",
    "get_metrics_routes",
    "metrics_endpoint",
]
