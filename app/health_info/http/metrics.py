"""
Process metrics endpoint.

Provides /metrics with uptime, memory and CPU counters of the server
process. Counters are read fresh on every request.
"""

import time
from typing import Any, Optional

import psutil
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route


def collect_process_metrics(process: Optional[psutil.Process] = None) -> dict[str, Any]:
    """
    Read uptime, memory and CPU usage for a process.

    Args:
        process: Process to inspect (defaults to the current process)

    Returns:
        Dict with "uptime" in seconds, "memory" in bytes and "cpu" in
        seconds of user/system time
    """
    process = process or psutil.Process()

    with process.oneshot():
        memory = process.memory_info()
        cpu = process.cpu_times()
        started = process.create_time()

    return {
        "uptime": max(time.time() - started, 0.0),
        "memory": memory._asdict(),
        "cpu": {
            "user": cpu.user,
            "system": cpu.system,
        },
    }


async def metrics_endpoint(request: Request) -> JSONResponse:
    """
    Process metrics endpoint.

    Returns:
        JSON response with uptime, memory and cpu
    """
    return JSONResponse(collect_process_metrics())


def get_metrics_routes(prefix: str = "") -> list[Route]:
    """
    Get metrics routes.

    Args:
        prefix: Path prefix, e.g. "/internal"

    Returns:
        List of Starlette Route objects
    """
    return [
        Route(f"{prefix}/metrics", metrics_endpoint, methods=["GET"]),
    ]
