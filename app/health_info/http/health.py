"""
Health check endpoint.

Provides /health for liveness probes. It never depends on commit
details or any other startup state.
"""

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route


async def health_check(request: Request) -> JSONResponse:
    """
    Liveness probe endpoint.

    Returns:
        JSON response with health status
    """
    return JSONResponse({"status": "UP"})


def get_health_routes(prefix: str = "") -> list[Route]:
    """
    Get health check routes.

    Args:
        prefix: Path prefix, e.g. "/internal"

    Returns:
        List of Starlette Route objects
    """
    return [
        Route(f"{prefix}/health", health_check, methods=["GET"]),
    ]
