"""
Build information endpoint.

Provides /info with the Python version, the host application's
pyproject.toml metadata and, when resolved at startup, git commit
details. The payload is computed once at registration.
"""

import logging
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from health_info.commit_details.types import CommitDetails
from health_info.manifest import find_project_manifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HealthInfoState:
    """
    Startup state shared read-only by the diagnostic handlers.

    Attributes:
        commit_details: Resolved commit details, None if not configured
        info: Precomputed /info payload
    """

    commit_details: Optional[CommitDetails]
    info: dict[str, Any]


def build_info(
    commit_details: Optional[CommitDetails] = None,
    manifest_dir: Optional[str | Path] = None,
) -> dict[str, Any]:
    """
    Build the /info payload.

    Args:
        commit_details: Commit details resolved at startup
        manifest_dir: Where to start looking for pyproject.toml

    Returns:
        Dict ready for JSON serialization
    """
    info: dict[str, Any] = {
        "python": {
            "version": platform.python_version(),
        },
    }

    manifest = find_project_manifest(manifest_dir)
    if manifest is not None:
        info["application"] = manifest.to_dict()
    else:
        logger.warning(
            "health-info: could not find pyproject.toml file, cannot add app data to /info"
        )

    if commit_details is not None:
        if commit_details.tag:
            info.setdefault("application", {})["version"] = commit_details.tag

        info["git"] = {
            "branch": commit_details.branch,
            "commit": commit_details.commit.model_dump(),
        }

        if commit_details.created:
            info["build"] = {"time": commit_details.created}

    return info


async def info_endpoint(request: Request) -> JSONResponse:
    """
    Build information endpoint.

    Returns:
        JSON response with runtime, application and git details
    """
    state: Optional[HealthInfoState] = getattr(request.app.state, "health_info", None)
    if state is None:
        # Routes mounted without register_health_info()
        return JSONResponse(build_info())

    return JSONResponse(state.info)


def get_info_routes(prefix: str = "") -> list[Route]:
    """
    Get info routes.

    Args:
        prefix: Path prefix, e.g. "/internal"

    Returns:
        List of Starlette Route objects
    """
    return [
        Route(f"{prefix}/info", info_endpoint, methods=["GET"]),
    ]
