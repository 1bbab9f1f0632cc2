"""
Starlette integration.

register_health_info() is the entry point for host applications: it
resolves commit details once, stores them on app.state and mounts the
enabled diagnostic routes. create_app() builds a standalone app for
app/main.py.
"""

import logging
from typing import Any, Optional

from starlette.applications import Starlette
from starlette.routing import BaseRoute

from health_info.commit_details import (
    CommitDetails,
    GitQuery,
    GitRunner,
    resolve_from_file,
    resolve_from_git,
)
from health_info.config import HealthInfoConfig, HealthInfoOptions
from health_info.http import (
    HealthInfoState,
    build_info,
    get_health_routes,
    get_info_routes,
    get_metrics_routes,
)

logger = logging.getLogger(__name__)

GIT_SOURCE = "git"


async def load_commit_details(
    options: HealthInfoOptions,
    query: Optional[GitQuery] = None,
) -> Optional[CommitDetails]:
    """
    Resolve commit details as selected by options.commit_details_from.

    Returns:
        CommitDetails, or None when commit_details_from is not set

    Raises:
        CommitDetailsError: If resolution fails
    """
    source = options.commit_details_from
    if not source:
        return None
    if source == GIT_SOURCE:
        return await resolve_from_git(query)
    return resolve_from_file(source)


def get_routes(options: HealthInfoOptions) -> list[BaseRoute]:
    """
    Get the enabled diagnostic routes.

    Args:
        options: Route options (prefix and disable flags)

    Returns:
        List of Starlette routes
    """
    routes: list[BaseRoute] = []
    if not options.disable_info:
        routes.extend(get_info_routes(options.prefix))
    if not options.disable_health:
        routes.extend(get_health_routes(options.prefix))
    if not options.disable_metrics:
        routes.extend(get_metrics_routes(options.prefix))
    return routes


async def register_health_info(
    app: Starlette,
    options: Optional[HealthInfoOptions | dict[str, Any]] = None,
    query: Optional[GitQuery] = None,
) -> HealthInfoState:
    """
    Add /health, /info and /metrics to a Starlette app.

    Commit details are resolved before any route is added, so a
    resolution failure leaves the app untouched.

    Args:
        app: Host application
        options: HealthInfoOptions or a dict of its fields
        query: GitQuery used when commit_details_from is "git"

    Returns:
        The state stored on app.state.health_info

    Raises:
        pydantic.ValidationError: If options are invalid
        CommitDetailsError: If commit details cannot be resolved
    """
    if options is None:
        options = HealthInfoOptions()
    elif not isinstance(options, HealthInfoOptions):
        options = HealthInfoOptions.model_validate(options)

    commit_details = await load_commit_details(options, query)

    state = HealthInfoState(
        commit_details=commit_details,
        info=build_info(commit_details, options.manifest_dir),
    )
    app.state.health_info = state

    routes = get_routes(options)
    app.router.routes.extend(routes)
    logger.info(
        "Registered diagnostic routes: %s",
        ", ".join(route.path for route in routes) or "none",
    )

    return state


async def create_app_async(
    config: HealthInfoConfig,
    query: Optional[GitQuery] = None,
) -> Starlette:
    """
    Create a Starlette app serving only the diagnostic routes.

    Args:
        config: Full configuration
        query: Optional GitQuery override (defaults to one built from config.git)

    Returns:
        Starlette application
    """
    if query is None:
        query = GitQuery(
            GitRunner(default_timeout=config.git.timeout, cwd=config.git.cwd)
        )

    app = Starlette()
    await register_health_info(app, config.routes, query)
    return app


def create_app(config: HealthInfoConfig) -> Starlette:
    """
    Create the Starlette app (sync wrapper).

    Raises:
        CommitDetailsError: If commit details cannot be resolved
    """
    import asyncio

    return asyncio.run(create_app_async(config))
