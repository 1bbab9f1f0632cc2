"""
Commit details resolution.

Produces one CommitDetails either from git (with CI environment
overrides for the branch) or from a snapshot file written earlier by
the persistence step.
"""

import asyncio
import logging
from pathlib import Path
from typing import Mapping, Optional, Union

from health_info.commit_details.ci_env import Known, resolve_branch_from_env
from health_info.commit_details.query import GitQuery
from health_info.commit_details.types import Commit, CommitDetails, CommitDetailsError

logger = logging.getLogger(__name__)


async def _resolve_branch(query: GitQuery, environ: Optional[Mapping[str, str]]) -> str:
    source = resolve_branch_from_env(environ)
    if isinstance(source, Known):
        return source.name
    return await query.branch()


async def resolve_from_git(
    query: Optional[GitQuery] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CommitDetails:
    """
    Resolve commit details from git.

    The four lookups run concurrently and are joined with one barrier.
    If commit id or commit time fails, the other lookups are cancelled
    and nothing is returned.

    Args:
        query: GitQuery to use (defaults to one running in the process cwd)
        environ: Environment mapping for CI branch detection

    Returns:
        CommitDetails for HEAD

    Raises:
        CommitDetailsError: If commit id or commit time cannot be read
    """
    query = query or GitQuery()

    tasks = [
        asyncio.create_task(query.tag()),
        asyncio.create_task(query.commit_id()),
        asyncio.create_task(query.commit_time()),
        asyncio.create_task(_resolve_branch(query, environ)),
    ]

    try:
        tag, commit_id, commit_time, branch = await asyncio.gather(*tasks)
    except Exception as e:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise CommitDetailsError("could not load commit details from git") from e

    details = CommitDetails(
        branch=branch,
        commit=Commit(id=commit_id, time=commit_time),
        tag=tag,
    )
    logger.info(
        "Resolved commit details from git: branch=%s commit=%s tag=%s",
        details.branch,
        details.commit.id,
        details.tag,
    )
    return details


def resolve_from_file(path: Union[str, Path]) -> CommitDetails:
    """
    Load commit details from a snapshot file.

    Args:
        path: Path to a JSON file written by persist()

    Returns:
        CommitDetails as stored in the file

    Raises:
        CommitDetailsError: If the file cannot be read or parsed
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
        details = CommitDetails.model_validate_json(text)
    except (OSError, ValueError) as e:
        raise CommitDetailsError(f"could not load commit details from: {path}") from e

    logger.info("Loaded commit details from %s", path)
    return details
