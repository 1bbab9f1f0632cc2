"""
Commit details snapshot files.

A snapshot lets a server report its commit details without git being
available at runtime (e.g. inside a container image). It is written
once at build time and loaded with resolve_from_file().
"""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

from health_info.commit_details.query import GitQuery
from health_info.commit_details.resolver import resolve_from_git
from health_info.commit_details.types import (
    CommitDetails,
    CommitDetailsWriteError,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_PATH = "./.commit-details.json"


def _check_extension(path: Union[str, Path]) -> None:
    if not str(path).endswith(".json"):
        raise ValueError("file name must have a .json extension")


def _file_mode(path: Path) -> int:
    """Mode for a new snapshot: the existing file's, else 0666 minus umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _atomic_write(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        # mkstemp creates 0600 files
        os.chmod(tmp_name, _file_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def persist(path: Union[str, Path], details: CommitDetails) -> str:
    """
    Write commit details to a JSON snapshot file.

    The written record is a copy of ``details`` with ``created`` set to
    the current instant; ``details`` itself is left untouched.

    Args:
        path: Output path, must end in .json
        details: Resolved commit details

    Returns:
        The path written

    Raises:
        ValueError: If path does not end in .json (checked before any I/O)
        CommitDetailsWriteError: If the file cannot be written
    """
    _check_extension(path)

    stamped = details.model_copy(update={"created": utc_now_iso()})
    content = json.dumps(stamped.to_dict(), indent=2) + "\n"

    try:
        _atomic_write(Path(path), content)
    except OSError as e:
        raise CommitDetailsWriteError(f"failed to write commit details to {path}") from e

    logger.info("Wrote commit details to %s", path)
    return str(path)


async def write_commit_details_json(
    path: Optional[str] = None,
    query: Optional[GitQuery] = None,
) -> str:
    """
    Resolve commit details from git and write them to a snapshot file.

    Args:
        path: Output path (default ./.commit-details.json)
        query: GitQuery to resolve with

    Returns:
        The path written

    Raises:
        ValueError: If path does not end in .json
        CommitDetailsWriteError: If resolution or writing fails
    """
    path = path or DEFAULT_SNAPSHOT_PATH
    _check_extension(path)

    try:
        details = await resolve_from_git(query)
    except Exception as e:
        raise CommitDetailsWriteError(f"failed to write commit details to {path}") from e

    return persist(path, details)
