"""
Read commit information from git.

Commit id and commit time failures mean we are not inside a usable
repository and propagate as GitCommandError. Branch and tag failures
are legitimate repository states (detached checkout, untagged history)
and are returned as values.
"""

import logging
from datetime import datetime
from typing import Optional

from health_info.commit_details.runner import GitRunner
from health_info.commit_details.types import GitCommandError, to_iso_utc

logger = logging.getLogger(__name__)

COMMIT_ID_CMD = "git rev-parse HEAD"
COMMIT_TIME_CMD = "git log -n 1 --pretty=format:%cI"
BRANCH_CMD = "git symbolic-ref HEAD"
TAG_CMD = "git describe --tags"

HEADS_PREFIX = "refs/heads/"
DETACHED_HEAD = "detached HEAD"


def strip_heads_prefix(ref: str) -> str:
    """Remove a leading refs/heads/ from a ref name."""
    if ref.startswith(HEADS_PREFIX):
        return ref[len(HEADS_PREFIX):]
    return ref


class GitQuery:
    """Runs the four git lookups used to build CommitDetails."""

    def __init__(self, runner: Optional[GitRunner] = None):
        self.runner = runner or GitRunner()

    async def _output(self, command: str) -> str:
        result = await self.runner.execute(command)
        if not result.success:
            raise GitCommandError(command, result.exit_code, result.stderr)
        return result.stdout.strip()

    async def commit_id(self) -> str:
        """Full hash of HEAD."""
        return await self._output(COMMIT_ID_CMD)

    async def commit_time(self) -> str:
        """Committer time of HEAD, normalized to UTC ISO-8601."""
        raw = await self._output(COMMIT_TIME_CMD)
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError as e:
            raise GitCommandError(
                COMMIT_TIME_CMD, 0, f"unexpected commit time: {raw!r}"
            ) from e
        return to_iso_utc(parsed)

    async def branch(self) -> str:
        """Current branch name, or "detached HEAD" if HEAD is not symbolic."""
        try:
            ref = await self._output(BRANCH_CMD)
        except GitCommandError as e:
            logger.debug("No symbolic ref for HEAD: %s", e)
            return DETACHED_HEAD
        return strip_heads_prefix(ref)

    async def tag(self) -> Optional[str]:
        """Nearest reachable tag, or None if there is none."""
        try:
            tag = await self._output(TAG_CMD)
        except GitCommandError as e:
            logger.debug("No tag found: %s", e)
            return None
        return tag or None
