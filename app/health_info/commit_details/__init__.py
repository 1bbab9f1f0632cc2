"""
Commit details resolution.

This module handles:
- Branch detection from CI environment variables
- Async git subprocess execution and parsing
- Resolving CommitDetails from git or a snapshot file
- Writing snapshot files
"""

from health_info.commit_details.types import (
    Commit,
    CommitDetails,
    CommandResult,
    CommandStatus,
    HealthInfoError,
    GitCommandError,
    CommitDetailsError,
    CommitDetailsWriteError,
)
from health_info.commit_details.runner import GitRunner
from health_info.commit_details.query import GitQuery, DETACHED_HEAD
from health_info.commit_details.ci_env import (
    BranchSource,
    Deferred,
    Known,
    resolve_branch_from_env,
)
from health_info.commit_details.resolver import resolve_from_file, resolve_from_git
from health_info.commit_details.persistence import (
    DEFAULT_SNAPSHOT_PATH,
    persist,
    write_commit_details_json,
)

__all__ = [
    # Types
    "Commit",
    "CommitDetails",
    "CommandResult",
    "CommandStatus",
    # Exceptions
    "HealthInfoError",
    "GitCommandError",
    "CommitDetailsError",
    "CommitDetailsWriteError",
    # Git
    "GitRunner",
    "GitQuery",
    "DETACHED_HEAD",
    # CI environment
    "BranchSource",
    "Known",
    "Deferred",
    "resolve_branch_from_env",
    # Resolution
    "resolve_from_git",
    "resolve_from_file",
    # Snapshots
    "DEFAULT_SNAPSHOT_PATH",
    "persist",
    "write_commit_details_json",
]
