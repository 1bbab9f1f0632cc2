"""
Type definitions for commit details resolution.

This module defines the data structures used throughout the resolver:
- CommandResult / CommandStatus for git subprocess execution
- CommitDetails, the resolved identity of a build
- The exception hierarchy
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class CommandStatus(str, Enum):
    """Status of command execution."""

    SUCCESS = "success"
    ERROR = "error"
    TIMEOUT = "timeout"


@dataclass
class CommandResult:
    """
    Result of a git command execution.

    Attributes:
        status: Execution status
        stdout: Standard output
        stderr: Standard error output
        exit_code: Process exit code (None if not available, e.g., timeout)
        command: The command that was executed
        error_message: Human-readable error message (for error/timeout status)
    """

    status: CommandStatus
    stdout: str
    stderr: str
    exit_code: Optional[int]
    command: str
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.status == CommandStatus.SUCCESS and self.exit_code == 0


class Commit(BaseModel):
    """A single commit: full hash and commit time."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    time: str


class CommitDetails(BaseModel):
    """
    Resolved identity of a build.

    Created once per resolution and never mutated. The persistence path
    produces a copy with ``created`` stamped instead of changing this one.

    Attributes:
        branch: Branch name, or "detached HEAD"
        commit: Commit id and time
        tag: Nearest tag, absent when no tag is reachable
        created: When the snapshot file was written (snapshots only)
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    branch: str
    commit: Commit
    tag: Optional[str] = None
    created: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization, dropping absent fields."""
        return self.model_dump(exclude_none=True)


def to_iso_utc(value: datetime) -> str:
    """
    Format a datetime as UTC ISO-8601 with millisecond precision.

    Example: 2023-08-24T11:28:44+01:00 -> 2023-08-24T10:28:44.000Z
    """
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    """Current instant as UTC ISO-8601 with millisecond precision."""
    return to_iso_utc(datetime.now(timezone.utc))


class HealthInfoError(Exception):
    """Base exception for health info errors."""

    pass


class GitCommandError(HealthInfoError):
    """Raised when a git subcommand fails."""

    def __init__(self, command: str, exit_code: Optional[int], stderr: str = ""):
        detail = stderr.strip() or f"exit code {exit_code}"
        super().__init__(f"git command failed: {command}: {detail}")
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class CommitDetailsError(HealthInfoError):
    """Raised when commit details cannot be resolved or loaded."""

    pass


class CommitDetailsWriteError(HealthInfoError):
    """Raised when the commit details snapshot cannot be written."""

    pass
