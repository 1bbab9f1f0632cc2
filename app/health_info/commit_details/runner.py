"""
Async git command execution.

This module runs git subcommands using asyncio subprocess management.
It includes:
- Argument splitting (commands are never passed through a shell)
- Timeout handling (the process is killed on timeout)
- Proper exit code handling
- Missing binary / OS errors reported as results, not exceptions
"""

import asyncio
import logging
import shlex
from typing import Optional

from health_info.commit_details.types import CommandResult, CommandStatus

logger = logging.getLogger(__name__)


class GitRunner:
    """
    Executes git commands with a timeout and optional working directory.

    Every call returns a CommandResult. Callers decide whether a failed
    command is fatal or an expected repository state.
    """

    def __init__(
        self,
        default_timeout: int = 10,
        cwd: Optional[str] = None,
    ):
        """
        Initialize the git runner.

        Args:
            default_timeout: Default timeout in seconds
            cwd: Working directory for git (defaults to the process cwd)
        """
        self.default_timeout = default_timeout
        self.cwd = cwd

    async def execute(
        self,
        command: str,
        timeout: Optional[int] = None,
    ) -> CommandResult:
        """
        Execute a git command.

        Args:
            command: The command string to execute, e.g. "git rev-parse HEAD"
            timeout: Optional timeout override in seconds

        Returns:
            CommandResult with execution results
        """
        timeout = timeout or self.default_timeout

        try:
            args = shlex.split(command)
        except ValueError as e:
            return CommandResult(
                status=CommandStatus.ERROR,
                stdout="",
                stderr=f"Failed to parse command: {e}",
                exit_code=None,
                command=command,
                error_message=f"Parse error: {e}",
            )

        logger.debug("Running %s (cwd=%s)", command, self.cwd or ".")

        try:
            return await self._execute(command, args, timeout)
        except asyncio.TimeoutError:
            return CommandResult(
                status=CommandStatus.TIMEOUT,
                stdout="",
                stderr=f"Command timed out after {timeout} seconds",
                exit_code=None,
                command=command,
                error_message=f"Timeout after {timeout}s",
            )
        except OSError as e:
            # git not installed, cwd missing, ...
            return CommandResult(
                status=CommandStatus.ERROR,
                stdout="",
                stderr=str(e),
                exit_code=None,
                command=command,
                error_message=f"Execution error: {type(e).__name__}: {e}",
            )

    async def _execute(
        self,
        command: str,
        args: list[str],
        timeout: int,
    ) -> CommandResult:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=self.cwd,
        )

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, asyncio.CancelledError):
            # No git child may outlive its task
            try:
                process.kill()
                await process.wait()
            except ProcessLookupError:
                pass
            raise

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")

        exit_code = process.returncode
        status = CommandStatus.SUCCESS if exit_code == 0 else CommandStatus.ERROR

        return CommandResult(
            status=status,
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
            command=command,
        )
