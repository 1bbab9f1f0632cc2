"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path
from typing import Callable, Iterable, Optional

import pytest


# Add app directory to path
APP_DIR = Path(__file__).parent.parent / "app"
sys.path.insert(0, str(APP_DIR))

from health_info.commit_details import CommandResult, CommandStatus, GitQuery  # noqa: E402


CI_ENV_VARS = (
    "GITHUB_HEAD_REF",
    "CI_COMMIT_BRANCH",
    "CI_MERGE_REQUEST_SOURCE_BRANCH_NAME",
    "CI_COMMIT_REF_NAME",
)

COMMIT_ID = "8896a0c4cb68614d499c0093c742d2e0c0074bf7"

MOCK_GIT_OUTPUT = {
    "git rev-parse HEAD": COMMIT_ID,
    "git log -n 1 --pretty=format:%cI": "2023-08-24T11:28:44+01:00",
    "git symbolic-ref HEAD": "refs/heads/afpc3687",
    "git describe --tags": "1.10.1",
}


class FakeGitRunner:
    """Stands in for GitRunner, answering from a dict of canned outputs."""

    def __init__(
        self,
        outputs: Optional[dict[str, str]] = None,
        failures: Iterable[str] = (),
    ):
        self.outputs = {**MOCK_GIT_OUTPUT, **(outputs or {})}
        self.failures = set(failures)
        self.commands: list[str] = []

    async def execute(self, command: str, timeout: Optional[int] = None) -> CommandResult:
        self.commands.append(command)
        if command in self.failures:
            return CommandResult(
                status=CommandStatus.ERROR,
                stdout="",
                stderr="fatal: bang",
                exit_code=128,
                command=command,
            )
        return CommandResult(
            status=CommandStatus.SUCCESS,
            stdout=self.outputs.get(command, "") + "\n",
            stderr="",
            exit_code=0,
            command=command,
        )


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test"
    )


@pytest.fixture(autouse=True)
def clean_ci_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests start without any CI branch variables set."""
    for name in CI_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_query() -> Callable[..., GitQuery]:
    """
    Factory for GitQuery objects backed by a FakeGitRunner.

    Usage:
        query = make_query(failures=["git describe --tags"])
    """

    def _make(**kwargs) -> GitQuery:
        return GitQuery(FakeGitRunner(**kwargs))

    return _make


@pytest.fixture
def commit_details_file(tmp_path: Path) -> Path:
    """A snapshot file as written by the snapshot CLI."""
    path = tmp_path / "commit-details.json"
    path.write_text(
        "{\n"
        '  "branch": "branch",\n'
        '  "commit": {\n'
        '    "id": "9ce898e",\n'
        '    "time": "2023-08-09T15:50:53+01:00"\n'
        "  },\n"
        '  "tag": "1.0.0",\n'
        '  "created": "2024-04-29T15:28:22.930Z"\n'
        "}\n",
        encoding="utf-8",
    )
    return path
