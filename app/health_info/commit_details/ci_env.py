"""
Branch detection from CI environment variables.

git cannot report the branch name inside GitHub Actions or GitLab CI
(checkouts are detached), so the CI variables are consulted first.

Rules are evaluated in order, first match wins:
1. GITHUB_HEAD_REF (refs/heads/ prefix stripped)
2. CI_COMMIT_BRANCH
3. CI_MERGE_REQUEST_SOURCE_BRANCH_NAME
4. CI_COMMIT_REF_NAME set without the two above -> "main"
5. Otherwise defer to git

Rule 4 is an approximation: GitLab tag pipelines only expose the ref
name, which is the tag, so the build is assumed to be on the default
branch. Tag pipelines on other branches are mislabelled.
"""

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Union

from health_info.commit_details.query import strip_heads_prefix

# GitLab CI, see https://docs.gitlab.com/ee/ci/variables/predefined_variables.html
GL_BRANCH = "CI_COMMIT_BRANCH"
GL_MR_BRANCH = "CI_MERGE_REQUEST_SOURCE_BRANCH_NAME"
GL_REF_NAME = "CI_COMMIT_REF_NAME"

# GitHub Actions
GH_BRANCH = "GITHUB_HEAD_REF"

DEFAULT_BRANCH = "main"


@dataclass(frozen=True)
class Known:
    """Branch name determined from the environment."""

    name: str


@dataclass(frozen=True)
class Deferred:
    """Environment does not say; ask git."""


BranchSource = Union[Known, Deferred]

BranchRule = tuple[Callable[[Mapping[str, str]], bool], Callable[[Mapping[str, str]], str]]


def _is_set(name: str) -> Callable[[Mapping[str, str]], bool]:
    return lambda environ: bool(environ.get(name))


BRANCH_RULES: list[BranchRule] = [
    (_is_set(GH_BRANCH), lambda environ: strip_heads_prefix(environ[GH_BRANCH])),
    (_is_set(GL_BRANCH), lambda environ: environ[GL_BRANCH]),
    (_is_set(GL_MR_BRANCH), lambda environ: environ[GL_MR_BRANCH]),
    (_is_set(GL_REF_NAME), lambda environ: DEFAULT_BRANCH),
]


def resolve_branch_from_env(environ: Optional[Mapping[str, str]] = None) -> BranchSource:
    """
    Determine the branch from CI variables.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Known(name) if a rule matched, Deferred() otherwise
    """
    if environ is None:
        environ = os.environ

    for predicate, extract in BRANCH_RULES:
        if predicate(environ):
            return Known(extract(environ))
    return Deferred()
