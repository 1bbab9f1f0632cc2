#!/usr/bin/env python3
"""
Standalone health-check probe.

Sends one GET to a server's health route and exits 0 if it answered
with a 2xx status, 1 otherwise. Meant for container HEALTHCHECK
instructions, where no shell or curl may be available.

Examples:
  # GET http://localhost:$PORT$HEALTH_BASE_PATH$HEALTH_PATH
  health-info-healthcheck

  # Explicit URL
  health-info-healthcheck http://localhost:3000/health

  # Read the health path from a different variable
  health-info-healthcheck --path-var=CUSTOM_PATH
"""

import argparse
import os
import posixpath
import re
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, TextIO

import httpx

DEFAULT_PORT = "8080"
DEFAULT_BASE_PATH = "/"
DEFAULT_HEALTH_PATH = "/health"

DEFAULT_PORT_VAR = "PORT"
DEFAULT_BASE_VAR = "HEALTH_BASE_PATH"
DEFAULT_PATH_VAR = "HEALTH_PATH"


def join_url_path(*segments: str) -> str:
    """
    Join path segments like filesystem paths.

    Duplicate separators are collapsed and the result is always absolute:
    join_url_path("/api/", "/health") -> "/api/health"
    """
    joined = re.sub(r"/+", "/", "/" + "/".join(segments))
    return posixpath.normpath(joined)


@dataclass(frozen=True)
class HealthCheckTarget:
    """Where the probe sends its single request."""

    port: str = DEFAULT_PORT
    base_path: str = DEFAULT_BASE_PATH
    health_path: str = DEFAULT_HEALTH_PATH
    scheme: str = "http"
    host: str = "localhost"

    @property
    def url(self) -> str:
        path = join_url_path(self.base_path, self.health_path)
        return f"{self.scheme}://{self.host}:{self.port}{path}"

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str],
        port_var: str = DEFAULT_PORT_VAR,
        base_var: str = DEFAULT_BASE_VAR,
        path_var: str = DEFAULT_PATH_VAR,
    ) -> "HealthCheckTarget":
        """Build a target from environment variables, falling back to defaults."""
        return cls(
            port=environ.get(port_var) or DEFAULT_PORT,
            base_path=environ.get(base_var) or DEFAULT_BASE_PATH,
            health_path=environ.get(path_var) or DEFAULT_HEALTH_PATH,
        )


def resolve_target_url(
    url: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    port_var: str = DEFAULT_PORT_VAR,
    base_var: str = DEFAULT_BASE_VAR,
    path_var: str = DEFAULT_PATH_VAR,
) -> str:
    """An explicit URL wins; otherwise build one from the environment."""
    if url:
        return url
    if environ is None:
        environ = os.environ
    return HealthCheckTarget.from_env(environ, port_var, base_var, path_var).url


def check_health(
    url: str,
    client: Optional[httpx.Client] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    """
    GET ``url`` once and report the outcome.

    Args:
        url: Health route URL
        client: Optional httpx client (a plain httpx.get is used otherwise).
            Redirects are followed.
        stdout: Stream for the success line (defaults to sys.stdout)
        stderr: Stream for failure lines (defaults to sys.stderr)

    Returns:
        0 if the response was 2xx, 1 otherwise
    """
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    try:
        if client is not None:
            response = client.get(url, follow_redirects=True)
        else:
            response = httpx.get(url, follow_redirects=True)
    except (httpx.RequestError, httpx.InvalidURL) as e:
        stderr.write(f"{str(e) or type(e).__name__}\n")
        return 1

    if not response.is_success:
        stderr.write(f"Response not OK, status: {response.status_code}\n")
        return 1

    stdout.write("healthy\n")
    return 0


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="health-info-healthcheck",
        description="GET a health route and exit 0 if it responds with 2xx",
    )
    parser.add_argument(
        "url",
        nargs="?",
        help="URL to check (default: http://localhost:$PORT$HEALTH_BASE_PATH$HEALTH_PATH)",
    )
    parser.add_argument(
        "--port-var",
        default=DEFAULT_PORT_VAR,
        help=f"Environment variable holding the port (default: {DEFAULT_PORT_VAR})",
    )
    parser.add_argument(
        "--base-var",
        default=DEFAULT_BASE_VAR,
        help=f"Environment variable holding the base path (default: {DEFAULT_BASE_VAR})",
    )
    parser.add_argument(
        "--path-var",
        default=DEFAULT_PATH_VAR,
        help=f"Environment variable holding the health path (default: {DEFAULT_PATH_VAR})",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    url = resolve_target_url(
        args.url,
        port_var=args.port_var,
        base_var=args.base_var,
        path_var=args.path_var,
    )
    return check_health(url)


if __name__ == "__main__":
    sys.exit(main())
