"""
Integration test fixtures.

Provides live HTTP servers for the health-check probe to talk to:
- ThreadedServer: a uvicorn server for an arbitrary Starlette app,
  running in a background thread of the test process
- ServerProcess: app/main.py started as a subprocess
"""

import os
import socket
import subprocess
import sys
import threading
import time
from pathlib import Path
from typing import Generator

import httpx
import pytest
import uvicorn
from starlette.applications import Starlette
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route

from health_info.http import get_health_routes

# Paths
TEST_DIR = Path(__file__).parent
APP_DIR = TEST_DIR.parent.parent / "app"

TEST_HOST = "127.0.0.1"


def free_port() -> int:
    """Ask the OS for a port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((TEST_HOST, 0))
        return sock.getsockname()[1]


class _Server(uvicorn.Server):
    def install_signal_handlers(self) -> None:
        # Signals can only be handled in the main thread
        pass


class ThreadedServer:
    """Runs a Starlette app with uvicorn in a background thread."""

    def __init__(self, app: Starlette, port: int | None = None):
        self.port = port or free_port()
        self.url = f"http://{TEST_HOST}:{self.port}"
        self.server = _Server(
            uvicorn.Config(app, host=TEST_HOST, port=self.port, log_level="warning")
        )
        self.thread = threading.Thread(target=self.server.run, daemon=True)

    def start(self, timeout: float = 10.0) -> None:
        self.thread.start()
        start_time = time.time()
        while not self.server.started:
            if time.time() - start_time > timeout:
                raise RuntimeError(f"Server failed to start within {timeout}s")
            time.sleep(0.05)

    def stop(self) -> None:
        self.server.should_exit = True
        self.thread.join(timeout=5.0)

    def __enter__(self) -> "ThreadedServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()


class ServerProcess:
    """Manages app/main.py as a subprocess for testing."""

    def __init__(self, port: int | None = None, extra_args: list[str] | None = None):
        self.port = port or free_port()
        self.extra_args = extra_args or []
        self.process: subprocess.Popen | None = None
        self.url = f"http://{TEST_HOST}:{self.port}"

    def start(self, health_path: str = "/health", timeout: float = 15.0) -> None:
        """Start the server and wait for it to be ready."""
        env = os.environ.copy()
        env["PYTHONPATH"] = str(APP_DIR)

        self.process = subprocess.Popen(
            [
                sys.executable,
                str(APP_DIR / "main.py"),
                "--host", TEST_HOST,
                "--port", str(self.port),
                *self.extra_args,
            ],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=env,
        )

        start_time = time.time()
        while time.time() - start_time < timeout:
            if self.process.poll() is not None:
                _, stderr = self.process.communicate()
                raise RuntimeError(f"Server exited early: {stderr.decode(errors='replace')}")
            try:
                response = httpx.get(f"{self.url}{health_path}", timeout=1.0)
                if response.status_code == 200:
                    return
            except httpx.RequestError:
                pass
            time.sleep(0.1)

        # Server didn't start in time
        self.stop()
        raise RuntimeError(f"Server failed to start within {timeout}s")

    def stop(self) -> None:
        """Stop the server."""
        if self.process:
            self.process.terminate()
            try:
                self.process.wait(timeout=5.0)
            except subprocess.TimeoutExpired:
                self.process.kill()
                self.process.wait()
            self.process = None


async def _fail(request) -> PlainTextResponse:
    return PlainTextResponse("error", status_code=500)


async def _custom_health(request) -> JSONResponse:
    return JSONResponse({"status": "UP"})


@pytest.fixture
def healthy_server() -> Generator[ThreadedServer, None, None]:
    """A server answering 200 on /health."""
    app = Starlette(routes=get_health_routes())
    with ThreadedServer(app) as server:
        yield server


@pytest.fixture
def failing_server() -> Generator[ThreadedServer, None, None]:
    """A server answering 500 on /health."""
    app = Starlette(routes=[Route("/health", _fail)])
    with ThreadedServer(app) as server:
        yield server


@pytest.fixture
def custom_path_server() -> Generator[ThreadedServer, None, None]:
    """A server with its health route at /checks/health and /api/v1/health."""
    app = Starlette(
        routes=[
            Route("/checks/health", _custom_health),
            *get_health_routes("/api/v1"),
        ]
    )
    with ThreadedServer(app) as server:
        yield server


@pytest.fixture
def unused_port() -> int:
    """A port with no listener."""
    return free_port()


@pytest.fixture
def subprocess_env() -> dict[str, str]:
    """Environment for running health_info modules with ``python -m``."""
    env = os.environ.copy()
    env["PYTHONPATH"] = str(APP_DIR)
    return env


@pytest.fixture(scope="module")
def prefixed_main_server() -> Generator[ServerProcess, None, None]:
    """app/main.py serving its routes under /internal."""
    server = ServerProcess(extra_args=["--prefix", "/internal"])
    server.start(health_path="/internal/health")
    yield server
    server.stop()
