#!/usr/bin/env python3
"""
Health Info Server - Entry Point

Runs a Starlette app serving /health, /info and /metrics with uvicorn.
Host applications normally call register_health_info() on their own
app instead; this entry point is for trying the routes out and for
integration tests.
"""

import argparse
import sys
from pathlib import Path

# Add app directory to path for imports when running directly
APP_DIR = Path(__file__).parent
if str(APP_DIR) not in sys.path:
    sys.path.insert(0, str(APP_DIR))

from health_info import __version__
from health_info.commit_details import HealthInfoError
from health_info.config import HealthInfoOptions, load_config
from health_info.server import create_app
from health_info.utils.logging import get_logger, setup_logging

logger = get_logger("health_info.main")


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Health Info diagnostic server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve on the default port with commit details from git
  python main.py --commit-details-from git

  # Serve under a prefix on a custom port
  python main.py --port 9000 --prefix /internal

  # Use a config file
  python main.py --config /path/to/config.yaml
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"health-info {__version__}",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML configuration file",
    )
    parser.add_argument(
        "--host",
        type=str,
        help="Host to bind to (overrides config)",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port to listen on (overrides config)",
    )
    parser.add_argument(
        "--prefix",
        type=str,
        help="Path prefix for the diagnostic routes (overrides config)",
    )
    parser.add_argument(
        "--commit-details-from",
        type=str,
        help='"git" or path to a commit details JSON file (overrides config)',
    )
    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    route_overrides = {}
    if args.prefix is not None:
        route_overrides["prefix"] = args.prefix
    if args.commit_details_from:
        route_overrides["commit_details_from"] = args.commit_details_from
    if route_overrides:
        config.routes = HealthInfoOptions.model_validate(
            {**config.routes.model_dump(), **route_overrides}
        )

    setup_logging(config.server.log_level)

    try:
        app = create_app(config)
    except HealthInfoError as e:
        cause = f": {e.__cause__}" if e.__cause__ else ""
        print(f"Startup error: {e}{cause}", file=sys.stderr)
        return 1

    logger.info("Starting Health Info Server v%s", __version__)
    logger.info("Running on http://%s:%s", config.server.host, config.server.port)

    import uvicorn

    try:
        uvicorn.run(
            app,
            host=config.server.host,
            port=config.server.port,
            log_level=config.server.log_level,
        )
    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
