#!/usr/bin/env python3
"""
Write a commit details snapshot file.

Run this at build time, where git is available, and point the server
at the result with commit_details_from=<path>.

Examples:
  # Write ./.commit-details.json
  health-info-commit-details

  # Custom location
  health-info-commit-details build/commit-details.json
"""

import argparse
import asyncio
import sys
from typing import Optional

from health_info.commit_details import (
    DEFAULT_SNAPSHOT_PATH,
    HealthInfoError,
    write_commit_details_json,
)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="health-info-commit-details",
        description="Write git commit details to a JSON file",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=DEFAULT_SNAPSHOT_PATH,
        help=f"Output file, must end in .json (default: {DEFAULT_SNAPSHOT_PATH})",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        path = asyncio.run(write_commit_details_json(args.path))
    except (ValueError, HealthInfoError) as e:
        print(e, file=sys.stderr)
        return 1

    print(f"written to file {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
