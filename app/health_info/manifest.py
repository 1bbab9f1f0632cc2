"""
Project manifest lookup.

Finds the nearest pyproject.toml of the host application so /info can
report its name, description and version.
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

MANIFEST_NAME = "pyproject.toml"


@dataclass(frozen=True)
class ProjectManifest:
    """Name, description and version read from a pyproject.toml."""

    path: Path
    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None

    def to_dict(self) -> dict[str, str]:
        """Application block for /info, dropping absent fields."""
        fields = {
            "name": self.name,
            "description": self.description,
            "version": self.version,
        }
        return {key: value for key, value in fields.items() if value is not None}


def _project_table(data: dict[str, Any]) -> Optional[dict[str, Any]]:
    # PEP 621 first, then Poetry's own table
    if isinstance(data.get("project"), dict):
        return data["project"]
    poetry = data.get("tool", {}).get("poetry")
    if isinstance(poetry, dict):
        return poetry
    return None


def find_project_manifest(start: Optional[str | Path] = None) -> Optional[ProjectManifest]:
    """
    Walk up from ``start`` to the nearest pyproject.toml with project metadata.

    Args:
        start: Directory to start from (defaults to the current directory)

    Returns:
        ProjectManifest, or None if no manifest was found

    Raises:
        tomllib.TOMLDecodeError: If a pyproject.toml on the way is not valid TOML
    """
    directory = Path(start).resolve() if start else Path.cwd()

    for candidate_dir in [directory, *directory.parents]:
        candidate = candidate_dir / MANIFEST_NAME
        if not candidate.is_file():
            continue

        with open(candidate, "rb") as f:
            table = _project_table(tomllib.load(f))

        if table is None:
            continue

        return ProjectManifest(
            path=candidate,
            name=table.get("name"),
            description=table.get("description"),
            version=table.get("version"),
        )

    return None
