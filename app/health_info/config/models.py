"""
Pydantic models for health info configuration.

HealthInfoOptions is what register_health_info() consumes; the other
models configure the demo server in app/main.py.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = Field(
        default="127.0.0.1",
        description="Host to bind the server to",
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port to listen on",
    )
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level",
    )


class GitSettings(BaseModel):
    """Git command execution settings."""

    timeout: int = Field(
        default=10,
        ge=1,
        le=600,
        description="Timeout in seconds for each git subcommand",
    )
    cwd: Optional[str] = Field(
        default=None,
        description="Working directory for git (defaults to the process cwd)",
    )


class HealthInfoOptions(BaseModel):
    """
    Options for the diagnostic routes.

    commit_details_from selects how commit details are resolved at
    startup: None skips resolution, "git" queries git, anything else is
    read as the path of a snapshot file.
    """

    commit_details_from: Optional[str] = Field(
        default=None,
        description='"git" or the path to the commit details JSON file',
    )
    disable_health: bool = Field(default=False, description="Disable /health")
    disable_info: bool = Field(default=False, description="Disable /info")
    disable_metrics: bool = Field(default=False, description="Disable /metrics")
    prefix: str = Field(default="", description="Path prefix for the routes")
    manifest_dir: Optional[str] = Field(
        default=None,
        description="Where to start looking for pyproject.toml (defaults to cwd)",
    )

    @field_validator("commit_details_from", mode="before")
    @classmethod
    def validate_commit_details_from(cls, v: Any) -> Any:
        """Treat falsy values as unset; reject other non-strings before any I/O."""
        if not v:
            return None
        if not isinstance(v, str):
            raise ValueError(
                'commit_details_from must be "git" or the path to the commit '
                f"details JSON file, got: {v}"
            )
        return v

    @field_validator("prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """Strip trailing slashes and ensure a leading one."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = f"/{v}"
        return v


class HealthInfoConfig(BaseModel):
    """
    Main configuration container.

    Loaded from YAML files and environment variables, then passed to
    server components explicitly.
    """

    server: ServerSettings = Field(default_factory=ServerSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    routes: HealthInfoOptions = Field(default_factory=HealthInfoOptions)

    # Allow extra fields to be ignored (forward compatibility)
    model_config = ConfigDict(extra="ignore")
