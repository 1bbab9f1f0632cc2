"""
Configuration system for Health Info.

Exports:
    HealthInfoConfig: Main configuration container
    HealthInfoOptions: Options for the diagnostic routes
    load_config: Load configuration from YAML/env
"""

from health_info.config.models import (
    HealthInfoConfig,
    HealthInfoOptions,
    ServerSettings,
    GitSettings,
)
from health_info.config.loader import load_config

__all__ = [
    "HealthInfoConfig",
    "HealthInfoOptions",
    "ServerSettings",
    "GitSettings",
    "load_config",
]
