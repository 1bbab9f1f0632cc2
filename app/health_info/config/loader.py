"""
Configuration loader with YAML and environment variable support.

Layers, lowest to highest priority:
1. Built-in defaults: health_info/config/defaults/settings.yaml
2. User config: --config path (YAML file)
3. Environment variables: HEALTH_INFO_SERVER__PORT=9000

Environment values are passed to the models as strings; pydantic
coerces them to each field's type, so HEALTH_INFO_ROUTES__PREFIX=1
stays the string "1" while HEALTH_INFO_SERVER__PORT=9000 becomes an int.
"""

import logging
import os
from functools import reduce
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from health_info.config.models import HealthInfoConfig

logger = logging.getLogger(__name__)

PACKAGE_DEFAULTS_DIR = Path(__file__).parent / "defaults"

ENV_PREFIX = "HEALTH_INFO_"
ENV_DELIMITER = "__"


def merge_layers(lower: Mapping[str, Any], upper: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay ``upper`` on ``lower``; sections present in both are merged key by key."""
    merged = dict(lower)
    for key, value in upper.items():
        below = merged.get(key)
        if isinstance(below, Mapping) and isinstance(value, Mapping):
            value = merge_layers(below, value)
        merged[key] = value
    return merged


def read_yaml_layer(path: Path) -> dict[str, Any]:
    """
    Read one YAML layer.

    A missing file or an empty document is an empty layer. A file that
    does not parse is skipped with a warning.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        logger.warning("Skipping unparseable config file %s: %s", path, e)
        return {}

    return data or {}


def env_layer(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """
    Collect HEALTH_INFO_<SECTION>__<KEY> variables into a nested layer.

    HEALTH_INFO_SERVER__PORT=9000 -> {"server": {"port": "9000"}}
    """
    if environ is None:
        environ = os.environ

    layer: dict[str, Any] = {}
    for name, value in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue

        *sections, field = name[len(ENV_PREFIX):].lower().split(ENV_DELIMITER)
        if not field or not all(sections):
            logger.warning("Ignoring malformed config variable %s", name)
            continue

        target = layer
        for section in sections:
            target = target.setdefault(section, {})
        target[field] = value

    return layer


def load_config(
    config_path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> HealthInfoConfig:
    """
    Load configuration from multiple sources.

    Args:
        config_path: Optional path to a YAML configuration file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        HealthInfoConfig: Validated configuration object

    Raises:
        FileNotFoundError: If config_path is given but does not exist
        pydantic.ValidationError: If configuration is invalid
    """
    layers = [read_yaml_layer(PACKAGE_DEFAULTS_DIR / "settings.yaml")]

    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")
        layers.append(read_yaml_layer(path))

    layers.append(env_layer(environ))

    return HealthInfoConfig.model_validate(reduce(merge_layers, layers, {}))
