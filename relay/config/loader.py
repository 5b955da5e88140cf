"""YAML config loader with environment overrides and dotted-key get/set."""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from relay.config.defaults import ENV_OVERRIDES
from relay.config.schema import RelayConfig

logger = logging.getLogger(__name__)


def load_config(
    path: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> RelayConfig:
    """Load and validate config from an optional YAML file, then apply env overrides.

    A missing file is not an error: the relay is usually configured through
    environment variables alone.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        else:
            logger.debug("Config file %s not found, using defaults", path)

    config = RelayConfig(**raw)
    return apply_env_overrides(config, os.environ if environ is None else environ)


def apply_env_overrides(config: RelayConfig, environ: Mapping[str, str]) -> RelayConfig:
    for var, dotted_key in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            config = set_config_value(config, dotted_key, value)
    return config


def get_config_value(config: RelayConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'upstream.api_host'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: RelayConfig, dotted_key: str, value: Any) -> RelayConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new RelayConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    # Attempt type coercion for common cases
    old_value = target[parts[-1]]
    if isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return RelayConfig(**data)
