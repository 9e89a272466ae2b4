"""YAML configuration file loader."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor

from octo_cmdlets.config.schema import Config

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""


# Field name → environment variable.
_SERVER_ENV_MAP: dict[str, str] = {
    "host": "OCTO_HOST",
    "api_key": "OCTO_API_KEY",
    "verify_ssl": "OCTO_VERIFY_SSL",
    "timeout": "OCTO_TIMEOUT",
}

_SERVER_BOOL_FIELDS: frozenset[str] = frozenset({"verify_ssl"})

_CACHE_TTL_ENV = "OCTO_CACHE_TTL"


def _lookup(value: Any, env_key: str, dotenv_vals: dict[str, str | None]) -> Any:
    """Priority (highest wins): YAML value > env var > ``.env`` file."""
    if value is None:
        value = os.environ.get(env_key)
    if value is None:
        value = dotenv_vals.get(env_key)
    return value


def _resolve_server(
    raw_server: dict[str, Any], dotenv_vals: dict[str, str | None]
) -> dict[str, Any]:
    """Resolve server fields from YAML, env vars, and ``.env`` file."""
    resolved: dict[str, Any] = {}
    for field, env_key in _SERVER_ENV_MAP.items():
        val = _lookup(raw_server.get(field), env_key, dotenv_vals)
        if val is not None:
            if field in _SERVER_BOOL_FIELDS and isinstance(val, str):
                if val.lower() not in SafeConstructor.bool_values:
                    raise ConfigError(f"Invalid boolean for {env_key}: {val!r}")
                val = SafeConstructor.bool_values[val.lower()]
            resolved[field] = val

    return resolved


def load_config(path: Path | str, *, required: bool = False) -> Config:
    """Load a YAML configuration file and return a ``Config`` object.

    A missing file is treated as an empty configuration unless *required*,
    so connection settings can come from the environment alone.

    Raises:
        ConfigError: On YAML parse errors, a missing required file, or
            validation failures.
    """
    path = Path(path)

    raw: Any = {}
    if path.is_file():
        try:
            raw = YAML(typ="safe").load(path) or {}
        except Exception as exc:
            raise ConfigError(f"Failed to read {path}: {exc}") from exc
    elif required:
        raise ConfigError(f"Configuration file not found: {path}")
    else:
        logger.debug("No config file at %s; using environment only", path)

    if not isinstance(raw, dict):
        raise ConfigError(f"Failed to read {path}: expected a mapping at the top level")

    env_file = path.parent / ".env"
    dotenv_vals = dotenv_values(env_file, encoding="utf-8-sig") if env_file.is_file() else {}

    try:
        raw["server"] = _resolve_server(raw.get("server") or {}, dotenv_vals)
        cache_ttl = _lookup(raw.get("cache_ttl"), _CACHE_TTL_ENV, dotenv_vals)
        if cache_ttl is not None:
            raw["cache_ttl"] = cache_ttl
        config = Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    logger.info("Loaded config from %s", path)
    return config
