"""Configuration loading and session wiring."""

from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr

from octo_cmdlets.config.loader import ConfigError, load_config
from octo_cmdlets.config.schema import Config, ServerConfig
from octo_cmdlets.core.provider import ApiKeyAuth, OctopusProvider
from octo_cmdlets.engine.session import connect, process_cache

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "Config",
    "ConfigError",
    "ServerConfig",
    "load",
    "load_config",
    "session_from_config",
]

DEFAULT_CONFIG_PATH = Path("octo.yaml")


def load(path: Path | str = DEFAULT_CONFIG_PATH) -> Config:
    """Load a YAML configuration file (optional when it is the default path)."""
    return load_config(path, required=Path(path) != DEFAULT_CONFIG_PATH)


def session_from_config(config: Config) -> OctopusProvider:
    """Build the provider described by *config* and store it as the process session."""
    if not config.server.host:
        raise ConfigError("server.host is required (set in YAML or OCTO_HOST env var)")
    if not config.server.api_key:
        raise ConfigError("server.api_key is required (set OCTO_API_KEY env var)")
    provider = OctopusProvider(
        host=config.server.host,
        auth=ApiKeyAuth(api_key=SecretStr(config.server.api_key)),
        verify_ssl=config.server.verify_ssl,
        timeout=config.server.timeout,
        cache_ttl=config.cache_ttl,
    )
    provider.attach_cache(process_cache(config.server.host, config.cache_ttl))
    return connect(provider)
