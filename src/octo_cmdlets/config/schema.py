"""Configuration models for the server connection."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from octo_cmdlets.core.cache import DEFAULT_CACHE_TTL


class ServerConfig(BaseSettings):
    """Octopus server connection settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``OCTO_`` prefix.  Constructor kwargs take precedence.

    ``api_key`` is typically provided via the ``OCTO_API_KEY`` environment
    variable rather than YAML to avoid committing secrets to version control.
    """

    model_config = SettingsConfigDict(env_prefix="OCTO_")

    host: str | None = None
    api_key: str | None = None
    verify_ssl: bool = True
    timeout: float = Field(default=30.0, gt=0)


class Config(BaseModel):
    """Command configuration, validated from YAML."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    cache_ttl: float = Field(default=DEFAULT_CACHE_TTL, ge=0)
