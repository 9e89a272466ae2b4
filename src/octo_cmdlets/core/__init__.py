"""Core infrastructure components for octo-cmdlets."""

from octo_cmdlets.core.cache import DEFAULT_CACHE_TTL, MISS, CacheEntry, ResourceCache
from octo_cmdlets.core.provider import ApiKeyAuth, OctopusProvider

__all__ = [
    "DEFAULT_CACHE_TTL",
    "MISS",
    "ApiKeyAuth",
    "CacheEntry",
    "OctopusProvider",
    "ResourceCache",
]
