"""Process-wide session slot.

Commands connect once and every engine operation falls back to the stored
session when none is passed explicitly. Collection caches outlive sessions:
each server gets one :class:`ResourceCache` for the life of the process, so
reconnecting reuses what earlier sessions already fetched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from octo_cmdlets.core.cache import DEFAULT_CACHE_TTL, ResourceCache
from octo_cmdlets.engine.errors import SessionNotEstablishedError

if TYPE_CHECKING:
    from octo_cmdlets.core.provider import OctopusProvider

logger = logging.getLogger(__name__)

_current: OctopusProvider | None = None
_caches: dict[str, ResourceCache] = {}


def connect(provider: OctopusProvider) -> OctopusProvider:
    """Store *provider* as the session for the rest of the process."""
    global _current  # noqa: PLW0603
    _current = provider
    logger.debug("Session established for %s", provider.host or "injected client")
    return provider


def disconnect() -> None:
    global _current  # noqa: PLW0603
    _current = None


def retrieve_session() -> OctopusProvider:
    """Return the stored session or raise :class:`SessionNotEstablishedError`."""
    if _current is None:
        raise SessionNotEstablishedError
    return _current


def require_session(session: OctopusProvider | None) -> OctopusProvider:
    return session if session is not None else retrieve_session()


def process_cache(host: str, ttl: float = DEFAULT_CACHE_TTL) -> ResourceCache:
    """Return the cache kept for *host*, creating it on first use.

    A later call with a different *ttl* applies it to entries stored from then on.
    """
    cache = _caches.get(host)
    if cache is None:
        cache = _caches[host] = ResourceCache(ttl=ttl)
        logger.debug("Created collection cache for %s (ttl=%ss)", host, ttl)
    else:
        cache.ttl = ttl
    return cache


def reset_process_cache() -> None:
    """Forget every server's cache."""
    _caches.clear()
