"""Minimal REST client for the Octopus Deploy API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urljoin

import requests

from octo_cmdlets.client.errors import error_for_response

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Octopus-ApiKey"


class OctopusClient:
    """Authenticated JSON-over-HTTP access to one Octopus server.

    Paths starting with ``/`` are server-relative links taken from a resource's
    ``Links``; anything else is resolved under ``<host>/api/``. Failures are
    raised as-is: there is no retry at this layer.
    """

    def __init__(
        self,
        host: str,
        api_key: str,
        *,
        verify_ssl: bool = True,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.host = host.rstrip("/")
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._session.headers.update({API_KEY_HEADER: api_key, "Accept": "application/json"})
        self._session.verify = verify_ssl

    def url(self, path: str) -> str:
        if path.startswith("/"):
            return urljoin(self.host + "/", path)
        return f"{self.host}/api/{path}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = self.url(path)
        logger.debug("HTTP %s %s", method, url)
        response = self._session.request(
            method, url, params=params, json=json, timeout=self.timeout
        )
        if response.status_code >= 400:
            logger.debug("HTTP %s %s -> %s", method, url, response.status_code)
            raise error_for_response(response)
        if not response.content:
            return None
        return response.json()

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
