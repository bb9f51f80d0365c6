"""HTTPS fetching for remote artifacts."""

from __future__ import annotations

import logging
import ssl
from typing import Protocol

import httpx
import truststore

from agent_os_setup.provision.models import ErrorKind, ProvisionError

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Anything that can turn a URL into bytes or raise ProvisionError."""

    def fetch(self, url: str) -> bytes: ...

    def close(self) -> None: ...


def _auth_headers(token: str | None) -> dict:
    """Return Authorization header dict only when a non-empty token exists."""
    return {"Authorization": f"Bearer {token}"} if token else {}


class HttpFetcher:
    """Fetcher backed by a shared ``httpx.Client``.

    Redirects are followed. Any non-2xx response is an error, so error
    page bodies are never handed back as file content.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        github_token: str | None = None,
        client: httpx.Client | None = None,
        debug: bool = False,
    ):
        self._owns_client = client is None
        if client is None:
            ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
            client = httpx.Client(verify=ssl_context)
        self.client = client
        self.timeout = timeout
        self.headers = _auth_headers(github_token)
        self.debug = debug

    def fetch(self, url: str) -> bytes:
        logger.debug("GET %s", url)
        try:
            response = self.client.get(
                url,
                timeout=self.timeout,
                follow_redirects=True,
                headers=self.headers,
            )
        except httpx.TimeoutException as e:
            raise ProvisionError(ErrorKind.TIMEOUT, f"Timed out after {self.timeout:g}s", url) from e
        except httpx.HTTPError as e:
            raise ProvisionError(ErrorKind.NETWORK_ERROR, f"Request failed: {e}", url) from e

        status = response.status_code
        if status == 404:
            raise ProvisionError(ErrorKind.NOT_FOUND, "Remote file not found (404)", url)
        if not 200 <= status < 300:
            msg = f"Server returned {status}"
            if self.debug:
                msg += f"\nResponse headers: {response.headers}\nBody (truncated 500): {response.text[:500]}"
            raise ProvisionError(ErrorKind.NETWORK_ERROR, msg, url)
        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        return response.content

    def close(self) -> None:
        if self._owns_client:
            self.client.close()


__all__ = ["Fetcher", "HttpFetcher"]
