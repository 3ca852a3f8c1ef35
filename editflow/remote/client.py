"""GitHub REST client used by the mutation steps.

Thin wrapper over ``httpx.Client`` that applies the bearer credential and
API headers, decodes JSON, and maps failures onto the submission error
taxonomy:

- 401 anywhere -> ``CredentialExpiredError``;
- any other non-2xx -> ``RemoteAPIError`` carrying the remote ``message``;
- transport failures -> ``RemoteAPIError`` with the httpx error text.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from editflow.remote.errors import CredentialExpiredError, RemoteAPIError

logger = logging.getLogger(__name__)


class RepositoryClient:
    """Authenticated JSON-over-HTTPS client for the repository API.

    Parameters
    ----------
    token:
        Bearer credential.
    base_url:
        API root, e.g. ``https://api.github.com``.
    api_version:
        Value of the ``X-GitHub-Api-Version`` header.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        *,
        api_version: str = "2022-11-28",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": api_version,
                "Authorization": f"Bearer {token}",
            },
        )

    def __enter__(self) -> RepositoryClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: dict[str, Any]) -> dict[str, Any]:
        return self.request("POST", path, json=data)

    def put(self, path: str, data: dict[str, Any]) -> dict[str, Any]:
        return self.request("PUT", path, json=data)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Issue one request and return the decoded JSON body."""
        logger.debug("%s %s", method, path)
        try:
            response = self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise RemoteAPIError(f"GitHub API request failed: {exc}") from exc

        if response.status_code == 401:
            raise CredentialExpiredError()

        body = self._decode(response)
        if not response.is_success:
            message = body.get("message") or f"GitHub API {response.status_code}"
            raise RemoteAPIError(message, status_code=response.status_code)
        return body

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"items": body}
