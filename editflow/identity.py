"""Identity-provider redirect contract (GitHub OAuth web flow).

The login and callback endpoints live outside this package; these helpers
build and consume their requests so the pipeline and the CLI agree with
them on the wire:

    GET <login-entry>?redirect=<original-path>
        -> provider authorize screen (state=<original-path>)
        -> <callback>?code=...&state=<original-path>
        -> <original-path>#github_token=<credential>
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode, urljoin, urlsplit

import httpx

from editflow.config import EditflowConfig

logger = logging.getLogger(__name__)


class OAuthError(RuntimeError):
    """Raised when the authorization code cannot be exchanged."""


def login_url(login_entry: str, return_to: str) -> str:
    """URL of the login entry point carrying the post-login return target."""
    return f"{login_entry}?{urlencode({'redirect': return_to})}"


def authorize_url(config: EditflowConfig, redirect: str = "/") -> str:
    """Provider authorization URL; *redirect* travels in ``state``."""
    params = {
        "client_id": config.oauth_client_id,
        "redirect_uri": config.callback_url,
        "scope": config.oauth_scope,
        "state": redirect or "/",
    }
    return f"{config.oauth_authorize_url}?{urlencode(params)}"


def exchange_code(
    config: EditflowConfig,
    code: str,
    *,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Trade an authorization *code* for an access token."""
    if not code:
        raise OAuthError("Missing authorization code")

    try:
        with httpx.Client(timeout=config.request_timeout_seconds, transport=transport) as client:
            response = client.post(
                config.oauth_token_url,
                headers={"Accept": "application/json"},
                json={
                    "client_id": config.oauth_client_id,
                    "client_secret": config.oauth_client_secret,
                    "code": code,
                    "redirect_uri": config.callback_url,
                },
            )
            body = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise OAuthError(f"GitHub OAuth error: {exc}") from exc

    token = body.get("access_token")
    error = body.get("error")
    if error or not token:
        raise OAuthError(f"GitHub OAuth error: {body.get('error_description') or error}")
    logger.info("Authorization code exchanged for an access token")
    return token


def callback_location(
    config: EditflowConfig, state: str, token: str
) -> str:
    """Where the callback sends the user: the original path plus the token fragment.

    Only the path of *state* is kept, so the callback can never redirect
    off-site.
    """
    path = urlsplit(urljoin(config.site_url, state or "/")).path or "/"
    return f"{path}#{config.token_key}={token}"
