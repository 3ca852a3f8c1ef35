"""Authentication commands: ``login-url``, ``callback``, ``logout``.

``login-url`` and ``callback`` mirror the login and callback endpoints so
the OAuth web flow can be completed from a terminal.
"""

from __future__ import annotations

import typer

from editflow.cli.commands._support import console, load_config
from editflow.core.credential_store import CredentialStore
from editflow.core.page import TerminalPage
from editflow.core.storage import DURABLE_NAMESPACE, SQLiteStore
from editflow.identity import OAuthError, authorize_url, callback_location, exchange_code


def login_url_cmd(
    redirect: str = typer.Option("/", "--redirect", "-r", help="Path to return to after login."),
) -> None:
    """Print the provider authorization URL."""
    config = load_config()
    if not config.oauth_client_id:
        console.print("[bold red]EDITFLOW_OAUTH_CLIENT_ID is not set.[/bold red]")
        raise typer.Exit(code=1)
    console.print(authorize_url(config, redirect), soft_wrap=True)


def callback_cmd(
    code: str = typer.Argument(..., help="Authorization code from the provider."),
    state: str = typer.Option("/", "--state", "-s", help="The state echoed by the provider."),
) -> None:
    """Exchange an authorization code and print the return URL."""
    config = load_config()
    try:
        token = exchange_code(config, code)
    except OAuthError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1)
    location = callback_location(config, state, token)
    console.print(config.site_url.rstrip("/") + location, soft_wrap=True)


def logout_cmd() -> None:
    """Forget the stored credential."""
    config = load_config()
    store = SQLiteStore(config.state_path, DURABLE_NAMESPACE)
    CredentialStore(store, TerminalPage(config.site_url, open_browser=False), config.token_key).clear()
    console.print("[green]Signed out.[/green]")
