"""``editflow resume PATH --page-url URL`` — finish a submission after login.

Pass the URL the identity provider sent you back to; its
``#github_token=...`` fragment is captured and stored.
"""

from __future__ import annotations

import typer

from editflow.cli.commands._support import (
    build_controller,
    console,
    exit_for,
    load_config,
    open_session,
)


def resume_cmd(
    path: str = typer.Argument(..., help="Repository path of the document on this page."),
    page_url: str = typer.Option(
        ...,
        "--page-url",
        "-u",
        help="The URL returned by the login callback, fragment included.",
    ),
    no_browser: bool = typer.Option(
        False, "--no-browser", help="Print URLs instead of opening a browser."
    ),
) -> None:
    """Resume a submission interrupted by the login redirect."""
    config = load_config()
    controller = build_controller(config, page_url, open_browser=not no_browser)
    session = open_session(controller, config, path)

    state = controller.resume_if_pending(session)
    if state is None:
        if controller.credentials.load():
            console.print(f"[dim]No pending submission for {path}.[/dim]")
        else:
            console.print("[yellow]Not signed in and nothing to resume.[/yellow]")
        return
    exit_for(state)
