"""``editflow submit PATH`` — submit the draft of a document as a pull request.

Without a stored credential the command saves the draft, marks it pending,
and sends the user to sign in; ``editflow resume`` finishes the job once
the provider redirects back.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.panel import Panel

from editflow.cli.commands._support import (
    build_controller,
    console,
    default_page_url,
    exit_for,
    load_config,
    open_session,
    read_text_file,
)
from editflow.models.submission import SubmissionStatus


def submit_cmd(
    path: str = typer.Argument(..., help="Repository path of the document, e.g. guide/intro.md."),
    text_file: Path = typer.Option(
        None,
        "--text",
        "-t",
        help="File holding the edited text. Defaults to the saved draft.",
    ),
    page_url: str = typer.Option(
        None,
        "--page-url",
        "-u",
        help="URL of the page being edited. Derived from the site URL if omitted.",
    ),
    no_browser: bool = typer.Option(
        False, "--no-browser", help="Print URLs instead of opening a browser."
    ),
) -> None:
    """Submit an edited document as a pull request."""
    config = load_config()
    controller = build_controller(
        config, page_url or default_page_url(config, path), open_browser=not no_browser
    )
    session = open_session(controller, config, path)
    session.begin_editing()
    if text_file is not None:
        session.update(read_text_file(text_file))

    if not session.dirty:
        console.print(f"[yellow]No changes to submit for {path}.[/yellow]")
        raise typer.Exit(code=0)

    state = controller.request_submit(path, session.text)
    if state is None:
        console.print(
            "[dim]Draft saved. Run [bold]editflow resume[/bold] with the URL you "
            "land on after signing in.[/dim]"
        )
        return

    if state.status == SubmissionStatus.SUCCESS:
        console.print(
            Panel(
                "\n".join([
                    "[bold green]Pull request opened![/bold green]",
                    "",
                    f"[bold]Document:[/bold] {path}",
                    f"[bold]URL:[/bold]      {state.message}",
                ]),
                title="[bold]editflow[/bold]",
                border_style="green",
                padding=(1, 2),
            )
        )
    exit_for(state)
