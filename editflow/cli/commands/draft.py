"""``editflow draft`` — inspect, save, and reset per-document drafts."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.syntax import Syntax
from rich.table import Table

from editflow.cli.commands._support import (
    build_controller,
    console,
    default_page_url,
    load_config,
    open_session,
    read_text_file,
)

draft_app = typer.Typer(
    name="draft",
    help="Manage session drafts.",
    no_args_is_help=True,
)


@draft_app.command(name="show", help="Show the draft (or original) text of a document.")
def show_cmd(
    path: str = typer.Argument(..., help="Repository path of the document."),
) -> None:
    config = load_config()
    controller = build_controller(config, default_page_url(config, path), open_browser=False)
    session = open_session(controller, config, path)
    session.begin_editing()
    label = "[yellow]draft[/yellow]" if session.dirty else "[dim]original[/dim]"
    console.print(f"{path} ({label})")
    console.print(Syntax(session.text, "markdown", word_wrap=True))


@draft_app.command(name="save", help="Save edited text as the draft of a document.")
def save_cmd(
    path: str = typer.Argument(..., help="Repository path of the document."),
    text_file: Path = typer.Argument(..., help="File holding the edited text."),
) -> None:
    config = load_config()
    controller = build_controller(config, default_page_url(config, path), open_browser=False)
    session = open_session(controller, config, path)
    session.begin_editing()
    session.update(read_text_file(text_file))
    console.print(f"[green]Draft saved for {path}.[/green]")


@draft_app.command(name="reset", help="Discard the draft and restore the original.")
def reset_cmd(
    path: str = typer.Argument(..., help="Repository path of the document."),
) -> None:
    config = load_config()
    controller = build_controller(config, default_page_url(config, path), open_browser=False)
    session = open_session(controller, config, path)
    session.reset()
    console.print(f"[green]Draft for {path} discarded.[/green]")


@draft_app.command(name="list", help="List documents with a saved draft.")
def list_cmd() -> None:
    config = load_config()
    controller = build_controller(config, config.site_url, open_browser=False)
    paths = controller.drafts.paths()
    if not paths:
        console.print("[dim]No drafts in this session.[/dim]")
        return

    pending = controller.drafts.peek_pending()
    table = Table(title="Drafts")
    table.add_column("Document", style="cyan")
    table.add_column("Pending", justify="center")
    for p in paths:
        table.add_row(p, "[yellow]Yes[/yellow]" if p == pending else "")
    console.print(table)
