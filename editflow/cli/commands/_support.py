"""Shared wiring for CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from editflow.config import EditflowConfig
from editflow.core.controller import SubmissionController
from editflow.core.editing import EditingSession
from editflow.core.page import TerminalPage
from editflow.models.submission import SubmissionState, SubmissionStatus

console = Console()

_STATUS_STYLES: dict[SubmissionStatus, str] = {
    SubmissionStatus.IDLE: "dim",
    SubmissionStatus.SUBMITTING: "bold yellow",
    SubmissionStatus.SUCCESS: "bold green",
    SubmissionStatus.ERROR: "bold red",
}


def load_config() -> EditflowConfig:
    """Fresh config per invocation so environment overrides are honoured."""
    return EditflowConfig()


def default_page_url(config: EditflowConfig, path: str) -> str:
    """Public URL of the rendered page for document *path*."""
    slug = path.rsplit(".", 1)[0] if "." in path.rsplit("/", 1)[-1] else path
    if slug.endswith("/index"):
        slug = slug[: -len("index")]
    return f"{config.site_url.rstrip('/')}/{slug.strip('/')}/"


def read_original(config: EditflowConfig, path: str) -> str:
    """Original document text from the content root."""
    source = config.content_root / path
    if not source.is_file():
        console.print(f"[bold red]Document not found:[/bold red] {source}")
        raise typer.Exit(code=1)
    return source.read_text(encoding="utf-8")


def build_controller(
    config: EditflowConfig, page_url: str, *, open_browser: bool = True
) -> SubmissionController:
    page = TerminalPage(page_url, echo=console.print, open_browser=open_browser)
    controller = SubmissionController.from_config(config, page)
    controller.subscribe(print_state)
    return controller


def open_session(
    controller: SubmissionController, config: EditflowConfig, path: str
) -> EditingSession:
    return EditingSession(controller.drafts, path, read_original(config, path))


def print_state(state: SubmissionState) -> None:
    style = _STATUS_STYLES[state.status]
    line = f"[{style}]{state.status.value.upper()}[/{style}]"
    if state.message:
        line += f"  {state.message}"
    console.print(line)


def exit_for(state: SubmissionState | None) -> None:
    """Exit non-zero when the attempt ended in error."""
    if state is not None and state.status == SubmissionStatus.ERROR:
        raise typer.Exit(code=1)


def read_text_file(text_file: Path) -> str:
    if not text_file.is_file():
        console.print(f"[bold red]File not found:[/bold red] {text_file}")
        raise typer.Exit(code=1)
    return text_file.read_text(encoding="utf-8")
