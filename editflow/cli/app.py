"""Main Typer application — imports and registers all CLI commands.

Entry point: ``editflow`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from editflow.cli.commands.auth import callback_cmd, login_url_cmd, logout_cmd
from editflow.cli.commands.draft import draft_app
from editflow.cli.commands.resume import resume_cmd
from editflow.cli.commands.submit import submit_cmd
from editflow.config import EditflowConfig

app = typer.Typer(
    name="editflow",
    help="Editflow: submit in-page document edits as GitHub pull requests.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging for every subcommand."""
    level = "DEBUG" if verbose else EditflowConfig().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="submit", help="Submit an edited document as a pull request.")(submit_cmd)
app.command(name="resume", help="Resume a submission after signing in.")(resume_cmd)
app.command(name="login-url", help="Print the GitHub authorization URL.")(login_url_cmd)
app.command(name="callback", help="Exchange an authorization code for a token.")(callback_cmd)
app.command(name="logout", help="Forget the stored GitHub token.")(logout_cmd)
app.add_typer(draft_app, name="draft")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
