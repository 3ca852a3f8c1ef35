"""Editflow CLI — Typer-based command-line interface.

Provides the ``editflow`` command with subcommands for managing drafts,
submitting documents, resuming after login, and handling the OAuth flow.

All output uses Rich for formatted terminal display.
"""
