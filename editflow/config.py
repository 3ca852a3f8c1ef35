"""Runtime configuration — env-driven.

Centralized config using pydantic-settings. Reads from a .env file and
EDITFLOW_* environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from editflow.models.remote import RepositoryTarget


class EditflowConfig(BaseSettings):
    """Editflow configuration with environment variable overrides.

    All settings can be overridden via EDITFLOW_* environment variables
    or a .env file in the working directory.

    Examples
    --------
    Override via environment::

        export EDITFLOW_REPO_OWNER=AdventureX-RGE
        export EDITFLOW_REPO_NAME=Playbook
        export EDITFLOW_LOG_LEVEL=DEBUG

    Or via .env file::

        EDITFLOW_OAUTH_CLIENT_ID=Iv1.0123456789abcdef
        EDITFLOW_SITE_URL=https://playbook.adventure-x.org
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EDITFLOW_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Canonical repository
    api_base: str = "https://api.github.com"
    api_version: str = "2022-11-28"
    repo_owner: str = "AdventureX-RGE"
    repo_name: str = "Playbook"
    default_branch: str = "main"
    branch_prefix: str = "playbook-edit-"

    # Site and identity provider
    site_url: str = "https://playbook.adventure-x.org"
    site_name: str = "Playbook Editor"
    login_entry: str = "/api/github/login"
    callback_path: str = "/api/github/callback"
    token_key: str = "github_token"
    oauth_client_id: str = ""
    oauth_client_secret: str = ""
    oauth_scope: str = "public_repo"
    oauth_authorize_url: str = "https://github.com/login/oauth/authorize"
    oauth_token_url: str = "https://github.com/login/oauth/access_token"

    # Remote timing
    poll_interval_seconds: float = 3.0
    poll_attempts: int = 10
    request_timeout_seconds: float = 30.0
    resume_delay_seconds: float = 0.1

    # Local state
    state_path: Path = Path(".editflow/state.db")
    session_id: str = ""  # empty -> derived from the parent process
    content_root: Path = Path("src/content/docs")

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"

    @property
    def repository(self) -> RepositoryTarget:
        """The canonical repository that proposals are opened against."""
        return RepositoryTarget(
            owner=self.repo_owner,
            name=self.repo_name,
            default_branch=self.default_branch,
        )

    @property
    def callback_url(self) -> str:
        return self.site_url.rstrip("/") + self.callback_path

    @property
    def effective_session_id(self) -> str:
        """Session scope for drafts.

        A terminal session stands in for a browser tab: the parent shell's
        pid survives re-invocations but not a new shell.
        """
        return self.session_id or f"ppid-{os.getppid()}"


# Module-level singleton — import as `from editflow.config import config`
config = EditflowConfig()
