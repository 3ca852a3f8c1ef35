"""Remote mutation sequence — local text in, pull request out.

Runs the eight steps strictly in order against one ``RepositoryClient``.
The first failure aborts the rest; nothing is rolled back (a stray branch
or commit on the user's fork is acceptable residue).  An expired
credential, wherever it is detected, clears the stored credential before
the error propagates.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import httpx

from editflow.config import EditflowConfig
from editflow.models.remote import MutationContext, ProposalLocation, SequenceSettings
from editflow.remote.client import RepositoryClient
from editflow.remote.errors import CredentialExpiredError
from editflow.remote.steps import BaseStep, build_steps

if TYPE_CHECKING:
    from editflow.core.credential_store import CredentialStore

logger = logging.getLogger(__name__)


class RemoteMutationSequence:
    """Fork -> branch -> commit -> pull request.

    Parameters
    ----------
    settings:
        Repository target, naming, and polling parameters.
    credentials:
        Cleared when the remote API reports the credential expired.
    base_url, api_version, timeout:
        Passed to ``RepositoryClient``.
    transport:
        Optional httpx transport, used by tests.
    sleep, clock:
        Injected into the polling and branch-naming steps.
    """

    def __init__(
        self,
        settings: SequenceSettings,
        credentials: CredentialStore | None = None,
        *,
        base_url: str = "https://api.github.com",
        api_version: str = "2022-11-28",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings
        self._credentials = credentials
        self._base_url = base_url
        self._api_version = api_version
        self._timeout = timeout
        self._transport = transport
        self.steps: list[BaseStep] = build_steps(settings, sleep=sleep, clock=clock)

    @classmethod
    def from_config(
        cls,
        config: EditflowConfig,
        credentials: CredentialStore | None = None,
        **kwargs,
    ) -> RemoteMutationSequence:
        settings = SequenceSettings(
            repository=config.repository,
            branch_prefix=config.branch_prefix,
            site_name=config.site_name,
            site_url=config.site_url,
            poll_interval_seconds=config.poll_interval_seconds,
            poll_attempts=config.poll_attempts,
        )
        return cls(
            settings,
            credentials,
            base_url=config.api_base,
            api_version=config.api_version,
            timeout=config.request_timeout_seconds,
            **kwargs,
        )

    def submit(self, credential: str, path: str, content: str) -> ProposalLocation:
        """Turn *content* for *path* into a pull request.

        Raises a ``SubmissionError`` subclass naming the failed step.
        """
        context = MutationContext(path=path, content=content)
        logger.info(
            "Submitting %s to %s", path, self.settings.repository.full_name
        )
        with RepositoryClient(
            credential,
            self._base_url,
            api_version=self._api_version,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                for step in self.steps:
                    context = step.run_step(client, context)
            except CredentialExpiredError:
                if self._credentials is not None:
                    self._forget_credential()
                raise

        logger.info("Pull request opened: %s", context.proposal_url)
        return ProposalLocation(
            url=context.proposal_url,
            number=context.proposal_number,
            branch=context.branch,
            head=f"{context.user_login}:{context.branch}",
        )

    def _forget_credential(self) -> None:
        """Clear the expired credential. Storage failures are logged, not raised."""
        # Local import: editflow.core imports this module.
        from editflow.core.storage import StorageError

        try:
            self._credentials.clear()
        except StorageError as exc:
            logger.warning("Expired credential could not be cleared: %s", exc)
