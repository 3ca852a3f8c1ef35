"""Steps 2 and 3 — ensure a personal copy exists and wait until it is usable.

Fork creation is asynchronous on GitHub: the POST returns before the copy
can be read.  ``AwaitForkStep`` is the only retrying step in the sequence.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from editflow.models.remote import MutationContext, SequenceSettings
from editflow.remote.client import RepositoryClient
from editflow.remote.errors import ReadinessTimeoutError, RemoteAPIError
from editflow.remote.steps.base import BaseStep

logger = logging.getLogger(__name__)


class EnsureForkStep(BaseStep):
    """Step 2: request a fork of the canonical repository.

    GitHub answers 202 for an existing fork too, so repeating the request
    is harmless.
    """

    @property
    def step_id(self) -> str:
        return "ensure_fork"

    @property
    def display_name(self) -> str:
        return "Ensure Fork"

    def execute(
        self, client: RepositoryClient, context: MutationContext
    ) -> MutationContext:
        client.post(f"{self.canonical_path()}/forks", {"default_branch_only": True})
        return context


class AwaitForkStep(BaseStep):
    """Step 3: poll the fork until it is reachable.

    Polls every ``poll_interval_seconds`` for at most ``poll_attempts``
    attempts.  Only ``RemoteAPIError`` (typically 404) counts as "not yet";
    an expired credential aborts at once.
    """

    def __init__(
        self,
        settings: SequenceSettings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(settings)
        self._sleep = sleep

    @property
    def step_id(self) -> str:
        return "await_fork"

    @property
    def display_name(self) -> str:
        return "Await Fork"

    def execute(
        self, client: RepositoryClient, context: MutationContext
    ) -> MutationContext:
        attempts = self.settings.poll_attempts
        for attempt in range(1, attempts + 1):
            try:
                client.get(self.fork_path(context))
            except RemoteAPIError as exc:
                logger.debug(
                    "Fork not ready (attempt %d/%d): %s", attempt, attempts, exc
                )
                if attempt < attempts:
                    self._sleep(self.settings.poll_interval_seconds)
                continue
            logger.info("Fork %s ready after %d attempt(s)", self.fork_path(context), attempt)
            return context.model_copy(update={"fork_ready": True})
        raise ReadinessTimeoutError()
