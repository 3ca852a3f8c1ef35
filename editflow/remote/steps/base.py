"""Abstract base step with enforced lifecycle.

Every concrete step inherits from BaseStep and implements only
``execute()``.  The ``run_step()`` wrapper is **not overridable** — it
enforces the canonical lifecycle:

    log start -> execute -> stamp failure with step_id -> record completion

Steps never run concurrently: each step's request depends on data returned
by an earlier one, carried in the frozen ``MutationContext``.
"""

from __future__ import annotations

import abc
import logging
import time
from typing import final

from editflow.models.remote import MutationContext, SequenceSettings
from editflow.remote.client import RepositoryClient
from editflow.remote.errors import RemoteAPIError, SubmissionError

logger = logging.getLogger(__name__)


class BaseStep(abc.ABC):
    """Abstract base for all remote mutation steps.

    Subclasses **must** implement:
        * ``step_id``      — unique identifier (e.g. ``"create_branch"``).
        * ``display_name`` — human-readable name used in logs and the CLI.
        * ``execute(client, context)`` — the step's remote call(s).

    Subclasses **must not** override ``run_step()``.
    """

    def __init__(self, settings: SequenceSettings) -> None:
        self.settings = settings

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @property
    @abc.abstractmethod
    def step_id(self) -> str:
        """Unique step identifier."""
        ...

    @property
    @abc.abstractmethod
    def display_name(self) -> str:
        """Human-readable step name."""
        ...

    @abc.abstractmethod
    def execute(
        self, client: RepositoryClient, context: MutationContext
    ) -> MutationContext:
        """Perform the step and return the context with its result filled in."""
        ...

    # ------------------------------------------------------------------
    # Lifecycle — NOT overridable
    # ------------------------------------------------------------------

    @final
    def run_step(
        self, client: RepositoryClient, context: MutationContext
    ) -> MutationContext:
        """Execute the step.  **Do not override.**

        Failures keep their original message; the step id is attached so
        callers can attribute them.  Unexpected exceptions (e.g. a response
        missing a field) are reported as ``RemoteAPIError``.
        """
        logger.info("%s [%s] started", self.display_name, self.step_id)
        started = time.monotonic()
        try:
            result = self.execute(client, context)
        except SubmissionError as exc:
            if exc.step_id is None:
                exc.step_id = self.step_id
            logger.error(
                "%s [%s] failed: %s", self.display_name, self.step_id, exc
            )
            raise
        except Exception as exc:
            logger.error(
                "%s [%s] failed unexpectedly: %r",
                self.display_name,
                self.step_id,
                exc,
            )
            raise RemoteAPIError(
                f"Unexpected GitHub API response: {exc!r}", step_id=self.step_id
            ) from exc

        logger.info(
            "%s [%s] done in %.2fs",
            self.display_name,
            self.step_id,
            time.monotonic() - started,
        )
        return result.model_copy(
            update={"completed_steps": (*result.completed_steps, self.step_id)}
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def fork_path(self, context: MutationContext) -> str:
        """API path of the user's personal copy."""
        return f"/repos/{context.user_login}/{self.settings.repository.name}"

    def canonical_path(self) -> str:
        repo = self.settings.repository
        return f"/repos/{repo.owner}/{repo.name}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} step_id={self.step_id!r}>"
