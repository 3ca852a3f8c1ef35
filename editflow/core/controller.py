"""Submission controller — the state machine tying the pipeline together.

States::

    idle -> submitting -> success | error
    success | error -> submitting      (a fresh attempt)

A submission without a credential cannot proceed in place: the page has to
leave for the identity provider, which discards everything in memory.  The
controller therefore persists the draft and a pending marker before
navigating, and ``resume_if_pending`` picks the submission back up on the
first load after the provider sends the user back.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Protocol

from editflow.config import EditflowConfig
from editflow.core.credential_store import CredentialStore
from editflow.core.draft_store import DraftStore
from editflow.core.editing import Editor
from editflow.core.page import Page, path_and_query
from editflow.core.storage import DURABLE_NAMESPACE, SQLiteStore, session_namespace
from editflow.identity import login_url
from editflow.models.remote import ProposalLocation
from editflow.models.submission import (
    VALID_TRANSITIONS,
    SubmissionState,
    SubmissionStatus,
)
from editflow.remote.errors import SubmissionError, SubmissionInProgressError
from editflow.remote.sequence import RemoteMutationSequence

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when a requested status transition is not valid."""


class Submitter(Protocol):
    def submit(self, credential: str, path: str, content: str) -> ProposalLocation: ...


class SubmissionController:
    """Drives one page's submission lifecycle.

    Parameters
    ----------
    credentials:
        Durable credential store.
    drafts:
        Session-scoped draft store.
    page:
        The host page (location, navigation, new windows).
    sequence:
        Anything with ``submit(credential, path, content)``; normally a
        ``RemoteMutationSequence``.
    login_entry:
        Path of the identity-provider login entry point.
    resume_delay:
        Seconds to let the editor settle before a resumed submission.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        drafts: DraftStore,
        page: Page,
        sequence: Submitter,
        *,
        login_entry: str = "/api/github/login",
        resume_delay: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.credentials = credentials
        self.drafts = drafts
        self.page = page
        self._sequence = sequence
        self._login_entry = login_entry
        self._resume_delay = resume_delay
        self._sleep = sleep
        self._state = SubmissionState()
        self._listeners: list[Callable[[SubmissionState], None]] = []

    @classmethod
    def from_config(
        cls,
        config: EditflowConfig,
        page: Page,
        *,
        sequence: Submitter | None = None,
    ) -> SubmissionController:
        """Wire stores and the remote sequence from *config*."""
        credentials = CredentialStore(
            SQLiteStore(config.state_path, DURABLE_NAMESPACE),
            page,
            token_key=config.token_key,
        )
        drafts = DraftStore(
            SQLiteStore(config.state_path, session_namespace(config.effective_session_id))
        )
        if sequence is None:
            sequence = RemoteMutationSequence.from_config(config, credentials)
        return cls(
            credentials,
            drafts,
            page,
            sequence,
            login_entry=config.login_entry,
            resume_delay=config.resume_delay_seconds,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def status(self) -> SubmissionStatus:
        return self._state.status

    @property
    def message(self) -> str:
        return self._state.message

    def subscribe(self, listener: Callable[[SubmissionState], None]) -> Callable[[], None]:
        """Call *listener* on every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _transition(self, target: SubmissionStatus, message: str, path: str) -> None:
        current = self._state.status
        if target not in VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(
                f"Cannot transition submission from {current.value} to {target.value}."
            )
        self._state = SubmissionState(status=target, message=message, path=path)
        logger.debug("Submission %s -> %s", current.value, target.value)
        for listener in list(self._listeners):
            listener(self._state)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def request_submit(self, path: str, content: str) -> SubmissionState | None:
        """Submit *content* for *path*, or send the user to log in first.

        Returns the final state, or None when the page navigated away to
        the identity provider.
        """
        if self._state.status == SubmissionStatus.SUBMITTING:
            raise SubmissionInProgressError(
                f"A submission of {self._state.path} is already in progress."
            )

        credential = self.credentials.extract_or_load()
        if not credential:
            self.drafts.save(path, content)
            self.drafts.mark_pending(path)
            target = login_url(self._login_entry, path_and_query(self.page.location))
            logger.info("No credential; redirecting to login for %s", path)
            self.page.navigate(target)
            return None

        self._transition(SubmissionStatus.SUBMITTING, "", path)
        try:
            proposal = self._sequence.submit(credential, path, content)
        except SubmissionError as exc:
            logger.warning(
                "Submission of %s failed at %s: %s", path, exc.step_id or "-", exc
            )
            self._transition(SubmissionStatus.ERROR, str(exc), path)
            return self._state
        except Exception as exc:
            logger.exception("Submission of %s aborted unexpectedly", path)
            self._transition(SubmissionStatus.ERROR, str(exc) or type(exc).__name__, path)
            return self._state

        self._transition(SubmissionStatus.SUCCESS, proposal.url, path)
        self.drafts.clear(path)
        self.drafts.consume_pending()
        self.page.open_window(proposal.url)
        return self._state

    def resume_if_pending(self, editor: Editor) -> SubmissionState | None:
        """Continue a submission interrupted by the login redirect.

        Call once per page load.  The pending marker is consumed whether or
        not it matches, so an unrelated later load never re-triggers it.
        """
        credential = self.credentials.extract_or_load()
        pending = self.drafts.consume_pending()
        if not credential or pending != editor.path:
            if pending:
                logger.info(
                    "Pending submission for %s not resumed (credential=%s, page=%s)",
                    pending,
                    bool(credential),
                    editor.path,
                )
            return None

        logger.info("Resuming submission of %s after login", pending)
        editor.begin_editing()
        self._sleep(self._resume_delay)
        return self.request_submit(editor.path, editor.text)
