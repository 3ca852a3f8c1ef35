"""Submission error taxonomy.

Every failure that can end a submission attempt derives from
``SubmissionError``.  ``step_id`` is stamped by the step runner so the
failing step is known without changing the user-facing message.
"""

from __future__ import annotations

CREDENTIAL_EXPIRED_MESSAGE = "GitHub token expired — please sign in again"
READINESS_TIMEOUT_MESSAGE = "Timed out waiting for fork to be created"


class SubmissionError(RuntimeError):
    """Base class for errors that abort a submission attempt."""

    def __init__(self, message: str, *, step_id: str | None = None) -> None:
        super().__init__(message)
        self.step_id = step_id


class CredentialExpiredError(SubmissionError):
    """The remote API rejected the credential (HTTP 401)."""

    def __init__(self, message: str = CREDENTIAL_EXPIRED_MESSAGE, **kwargs) -> None:
        super().__init__(message, **kwargs)


class ReadinessTimeoutError(SubmissionError):
    """The personal copy never became reachable within the polling window."""

    def __init__(self, message: str = READINESS_TIMEOUT_MESSAGE, **kwargs) -> None:
        super().__init__(message, **kwargs)


class RemoteAPIError(SubmissionError):
    """Any other non-2xx response, or a transport failure."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        step_id: str | None = None,
    ) -> None:
        super().__init__(message, step_id=step_id)
        self.status_code = status_code


class SubmissionInProgressError(RuntimeError):
    """Raised when a submission is requested while one is in flight."""
