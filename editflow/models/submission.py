"""Submission status models — table-driven state transitions."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SubmissionStatus(str, Enum):
    """Lifecycle of a single submission attempt."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


# Valid status transitions — enforced by SubmissionController.
# SUCCESS and ERROR end an attempt; a new attempt re-enters SUBMITTING.
VALID_TRANSITIONS: dict[SubmissionStatus, set[SubmissionStatus]] = {
    SubmissionStatus.IDLE: {SubmissionStatus.SUBMITTING},
    SubmissionStatus.SUBMITTING: {SubmissionStatus.SUCCESS, SubmissionStatus.ERROR},
    SubmissionStatus.SUCCESS: {SubmissionStatus.SUBMITTING},
    SubmissionStatus.ERROR: {SubmissionStatus.SUBMITTING},
}


class SubmissionState(BaseModel):
    """Status plus its message.

    The message is empty while idle or submitting, the proposal URL on
    success, and a human-readable cause on error.
    """

    model_config = ConfigDict(frozen=True)

    status: SubmissionStatus = SubmissionStatus.IDLE
    message: str = ""
    path: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.status in (SubmissionStatus.SUCCESS, SubmissionStatus.ERROR)
