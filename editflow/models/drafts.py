"""Draft and pending-submission models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Draft(BaseModel):
    """A locally persisted, unsubmitted edit to a single document.

    ``dirty`` is sticky: once an edit event has been saved the draft stays
    dirty even if the text matches the original again.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    text: str
    dirty: bool = True


class PendingSubmission(BaseModel):
    """Marker recording a submission deferred until after login."""

    model_config = ConfigDict(frozen=True)

    path: str
