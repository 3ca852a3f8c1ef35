"""Editflow data models — all Pydantic v2, all frozen (immutable)."""

from editflow.models.drafts import Draft, PendingSubmission
from editflow.models.remote import (
    MutationContext,
    ProposalLocation,
    RepositoryTarget,
    SequenceSettings,
)
from editflow.models.submission import (
    VALID_TRANSITIONS,
    SubmissionState,
    SubmissionStatus,
)

__all__ = [
    # drafts
    "Draft",
    "PendingSubmission",
    # remote
    "RepositoryTarget",
    "MutationContext",
    "ProposalLocation",
    "SequenceSettings",
    # submission
    "SubmissionStatus",
    "SubmissionState",
    "VALID_TRANSITIONS",
]
