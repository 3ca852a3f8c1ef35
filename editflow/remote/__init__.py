"""Remote repository side of the contribution pipeline."""

from editflow.remote.client import RepositoryClient
from editflow.remote.errors import (
    CredentialExpiredError,
    ReadinessTimeoutError,
    RemoteAPIError,
    SubmissionError,
    SubmissionInProgressError,
)
from editflow.remote.sequence import RemoteMutationSequence

__all__ = [
    "RepositoryClient",
    "RemoteMutationSequence",
    "SubmissionError",
    "CredentialExpiredError",
    "ReadinessTimeoutError",
    "RemoteAPIError",
    "SubmissionInProgressError",
]
