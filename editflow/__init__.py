"""Editflow: turn a locally edited document into a GitHub pull request.

The contribution pipeline behind an in-page editor:
  - Drafts persisted per document for the session, with a sticky dirty flag
  - Durable bearer credential captured from the login callback fragment
  - Fork -> branch -> commit -> pull request as an ordered pipeline of steps
  - Submission state machine that survives the login redirect and resumes
    the interrupted submission exactly once
"""

__version__ = "0.1.0"
__description__ = "Contribution pipeline from in-page edits to GitHub pull requests"

from editflow.core.controller import SubmissionController
from editflow.remote.sequence import RemoteMutationSequence

__all__ = ["SubmissionController", "RemoteMutationSequence", "__version__"]
