"""Remote repository models — target, per-attempt context, proposal result."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RepositoryTarget(BaseModel):
    """The canonical repository that receives change proposals."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str
    default_branch: str = "main"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class MutationContext(BaseModel):
    """Ephemeral state threaded through one submission attempt.

    Each step reads what earlier steps produced and returns a copy with its
    own field filled in.  Never persisted; discarded when the attempt ends.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    user_login: str = ""
    fork_ready: bool = False
    base_sha: str = ""
    branch: str = ""
    file_sha: str = ""
    commit_sha: str = ""
    proposal_url: str = ""
    proposal_number: int | None = None
    completed_steps: tuple[str, ...] = ()

    @property
    def file_name(self) -> str:
        """Base name of the target file, used in commit and proposal titles."""
        return self.path.rsplit("/", 1)[-1]


class SequenceSettings(BaseModel):
    """Static inputs shared by every step of a submission attempt."""

    model_config = ConfigDict(frozen=True)

    repository: RepositoryTarget
    branch_prefix: str = "playbook-edit-"
    site_name: str = "Playbook Editor"
    site_url: str = "https://playbook.adventure-x.org"
    poll_interval_seconds: float = 3.0
    poll_attempts: int = 10


class ProposalLocation(BaseModel):
    """Where the opened pull request can be browsed."""

    model_config = ConfigDict(frozen=True)

    url: str
    number: int | None = None
    branch: str = ""
    head: str = ""
