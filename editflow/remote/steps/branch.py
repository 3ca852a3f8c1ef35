"""Steps 4 and 5 — snapshot the base tip and branch from it."""

from __future__ import annotations

import time
from collections.abc import Callable

from editflow.models.remote import MutationContext, SequenceSettings
from editflow.remote.client import RepositoryClient
from editflow.remote.steps.base import BaseStep


class SnapshotBaseStep(BaseStep):
    """Step 4: read the tip of the default branch on the fork."""

    @property
    def step_id(self) -> str:
        return "snapshot_base"

    @property
    def display_name(self) -> str:
        return "Snapshot Base Branch"

    def execute(
        self, client: RepositoryClient, context: MutationContext
    ) -> MutationContext:
        branch = self.settings.repository.default_branch
        ref = client.get(f"{self.fork_path(context)}/git/ref/heads/{branch}")
        return context.model_copy(update={"base_sha": ref["object"]["sha"]})


class CreateBranchStep(BaseStep):
    """Step 5: create a fresh branch at the snapshot tip.

    The name carries a millisecond timestamp so a retry never collides with
    a branch left behind by an earlier partial attempt.
    """

    def __init__(
        self,
        settings: SequenceSettings,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(settings)
        self._clock = clock

    @property
    def step_id(self) -> str:
        return "create_branch"

    @property
    def display_name(self) -> str:
        return "Create Branch"

    def branch_name(self) -> str:
        return f"{self.settings.branch_prefix}{int(self._clock() * 1000)}"

    def execute(
        self, client: RepositoryClient, context: MutationContext
    ) -> MutationContext:
        branch = self.branch_name()
        client.post(
            f"{self.fork_path(context)}/git/refs",
            {"ref": f"refs/heads/{branch}", "sha": context.base_sha},
        )
        return context.model_copy(update={"branch": branch})
