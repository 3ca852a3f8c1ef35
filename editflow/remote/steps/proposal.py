"""Step 8 — open the pull request against the canonical default branch."""

from __future__ import annotations

from editflow.models.remote import MutationContext
from editflow.remote.client import RepositoryClient
from editflow.remote.steps.base import BaseStep
from editflow.remote.steps.content import commit_title


class OpenProposalStep(BaseStep):
    """Step 8: ``POST /repos/{owner}/{repo}/pulls``."""

    @property
    def step_id(self) -> str:
        return "open_proposal"

    @property
    def display_name(self) -> str:
        return "Open Pull Request"

    def body(self, context: MutationContext) -> str:
        return (
            f"Submitted from the [{self.settings.site_name}]({self.settings.site_url})"
            f" by @{context.user_login}."
        )

    def execute(
        self, client: RepositoryClient, context: MutationContext
    ) -> MutationContext:
        pr = client.post(
            f"{self.canonical_path()}/pulls",
            {
                "title": commit_title(context.file_name),
                "body": self.body(context),
                "head": f"{context.user_login}:{context.branch}",
                "base": self.settings.repository.default_branch,
            },
        )
        return context.model_copy(
            update={"proposal_url": pr["html_url"], "proposal_number": pr.get("number")}
        )
