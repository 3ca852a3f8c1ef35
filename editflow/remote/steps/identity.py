"""Step 1 — resolve the authenticated user's handle.

A 401 here means the stored credential has expired; the sequence clears it
so the next attempt goes back through login.
"""

from __future__ import annotations

from editflow.models.remote import MutationContext
from editflow.remote.client import RepositoryClient
from editflow.remote.steps.base import BaseStep


class ResolveIdentityStep(BaseStep):
    """Step 1: ``GET /user`` -> login."""

    @property
    def step_id(self) -> str:
        return "resolve_identity"

    @property
    def display_name(self) -> str:
        return "Resolve Identity"

    def execute(
        self, client: RepositoryClient, context: MutationContext
    ) -> MutationContext:
        user = client.get("/user")
        return context.model_copy(update={"user_login": user["login"]})
