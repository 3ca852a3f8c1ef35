"""Steps 6 and 7 — read the file's blob sha, then write the new content.

GitHub only accepts an update to an existing file when the request names
the blob it replaces, so a concurrent upstream edit to the same path is
rejected instead of silently overwritten.
"""

from __future__ import annotations

import base64
from urllib.parse import quote

from editflow.models.remote import MutationContext
from editflow.remote.client import RepositoryClient
from editflow.remote.steps.base import BaseStep


def encode_content(text: str) -> str:
    """Base64 of the UTF-8 bytes of *text*, as the contents API expects."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def commit_title(file_name: str) -> str:
    return f"docs: edit {file_name}"


class _ContentStep(BaseStep):
    def contents_path(self, context: MutationContext) -> str:
        return f"{self.fork_path(context)}/contents/{quote(context.path)}"


class ReadFileStep(_ContentStep):
    """Step 6: read the current blob sha of the file on the new branch."""

    @property
    def step_id(self) -> str:
        return "read_file"

    @property
    def display_name(self) -> str:
        return "Read File"

    def execute(
        self, client: RepositoryClient, context: MutationContext
    ) -> MutationContext:
        current = client.get(self.contents_path(context), params={"ref": context.branch})
        return context.model_copy(update={"file_sha": current["sha"]})


class WriteFileStep(_ContentStep):
    """Step 7: replace the file content, guarded by the blob sha."""

    @property
    def step_id(self) -> str:
        return "write_file"

    @property
    def display_name(self) -> str:
        return "Write File"

    def execute(
        self, client: RepositoryClient, context: MutationContext
    ) -> MutationContext:
        result = client.put(
            self.contents_path(context),
            {
                "message": commit_title(context.file_name),
                "content": encode_content(context.content),
                "sha": context.file_sha,
                "branch": context.branch,
            },
        )
        commit_sha = result.get("commit", {}).get("sha", "")
        return context.model_copy(update={"commit_sha": commit_sha})
