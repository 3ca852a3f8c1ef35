"""Tests for RemoteMutationSequence — ordering, polling, and failure handling."""

from __future__ import annotations

import base64

import pytest

from editflow.core.credential_store import CredentialStore
from editflow.core.storage import MemoryStore, StorageError
from editflow.remote.errors import (
    CREDENTIAL_EXPIRED_MESSAGE,
    READINESS_TIMEOUT_MESSAGE,
    CredentialExpiredError,
    ReadinessTimeoutError,
    RemoteAPIError,
)
from editflow.remote.sequence import RemoteMutationSequence
from editflow.remote.steps import STEP_ORDER

from tests.conftest import OWNER, PR_URL, REPO, USER, FakeGitHub

FORK = f"/repos/{USER}/{REPO}"
CONTENTS = f"{FORK}/contents/guide/intro.md"

EXPECTED_CALLS = [
    ("GET", "/user"),
    ("POST", f"/repos/{OWNER}/{REPO}/forks"),
    ("GET", FORK),
    ("GET", f"{FORK}/git/ref/heads/main"),
    ("POST", f"{FORK}/git/refs"),
    ("GET", CONTENTS),
    ("PUT", CONTENTS),
    ("POST", f"/repos/{OWNER}/{REPO}/pulls"),
]


class TestSuccessfulSubmission:
    def test_returns_proposal_location(self, github: FakeGitHub, make_sequence):
        proposal = make_sequence(github).submit("tok", "guide/intro.md", "new text")
        assert proposal.url == PR_URL
        assert proposal.number == 42
        assert proposal.head == f"{USER}:{proposal.branch}"

    def test_steps_issue_requests_in_order(self, github: FakeGitHub, make_sequence):
        make_sequence(github).submit("tok", "guide/intro.md", "new text")
        assert github.paths() == EXPECTED_CALLS

    def test_step_order_matches_registry(self, github: FakeGitHub, make_sequence):
        sequence = make_sequence(github)
        assert [s.step_id for s in sequence.steps] == STEP_ORDER

    def test_bearer_credential_and_api_headers(self, github: FakeGitHub, make_sequence):
        make_sequence(github).submit("tok-123", "guide/intro.md", "x")
        for request in github.requests:
            assert request.headers["Authorization"] == "Bearer tok-123"
            assert request.headers["Accept"] == "application/vnd.github+json"
            assert request.headers["X-GitHub-Api-Version"] == "2022-11-28"

    def test_fork_request_limits_to_default_branch(self, github: FakeGitHub, make_sequence):
        make_sequence(github).submit("tok", "guide/intro.md", "x")
        _, _, payload = github.calls[1]
        assert payload == {"default_branch_only": True}

    def test_branch_points_at_base_tip(self, github: FakeGitHub, make_sequence):
        make_sequence(github).submit("tok", "guide/intro.md", "x")
        _, _, payload = github.calls[4]
        assert payload == {
            "ref": "refs/heads/playbook-edit-1700000000500",
            "sha": "base123",
        }

    def test_branch_names_differ_per_attempt(self, github: FakeGitHub, make_sequence):
        ticks = iter([1.0, 2.0])
        sequence = make_sequence(github, clock=lambda: next(ticks))
        first = sequence.submit("tok", "guide/intro.md", "x").branch
        second = sequence.submit("tok", "guide/intro.md", "x").branch
        assert first != second

    def test_file_read_on_new_branch(self, github: FakeGitHub, make_sequence):
        make_sequence(github).submit("tok", "guide/intro.md", "x")
        read = github.requests[5]
        assert read.url.params["ref"] == "playbook-edit-1700000000500"

    def test_write_is_sha_guarded_and_base64(self, github: FakeGitHub, make_sequence):
        text = "# Intro\n\n中文内容\n"
        make_sequence(github).submit("tok", "guide/intro.md", text)
        _, _, payload = github.calls[6]
        assert payload["sha"] == "blob456"
        assert payload["branch"] == "playbook-edit-1700000000500"
        assert payload["message"] == "docs: edit intro.md"
        assert base64.b64decode(payload["content"]).decode("utf-8") == text

    def test_proposal_attributes_user(self, github: FakeGitHub, make_sequence):
        make_sequence(github).submit("tok", "guide/intro.md", "x")
        _, _, payload = github.calls[7]
        assert payload["title"] == "docs: edit intro.md"
        assert payload["head"] == f"{USER}:playbook-edit-1700000000500"
        assert payload["base"] == "main"
        assert f"@{USER}" in payload["body"]
        assert "https://playbook.example" in payload["body"]


class TestForkReadiness:
    def test_polls_until_fork_is_reachable(self, make_sequence, sleeps: list[float]):
        fake = FakeGitHub(fork_ready_after=3)
        proposal = make_sequence(fake).submit("tok", "guide/intro.md", "x")
        assert proposal.url == PR_URL
        assert fake.paths().count(("GET", FORK)) == 4
        assert sleeps == [3.0, 3.0, 3.0]

    def test_times_out_after_ten_attempts(self, make_sequence, sleeps: list[float]):
        fake = FakeGitHub(fork_ready_after=100)
        with pytest.raises(ReadinessTimeoutError) as exc_info:
            make_sequence(fake).submit("tok", "guide/intro.md", "x")

        assert str(exc_info.value) == READINESS_TIMEOUT_MESSAGE
        assert exc_info.value.step_id == "await_fork"
        assert fake.paths().count(("GET", FORK)) == 10
        assert all(delay >= 3.0 for delay in sleeps)
        assert len(sleeps) == 9

    def test_timeout_aborts_remaining_steps(self, make_sequence):
        fake = FakeGitHub(fork_ready_after=100)
        with pytest.raises(ReadinessTimeoutError):
            make_sequence(fake).submit("tok", "guide/intro.md", "x")
        assert fake.paths()[-1] == ("GET", FORK)

    def test_unauthorized_probe_aborts_without_polling(
        self, make_sequence, sleeps: list[float]
    ):
        fake = FakeGitHub()
        fake.fail("GET", FORK, 401)
        with pytest.raises(CredentialExpiredError):
            make_sequence(fake).submit("tok", "guide/intro.md", "x")
        assert fake.paths().count(("GET", FORK)) == 1
        assert sleeps == []


class TestFailures:
    def test_expired_credential_at_identity_step(
        self, make_sequence, credentials: CredentialStore, durable_store: MemoryStore
    ):
        durable_store.set("github_token", "tok")
        fake = FakeGitHub()
        fake.fail("GET", "/user", 401)

        with pytest.raises(CredentialExpiredError) as exc_info:
            make_sequence(fake).submit("tok", "guide/intro.md", "x")

        assert str(exc_info.value) == CREDENTIAL_EXPIRED_MESSAGE
        assert exc_info.value.step_id == "resolve_identity"
        assert credentials.load() is None
        assert fake.paths() == [("GET", "/user")]

    def test_expired_credential_at_write_step(
        self, make_sequence, credentials: CredentialStore, durable_store: MemoryStore
    ):
        durable_store.set("github_token", "tok")
        fake = FakeGitHub()
        fake.fail("PUT", CONTENTS, 401)

        with pytest.raises(CredentialExpiredError) as exc_info:
            make_sequence(fake).submit("tok", "guide/intro.md", "x")

        assert exc_info.value.step_id == "write_file"
        assert credentials.load() is None
        assert ("POST", f"/repos/{OWNER}/{REPO}/pulls") not in fake.paths()

    def test_remote_message_surfaced_verbatim(self, make_sequence):
        fake = FakeGitHub()
        fake.fail("POST", f"/repos/{OWNER}/{REPO}/pulls", 422, "Validation Failed")
        with pytest.raises(RemoteAPIError) as exc_info:
            make_sequence(fake).submit("tok", "guide/intro.md", "x")
        assert str(exc_info.value) == "Validation Failed"
        assert exc_info.value.status_code == 422
        assert exc_info.value.step_id == "open_proposal"

    def test_missing_remote_message_falls_back_to_status(self, make_sequence):
        fake = FakeGitHub()
        fake.fail("GET", f"{FORK}/git/ref/heads/main", 500)
        with pytest.raises(RemoteAPIError, match="GitHub API 500"):
            make_sequence(fake).submit("tok", "guide/intro.md", "x")

    def test_failure_is_fail_fast(self, make_sequence, sleeps: list[float]):
        fake = FakeGitHub()
        fake.fail("POST", f"{FORK}/git/refs", 422, "Reference already exists")
        with pytest.raises(RemoteAPIError):
            make_sequence(fake).submit("tok", "guide/intro.md", "x")
        assert fake.paths() == EXPECTED_CALLS[:5]
        assert sleeps == []

    def test_missing_file_fails_read_step(self, make_sequence):
        fake = FakeGitHub()
        with pytest.raises(RemoteAPIError) as exc_info:
            make_sequence(fake).submit("tok", "guide/missing.md", "x")
        assert exc_info.value.step_id == "read_file"
        assert str(exc_info.value) == "Not Found"

    def test_remote_error_keeps_credential(
        self, make_sequence, credentials: CredentialStore, durable_store: MemoryStore
    ):
        durable_store.set("github_token", "tok")
        fake = FakeGitHub()
        fake.fail("POST", f"/repos/{OWNER}/{REPO}/forks", 403, "Forbidden")
        with pytest.raises(RemoteAPIError):
            make_sequence(fake).submit("tok", "guide/intro.md", "x")
        assert credentials.load() == "tok"

    def test_expired_credential_propagates_when_clear_fails(self, settings, page):
        class LockedDeleteStore(MemoryStore):
            def delete(self, key: str) -> None:
                raise StorageError("database is locked")

        store = LockedDeleteStore()
        store.set("github_token", "tok")
        fake = FakeGitHub()
        fake.fail("GET", "/user", 401)
        sequence = RemoteMutationSequence(
            settings, CredentialStore(store, page), transport=fake.transport
        )

        with pytest.raises(CredentialExpiredError) as exc_info:
            sequence.submit("tok", "guide/intro.md", "x")
        assert exc_info.value.step_id == "resolve_identity"
