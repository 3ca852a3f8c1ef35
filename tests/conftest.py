"""Shared test fixtures for editflow."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from editflow.core.controller import SubmissionController
from editflow.core.credential_store import CredentialStore
from editflow.core.draft_store import DraftStore
from editflow.core.page import Page
from editflow.core.storage import MemoryStore
from editflow.models.remote import RepositoryTarget, SequenceSettings
from editflow.remote.sequence import RemoteMutationSequence

OWNER = "AdventureX-RGE"
REPO = "Playbook"
USER = "octocat"
PR_URL = f"https://github.com/{OWNER}/{REPO}/pull/42"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakePage(Page):
    """Records navigations instead of performing them."""

    def __init__(self, location: str = "https://playbook.example/guide/intro/") -> None:
        self._location = location
        self.replaced: list[str] = []
        self.navigations: list[str] = []
        self.windows: list[str] = []

    @property
    def location(self) -> str:
        return self._location

    def replace_location(self, url: str) -> None:
        self.replaced.append(url)
        self._location = url

    def navigate(self, url: str) -> None:
        self.navigations.append(url)

    def open_window(self, url: str) -> None:
        self.windows.append(url)


class FakeGitHub:
    """In-process GitHub REST API served through ``httpx.MockTransport``.

    ``fork_ready_after`` is the number of 404s the fork probe returns
    before succeeding.  ``overrides`` maps ``(method, path)`` to a
    ``(status, body)`` response that replaces the default.
    """

    def __init__(self, fork_ready_after: int = 0) -> None:
        self.fork_ready_after = fork_ready_after
        self.overrides: dict[tuple[str, str], tuple[int, dict[str, Any]]] = {}
        self.calls: list[tuple[str, str, dict[str, Any] | None]] = []
        self.requests: list[httpx.Request] = []
        self._fork_probes = 0

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def fail(self, method: str, path: str, status: int, message: str = "") -> None:
        self.overrides[(method, path)] = (status, {"message": message} if message else {})

    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        payload = json.loads(request.content) if request.content else None
        self.calls.append((method, path, payload))
        self.requests.append(request)

        if (method, path) in self.overrides:
            status, body = self.overrides[(method, path)]
            return httpx.Response(status, json=body)

        fork = f"/repos/{USER}/{REPO}"
        routes: dict[tuple[str, str], Callable[[], httpx.Response]] = {
            ("GET", "/user"): lambda: httpx.Response(200, json={"login": USER}),
            ("POST", f"/repos/{OWNER}/{REPO}/forks"): lambda: httpx.Response(
                202, json={"full_name": f"{USER}/{REPO}"}
            ),
            ("GET", fork): self._probe_fork,
            ("GET", f"{fork}/git/ref/heads/main"): lambda: httpx.Response(
                200, json={"ref": "refs/heads/main", "object": {"sha": "base123"}}
            ),
            ("POST", f"{fork}/git/refs"): lambda: httpx.Response(
                201, json={"ref": payload["ref"], "object": {"sha": payload["sha"]}}
            ),
            ("GET", f"{fork}/contents/guide/intro.md"): lambda: httpx.Response(
                200, json={"sha": "blob456", "path": "guide/intro.md"}
            ),
            ("PUT", f"{fork}/contents/guide/intro.md"): lambda: httpx.Response(
                200, json={"commit": {"sha": "commit789"}}
            ),
            ("POST", f"/repos/{OWNER}/{REPO}/pulls"): lambda: httpx.Response(
                201, json={"html_url": PR_URL, "number": 42}
            ),
        }
        route = routes.get((method, path))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return route()

    def _probe_fork(self) -> httpx.Response:
        self._fork_probes += 1
        if self._fork_probes <= self.fork_ready_after:
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(200, json={"full_name": f"{USER}/{REPO}"})

    def paths(self) -> list[tuple[str, str]]:
        return [(m, p) for m, p, _ in self.calls]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test state."""
    return tmp_path


@pytest.fixture
def make_page() -> Callable[..., FakePage]:
    """Factory fixture: a FakePage at the given location."""
    return FakePage


@pytest.fixture
def page() -> FakePage:
    return FakePage()


@pytest.fixture
def durable_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def session_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def credentials(durable_store: MemoryStore, page: FakePage) -> CredentialStore:
    return CredentialStore(durable_store, page)


@pytest.fixture
def drafts(session_store: MemoryStore) -> DraftStore:
    return DraftStore(session_store)


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def settings() -> SequenceSettings:
    return SequenceSettings(
        repository=RepositoryTarget(owner=OWNER, name=REPO, default_branch="main"),
        site_url="https://playbook.example",
    )


@pytest.fixture
def sleeps() -> list[float]:
    """Collects every delay requested by the code under test."""
    return []


@pytest.fixture
def make_sequence(
    settings: SequenceSettings,
    credentials: CredentialStore,
    sleeps: list[float],
) -> Callable[..., RemoteMutationSequence]:
    """Factory fixture: a sequence wired to a FakeGitHub, never really sleeping."""

    def _factory(fake: FakeGitHub, **overrides: Any) -> RemoteMutationSequence:
        kwargs: dict[str, Any] = {
            "base_url": "https://api.github.test",
            "transport": fake.transport,
            "sleep": sleeps.append,
            "clock": lambda: 1_700_000_000.5,
        }
        kwargs.update(overrides)
        return RemoteMutationSequence(settings, credentials, **kwargs)

    return _factory


@pytest.fixture
def controller(
    credentials: CredentialStore,
    drafts: DraftStore,
    page: FakePage,
    github: FakeGitHub,
    make_sequence: Callable[..., RemoteMutationSequence],
    sleeps: list[float],
) -> SubmissionController:
    """Provide a SubmissionController wired to in-memory stores and FakeGitHub."""
    return SubmissionController(
        credentials,
        drafts,
        page,
        make_sequence(github),
        login_entry="/api/github/login",
        sleep=sleeps.append,
    )
