"""Remote mutation steps — registry mapping step_id to step class.

Usage::

    from editflow.remote.steps import build_steps

    for step in build_steps(settings):
        context = step.run_step(client, context)
"""

from __future__ import annotations

import time
from collections.abc import Callable

from editflow.models.remote import SequenceSettings
from editflow.remote.steps.base import BaseStep
from editflow.remote.steps.branch import CreateBranchStep, SnapshotBaseStep
from editflow.remote.steps.content import ReadFileStep, WriteFileStep
from editflow.remote.steps.fork import AwaitForkStep, EnsureForkStep
from editflow.remote.steps.identity import ResolveIdentityStep
from editflow.remote.steps.proposal import OpenProposalStep

# ---------------------------------------------------------------------------
# Step registry: step_id -> step class
# ---------------------------------------------------------------------------

STEP_REGISTRY: dict[str, type[BaseStep]] = {
    "resolve_identity": ResolveIdentityStep,
    "ensure_fork": EnsureForkStep,
    "await_fork": AwaitForkStep,
    "snapshot_base": SnapshotBaseStep,
    "create_branch": CreateBranchStep,
    "read_file": ReadFileStep,
    "write_file": WriteFileStep,
    "open_proposal": OpenProposalStep,
}

# Execution order. Every step consumes what the one before it produced.
STEP_ORDER: list[str] = [
    "resolve_identity",
    "ensure_fork",
    "await_fork",
    "snapshot_base",
    "create_branch",
    "read_file",
    "write_file",
    "open_proposal",
]


def build_steps(
    settings: SequenceSettings,
    *,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.time,
) -> list[BaseStep]:
    """Instantiate every step in execution order."""
    steps: list[BaseStep] = []
    for step_id in STEP_ORDER:
        cls = STEP_REGISTRY[step_id]
        if cls is AwaitForkStep:
            steps.append(AwaitForkStep(settings, sleep=sleep))
        elif cls is CreateBranchStep:
            steps.append(CreateBranchStep(settings, clock=clock))
        else:
            steps.append(cls(settings))
    return steps


__all__ = [
    "BaseStep",
    "STEP_REGISTRY",
    "STEP_ORDER",
    "build_steps",
    "ResolveIdentityStep",
    "EnsureForkStep",
    "AwaitForkStep",
    "SnapshotBaseStep",
    "CreateBranchStep",
    "ReadFileStep",
    "WriteFileStep",
    "OpenProposalStep",
]
