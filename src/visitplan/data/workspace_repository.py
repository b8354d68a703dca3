"""Loading and saving the process-wide planning workspace."""

from __future__ import annotations

import functools
import logging

from ..persistence.filesystem import FileStorage
from ..services.workspace import PlanningWorkspace


@functools.lru_cache(maxsize=1)
def load_workspace() -> PlanningWorkspace:
    """Load the workspace from the configured snapshot, or start an empty one."""

    snapshot = FileStorage().load_snapshot()
    if snapshot is None:
        return PlanningWorkspace()
    workspace = PlanningWorkspace.from_snapshot(snapshot)
    logging.info(
        f"Loaded workspace with {len(workspace.sites)} site(s), {len(workspace.reports)} report(s) "
        f"and {len(workspace.plans())} weekly plan(s)"
    )
    return workspace


def save_workspace(workspace: PlanningWorkspace, storage: FileStorage | None = None) -> None:
    path = workspace.save(storage or FileStorage())
    logging.info(f"Workspace snapshot written to {path}")


def persist_workspace(workspace: PlanningWorkspace) -> None:
    """Save after a mutation; a failed write is logged and does not fail the caller."""

    try:
        save_workspace(workspace)
    except OSError as exc:
        logging.error(f"Failed to persist workspace snapshot: {exc}")
