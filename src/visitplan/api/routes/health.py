"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...data import workspace_repository

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/workspace", status_code=status.HTTP_200_OK)
def health_workspace() -> dict:
    workspace = workspace_repository.load_workspace()
    return {
        "status": "ok",
        "sites": len(workspace.sites),
        "reports": len(workspace.reports),
        "weekly_plans": len(workspace.plans()),
        "draft_pending": workspace.draft is not None,
    }
