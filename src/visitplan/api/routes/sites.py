"""Site ownership, grouping and hold endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...data import workspace_repository
from ...schemas.planning import HoldDecision, HoldRequest, LinkRequest, ReassignRequest, SiteModel
from ...services.outputs.formatter import site_to_model

router = APIRouter(prefix="/sites", tags=["sites"])


@router.get("/alerts", status_code=status.HTTP_200_OK)
def list_alerts() -> list[dict]:
    """Overdue-visit alerts for management."""
    return [
        {
            "site_id": site.id,
            "client_name": site.client_name,
            "consultant_id": site.assigned_consultant_id,
            "message": message,
        }
        for site, message in workspace_repository.load_workspace().management_alerts()
    ]


@router.post("/reassign", status_code=status.HTTP_200_OK)
def reassign(payload: ReassignRequest) -> dict:
    """Reassign sites; linked sites in the same group follow along."""
    workspace = workspace_repository.load_workspace()
    try:
        changed = workspace.reassign_sites(payload.site_ids, payload.new_consultant_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error reassigning sites: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to reassign sites: {str(exc)}",
        ) from exc
    if changed:
        workspace_repository.persist_workspace(workspace)
    return {
        "success": True,
        "reassigned_site_ids": changed,
        "message": f"Successfully reassigned {len(changed)} site(s).",
    }


@router.post("/{site_id}/link", status_code=status.HTTP_200_OK)
def link(site_id: int, payload: LinkRequest) -> dict:
    workspace = workspace_repository.load_workspace()
    try:
        workspace.link_sites(site_id, payload.target_site_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    workspace_repository.persist_workspace(workspace)
    return {"success": True, "site_group_id": workspace.get_site(site_id).site_group_id}


@router.delete("/{site_id}/link", status_code=status.HTTP_200_OK)
def unlink(site_id: int) -> dict:
    workspace = workspace_repository.load_workspace()
    try:
        workspace.unlink_site(site_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    workspace_repository.persist_workspace(workspace)
    return {"success": True}


@router.post("/{site_id}/hold", response_model=SiteModel, status_code=status.HTTP_200_OK)
def request_hold(site_id: int, payload: HoldRequest) -> SiteModel:
    workspace = workspace_repository.load_workspace()
    try:
        site = workspace.request_hold(site_id, payload.reason, payload.start, payload.end, payload.requested_by)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    workspace_repository.persist_workspace(workspace)
    return site_to_model(site)


@router.post("/{site_id}/hold/decision", response_model=SiteModel, status_code=status.HTTP_200_OK)
def resolve_hold(site_id: int, payload: HoldDecision) -> SiteModel:
    workspace = workspace_repository.load_workspace()
    try:
        site = workspace.resolve_hold(site_id, payload.approved)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    workspace_repository.persist_workspace(workspace)
    return site_to_model(site)


@router.delete("/{site_id}/hold", response_model=SiteModel, status_code=status.HTTP_200_OK)
def clear_hold(site_id: int) -> SiteModel:
    workspace = workspace_repository.load_workspace()
    try:
        site = workspace.clear_hold(site_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    workspace_repository.persist_workspace(workspace)
    return site_to_model(site)
