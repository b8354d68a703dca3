"""Draft weekly plan endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...config import settings
from ...data import workspace_repository
from ...schemas.planning import ConfirmDraftRequest, DraftResponse, PlanGenerationRequest
from ...services.outputs.formatter import models_to_plan_state, plan_state_to_models
from ...services.planning.drafts import DraftPlanResult, PlanGenerationOptions

router = APIRouter(prefix="/drafts", tags=["drafts"])


def _draft_response(draft: DraftPlanResult) -> DraftResponse:
    return DraftResponse(
        plans=plan_state_to_models(draft.plans),
        eligible_count=draft.eligible_count,
        placed_count=draft.placed_count,
        dropped_site_ids=draft.dropped_site_ids,
        message=draft.summary(),
    )


@router.post("", response_model=DraftResponse, status_code=status.HTTP_201_CREATED)
def generate_draft(payload: PlanGenerationRequest) -> DraftResponse:
    options = PlanGenerationOptions(
        target_user_ids=payload.target_user_ids,
        include_unassigned=payload.include_unassigned,
        city_filter=payload.city_filter,
        frequency_filter=payload.frequency_filter,
        max_sites_per_user=(
            payload.max_sites_per_user
            if payload.max_sites_per_user is not None
            else settings.default_max_sites_per_user
        ),
    )
    try:
        draft = workspace_repository.load_workspace().generate_draft(options)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _draft_response(draft)


@router.get("", response_model=DraftResponse, status_code=status.HTTP_200_OK)
def get_draft() -> DraftResponse:
    draft = workspace_repository.load_workspace().draft
    if draft is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="There is no pending draft.")
    return _draft_response(draft)


@router.post("/confirm", status_code=status.HTTP_200_OK)
def confirm_draft(payload: ConfirmDraftRequest) -> dict:
    workspace = workspace_repository.load_workspace()
    edited = models_to_plan_state(payload.plans) if payload.plans is not None else None
    try:
        changed = workspace.confirm_draft(edited)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error confirming draft plans: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to confirm draft plans: {str(exc)}",
        ) from exc
    workspace_repository.persist_workspace(workspace)
    return {"success": True, "reassigned_site_ids": changed}


@router.delete("", status_code=status.HTTP_200_OK)
def discard_draft() -> dict:
    try:
        workspace_repository.load_workspace().discard_draft()
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return {"success": True, "message": "Draft plan discarded."}
