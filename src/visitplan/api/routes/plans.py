"""Weekly plan endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse

from ...data import workspace_repository
from ...schemas.planning import MoveRequest, MoveResponse, PlanViewModel, WeeklyPlanModel
from ...services.outputs.formatter import model_to_plan, plan_to_model, plan_view_to_model

router = APIRouter(prefix="/plans", tags=["plans"])


@router.get("/{consultant_id}", response_model=WeeklyPlanModel, status_code=status.HTTP_200_OK)
def get_plan(consultant_id: int) -> WeeklyPlanModel:
    workspace = workspace_repository.load_workspace()
    created = consultant_id not in workspace.plans()
    plan = workspace.ensure_plan(consultant_id)
    if plan is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Consultant {consultant_id} has no weekly plan and no assigned sites.",
        )
    if created:
        workspace_repository.persist_workspace(workspace)
    return plan_to_model(plan)


@router.get("/{consultant_id}/view", response_model=PlanViewModel, status_code=status.HTTP_200_OK)
def get_plan_view(consultant_id: int) -> PlanViewModel:
    """Plan as the consultant sees it this week, reconciled against filed reports."""
    workspace = workspace_repository.load_workspace()
    created = consultant_id not in workspace.plans()
    if workspace.ensure_plan(consultant_id) is not None and created:
        workspace_repository.persist_workspace(workspace)
    return plan_view_to_model(consultant_id, workspace.plan_view(consultant_id))


@router.put("/{consultant_id}", response_model=WeeklyPlanModel, status_code=status.HTTP_200_OK)
def replace_plan(consultant_id: int, payload: WeeklyPlanModel) -> WeeklyPlanModel:
    workspace = workspace_repository.load_workspace()
    plan = workspace.replace_plan(consultant_id, model_to_plan(payload))
    workspace_repository.persist_workspace(workspace)
    return plan_to_model(plan)


@router.post("/{consultant_id}/moves", response_model=MoveResponse, status_code=status.HTTP_200_OK)
def move_site(consultant_id: int, payload: MoveRequest):
    """Move a site between buckets.

    Early visits (a Weekly site last seen on Friday going into Monday) answer
    409 with the reason; resend with ``confirmed`` set to apply the move.
    """
    workspace = workspace_repository.load_workspace()
    try:
        outcome = workspace.attempt_move(
            consultant_id,
            payload.site_id,
            payload.source,
            payload.target,
            confirmed=payload.confirmed,
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error moving site {payload.site_id} for consultant {consultant_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to move site: {str(exc)}",
        ) from exc

    response = MoveResponse(
        status=outcome.status,
        site_id=outcome.site_id,
        source=outcome.source,
        target=outcome.target,
        reason=outcome.reason,
        plan=plan_to_model(outcome.plan) if outcome.plan is not None else None,
    )
    if outcome.requires_confirmation:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=response.model_dump(mode="json"))
    if outcome.status == "applied":
        workspace_repository.persist_workspace(workspace)
    return response
