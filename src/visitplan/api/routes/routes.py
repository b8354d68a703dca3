"""Route suggestion and routing settings endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...data import workspace_repository
from ...persistence.filesystem import FileStorage
from ...schemas.routing import RouteConfigModel, RouteConfigUpdate, RouteRequest, RouteSuggestionResponse
from ...services.outputs.formatter import route_config_to_model, route_suggestion_to_json, route_suggestion_to_model

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/suggest", response_model=RouteSuggestionResponse, status_code=status.HTTP_200_OK)
def suggest(payload: RouteRequest) -> RouteSuggestionResponse:
    workspace = workspace_repository.load_workspace()
    try:
        suggestion = workspace.suggest_route(payload.consultant_id, payload.day, payload.mode)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error suggesting route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to suggest route: {str(exc)}",
        ) from exc

    if suggestion is None:
        return RouteSuggestionResponse(
            consultant_id=payload.consultant_id,
            day=payload.day,
            message="No sites planned for this day.",
        )

    if payload.persist:
        # Saving the run is best effort; the suggestion is still returned.
        try:
            storage = FileStorage()
            run_dir = storage.make_run_directory(prefix=f"route_{payload.consultant_id}_{payload.day.lower()}")
            storage.write_json(run_dir / "route.json", route_suggestion_to_json(suggestion))
            logging.info(f"Route suggestion saved to {run_dir}")
        except OSError as exc:
            logging.warning(f"Could not save route suggestion: {exc}")

    return RouteSuggestionResponse(
        consultant_id=payload.consultant_id,
        day=payload.day,
        suggestion=route_suggestion_to_model(suggestion),
    )


@router.get("/config", response_model=RouteConfigModel, status_code=status.HTTP_200_OK)
def get_config() -> RouteConfigModel:
    return route_config_to_model(workspace_repository.load_workspace().route_config)


@router.patch("/config", response_model=RouteConfigModel, status_code=status.HTTP_200_OK)
def update_config(payload: RouteConfigUpdate) -> RouteConfigModel:
    workspace = workspace_repository.load_workspace()
    try:
        config = workspace.update_route_config(**payload.model_dump(exclude_none=True))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    workspace_repository.persist_workspace(workspace)
    return route_config_to_model(config)
