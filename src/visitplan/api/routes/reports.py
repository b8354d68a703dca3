"""Visit report endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from ...data import workspace_repository
from ...schemas.planning import ReportModel
from ...services.outputs.formatter import model_to_report, report_to_model

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ReportModel, status_code=status.HTTP_201_CREATED)
def file_report(payload: ReportModel) -> ReportModel:
    """File a visit report and apply its effects on the site (last visit, status)."""
    workspace = workspace_repository.load_workspace()
    try:
        filed = workspace.file_report(model_to_report(payload))
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    workspace_repository.persist_workspace(workspace)
    return report_to_model(filed)


@router.get("", response_model=list[ReportModel], status_code=status.HTTP_200_OK)
def list_reports(
    consultant_id: int | None = Query(default=None, description="Only reports filed by this consultant"),
) -> list[ReportModel]:
    reports = workspace_repository.load_workspace().reports
    if consultant_id is not None:
        reports = [report for report in reports if report.consultant_id == consultant_id]
    return [report_to_model(report) for report in reports]
