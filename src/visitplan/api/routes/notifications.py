"""Notification delivery endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from ...data import workspace_repository
from ...schemas.notifications import NotificationModel
from ...services.outputs.formatter import notification_to_model

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationModel], status_code=status.HTTP_200_OK)
def drain_notifications(
    recipient_id: int | None = Query(default=None, description="Only notifications addressed to this consultant"),
) -> list[NotificationModel]:
    """Deliver pending notifications. Delivered notifications are removed from the queue."""
    pending = workspace_repository.load_workspace().drain_notifications(recipient_id)
    return [notification_to_model(item) for item in pending]
