"""Notification response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class NavigationTargetModel(BaseModel):
    view: Literal["management", "consultant"]
    tab: Optional[str] = None
    sub_tab: Optional[str] = None
    item_id: Optional[str] = None


class NotificationModel(BaseModel):
    message: str
    level: Literal["success", "error", "info"]
    recipient_id: Optional[int] = None
    nav_target: Optional[NavigationTargetModel] = None
    created_at: datetime
