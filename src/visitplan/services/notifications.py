"""User-facing notifications the planning core asks its host to display."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal, Optional

NotificationLevel = Literal["success", "error", "info"]


@dataclass(slots=True, frozen=True)
class NavigationTarget:
    view: Literal["management", "consultant"]
    tab: Optional[str] = None
    sub_tab: Optional[str] = None
    item_id: Optional[str] = None


@dataclass(slots=True)
class Notification:
    message: str
    level: NotificationLevel = "success"
    # None addresses whoever triggered the action; otherwise a consultant's inbox.
    recipient_id: Optional[int] = None
    nav_target: Optional[NavigationTarget] = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.created_at is None:
            self.created_at = datetime.now(timezone.utc)
