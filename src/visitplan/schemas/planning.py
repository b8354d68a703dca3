"""Planning request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .routing import RouteConfigModel

SiteStatusField = Literal["Active", "Not Active", "On Hold", "Completed"]
FrequencyField = Literal["Weekly", "Bi-Weekly", "Monthly", "Shop Audit"]
ReportStatusField = Literal[
    "Visit Complete",
    "Site Not Active",
    "Client Cancelled",
    "Project Finished",
    "On Hold",
    "Revisit Waived",
]
WeekdayField = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
BucketField = Literal["todo", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


class SiteModel(BaseModel):
    id: int
    client_name: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    frequency: FrequencyField = "Weekly"
    status: SiteStatusField = "Active"
    assigned_consultant_id: int = Field(default=0, ge=0, description="0 marks the unassigned pool.")
    address: str = ""
    city: str = ""
    last_visited: Optional[date] = None
    notes: Optional[str] = None
    is_priority: bool = False
    priority_note: Optional[str] = None
    site_group_id: Optional[str] = None
    on_hold_reason: Optional[str] = None
    on_hold_start: Optional[date] = None
    on_hold_end: Optional[date] = None
    on_hold_set_by: Optional[int] = None
    on_hold_approval_status: Optional[Literal["Pending", "Approved"]] = None


class ReportModel(BaseModel):
    id: str
    site_id: int
    consultant_id: int
    visit_date: date
    status: ReportStatusField
    notes: str = ""
    management_notes: str = ""
    review_status: Optional[Literal["pending", "approved", "rejected"]] = None
    delivered_items: Dict[str, int] = Field(default_factory=dict)
    documents: List[dict] = Field(default_factory=list)


class UserModel(BaseModel):
    id: int
    name: str
    email: str = ""
    role: Literal["consultant", "management"] = "consultant"


class WeeklyPlanModel(BaseModel):
    todo: List[SiteModel] = Field(default_factory=list)
    planned: Dict[WeekdayField, List[SiteModel]] = Field(default_factory=dict)


class PlanViewModel(BaseModel):
    consultant_id: int
    todo: List[SiteModel]
    planned: Dict[WeekdayField, List[SiteModel]]
    on_hold: List[SiteModel]
    completed: List[SiteModel]
    revisits: List[SiteModel]
    revisit_ids: List[int]


class MoveRequest(BaseModel):
    site_id: int
    source: BucketField
    target: BucketField
    confirmed: bool = Field(default=False, description="Set after the user accepts an early-visit warning.")


class MoveResponse(BaseModel):
    status: Literal["applied", "allowed", "requires_confirmation", "noop", "not_found"]
    site_id: int
    source: BucketField
    target: BucketField
    reason: Optional[str] = None
    plan: Optional[WeeklyPlanModel] = None


class PlanGenerationRequest(BaseModel):
    target_user_ids: List[int] = Field(..., min_length=1)
    include_unassigned: bool = False
    city_filter: str = "all"
    frequency_filter: str = "all"
    max_sites_per_user: Optional[int] = Field(default=None, ge=0)


class DraftResponse(BaseModel):
    plans: Dict[int, WeeklyPlanModel]
    eligible_count: int = 0
    placed_count: int = 0
    dropped_site_ids: List[int] = Field(default_factory=list)
    message: Optional[str] = None


class ConfirmDraftRequest(BaseModel):
    plans: Optional[Dict[int, WeeklyPlanModel]] = Field(
        default=None,
        description="Edited drafts. When omitted the pending draft is confirmed as generated.",
    )


class ReassignRequest(BaseModel):
    site_ids: List[int] = Field(..., min_length=1)
    new_consultant_id: int = Field(..., ge=0)


class WorkspaceSnapshot(BaseModel):
    sites: List[SiteModel] = Field(default_factory=list)
    reports: List[ReportModel] = Field(default_factory=list)
    users: List[UserModel] = Field(default_factory=list)
    weekly_plans: Dict[int, WeeklyPlanModel] = Field(default_factory=dict)
    route_config: Optional[RouteConfigModel] = None


class LinkRequest(BaseModel):
    target_site_id: int


class HoldRequest(BaseModel):
    reason: str = Field(..., min_length=1)
    start: date
    end: date
    requested_by: int


class HoldDecision(BaseModel):
    approved: bool
