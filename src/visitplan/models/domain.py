"""Domain models for sites, visit reports, consultants and weekly plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterator, Literal, Optional

SiteStatus = Literal["Active", "Not Active", "On Hold", "Completed"]
VisitFrequency = Literal["Weekly", "Bi-Weekly", "Monthly", "Shop Audit"]
ReportStatus = Literal[
    "Visit Complete",
    "Site Not Active",
    "Client Cancelled",
    "Project Finished",
    "On Hold",
    "Revisit Waived",
]
UserRole = Literal["consultant", "management"]
Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

WEEKDAYS: tuple[Weekday, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
TODO_BUCKET = "todo"
UNASSIGNED_CONSULTANT_ID = 0

SITE_STATUSES: tuple[str, ...] = ("Active", "Not Active", "On Hold", "Completed")
VISIT_FREQUENCIES: tuple[str, ...] = ("Weekly", "Bi-Weekly", "Monthly", "Shop Audit")
REPORT_STATUSES: tuple[str, ...] = (
    "Visit Complete",
    "Site Not Active",
    "Client Cancelled",
    "Project Finished",
    "On Hold",
    "Revisit Waived",
)

# Report outcomes that close out a site for the week.
COMPLETING_REPORT_STATUSES = frozenset(
    {"Visit Complete", "Revisit Waived", "Project Finished", "Client Cancelled"}
)


@dataclass(slots=True)
class Site:
    """A client location requiring periodic visits."""

    id: int
    client_name: str
    latitude: float
    longitude: float
    frequency: str = "Weekly"
    status: str = "Active"
    assigned_consultant_id: int = UNASSIGNED_CONSULTANT_ID
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


@dataclass(slots=True)
class Report:
    """Outcome of a single site visit."""

    id: str
    site_id: int
    consultant_id: int
    visit_date: date
    status: str
    notes: str = ""
    management_notes: str = ""
    review_status: Optional[Literal["pending", "approved", "rejected"]] = None
    delivered_items: dict[str, int] = field(default_factory=dict)
    documents: list[dict] = field(default_factory=list)


@dataclass(slots=True)
class User:
    id: int
    name: str
    email: str = ""
    role: str = "consultant"


def _empty_week() -> dict[str, list[Site]]:
    return {day: [] for day in WEEKDAYS}


@dataclass(slots=True)
class WeeklyPlan:
    """Scheduling intent for one consultant: unscheduled sites plus one list per weekday."""

    todo: list[Site] = field(default_factory=list)
    planned: dict[str, list[Site]] = field(default_factory=_empty_week)

    def __post_init__(self) -> None:
        for day in WEEKDAYS:
            self.planned.setdefault(day, [])

    def copy(self) -> "WeeklyPlan":
        return WeeklyPlan(
            todo=list(self.todo),
            planned={day: list(self.planned.get(day, [])) for day in WEEKDAYS},
        )

    def bucket(self, name: str) -> list[Site]:
        if name == TODO_BUCKET:
            return self.todo
        if name in WEEKDAYS:
            return self.planned[name]
        raise ValueError(f"Unknown plan bucket '{name}'. Expected 'todo' or a weekday.")

    def iter_entries(self) -> Iterator[tuple[str, Site]]:
        """Yield (bucket, site) pairs, todo first then Monday through Friday."""
        for site in self.todo:
            yield TODO_BUCKET, site
        for day in WEEKDAYS:
            for site in self.planned.get(day, []):
                yield day, site

    def site_ids(self) -> list[int]:
        return [site.id for _, site in self.iter_entries()]

    def locate(self, site_id: int) -> Optional[str]:
        for bucket, site in self.iter_entries():
            if site.id == site_id:
                return bucket
        return None

    def without_site(self, site_id: int) -> "WeeklyPlan":
        return WeeklyPlan(
            todo=[site for site in self.todo if site.id != site_id],
            planned={
                day: [site for site in self.planned.get(day, []) if site.id != site_id]
                for day in WEEKDAYS
            },
        )

    def __len__(self) -> int:
        return len(self.todo) + sum(len(self.planned.get(day, [])) for day in WEEKDAYS)


WeeklyPlanState = dict[int, WeeklyPlan]
