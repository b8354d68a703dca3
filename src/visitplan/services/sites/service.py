"""Site mutations that keep ownership, site groups and weekly plans consistent."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Sequence

from ...models.domain import UNASSIGNED_CONSULTANT_ID, Report, Site, User
from ..notifications import Notification
from ..planning.store import WeeklyPlanStore


@dataclass(slots=True)
class SiteChange:
    sites: list[Site]
    changed_ids: list[int] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)


def _index(sites: Sequence[Site], site_id: int) -> int:
    for idx, site in enumerate(sites):
        if site.id == site_id:
            return idx
    raise ValueError(f"Unknown site id {site_id}.")


def _update(sites: Sequence[Site], site_id: int, **changes) -> list[Site]:
    updated = list(sites)
    idx = _index(updated, site_id)
    updated[idx] = replace(updated[idx], **changes)
    return updated


def expand_site_groups(sites: Sequence[Site], site_ids: Iterable[int]) -> list[int]:
    """Add every site sharing a group with one of ``site_ids``, preserving order."""

    requested = list(dict.fromkeys(site_ids))
    by_id = {site.id: site for site in sites}
    missing = [site_id for site_id in requested if site_id not in by_id]
    if missing:
        raise ValueError(f"Unknown site id(s): {', '.join(str(site_id) for site_id in missing)}.")

    groups = {by_id[site_id].site_group_id for site_id in requested if by_id[site_id].site_group_id}
    expanded = list(requested)
    for site in sites:
        if site.site_group_id in groups and site.id not in expanded:
            expanded.append(site.id)
    return expanded


def reassign_sites(
    sites: Sequence[Site],
    store: WeeklyPlanStore,
    site_ids: Iterable[int],
    new_consultant_id: int,
) -> SiteChange:
    """Give ``site_ids`` (and their group members) to ``new_consultant_id``.

    Moved sites leave their old owner's plan and are pushed onto the front of
    the new owner's todo list when the new owner already has a plan.
    """

    ids = expand_site_groups(sites, site_ids)
    by_id = {site.id: site for site in sites}
    moving = [by_id[site_id] for site_id in ids if by_id[site_id].assigned_consultant_id != new_consultant_id]
    if not moving:
        return SiteChange(sites=list(sites))

    updated = list(sites)
    removed_from: dict[int, int] = {}
    for site in moving:
        old_owner = site.assigned_consultant_id
        new_site = replace(site, assigned_consultant_id=new_consultant_id)
        updated[_index(updated, site.id)] = new_site
        if old_owner != UNASSIGNED_CONSULTANT_ID:
            store.remove_site(old_owner, site.id)
            removed_from[old_owner] = removed_from.get(old_owner, 0) + 1
        if new_consultant_id != UNASSIGNED_CONSULTANT_ID:
            store.add_to_todo(new_consultant_id, new_site)

    notifications: list[Notification] = []
    names = ", ".join(site.client_name for site in moving)
    if new_consultant_id != UNASSIGNED_CONSULTANT_ID:
        notifications.append(
            Notification(
                message=f"Schedule Updated: Assigned {len(moving)} site(s) ({names}) to your list.",
                recipient_id=new_consultant_id,
            )
        )
    for old_owner, count in removed_from.items():
        notifications.append(
            Notification(
                message=f"Schedule Updated: {count} site(s) moved from your list.",
                recipient_id=old_owner,
            )
        )
    notifications.append(Notification(message=f"Successfully reassigned {len(moving)} site(s)."))
    logging.info(f"Reassigned sites {[site.id for site in moving]} to consultant {new_consultant_id}")
    return SiteChange(sites=updated, changed_ids=[site.id for site in moving], notifications=notifications)


def update_site_assignment(
    sites: Sequence[Site],
    store: WeeklyPlanStore,
    site_id: int,
    new_consultant_id: int,
) -> SiteChange:
    return reassign_sites(sites, store, [site_id], new_consultant_id)


def link_sites(sites: Sequence[Site], site_id: int, target_site_id: int) -> list[Site]:
    """Put ``site_id`` into the group of ``target_site_id``, creating the group if needed."""

    target = sites[_index(sites, target_site_id)]
    group_id = target.site_group_id or f"group-{target.id}"
    updated = _update(sites, target_site_id, site_group_id=group_id)
    return _update(updated, site_id, site_group_id=group_id)


def unlink_site(sites: Sequence[Site], site_id: int) -> list[Site]:
    return _update(sites, site_id, site_group_id=None)


def apply_report(sites: Sequence[Site], report: Report) -> tuple[list[Site], Report]:
    """Apply a newly filed report's side effects to its site.

    Reports carrying management notes or waiving a revisit are queued for review.
    """

    changes: dict = {}
    if report.status == "Visit Complete":
        changes["last_visited"] = report.visit_date
    if report.status == "Project Finished":
        changes["status"] = "Completed"
    elif report.status == "Client Cancelled":
        changes["status"] = "Not Active"

    requires_review = bool(report.management_notes.strip()) or report.status == "Revisit Waived"
    filed = replace(report, review_status="pending" if requires_review else None)
    updated = _update(sites, report.site_id, **changes) if changes else list(sites)
    return updated, filed


def request_hold(
    sites: Sequence[Site],
    site_id: int,
    reason: str,
    start: date,
    end: date,
    requested_by: User,
) -> list[Site]:
    if end < start:
        raise ValueError("Hold end date must not precede its start date.")
    approval = "Approved" if requested_by.role == "management" else "Pending"
    return _update(
        sites,
        site_id,
        status="On Hold",
        on_hold_reason=reason,
        on_hold_start=start,
        on_hold_end=end,
        on_hold_set_by=requested_by.id,
        on_hold_approval_status=approval,
    )


def clear_hold(sites: Sequence[Site], site_id: int) -> list[Site]:
    return _update(
        sites,
        site_id,
        status="Active",
        on_hold_reason=None,
        on_hold_start=None,
        on_hold_end=None,
        on_hold_set_by=None,
        on_hold_approval_status=None,
    )


def resolve_hold(sites: Sequence[Site], site_id: int, approved: bool) -> list[Site]:
    if approved:
        return _update(sites, site_id, on_hold_approval_status="Approved")
    return clear_hold(sites, site_id)
