"""Draft weekly plan generation and confirmation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Sequence

from ...models.domain import UNASSIGNED_CONSULTANT_ID, Site, WeeklyPlanState
from ..scheduling.due import is_site_due
from .store import WeeklyPlanStore, empty_plan

ALL = "all"

DuePredicate = Callable[[Site, date], bool]


@dataclass(slots=True)
class PlanGenerationOptions:
    target_user_ids: list[int]
    include_unassigned: bool = False
    city_filter: str = ALL
    frequency_filter: str = ALL
    max_sites_per_user: int = 999

    def __post_init__(self) -> None:
        if self.max_sites_per_user < 0:
            raise ValueError("max_sites_per_user must be >= 0")
        # Preserve order while dropping repeated ids.
        self.target_user_ids = list(dict.fromkeys(self.target_user_ids))


@dataclass(slots=True)
class DraftPlanResult:
    plans: WeeklyPlanState
    eligible_count: int
    placed_count: int
    dropped_site_ids: list[int] = field(default_factory=list)

    @property
    def dropped_count(self) -> int:
        return len(self.dropped_site_ids)

    def summary(self) -> str:
        message = (
            f"Draft plans generated for {len(self.plans)} user(s) with "
            f"{self.placed_count} of {self.eligible_count} eligible site(s)."
        )
        if self.dropped_site_ids:
            message += f" {self.dropped_count} site(s) could not be placed."
        return message


def _is_candidate(site: Site, options: PlanGenerationOptions, today: date, is_due: DuePredicate) -> bool:
    if site.status != "Active":
        return False
    if options.city_filter != ALL and site.city != options.city_filter:
        return False
    if options.frequency_filter != ALL and site.frequency != options.frequency_filter:
        return False
    return is_due(site, today)


def group_units(sites: Sequence[Site]) -> list[list[Site]]:
    """Bundle sites sharing a ``site_group_id``; ungrouped sites form their own unit.

    Units follow the order in which their first member appears.
    """

    units: dict[object, list[Site]] = {}
    for site in sites:
        key = site.site_group_id or ("site", site.id)
        units.setdefault(key, []).append(site)
    return list(units.values())


def generate_draft_plans(
    options: PlanGenerationOptions,
    sites: Sequence[Site],
    today: date,
    *,
    is_due: DuePredicate = is_site_due,
) -> DraftPlanResult:
    """Distribute due, active sites across the target consultants.

    Owned sites stay with their owner unless the owner is at capacity, in which
    case they are dropped rather than handed to someone else. Unassigned-pool
    sites go to the least-loaded target still under capacity. Linked sites are
    placed, or dropped, together.
    """

    targets = options.target_user_ids
    target_set = set(targets)
    plans: WeeklyPlanState = {consultant_id: empty_plan() for consultant_id in targets}

    candidates = [site for site in sites if site.assigned_consultant_id in target_set]
    if options.include_unassigned:
        candidates += [site for site in sites if site.assigned_consultant_id == UNASSIGNED_CONSULTANT_ID]
    candidates = [site for site in candidates if _is_candidate(site, options, today, is_due)]

    cap = options.max_sites_per_user
    dropped: list[int] = []
    placed = 0

    def load(consultant_id: int) -> int:
        return len(plans[consultant_id].todo)

    # Linked sites travel together and count against the cap as a whole.
    for unit in group_units(candidates):
        owners = [site.assigned_consultant_id for site in unit if site.assigned_consultant_id in target_set]
        if owners:
            target = owners[0]
            if load(target) + len(unit) > cap:
                dropped.extend(site.id for site in unit)
                continue
        else:
            available = [consultant_id for consultant_id in targets if load(consultant_id) + len(unit) <= cap]
            if not available:
                dropped.extend(site.id for site in unit)
                continue
            target = min(available, key=load)
        plans[target].todo.extend(unit)
        placed += len(unit)

    result = DraftPlanResult(
        plans=plans,
        eligible_count=len(candidates),
        placed_count=placed,
        dropped_site_ids=dropped,
    )
    logging.info(
        f"Generated draft plans for {len(targets)} consultant(s): "
        f"eligible={result.eligible_count} placed={placed} dropped={result.dropped_count}"
    )
    return result


def plan_assignments(plans: WeeklyPlanState) -> dict[int, int]:
    """Map every site id referenced in ``plans`` to the consultant whose plan holds it."""

    assignments: dict[int, int] = {}
    for consultant_id, plan in plans.items():
        for site_id in plan.site_ids():
            assignments[site_id] = consultant_id
    return assignments


def resolve_owners(edited_plans: WeeklyPlanState, sites: Sequence[Site]) -> dict[int, int]:
    """Owner of every site the confirmed plans touch, including unplanned members of a planned group.

    A group follows the first of its members found in the plans.
    """

    assignments = plan_assignments(edited_plans)
    group_by_site = {site.id: site.site_group_id for site in sites if site.site_group_id}
    group_owner: dict[str, int] = {}
    for site_id in assignments:
        group_id = group_by_site.get(site_id)
        if group_id:
            group_owner.setdefault(group_id, assignments[site_id])

    owners = dict(assignments)
    for site in sites:
        if site.site_group_id in group_owner:
            owners[site.id] = group_owner[site.site_group_id]
    return owners


def confirm_draft_plans(
    store: WeeklyPlanStore,
    edited_plans: WeeklyPlanState,
    sites: Sequence[Site],
) -> tuple[list[Site], list[int]]:
    """Commit reviewed drafts into ``store`` and realign site ownership.

    Every site the confirmed plans touch ends up owned by exactly one consultant
    and listed only in that consultant's plan; consultants outside the draft lose
    sites that moved away from them. Returns the updated site list and the ids of
    sites whose owner changed.
    """

    store.replace_many(edited_plans)
    owners = resolve_owners(edited_plans, sites)
    consultant_ids = store.consultant_ids()

    updated: list[Site] = []
    changed: list[int] = []
    for site in sites:
        owner = owners.get(site.id)
        if owner is None:
            updated.append(site)
            continue
        if owner != site.assigned_consultant_id:
            site = replace(site, assigned_consultant_id=owner)
            changed.append(site.id)
        updated.append(site)
        for consultant_id in consultant_ids:
            if consultant_id != owner:
                store.remove_site(consultant_id, site.id)
        store.add_to_todo(owner, site)

    logging.info(
        f"Confirmed draft plans for {len(edited_plans)} consultant(s); {len(changed)} site(s) changed owner"
    )
    return updated, changed
