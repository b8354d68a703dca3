"""Per-consultant weekly plan store and bucket moves."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Literal, Optional

from ...models.domain import TODO_BUCKET, WEEKDAYS, Site, WeeklyPlan, WeeklyPlanState
from ..scheduling.dates import most_recent_friday

MoveStatus = Literal["applied", "allowed", "requires_confirmation", "noop", "not_found"]

EARLY_VISIT_TARGET = "Monday"


@dataclass(slots=True)
class MoveOutcome:
    """Result of proposing or committing a bucket move.

    ``allowed`` means a proposal passed every check and can be committed;
    ``applied`` means the plan was changed.
    """

    status: MoveStatus
    site_id: int
    source: str
    target: str
    reason: Optional[str] = None
    plan: Optional[WeeklyPlan] = None

    @property
    def requires_confirmation(self) -> bool:
        return self.status == "requires_confirmation"


def _check_bucket(name: str) -> None:
    if name != TODO_BUCKET and name not in WEEKDAYS:
        raise ValueError(f"Unknown plan bucket '{name}'. Expected 'todo' or one of {', '.join(WEEKDAYS)}.")


def empty_plan(todo: Iterable[Site] = ()) -> WeeklyPlan:
    return WeeklyPlan(todo=list(todo))


def normalize_plan(plan: WeeklyPlan) -> WeeklyPlan:
    """Copy of ``plan`` keeping only the first occurrence of every site id."""

    seen: set[int] = set()
    result = empty_plan()
    for bucket, site in plan.iter_entries():
        if site.id in seen:
            logging.warning(f"Dropping duplicate entry for site {site.id} in bucket '{bucket}'")
            continue
        seen.add(site.id)
        result.bucket(bucket).append(site)
    return result


def move_site(plan: WeeklyPlan, site_id: int, source: str, target: str) -> WeeklyPlan:
    """Return a new plan with ``site_id`` moved from ``source`` to ``target``.

    Moving into ``todo`` inserts at the front; moving into a weekday appends.
    When the site is not in ``source`` (or source equals target) the plan is
    returned unchanged as a copy.
    """

    _check_bucket(source)
    _check_bucket(target)
    new_plan = plan.copy()
    if source == target:
        return new_plan

    site = next((item for item in new_plan.bucket(source) if item.id == site_id), None)
    if site is None:
        return new_plan

    new_plan = new_plan.without_site(site_id)
    if target == TODO_BUCKET:
        new_plan.todo.insert(0, site)
    else:
        new_plan.planned[target].append(site)
    return new_plan


def early_visit_reason(site: Site, target: str, today: date) -> Optional[str]:
    """Explain why moving ``site`` into ``target`` needs human confirmation, if it does."""

    if target != EARLY_VISIT_TARGET or site.frequency != "Weekly" or site.is_priority:
        return None
    if site.last_visited is None or site.last_visited != most_recent_friday(today):
        return None
    return (
        f"The last visit to {site.client_name} was on Friday {site.last_visited.isoformat()}. "
        "Scheduling it for Monday is sooner than the typical weekly cadence."
    )


class WeeklyPlanStore:
    """Mapping of consultant id to weekly plan, guarding single-bucket membership."""

    def __init__(self, plans: WeeklyPlanState | None = None) -> None:
        self._plans: WeeklyPlanState = {cid: normalize_plan(plan) for cid, plan in (plans or {}).items()}

    def __contains__(self, consultant_id: int) -> bool:
        return consultant_id in self._plans

    def consultant_ids(self) -> list[int]:
        return list(self._plans)

    def get(self, consultant_id: int) -> Optional[WeeklyPlan]:
        plan = self._plans.get(consultant_id)
        return plan.copy() if plan is not None else None

    def snapshot(self) -> WeeklyPlanState:
        return {cid: plan.copy() for cid, plan in self._plans.items()}

    def initialize_plan(self, consultant_id: int, active_due_sites: Iterable[Site]) -> bool:
        """Seed a todo-only plan unless the consultant already has one. Returns True if created."""

        if consultant_id in self._plans:
            return False
        self._plans[consultant_id] = normalize_plan(empty_plan(active_due_sites))
        logging.info(f"Seeded weekly plan for consultant {consultant_id} with {len(self._plans[consultant_id])} site(s)")
        return True

    def replace_plan(self, consultant_id: int, plan: WeeklyPlan) -> None:
        self._plans[consultant_id] = normalize_plan(plan)

    def replace_many(self, plans: WeeklyPlanState) -> None:
        for consultant_id, plan in plans.items():
            self.replace_plan(consultant_id, plan)

    def remove_site(self, consultant_id: int, site_id: int) -> bool:
        plan = self._plans.get(consultant_id)
        if plan is None or plan.locate(site_id) is None:
            return False
        self._plans[consultant_id] = plan.without_site(site_id)
        return True

    def add_to_todo(self, consultant_id: int, site: Site) -> bool:
        """Insert ``site`` at the front of todo when the plan exists and lacks it."""

        plan = self._plans.get(consultant_id)
        if plan is None or plan.locate(site.id) is not None:
            return False
        plan.todo.insert(0, site)
        return True

    def _find(self, consultant_id: int, site_id: int, source: str) -> Optional[Site]:
        plan = self._plans.get(consultant_id)
        if plan is None:
            raise LookupError(f"No weekly plan for consultant {consultant_id}.")
        return next((item for item in plan.bucket(source) if item.id == site_id), None)

    def propose_move(self, consultant_id: int, site: Site, source: str, target: str, today: date) -> MoveOutcome:
        """Check a move without applying it."""

        _check_bucket(source)
        _check_bucket(target)
        if source == target:
            return MoveOutcome("noop", site.id, source, target)
        if self._find(consultant_id, site.id, source) is None:
            return MoveOutcome("not_found", site.id, source, target, reason=f"Site {site.id} is not in '{source}'.")
        reason = early_visit_reason(site, target, today)
        if reason:
            logging.info(f"Move of site {site.id} to {target} for consultant {consultant_id} needs confirmation")
            return MoveOutcome("requires_confirmation", site.id, source, target, reason=reason)
        return MoveOutcome("allowed", site.id, source, target)

    def commit_move(self, consultant_id: int, site_id: int, source: str, target: str) -> MoveOutcome:
        """Apply a move unconditionally; stale requests are no-ops."""

        _check_bucket(source)
        _check_bucket(target)
        if source == target:
            return MoveOutcome("noop", site_id, source, target, plan=self.get(consultant_id))
        if self._find(consultant_id, site_id, source) is None:
            logging.warning(
                f"Ignoring move of site {site_id} from '{source}' for consultant {consultant_id}: not found"
            )
            return MoveOutcome("not_found", site_id, source, target, plan=self.get(consultant_id))
        self._plans[consultant_id] = move_site(self._plans[consultant_id], site_id, source, target)
        return MoveOutcome("applied", site_id, source, target, plan=self.get(consultant_id))

    def attempt_move(
        self,
        consultant_id: int,
        site: Site,
        source: str,
        target: str,
        today: date,
        *,
        confirmed: bool = False,
    ) -> MoveOutcome:
        """Propose then commit. A blocked move is retried by calling again with ``confirmed=True``."""

        proposal = self.propose_move(consultant_id, site, source, target, today)
        if proposal.status == "allowed" or (proposal.requires_confirmation and confirmed):
            return self.commit_move(consultant_id, site.id, source, target)
        proposal.plan = self.get(consultant_id)
        return proposal
