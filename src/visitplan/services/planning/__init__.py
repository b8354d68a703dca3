"""Weekly plan store, plan derivation and draft generation."""

from .derivation import PlanView, derive_plan_view, is_site_completed_this_week
from .drafts import DraftPlanResult, PlanGenerationOptions, confirm_draft_plans, generate_draft_plans
from .store import MoveOutcome, WeeklyPlanStore, move_site

__all__ = [
    "WeeklyPlanStore",
    "MoveOutcome",
    "move_site",
    "PlanView",
    "derive_plan_view",
    "is_site_completed_this_week",
    "DraftPlanResult",
    "PlanGenerationOptions",
    "generate_draft_plans",
    "confirm_draft_plans",
]
