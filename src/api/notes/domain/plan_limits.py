"""Plan Limit Gate.

Decides whether a tenant may create another note given its plan and its
current note count. Pure; callers must read the count under the tenant
row lock for the decision to hold.
"""

from __future__ import annotations

from dataclasses import dataclass

from notes.domain.exceptions import InvalidPlanError, NoteLimitReachedError
from shared_kernel.plans import TenantPlan

FREE_PLAN_NOTE_LIMIT = 3


@dataclass(frozen=True)
class PlanLimitDecision:
    """Outcome of evaluating a tenant's note allowance.

    Attributes:
        allowed: Whether one more note may be created
        note_count: The count the decision was based on
        note_limit: Maximum notes for the plan, None when unlimited
    """

    allowed: bool
    note_count: int
    note_limit: int | None


def evaluate_note_limit(plan: str, note_count: int) -> PlanLimitDecision:
    """Decide whether one more note fits the plan.

    Raises:
        InvalidPlanError: If the plan is not a known plan
    """
    try:
        tier = TenantPlan(plan)
    except ValueError as e:
        raise InvalidPlanError(f"Invalid plan: {plan!r}") from e

    if tier == TenantPlan.PRO:
        return PlanLimitDecision(allowed=True, note_count=note_count, note_limit=None)

    return PlanLimitDecision(
        allowed=note_count < FREE_PLAN_NOTE_LIMIT,
        note_count=note_count,
        note_limit=FREE_PLAN_NOTE_LIMIT,
    )


def enforce_note_limit(plan: str, note_count: int) -> PlanLimitDecision:
    """Like ``evaluate_note_limit`` but raises when creation is denied.

    Raises:
        InvalidPlanError: If the plan is not a known plan
        NoteLimitReachedError: If the plan allows no more notes
    """
    decision = evaluate_note_limit(plan, note_count)
    if not decision.allowed:
        raise NoteLimitReachedError()
    return decision
