"""Application-layer value objects for the Notes context."""

from __future__ import annotations

from dataclasses import dataclass

from notes.domain.aggregates import Note
from notes.domain.plan_limits import PlanLimitDecision
from notes.domain.value_objects import TenantSnapshot


@dataclass(frozen=True)
class NotePage:
    """One page of a tenant's notes."""

    notes: list[Note]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        """Number of pages at this page size."""
        return -(-self.total // self.limit)


@dataclass(frozen=True)
class TenantStats:
    """Note usage of a tenant against its plan."""

    tenant: TenantSnapshot
    decision: PlanLimitDecision

    @property
    def note_count(self) -> int:
        return self.decision.note_count

    @property
    def note_limit(self) -> int | None:
        return self.decision.note_limit

    @property
    def can_create_more(self) -> bool:
        return self.decision.allowed
