"""Database infrastructure - engines, sessions and the ORM base."""

from infrastructure.database.exceptions import (
    constraint_mentioned,
    violated_constraint,
)
from infrastructure.database.models import Base, TimestampMixin, utc_now

__all__ = [
    "Base",
    "TimestampMixin",
    "constraint_mentioned",
    "utc_now",
    "violated_constraint",
]
