"""Helpers for interpreting database driver errors."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError


def violated_constraint(error: IntegrityError) -> str | None:
    """Return the name of the constraint an IntegrityError violated.

    asyncpg exposes ``constraint_name`` on the wrapped driver exception;
    other drivers only mention it in the message, so callers should fall
    back to ``constraint_mentioned`` when this returns None.
    """
    orig = getattr(error, "orig", None)
    # SQLAlchemy's asyncpg adapter keeps the driver exception in __cause__
    for candidate in (orig, getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return name
    return None


def constraint_mentioned(error: IntegrityError, constraint_name: str) -> bool:
    """Check whether an IntegrityError was caused by the named constraint."""
    name = violated_constraint(error)
    if name is not None:
        return name == constraint_name
    return constraint_name in str(error)
