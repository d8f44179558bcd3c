"""Value objects for the Notes domain."""

from __future__ import annotations

from dataclasses import dataclass

from ulid import ULID


@dataclass(frozen=True)
class NoteId:
    """Identifier for a Note aggregate."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> NoteId:
        """Generate a new NoteId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> NoteId:
        """Create NoteId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid NoteId: {value}") from e
        return cls(value=value)


@dataclass(frozen=True)
class TenantSnapshot:
    """The parts of a tenant the Notes context reads.

    Notes does not own tenants; it only needs the plan to gate creation
    and the display fields for statistics.
    """

    id: str
    name: str
    slug: str
    plan: str
