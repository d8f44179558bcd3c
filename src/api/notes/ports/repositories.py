"""Repository protocols (ports) for the Notes bounded context.

Every method takes the tenant explicitly; there is no way to address a
note without naming the tenant it must belong to.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from notes.domain.aggregates import Note
from notes.domain.value_objects import NoteId, TenantSnapshot


@runtime_checkable
class INoteRepository(Protocol):
    """Repository for Note aggregate persistence."""

    async def get_tenant(
        self, tenant_id: str, for_update: bool = False
    ) -> TenantSnapshot | None:
        """Read the tenant's plan and display fields.

        With ``for_update`` the tenant row stays locked until the enclosing
        transaction ends, serialising concurrent note creation.
        """
        ...

    async def count_for_tenant(self, tenant_id: str) -> int:
        """Count the tenant's notes."""
        ...

    async def add(self, note: Note) -> None:
        """Insert a new note."""
        ...

    async def get(self, note_id: NoteId, tenant_id: str) -> Note | None:
        """Retrieve a note of the tenant; None if missing or another tenant's."""
        ...

    async def save(self, note: Note) -> None:
        """Persist title, content and updated_at of an existing note."""
        ...

    async def delete(self, note_id: NoteId, tenant_id: str) -> bool:
        """Delete a note of the tenant.

        Returns:
            True if a row was deleted
        """
        ...

    async def list_for_tenant(
        self,
        tenant_id: str,
        offset: int,
        limit: int,
        search: str | None = None,
    ) -> tuple[list[Note], int]:
        """List the tenant's notes newest first.

        ``search`` matches title or content case-insensitively.

        Returns:
            The requested page and the total number of matching notes
        """
        ...
