"""Note aggregate for the Notes context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from notes.domain.exceptions import InvalidNoteError
from notes.domain.value_objects import NoteId

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10_000


def _clean(value: str, field: str, max_length: int) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise InvalidNoteError(f"{field} must not be empty")
    if len(cleaned) > max_length:
        raise InvalidNoteError(f"{field} must be at most {max_length} characters")
    return cleaned


@dataclass
class Note:
    """A note owned by a tenant.

    ``tenant_id`` is fixed at creation. Title and content are trimmed and
    must be non-empty.
    """

    id: NoteId
    title: str
    content: str
    user_id: str
    tenant_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls, title: str, content: str, user_id: str, tenant_id: str, now: datetime
    ) -> Note:
        """Factory method for a new note.

        Raises:
            InvalidNoteError: If title or content is empty or too long
        """
        return cls(
            id=NoteId.generate(),
            title=_clean(title, "title", TITLE_MAX_LENGTH),
            content=_clean(content, "content", CONTENT_MAX_LENGTH),
            user_id=user_id,
            tenant_id=tenant_id,
            created_at=now,
            updated_at=now,
        )

    def revise(
        self, now: datetime, title: str | None = None, content: str | None = None
    ) -> None:
        """Replace title and/or content.

        Raises:
            InvalidNoteError: If neither field is given, or a given field is
                empty or too long
        """
        if title is None and content is None:
            raise InvalidNoteError("Provide a title or content to update")
        if title is not None:
            self.title = _clean(title, "title", TITLE_MAX_LENGTH)
        if content is not None:
            self.content = _clean(content, "content", CONTENT_MAX_LENGTH)
        self.updated_at = now
