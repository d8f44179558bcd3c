"""SQLAlchemy ORM models for the Notes context."""

from notes.infrastructure.models.note import NoteModel

__all__ = ["NoteModel"]
