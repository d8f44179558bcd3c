"""Domain aggregates for the Notes context."""

from notes.domain.aggregates.note import Note

__all__ = ["Note"]
