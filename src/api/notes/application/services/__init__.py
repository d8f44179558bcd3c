"""Application services for the Notes context."""

from notes.application.services.note_service import NoteService

__all__ = ["NoteService"]
