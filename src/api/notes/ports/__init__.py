"""Ports for the Notes bounded context."""

from notes.ports.exceptions import NoteNotFoundError, NoteTenantNotFoundError
from notes.ports.repositories import INoteRepository

__all__ = ["INoteRepository", "NoteNotFoundError", "NoteTenantNotFoundError"]
