"""FastAPI dependency providers for the Notes bounded context."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.dependencies import get_observation_context
from infrastructure.database.dependencies import get_write_session
from notes.application.observability import DefaultNoteServiceProbe, NoteServiceProbe
from notes.application.services import NoteService
from notes.infrastructure.note_repository import NoteRepository
from shared_kernel.observability_context import ObservationContext


def get_note_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> NoteRepository:
    """Get NoteRepository instance."""
    return NoteRepository(session=session)


def get_note_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> NoteServiceProbe:
    """Get NoteServiceProbe bound to the caller's observation context."""
    return DefaultNoteServiceProbe().with_context(context)


def get_note_service(
    note_repo: Annotated[NoteRepository, Depends(get_note_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[NoteServiceProbe, Depends(get_note_service_probe)],
) -> NoteService:
    """Get NoteService instance.

    Args:
        note_repo: Note repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        probe: Note service probe for observability

    Returns:
        NoteService instance
    """
    return NoteService(session=session, note_repository=note_repo, probe=probe)


__all__ = ["get_note_repository", "get_note_service", "get_note_service_probe"]
