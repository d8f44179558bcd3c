"""Note application service.

Every operation is confined to the caller's tenant: reads, updates and
deletes filter on the tenant id, and a note of another tenant is reported
exactly like a missing one.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from notes.application.observability import (
    DefaultNoteServiceProbe,
    NoteServiceProbe,
)
from notes.application.value_objects import NotePage, TenantStats
from notes.domain.aggregates import Note
from notes.domain.exceptions import NoteLimitReachedError
from notes.domain.plan_limits import enforce_note_limit, evaluate_note_limit
from notes.domain.value_objects import NoteId
from notes.ports.exceptions import NoteNotFoundError, NoteTenantNotFoundError
from notes.ports.repositories import INoteRepository
from shared_kernel.middleware.tenant_context import TenantContext


def _utc_now() -> datetime:
    return datetime.now(UTC)


class NoteService:
    """Application service for tenant-scoped note management."""

    def __init__(
        self,
        session: AsyncSession,
        note_repository: INoteRepository,
        probe: NoteServiceProbe | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize NoteService with dependencies.

        Args:
            session: Database session for transaction management
            note_repository: Repository for note persistence
            probe: Optional domain probe for observability
            clock: Source of the current time
        """
        self._session = session
        self._note_repository = note_repository
        self._probe = probe or DefaultNoteServiceProbe()
        self._clock = clock

    async def create(self, context: TenantContext, title: str, content: str) -> Note:
        """Create a note in the caller's tenant, subject to the plan limit.

        The tenant row is locked before counting, so concurrent creators in
        one tenant are serialised and a free tenant never exceeds its limit.

        Raises:
            NoteLimitReachedError: If the plan allows no more notes
            InvalidPlanError: If the stored plan is unknown
            InvalidNoteError: If title or content is invalid
        """
        async with self._session.begin():
            tenant = await self._note_repository.get_tenant(
                context.tenant_id, for_update=True
            )
            if tenant is None:
                raise NoteTenantNotFoundError()

            note_count = await self._note_repository.count_for_tenant(tenant.id)
            try:
                decision = enforce_note_limit(tenant.plan, note_count)
            except NoteLimitReachedError:
                self._probe.note_limit_reached(
                    note_count=note_count,
                    note_limit=evaluate_note_limit(tenant.plan, note_count).note_limit,
                )
                raise

            note = Note.create(
                title=title,
                content=content,
                user_id=context.user_id,
                tenant_id=tenant.id,
                now=self._clock(),
            )
            await self._note_repository.add(note)

        self._probe.note_created(
            note_id=note.id.value, note_count=decision.note_count + 1
        )
        return note

    async def list_notes(
        self,
        context: TenantContext,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
    ) -> NotePage:
        """List the caller's tenant notes, newest first."""
        search = search.strip() if search else None
        notes, total = await self._note_repository.list_for_tenant(
            context.tenant_id,
            offset=(page - 1) * limit,
            limit=limit,
            search=search or None,
        )
        self._probe.notes_listed(count=len(notes), total=total, searched=bool(search))
        return NotePage(notes=notes, page=page, limit=limit, total=total)

    async def get(self, context: TenantContext, note_id: str) -> Note:
        """Retrieve one note of the caller's tenant.

        Raises:
            NoteNotFoundError: If missing, malformed or another tenant's
        """
        note_id_obj = self._parse_id(note_id)
        note = await self._note_repository.get(note_id_obj, context.tenant_id)
        if note is None:
            self._probe.note_not_found(note_id=note_id)
            raise NoteNotFoundError()
        return note

    async def update(
        self,
        context: TenantContext,
        note_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> Note:
        """Change title and/or content of a note of the caller's tenant.

        Raises:
            NoteNotFoundError: If missing, malformed or another tenant's
            InvalidNoteError: If no field is given or a field is invalid
        """
        note_id_obj = self._parse_id(note_id)
        async with self._session.begin():
            note = await self._note_repository.get(note_id_obj, context.tenant_id)
            if note is None:
                self._probe.note_not_found(note_id=note_id)
                raise NoteNotFoundError()

            note.revise(self._clock(), title=title, content=content)
            await self._note_repository.save(note)

        self._probe.note_updated(note_id=note.id.value)
        return note

    async def delete(self, context: TenantContext, note_id: str) -> None:
        """Delete a note of the caller's tenant.

        Raises:
            NoteNotFoundError: If missing, malformed or another tenant's
        """
        note_id_obj = self._parse_id(note_id)
        async with self._session.begin():
            deleted = await self._note_repository.delete(
                note_id_obj, context.tenant_id
            )

        if not deleted:
            self._probe.note_not_found(note_id=note_id)
            raise NoteNotFoundError()
        self._probe.note_deleted(note_id=note_id)

    async def stats(self, context: TenantContext) -> TenantStats:
        """Report the caller's tenant note usage against its plan.

        Raises:
            NoteTenantNotFoundError: If the tenant no longer exists
            InvalidPlanError: If the stored plan is unknown
        """
        tenant = await self._note_repository.get_tenant(context.tenant_id)
        if tenant is None:
            raise NoteTenantNotFoundError()
        note_count = await self._note_repository.count_for_tenant(tenant.id)
        return TenantStats(
            tenant=tenant, decision=evaluate_note_limit(tenant.plan, note_count)
        )

    def _parse_id(self, note_id: str) -> NoteId:
        try:
            return NoteId.from_string(note_id)
        except ValueError as e:
            self._probe.note_not_found(note_id=note_id)
            raise NoteNotFoundError() from e
