"""PostgreSQL implementation of INoteRepository.

The tenants table belongs to IAM; this repository reads it through a
lightweight table construct so the Notes context does not import IAM
models.
"""

from __future__ import annotations

from sqlalchemy import column, delete, func, or_, select, table
from sqlalchemy.ext.asyncio import AsyncSession

from notes.domain.aggregates import Note
from notes.domain.value_objects import NoteId, TenantSnapshot
from notes.infrastructure.models import NoteModel
from notes.ports.repositories import INoteRepository

_tenants = table(
    "tenants",
    column("id"),
    column("name"),
    column("slug"),
    column("plan"),
)


class NoteRepository(INoteRepository):
    """Repository managing PostgreSQL storage for Note aggregates."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
        """
        self._session = session

    async def get_tenant(
        self, tenant_id: str, for_update: bool = False
    ) -> TenantSnapshot | None:
        """Read the tenant, optionally locking its row."""
        stmt = select(
            _tenants.c.id, _tenants.c.name, _tenants.c.slug, _tenants.c.plan
        ).where(_tenants.c.id == tenant_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        return TenantSnapshot(id=row.id, name=row.name, slug=row.slug, plan=row.plan)

    async def count_for_tenant(self, tenant_id: str) -> int:
        """Count the tenant's notes."""
        stmt = (
            select(func.count())
            .select_from(NoteModel)
            .where(NoteModel.tenant_id == tenant_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def add(self, note: Note) -> None:
        """Insert a new note."""
        self._session.add(
            NoteModel(
                id=note.id.value,
                title=note.title,
                content=note.content,
                user_id=note.user_id,
                tenant_id=note.tenant_id,
                created_at=note.created_at,
                updated_at=note.updated_at,
            )
        )
        await self._session.flush()

    async def get(self, note_id: NoteId, tenant_id: str) -> Note | None:
        """Retrieve a note of the tenant."""
        stmt = select(NoteModel).where(
            NoteModel.id == note_id.value,
            NoteModel.tenant_id == tenant_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def save(self, note: Note) -> None:
        """Persist title, content and updated_at of an existing note."""
        stmt = select(NoteModel).where(
            NoteModel.id == note.id.value,
            NoteModel.tenant_id == note.tenant_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one()
        model.title = note.title
        model.content = note.content
        model.updated_at = note.updated_at
        await self._session.flush()

    async def delete(self, note_id: NoteId, tenant_id: str) -> bool:
        """Delete a note of the tenant."""
        stmt = (
            delete(NoteModel)
            .where(NoteModel.id == note_id.value, NoteModel.tenant_id == tenant_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return (result.rowcount or 0) > 0

    async def list_for_tenant(
        self,
        tenant_id: str,
        offset: int,
        limit: int,
        search: str | None = None,
    ) -> tuple[list[Note], int]:
        """List the tenant's notes newest first, with the total match count."""
        conditions = [NoteModel.tenant_id == tenant_id]
        if search:
            conditions.append(
                or_(
                    NoteModel.title.icontains(search, autoescape=True),
                    NoteModel.content.icontains(search, autoescape=True),
                )
            )

        count_stmt = select(func.count()).select_from(NoteModel).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()

        page_stmt = (
            select(NoteModel)
            .where(*conditions)
            .order_by(NoteModel.created_at.desc(), NoteModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(page_stmt)
        return [self._to_domain(model) for model in result.scalars().all()], total

    @staticmethod
    def _to_domain(model: NoteModel) -> Note:
        return Note(
            id=NoteId(value=model.id),
            title=model.title,
            content=model.content,
            user_id=model.user_id,
            tenant_id=model.tenant_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
