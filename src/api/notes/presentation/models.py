"""Pydantic models for note API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field

from notes.application.value_objects import NotePage, TenantStats
from notes.domain.aggregates import Note
from notes.domain.aggregates.note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH
from shared_kernel.api_models import CamelModel


class CreateNoteRequest(CamelModel):
    """Request model for creating a note."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LENGTH)


class UpdateNoteRequest(CamelModel):
    """Request model for updating a note; at least one field is required."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(None, min_length=1, max_length=CONTENT_MAX_LENGTH)


class NoteResponse(CamelModel):
    """Response model for a note."""

    id: str
    title: str
    content: str
    user_id: str
    tenant_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, note: Note) -> NoteResponse:
        """Convert domain Note aggregate to API response."""
        return cls(
            id=note.id.value,
            title=note.title,
            content=note.content,
            user_id=note.user_id,
            tenant_id=note.tenant_id,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class NoteEnvelope(CamelModel):
    """Payload wrapping a single note."""

    note: NoteResponse


class PaginationResponse(CamelModel):
    """Pagination metadata of a note listing."""

    page: int
    limit: int
    total: int
    pages: int


class NoteListResponse(CamelModel):
    """Payload of GET /notes."""

    notes: list[NoteResponse]
    pagination: PaginationResponse

    @classmethod
    def from_page(cls, page: NotePage) -> NoteListResponse:
        """Convert a NotePage to API response."""
        return cls(
            notes=[NoteResponse.from_domain(note) for note in page.notes],
            pagination=PaginationResponse(
                page=page.page,
                limit=page.limit,
                total=page.total,
                pages=page.pages,
            ),
        )


class StatsTenantResponse(CamelModel):
    """Tenant fields shown with usage statistics."""

    id: str
    name: str
    slug: str
    plan: str


class TenantStatsResponse(CamelModel):
    """Payload of GET /tenants/stats."""

    tenant: StatsTenantResponse
    note_count: int
    note_limit: int | None
    can_create_more: bool

    @classmethod
    def from_stats(cls, stats: TenantStats) -> TenantStatsResponse:
        """Convert TenantStats to API response."""
        return cls(
            tenant=StatsTenantResponse(
                id=stats.tenant.id,
                name=stats.tenant.name,
                slug=stats.tenant.slug,
                plan=stats.tenant.plan,
            ),
            note_count=stats.note_count,
            note_limit=stats.note_limit,
            can_create_more=stats.can_create_more,
        )
