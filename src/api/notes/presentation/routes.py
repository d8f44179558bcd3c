"""HTTP routes for tenant-scoped notes and tenant usage statistics."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from iam.dependencies import get_tenant_context
from notes.application.services import NoteService
from notes.dependencies import get_note_service
from notes.presentation.models import (
    CreateNoteRequest,
    NoteEnvelope,
    NoteListResponse,
    NoteResponse,
    TenantStatsResponse,
    UpdateNoteRequest,
)
from shared_kernel.api_models import ApiResponse
from shared_kernel.middleware.tenant_context import TenantContext

router = APIRouter(
    prefix="/notes",
    tags=["notes"],
)

stats_router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)


@router.get("")
async def list_notes(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[NoteService, Depends(get_note_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> ApiResponse[NoteListResponse]:
    """List the tenant's notes, newest first."""
    result = await service.list_notes(context, page=page, limit=limit, search=search)
    return ApiResponse(data=NoteListResponse.from_page(result))


@router.get("/{note_id}")
async def get_note(
    note_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[NoteService, Depends(get_note_service)],
) -> ApiResponse[NoteEnvelope]:
    """Retrieve one note of the tenant."""
    note = await service.get(context, note_id)
    return ApiResponse(data=NoteEnvelope(note=NoteResponse.from_domain(note)))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_note(
    request: CreateNoteRequest,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[NoteService, Depends(get_note_service)],
) -> ApiResponse[NoteEnvelope]:
    """Create a note, subject to the tenant's plan limit."""
    note = await service.create(context, title=request.title, content=request.content)
    return ApiResponse(
        message="Note created successfully",
        data=NoteEnvelope(note=NoteResponse.from_domain(note)),
    )


@router.put("/{note_id}")
async def update_note(
    note_id: str,
    request: UpdateNoteRequest,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[NoteService, Depends(get_note_service)],
) -> ApiResponse[NoteEnvelope]:
    """Update title and/or content of a note of the tenant."""
    note = await service.update(
        context, note_id, title=request.title, content=request.content
    )
    return ApiResponse(
        message="Note updated successfully",
        data=NoteEnvelope(note=NoteResponse.from_domain(note)),
    )


@router.delete("/{note_id}")
async def delete_note(
    note_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[NoteService, Depends(get_note_service)],
) -> ApiResponse[None]:
    """Delete a note of the tenant."""
    await service.delete(context, note_id)
    return ApiResponse(message="Note deleted successfully")


@stats_router.get("/stats")
async def tenant_stats(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[NoteService, Depends(get_note_service)],
) -> ApiResponse[TenantStatsResponse]:
    """Report the tenant's note usage against its plan."""
    stats = await service.stats(context)
    return ApiResponse(data=TenantStatsResponse.from_stats(stats))
