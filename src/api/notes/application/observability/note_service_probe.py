"""Domain probe for note service operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to note management and plan limits.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class NoteServiceProbe(Protocol):
    """Domain probe for note service operations."""

    def note_created(self, note_id: str, note_count: int) -> None:
        """Record that a note was created."""
        ...

    def note_limit_reached(self, note_count: int, note_limit: int | None) -> None:
        """Record that the plan gate denied a note."""
        ...

    def note_not_found(self, note_id: str) -> None:
        """Record that a note was missing or belonged to another tenant."""
        ...

    def note_updated(self, note_id: str) -> None:
        """Record that a note was updated."""
        ...

    def note_deleted(self, note_id: str) -> None:
        """Record that a note was deleted."""
        ...

    def notes_listed(self, count: int, total: int, searched: bool) -> None:
        """Record that a page of notes was returned."""
        ...

    def with_context(self, context: ObservationContext) -> NoteServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultNoteServiceProbe:
    """Default implementation of NoteServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultNoteServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultNoteServiceProbe(logger=self._logger, context=context)

    def note_created(self, note_id: str, note_count: int) -> None:
        self._logger.info(
            "note_created",
            note_id=note_id,
            note_count=note_count,
            **self._get_context_kwargs(),
        )

    def note_limit_reached(self, note_count: int, note_limit: int | None) -> None:
        self._logger.info(
            "note_limit_reached",
            note_count=note_count,
            note_limit=note_limit,
            **self._get_context_kwargs(),
        )

    def note_not_found(self, note_id: str) -> None:
        self._logger.debug(
            "note_not_found",
            note_id=note_id,
            **self._get_context_kwargs(),
        )

    def note_updated(self, note_id: str) -> None:
        self._logger.info(
            "note_updated",
            note_id=note_id,
            **self._get_context_kwargs(),
        )

    def note_deleted(self, note_id: str) -> None:
        self._logger.info(
            "note_deleted",
            note_id=note_id,
            **self._get_context_kwargs(),
        )

    def notes_listed(self, count: int, total: int, searched: bool) -> None:
        self._logger.debug(
            "notes_listed",
            count=count,
            total=total,
            searched=searched,
            **self._get_context_kwargs(),
        )
