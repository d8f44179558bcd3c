"""Domain probe for request failures surfaced by the global error handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RequestProbe(Protocol):
    """Domain probe for errors translated into HTTP responses."""

    def domain_error_returned(self, path: str, code: str, http_status: int) -> None:
        """Record that a tagged domain error was returned to the caller."""
        ...

    def request_validation_failed(self, path: str, error_count: int) -> None:
        """Record that a request body or query failed validation."""
        ...

    def unhandled_exception(self, path: str, error: Exception) -> None:
        """Record that an unexpected exception escaped a route."""
        ...

    def with_context(self, context: ObservationContext) -> RequestProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRequestProbe:
    """Default implementation of RequestProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultRequestProbe:
        """Create a new probe with observation context bound."""
        return DefaultRequestProbe(logger=self._logger, context=context)

    def domain_error_returned(self, path: str, code: str, http_status: int) -> None:
        """Record that a tagged domain error was returned to the caller."""
        log = self._logger.warning if http_status < 500 else self._logger.error
        log(
            "domain_error_returned",
            path=path,
            code=code,
            http_status=http_status,
            **self._get_context_kwargs(),
        )

    def request_validation_failed(self, path: str, error_count: int) -> None:
        """Record that a request body or query failed validation."""
        self._logger.info(
            "request_validation_failed",
            path=path,
            error_count=error_count,
            **self._get_context_kwargs(),
        )

    def unhandled_exception(self, path: str, error: Exception) -> None:
        """Record that an unexpected exception escaped a route."""
        self._logger.exception(
            "unhandled_exception",
            path=path,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
