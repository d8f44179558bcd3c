"""Global exception handlers translating errors into the JSON error envelope.

Three layers: tagged application errors (``NotebaseError``), request
validation errors, and a catch-all that never leaks internals outside
debug mode. Every response has the shape
``{"success": false, "error": {"code": ..., "message": ...}}``.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from infrastructure.observability import DefaultRequestProbe, RequestProbe
from shared_kernel.exceptions import InternalError, NotebaseError

_HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def register_error_handlers(
    app: FastAPI, debug: bool = False, probe: RequestProbe | None = None
) -> None:
    """Register all global error handlers on the FastAPI app.

    Args:
        app: The application to register on
        debug: Expose messages of 5xx errors to callers
        probe: Optional domain probe for observability
    """
    probe = probe or DefaultRequestProbe()
    _register_domain_error_handler(app, debug, probe)
    _register_validation_error_handler(app, probe)
    _register_http_error_handler(app)
    _register_generic_error_handler(app, debug, probe)


def _register_domain_error_handler(
    app: FastAPI, debug: bool, probe: RequestProbe
) -> None:
    @app.exception_handler(NotebaseError)
    async def domain_error_handler(request: Request, exc: NotebaseError):
        """Handle every tagged application error."""
        probe.domain_error_returned(
            path=request.url.path, code=exc.code, http_status=exc.http_status
        )
        expose = debug or exc.http_status < status.HTTP_500_INTERNAL_SERVER_ERROR
        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_response(expose_message=expose),
        )


def _register_validation_error_handler(app: FastAPI, probe: RequestProbe) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ):
        """Handle request body, path and query validation errors."""
        errors = exc.errors()
        probe.request_validation_failed(
            path=request.url.path, error_count=len(errors)
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=build_validation_error_response(errors),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Wrap framework-raised HTTP errors (unknown route, wrong method)."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": {
                    "code": _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
                    "message": str(exc.detail),
                },
            },
            headers=exc.headers,
        )


def _register_generic_error_handler(
    app: FastAPI, debug: bool, probe: RequestProbe
) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all for unexpected failures."""
        probe.unhandled_exception(path=request.url.path, error=exc)
        error = InternalError(str(exc) or type(exc).__name__)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error.to_response(expose_message=debug),
        )


def build_validation_error_response(errors) -> dict:
    """Build the validation error envelope.

    The message is the first error's, prefixed with the offending field;
    every error is listed under ``details``.
    """
    details = [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
        }
        for error in errors
    ]
    message = "Invalid request data"
    if details:
        first = details[0]
        message = (
            f"{first['field']}: {first['message']}" if first["field"] else first["message"]
        )
    return {
        "success": False,
        "error": {
            "code": "VALIDATION_ERROR",
            "message": message,
            "details": details,
        },
    }
