"""Notes presentation layer."""

from notes.presentation.routes import router, stats_router

__all__ = ["router", "stats_router"]
