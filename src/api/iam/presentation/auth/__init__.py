"""Authentication presentation layer."""

from iam.presentation.auth.routes import router

__all__ = ["router"]
