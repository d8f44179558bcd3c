"""IAM presentation layer - aggregate-based organization.

Each package (auth, invitations, tenants) contains its own routes and
models. Auth is enforced per-endpoint; invitation lookup and acceptance
are public.
"""

from __future__ import annotations

from fastapi import APIRouter

from iam.presentation import auth, invitations, tenants

router = APIRouter()

router.include_router(auth.router)
router.include_router(invitations.router)
router.include_router(tenants.router)

__all__ = ["router"]
