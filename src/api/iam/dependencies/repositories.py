"""Repository providers for the IAM bounded context.

All repositories share the request's write session through FastAPI
dependency caching, so a service sees one transaction across them.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.infrastructure.invitation_repository import InvitationRepository
from iam.infrastructure.tenant_repository import TenantRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session


def get_tenant_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> TenantRepository:
    """Get TenantRepository instance."""
    return TenantRepository(session=session)


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    """Get UserRepository instance."""
    return UserRepository(session=session)


def get_invitation_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> InvitationRepository:
    """Get InvitationRepository instance."""
    return InvitationRepository(session=session)
