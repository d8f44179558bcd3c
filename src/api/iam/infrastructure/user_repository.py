"""PostgreSQL implementation of IUserRepository.

Users carry credentials and their single tenant membership. Emails are
unique across the whole system.
"""

from __future__ import annotations

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import User
from iam.domain.value_objects import EmailAddress, TenantId, TenantRole, UserId
from iam.infrastructure.models import UserModel
from iam.infrastructure.models.user import USER_EMAIL_CONSTRAINT
from iam.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from iam.ports.exceptions import DuplicateUserEmailError
from iam.ports.repositories import IUserRepository
from infrastructure.database import constraint_mentioned


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates."""

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def save(self, user: User) -> None:
        """Persist a user aggregate.

        Creates a new user or updates an existing one.

        Raises:
            DuplicateUserEmailError: If another user already has this email
        """
        model = await self._session.get(UserModel, user.id.value)
        if model is None:
            model = UserModel(
                id=user.id.value,
                email=user.email.value,
                password_hash=user.password_hash,
                role=user.role.value,
                tenant_id=user.tenant_id.value,
            )
            self._session.add(model)
        else:
            model.email = user.email.value
            model.password_hash = user.password_hash
            model.role = user.role.value
            model.tenant_id = user.tenant_id.value

        try:
            await self._session.flush()
        except IntegrityError as e:
            if constraint_mentioned(e, USER_EMAIL_CONSTRAINT):
                self._probe.duplicate_user_email()
                raise DuplicateUserEmailError(
                    "A user with this email already exists"
                ) from e
            raise

        self._probe.user_saved(user.id.value, user.tenant_id.value, user.role.value)

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID."""
        stmt = select(UserModel).where(UserModel.id == user_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def get_by_email(self, email: EmailAddress) -> User | None:
        """Retrieve a user by email, across all tenants."""
        stmt = select(UserModel).where(UserModel.email == email.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def exists_in_tenant(self, email: EmailAddress, tenant_id: TenantId) -> bool:
        """Check whether a user with this email belongs to the tenant."""
        stmt = select(
            exists().where(
                UserModel.email == email.value,
                UserModel.tenant_id == tenant_id.value,
            )
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def list_by_ids(self, user_ids: list[UserId]) -> list[User]:
        """Retrieve several users in one query."""
        if not user_ids:
            return []
        ids = {user_id.value for user_id in user_ids}
        stmt = select(UserModel).where(UserModel.id.in_(ids))
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=UserId(value=model.id),
            email=EmailAddress(value=model.email),
            password_hash=model.password_hash,
            role=TenantRole(model.role),
            tenant_id=TenantId(value=model.tenant_id),
        )
