"""Integration test fixtures.

These fixtures require a running PostgreSQL instance. Connection details
come from the same NOTEBASE_DB_* variables the application reads; tests
are skipped when the database cannot be reached.

Every test starts from a freshly created schema.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass
import os

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import iam.infrastructure.models  # noqa: F401
import notes.infrastructure.models  # noqa: F401
from iam.application.security import hash_password
from iam.domain.aggregates import Tenant, User
from iam.domain.value_objects import EmailAddress, TenantRole
from iam.infrastructure.tenant_repository import TenantRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.engines import create_write_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings
from shared_kernel.middleware.tenant_context import TenantContext
from shared_kernel.plans import TenantPlan

SEED_PASSWORD = "password"


@dataclass(frozen=True)
class SeededTenant:
    """A tenant with its admin, as created by the ``seed_tenant`` fixture."""

    tenant: Tenant
    admin: User

    @property
    def admin_context(self) -> TenantContext:
        return TenantContext(
            user_id=self.admin.id.value,
            email=self.admin.email.value,
            tenant_id=self.tenant.id.value,
            role=self.admin.role.value,
        )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        NOTEBASE_DB_HOST, NOTEBASE_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("NOTEBASE_DB_HOST", "localhost"),
        port=int(os.getenv("NOTEBASE_DB_PORT", "5432")),
        database=os.getenv("NOTEBASE_DB_DATABASE", "notebase"),
        username=os.getenv("NOTEBASE_DB_USERNAME", "notebase"),
        password=SecretStr(os.getenv("NOTEBASE_DB_PASSWORD", "notebase_dev_password")),
        pool_max_connections=20,
    )


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Provide a write engine over a freshly created schema."""
    engine = create_write_engine(integration_db_settings)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, SQLAlchemyError) as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL not available: {e}")

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Provide a session factory for tests that need several sessions."""
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a single async session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed_tenant(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[SeededTenant]]:
    """Factory creating a tenant and its admin in a committed transaction."""

    async def _seed(slug: str, plan: TenantPlan = TenantPlan.FREE) -> SeededTenant:
        tenant = Tenant.create(name=slug.title(), slug=slug, plan=plan)
        admin = User.create(
            email=EmailAddress.parse(f"admin@{slug}.test"),
            password_hash=hash_password(SEED_PASSWORD),
            tenant_id=tenant.id,
            role=TenantRole.ADMIN,
        )
        async with session_factory() as session, session.begin():
            await TenantRepository(session=session).save(tenant)
            await UserRepository(session=session).save(admin)
        return SeededTenant(tenant=tenant, admin=admin)

    return _seed
