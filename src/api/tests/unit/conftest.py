"""Unit test fixtures with mocked dependencies."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from shared_kernel.middleware.tenant_context import TenantContext

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _transaction_ctx() -> MagicMock:
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=None)
    ctx.__aexit__ = AsyncMock(return_value=None)
    return ctx


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def mock_session() -> Mock:
    """AsyncSession whose begin() and begin_nested() act as context managers.

    Exceptions raised inside the block propagate (``__aexit__`` returns None).
    """
    session = Mock(spec=AsyncSession)
    session.begin = MagicMock(side_effect=lambda: _transaction_ctx())
    session.begin_nested = MagicMock(side_effect=lambda: _transaction_ctx())
    return session


@pytest.fixture
def fixed_clock():
    """Clock returning a constant instant."""
    return lambda: FIXED_NOW


@pytest.fixture
def tenant_id() -> str:
    return str(ULID())


@pytest.fixture
def admin_context(tenant_id: str) -> TenantContext:
    """Tenant context of an admin."""
    return TenantContext(
        user_id=str(ULID()),
        email="admin@acme.test",
        tenant_id=tenant_id,
        role="admin",
    )


@pytest.fixture
def member_context(tenant_id: str) -> TenantContext:
    """Tenant context of a member of the same tenant."""
    return TenantContext(
        user_id=str(ULID()),
        email="user@acme.test",
        tenant_id=tenant_id,
        role="member",
    )
