"""Fixtures for IAM route tests."""

from unittest.mock import create_autospec

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from iam.application.services import AuthService, InvitationService, TenantService
from iam.dependencies import (
    get_auth_service,
    get_invitation_service,
    get_tenant_context,
    get_tenant_service,
)
from iam.domain.aggregates import Tenant, User
from iam.domain.value_objects import EmailAddress, TenantRole
from iam.presentation import router
from infrastructure.error_handlers import register_error_handlers
from infrastructure.settings import InvitationSettings, get_invitation_settings
from shared_kernel.middleware.tenant_context import TenantContext


@pytest.fixture
def tenant() -> Tenant:
    return Tenant.create(name="Acme", slug="acme")


@pytest.fixture
def admin_user(tenant) -> User:
    return User.create(
        email=EmailAddress.parse("admin@acme.test"),
        password_hash="hash",
        tenant_id=tenant.id,
        role=TenantRole.ADMIN,
    )


@pytest.fixture
def admin(admin_user, tenant) -> TenantContext:
    return TenantContext(
        user_id=admin_user.id.value,
        email=admin_user.email.value,
        tenant_id=tenant.id.value,
        role="admin",
    )


@pytest.fixture
def mock_auth_service():
    return create_autospec(AuthService, instance=True)


@pytest.fixture
def mock_invitation_service():
    return create_autospec(InvitationService, instance=True)


@pytest.fixture
def mock_tenant_service():
    return create_autospec(TenantService, instance=True)


@pytest.fixture
def app(
    admin, mock_auth_service, mock_invitation_service, mock_tenant_service
) -> FastAPI:
    """App with the IAM router, real error handlers and mocked services."""
    app = FastAPI()
    register_error_handlers(app)
    app.dependency_overrides[get_tenant_context] = lambda: admin
    app.dependency_overrides[get_auth_service] = lambda: mock_auth_service
    app.dependency_overrides[get_invitation_service] = lambda: mock_invitation_service
    app.dependency_overrides[get_tenant_service] = lambda: mock_tenant_service
    app.dependency_overrides[get_invitation_settings] = lambda: InvitationSettings(
        frontend_url="https://notes.example.com/"
    )
    app.include_router(router)
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
