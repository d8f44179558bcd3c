"""Unit tests for User aggregate."""

from iam.domain.aggregates import User
from iam.domain.value_objects import EmailAddress, TenantId, TenantRole


def _user(role: TenantRole = TenantRole.MEMBER) -> User:
    return User.create(
        email=EmailAddress.parse("alice@acme.test"),
        password_hash="hash",
        tenant_id=TenantId.generate(),
        role=role,
    )


class TestUserCreation:
    """Tests for User.create factory."""

    def test_defaults_to_member(self):
        user = User.create(
            email=EmailAddress.parse("alice@acme.test"),
            password_hash="hash",
            tenant_id=TenantId.generate(),
        )

        assert user.role == TenantRole.MEMBER
        assert user.is_admin is False

    def test_admin(self):
        assert _user(TenantRole.ADMIN).is_admin is True


class TestJoinTenant:
    """Tests for User.join_tenant."""

    def test_moves_user_and_sets_role(self):
        user = _user(TenantRole.ADMIN)
        new_tenant = TenantId.generate()

        user.join_tenant(new_tenant, TenantRole.MEMBER)

        assert user.tenant_id == new_tenant
        assert user.role == TenantRole.MEMBER


class TestUserEquality:
    """Users are compared by identity."""

    def test_equal_by_id(self):
        user = _user()
        twin = User(
            id=user.id,
            email=EmailAddress.parse("other@acme.test"),
            password_hash="other",
            role=TenantRole.ADMIN,
            tenant_id=TenantId.generate(),
        )

        assert user == twin
        assert len({user, twin}) == 1

    def test_different_ids_not_equal(self):
        assert _user() != _user()
