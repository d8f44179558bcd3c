"""Seed development data: two tenants, each with an admin and a member.

Usage:
    python scripts/seed_data.py

Idempotent: tenants and users that already exist are left untouched.
All seeded users share the password "password".
"""

import asyncio
import sys
from pathlib import Path

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "api"))

import structlog  # noqa: E402

from iam.application.security import hash_password  # noqa: E402
from iam.application.services.tenant_service import TenantService  # noqa: E402
from iam.domain.aggregates import User  # noqa: E402
from iam.domain.value_objects import EmailAddress, TenantRole  # noqa: E402
from iam.infrastructure.tenant_repository import TenantRepository  # noqa: E402
from iam.infrastructure.user_repository import UserRepository  # noqa: E402
from infrastructure.database.dependencies import (  # noqa: E402
    close_database_connections,
    get_write_session,
)
from infrastructure.logging import configure_logging  # noqa: E402

SEED_PASSWORD = "password"

SEED_TENANTS = [
    ("Acme", "acme"),
    ("Globex", "globex"),
]

logger = structlog.get_logger()


async def seed() -> None:
    password_hash = hash_password(SEED_PASSWORD)

    async for session in get_write_session():
        tenants = TenantRepository(session=session)
        users = UserRepository(session=session)
        tenant_service = TenantService(tenant_repository=tenants, session=session)

        for name, slug in SEED_TENANTS:
            async with session.begin():
                tenant = await tenants.get_by_slug(slug)
            if tenant is None:
                tenant = await tenant_service.create_tenant(name=name, slug=slug)

            async with session.begin():
                for local_part, role in (
                    ("admin", TenantRole.ADMIN),
                    ("user", TenantRole.MEMBER),
                ):
                    email = EmailAddress.parse(f"{local_part}@{slug}.test")
                    if await users.get_by_email(email) is not None:
                        continue
                    await users.save(
                        User.create(
                            email=email,
                            password_hash=password_hash,
                            tenant_id=tenant.id,
                            role=role,
                        )
                    )
                    logger.info("seed_user_created", email=email.value, role=role.value)

    await close_database_connections()


def main() -> None:
    configure_logging()
    asyncio.run(seed())


if __name__ == "__main__":
    main()
