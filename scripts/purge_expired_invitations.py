"""Delete invitations that lapsed while still pending.

Usage:
    python scripts/purge_expired_invitations.py

Expiry is always enforced at query time, so this only reclaims storage.
Suitable for a periodic job.
"""

import asyncio
import sys
from datetime import UTC, datetime
from pathlib import Path

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "api"))

from iam.infrastructure.invitation_repository import InvitationRepository  # noqa: E402
from infrastructure.database.dependencies import (  # noqa: E402
    close_database_connections,
    get_write_session,
)
from infrastructure.logging import configure_logging  # noqa: E402


async def purge() -> int:
    deleted = 0
    async for session in get_write_session():
        async with session.begin():
            deleted = await InvitationRepository(session=session).purge_expired(
                datetime.now(UTC)
            )
    await close_database_connections()
    return deleted


def main() -> None:
    configure_logging()
    asyncio.run(purge())


if __name__ == "__main__":
    main()
