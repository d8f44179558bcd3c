"""Integration tests for repository SQL behaviour against PostgreSQL."""

from datetime import UTC, datetime, timedelta

import pytest

from iam.domain.aggregates import Invitation, Tenant
from iam.domain.value_objects import EmailAddress, TenantRole
from iam.infrastructure.invitation_repository import InvitationRepository
from iam.infrastructure.tenant_repository import TenantRepository
from iam.ports.exceptions import DuplicateInvitationError, DuplicateTenantSlugError
from notes.domain.aggregates import Note
from notes.domain.value_objects import NoteId
from notes.infrastructure.note_repository import NoteRepository

pytestmark = pytest.mark.integration


class TestTenantRepository:
    """Tests for TenantRepository constraints."""

    @pytest.mark.asyncio
    async def test_duplicate_slug_is_classified(self, session_factory, seed_tenant):
        await seed_tenant("acme")

        async with session_factory() as session:
            with pytest.raises(DuplicateTenantSlugError):
                async with session.begin():
                    await TenantRepository(session=session).save(
                        Tenant.create(name="Other", slug="acme")
                    )


class TestNoteRepository:
    """Tests for tenant scoping, ordering and search."""

    @pytest.mark.asyncio
    async def test_notes_are_scoped_to_tenant(self, session_factory, seed_tenant):
        acme = await seed_tenant("acme")
        globex = await seed_tenant("globex")
        now = datetime.now(UTC)
        note = Note.create(
            title="Roadmap",
            content="secret plans",
            user_id=acme.admin.id.value,
            tenant_id=acme.tenant.id.value,
            now=now,
        )

        async with session_factory() as session, session.begin():
            await NoteRepository(session).add(note)

        async with session_factory() as session, session.begin():
            repo = NoteRepository(session)
            assert await repo.get(note.id, globex.tenant.id.value) is None
            assert await repo.delete(note.id, globex.tenant.id.value) is False
            assert (await repo.get(note.id, acme.tenant.id.value)).title == "Roadmap"

    @pytest.mark.asyncio
    async def test_lists_newest_first_with_search(self, session_factory, seed_tenant):
        acme = await seed_tenant("acme")
        start = datetime.now(UTC)
        notes = [
            Note.create(
                title=title,
                content=content,
                user_id=acme.admin.id.value,
                tenant_id=acme.tenant.id.value,
                now=start + timedelta(seconds=i),
            )
            for i, (title, content) in enumerate(
                [("Groceries", "milk"), ("Budget", "100% over"), ("Ideas", "MILK shake")]
            )
        ]
        async with session_factory() as session, session.begin():
            repo = NoteRepository(session)
            for note in notes:
                await repo.add(note)

        async with session_factory() as session:
            repo = NoteRepository(session)
            page, total = await repo.list_for_tenant(
                acme.tenant.id.value, offset=0, limit=2
            )
            assert total == 3
            assert [n.title for n in page] == ["Ideas", "Budget"]

            matches, total = await repo.list_for_tenant(
                acme.tenant.id.value, offset=0, limit=10, search="milk"
            )
            assert total == 2
            assert [n.title for n in matches] == ["Ideas", "Groceries"]

            literal, _ = await repo.list_for_tenant(
                acme.tenant.id.value, offset=0, limit=10, search="0%"
            )
            assert [n.title for n in literal] == ["Budget"]

    @pytest.mark.asyncio
    async def test_unknown_note(self, async_session, seed_tenant):
        acme = await seed_tenant("acme")

        assert await NoteRepository(async_session).get(NoteId.generate(), acme.tenant.id.value) is None


class TestInvitationRepository:
    """Tests for the pending-invitation index and expiry handling."""

    @pytest.mark.asyncio
    async def test_second_pending_invitation_is_rejected(
        self, session_factory, seed_tenant
    ):
        acme = await seed_tenant("acme")
        now = datetime.now(UTC)

        def issue(token: str) -> Invitation:
            return Invitation.issue(
                email=EmailAddress.parse("new@acme.test"),
                tenant_id=acme.tenant.id,
                invited_by=acme.admin.id,
                role=TenantRole.MEMBER,
                token=token,
                now=now,
                ttl=timedelta(days=7),
            )

        async with session_factory() as session, session.begin():
            await InvitationRepository(session=session).add(issue("token-one"))

        async with session_factory() as session:
            with pytest.raises(DuplicateInvitationError):
                async with session.begin():
                    await InvitationRepository(session=session).add(issue("token-two"))

    @pytest.mark.asyncio
    async def test_expired_invitation_is_not_live(self, session_factory, seed_tenant):
        acme = await seed_tenant("acme")
        issued_at = datetime.now(UTC) - timedelta(days=8)
        invitation = Invitation.issue(
            email=EmailAddress.parse("late@acme.test"),
            tenant_id=acme.tenant.id,
            invited_by=acme.admin.id,
            role=TenantRole.MEMBER,
            token="stale-token",
            now=issued_at,
            ttl=timedelta(days=7),
        )

        async with session_factory() as session, session.begin():
            await InvitationRepository(session=session).add(invitation)

        now = datetime.now(UTC)
        async with session_factory() as session, session.begin():
            repo = InvitationRepository(session=session)
            assert await repo.get_active_by_token("stale-token", now) is None
            assert await repo.expire_stale(invitation.email, acme.tenant.id, now) == 1

        assert invitation.is_active(now) is False
