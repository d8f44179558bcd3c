"""Unit tests for NoteRepository.

Uses a mocked AsyncSession; SQL behaviour is covered by integration tests.
"""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from notes.domain.aggregates import Note
from notes.domain.value_objects import NoteId, TenantSnapshot
from notes.infrastructure.models import NoteModel
from notes.infrastructure.note_repository import NoteRepository
from notes.ports.repositories import INoteRepository

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
TENANT_ID = "01JTENANT00000000000000000"


def _compiled(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


def _model(note_id: str = "01JNOTE0000000000000000000") -> NoteModel:
    return NoteModel(
        id=note_id,
        title="Groceries",
        content="milk",
        user_id="01JUSER0000000000000000000",
        tenant_id=TENANT_ID,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def mock_result() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_session(mock_result) -> AsyncMock:
    session = AsyncMock()
    session.add = MagicMock()
    session.execute = AsyncMock(return_value=mock_result)
    return session


@pytest.fixture
def repository(mock_session) -> NoteRepository:
    return NoteRepository(session=mock_session)


class TestProtocolCompliance:
    """Tests for protocol compliance."""

    def test_implements_protocol(self, repository):
        assert isinstance(repository, INoteRepository)


class TestGetTenant:
    """Tests for NoteRepository.get_tenant."""

    @pytest.mark.asyncio
    async def test_returns_snapshot(self, repository, mock_result):
        mock_result.one_or_none.return_value = SimpleNamespace(
            id=TENANT_ID, name="Acme", slug="acme", plan="free"
        )

        tenant = await repository.get_tenant(TENANT_ID)

        assert tenant == TenantSnapshot(id=TENANT_ID, name="Acme", slug="acme", plan="free")

    @pytest.mark.asyncio
    async def test_missing_tenant(self, repository, mock_result):
        mock_result.one_or_none.return_value = None

        assert await repository.get_tenant(TENANT_ID) is None

    @pytest.mark.asyncio
    async def test_locks_row_when_requested(self, repository, mock_session, mock_result):
        mock_result.one_or_none.return_value = None

        await repository.get_tenant(TENANT_ID, for_update=True)

        stmt = mock_session.execute.await_args.args[0]
        assert "FOR UPDATE" in _compiled(stmt)

    @pytest.mark.asyncio
    async def test_plain_read_does_not_lock(self, repository, mock_session, mock_result):
        mock_result.one_or_none.return_value = None

        await repository.get_tenant(TENANT_ID)

        stmt = mock_session.execute.await_args.args[0]
        assert "FOR UPDATE" not in _compiled(stmt)


class TestWrites:
    """Tests for add, save and delete."""

    @pytest.mark.asyncio
    async def test_add_flushes_model(self, repository, mock_session):
        note = Note.create(
            title="Groceries", content="milk", user_id="u", tenant_id=TENANT_ID, now=NOW
        )

        await repository.add(note)

        model = mock_session.add.call_args.args[0]
        assert isinstance(model, NoteModel)
        assert (model.id, model.tenant_id, model.title) == (
            note.id.value,
            TENANT_ID,
            "Groceries",
        )
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_save_copies_mutable_fields(self, repository, mock_session, mock_result):
        model = _model()
        mock_result.scalar_one.return_value = model
        note = repository._to_domain(model)
        later = NOW.replace(hour=13)
        note.revise(later, title="Shopping")

        await repository.save(note)

        assert model.title == "Shopping"
        assert model.updated_at == later
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_reports_rowcount(self, repository, mock_session, mock_result):
        mock_result.rowcount = 1
        assert await repository.delete(NoteId.generate(), TENANT_ID) is True

        mock_result.rowcount = 0
        assert await repository.delete(NoteId.generate(), TENANT_ID) is False

        stmt = mock_session.execute.await_args.args[0]
        assert "notes.tenant_id" in _compiled(stmt)


class TestReads:
    """Tests for get, count_for_tenant and list_for_tenant."""

    @pytest.mark.asyncio
    async def test_get_scopes_to_tenant(self, repository, mock_session, mock_result):
        mock_result.scalar_one_or_none.return_value = _model()

        note = await repository.get(NoteId(value="01JNOTE0000000000000000000"), TENANT_ID)

        assert note.title == "Groceries"
        assert note.id == NoteId(value="01JNOTE0000000000000000000")
        stmt = mock_session.execute.await_args.args[0]
        assert "notes.tenant_id" in _compiled(stmt)

    @pytest.mark.asyncio
    async def test_get_missing(self, repository, mock_result):
        mock_result.scalar_one_or_none.return_value = None

        assert await repository.get(NoteId.generate(), TENANT_ID) is None

    @pytest.mark.asyncio
    async def test_count(self, repository, mock_result):
        mock_result.scalar_one.return_value = 2

        assert await repository.count_for_tenant(TENANT_ID) == 2

    @pytest.mark.asyncio
    async def test_list_returns_page_and_total(
        self, repository, mock_session, mock_result
    ):
        mock_result.scalar_one.return_value = 11
        mock_result.scalars.return_value.all.return_value = [_model()]

        notes, total = await repository.list_for_tenant(
            TENANT_ID, offset=10, limit=10, search="100%"
        )

        assert total == 11
        assert [n.title for n in notes] == ["Groceries"]
        assert mock_session.execute.await_count == 2
        page_sql = _compiled(mock_session.execute.await_args_list[1].args[0])
        assert "ORDER BY notes.created_at DESC" in page_sql
        assert "LIKE" in page_sql
        assert "ESCAPE" in page_sql
