"""Unit tests for Note aggregate."""

from datetime import UTC, datetime, timedelta

import pytest

from notes.domain.aggregates import Note
from notes.domain.aggregates.note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH
from notes.domain.exceptions import InvalidNoteError

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _note() -> Note:
    return Note.create(
        title="Groceries", content="milk", user_id="u1", tenant_id="t1", now=NOW
    )


class TestNoteCreation:
    """Tests for Note.create factory."""

    def test_creates_note(self):
        note = _note()

        assert note.title == "Groceries"
        assert note.tenant_id == "t1"
        assert note.created_at == note.updated_at == NOW

    def test_trims_fields(self):
        note = Note.create(
            title="  Groceries ", content="\nmilk\t", user_id="u1", tenant_id="t1", now=NOW
        )

        assert (note.title, note.content) == ("Groceries", "milk")

    @pytest.mark.parametrize(("title", "content"), [("", "milk"), ("   ", "milk"), ("x", " ")])
    def test_rejects_blank_fields(self, title, content):
        with pytest.raises(InvalidNoteError):
            Note.create(title=title, content=content, user_id="u1", tenant_id="t1", now=NOW)

    def test_length_limits(self):
        Note.create(
            title="t" * TITLE_MAX_LENGTH,
            content="c" * CONTENT_MAX_LENGTH,
            user_id="u1",
            tenant_id="t1",
            now=NOW,
        )

        with pytest.raises(InvalidNoteError, match="title"):
            Note.create(
                title="t" * (TITLE_MAX_LENGTH + 1),
                content="c",
                user_id="u1",
                tenant_id="t1",
                now=NOW,
            )


class TestNoteRevise:
    """Tests for Note.revise."""

    def test_updates_title_only(self):
        note = _note()
        later = NOW + timedelta(minutes=5)

        note.revise(later, title="Shopping")

        assert note.title == "Shopping"
        assert note.content == "milk"
        assert note.updated_at == later
        assert note.created_at == NOW

    def test_requires_a_field(self):
        with pytest.raises(InvalidNoteError):
            _note().revise(NOW)

    def test_rejects_blank_content(self):
        note = _note()

        with pytest.raises(InvalidNoteError):
            note.revise(NOW, content="  ")

        assert note.content == "milk"
