"""
Unit Tests for Note Service.

Tests the NoteService business logic against a real MemoryStorage.
"""

import pytest

from notekeep.backend.core.exceptions import NotFoundError, ValidationError
from notekeep.backend.repositories.storage import MemoryStorage
from notekeep.backend.schemas.note import NoteCreate, NoteUpdate
from notekeep.backend.services.note import NoteService


class TestNoteServiceCreate:
    """Tests for note creation."""

    def test_create_note_with_defaults(self, note_service: NoteService, user_id):
        note = note_service.create_note(user_id, NoteCreate(title="Alpha Plan"))

        assert note.user_id == user_id
        assert note.content == ""
        assert note.word_count == 0
        assert note.tags == ()
        assert note.is_pinned is False
        assert note.folder_id is None
        assert note.created_at == note.updated_at

    def test_create_note_counts_words(self, note_service: NoteService, user_id):
        note = note_service.create_note(
            user_id, NoteCreate(title="t", content="hello   world\nagain"),
        )

        assert note.word_count == 3

    def test_create_in_own_folder(self, note_service: NoteService, storage: MemoryStorage, user_id):
        folder = storage.create_folder(user_id, name="Work")

        note = note_service.create_note(user_id, NoteCreate(title="t", folder_id=folder.id))

        assert note.folder_id == folder.id

    def test_no_folder_selector_means_no_folder(self, note_service: NoteService, user_id):
        note = note_service.create_note(user_id, NoteCreate(title="t", folder_id="none"))

        assert note.folder_id is None

    def test_unknown_folder_rejected(self, note_service: NoteService, user_id):
        with pytest.raises(ValidationError, match="Folder does not exist"):
            note_service.create_note(user_id, NoteCreate(title="t", folder_id="missing"))

    def test_other_users_folder_rejected(
        self, note_service: NoteService, storage: MemoryStorage, user_id, other_user_id,
    ):
        theirs = storage.create_folder(other_user_id, name="Theirs")

        with pytest.raises(ValidationError):
            note_service.create_note(user_id, NoteCreate(title="t", folder_id=theirs.id))

    def test_folder_deleted_before_write_rejected(
        self, note_service: NoteService, storage: MemoryStorage, user_id, monkeypatch,
    ):
        folder = storage.create_folder(user_id, name="Doomed")
        write_note = storage.create_note

        def delete_folder_first(*args, **kwargs):
            storage.delete_folder(folder.id)
            return write_note(*args, **kwargs)

        monkeypatch.setattr(storage, "create_note", delete_folder_first)

        with pytest.raises(ValidationError, match="Folder does not exist"):
            note_service.create_note(user_id, NoteCreate(title="late", folder_id=folder.id))

        assert note_service.list_notes(user_id) == []

    def test_blank_title_rejected(self, note_service: NoteService, user_id):
        with pytest.raises(ValidationError):
            note_service.create_note(user_id, NoteCreate(title="   "))


class TestNoteServiceGet:
    """Tests for getting notes."""

    def test_get_own_note(self, note_service: NoteService, user_id):
        note = note_service.create_note(user_id, NoteCreate(title="t"))

        assert note_service.get_note(user_id, note.id) == note

    def test_other_users_note_not_found(self, note_service: NoteService, user_id, other_user_id):
        theirs = note_service.create_note(other_user_id, NoteCreate(title="t"))

        with pytest.raises(NotFoundError, match="Note not found"):
            note_service.get_note(user_id, theirs.id)

    def test_unknown_note_not_found(self, note_service: NoteService, user_id):
        with pytest.raises(NotFoundError):
            note_service.get_note(user_id, "missing")


class TestNoteServiceList:
    """Tests for list, filter and search."""

    @pytest.fixture
    def notes(self, note_service: NoteService, storage: MemoryStorage, user_id, other_user_id):
        folder = storage.create_folder(user_id, name="Work")
        created = {
            "plan": note_service.create_note(
                user_id, NoteCreate(title="Alpha Plan", tags=["Work"], folder_id=folder.id),
            ),
            "shopping": note_service.create_note(
                user_id, NoteCreate(title="Shopping", content="milk eggs", is_pinned=True),
            ),
            "diary": note_service.create_note(
                user_id, NoteCreate(title="Diary", content="ALPHA centauri"),
            ),
            "theirs": note_service.create_note(
                other_user_id, NoteCreate(title="Alpha", is_pinned=True),
            ),
        }
        return folder, created

    def test_list_all_most_recent_first(self, note_service: NoteService, notes, user_id):
        _, created = notes

        titles = [n.title for n in note_service.list_notes(user_id)]

        assert titles == ["Diary", "Shopping", "Alpha Plan"]

    def test_list_by_folder(self, note_service: NoteService, notes, user_id):
        folder, created = notes

        assert note_service.list_notes(user_id, folder_id=folder.id) == [created["plan"]]

    def test_list_pinned(self, note_service: NoteService, notes, user_id):
        _, created = notes

        assert note_service.list_notes(user_id, pinned=True) == [created["shopping"]]

    def test_search_matches_title_content_and_tags(
        self, note_service: NoteService, notes, user_id,
    ):
        _, created = notes

        assert note_service.list_notes(user_id, search="alpha") == [
            created["diary"], created["plan"],
        ]
        assert note_service.list_notes(user_id, search="work") == [created["plan"]]

    def test_search_wins_over_other_filters(
        self, note_service: NoteService, notes, user_id,
    ):
        folder, created = notes

        result = note_service.list_notes(
            user_id, folder_id=folder.id, pinned=True, search="milk",
        )

        assert result == [created["shopping"]]

    def test_pinned_wins_over_folder(self, note_service: NoteService, notes, user_id):
        folder, created = notes

        assert note_service.list_notes(user_id, folder_id=folder.id, pinned=True) == [
            created["shopping"],
        ]

    def test_search_without_hits(self, note_service: NoteService, notes, user_id):
        assert note_service.list_notes(user_id, search="zebra") == []


class TestNoteServiceUpdate:
    """Tests for updating notes."""

    def test_partial_update(self, note_service: NoteService, user_id):
        note = note_service.create_note(user_id, NoteCreate(title="t", content="one two"))

        updated = note_service.update_note(user_id, note.id, NoteUpdate(is_pinned=True))

        assert updated.is_pinned is True
        assert updated.title == "t"
        assert updated.word_count == 2
        assert updated.updated_at > note.updated_at

    def test_empty_update_still_touches(self, note_service: NoteService, user_id):
        note = note_service.create_note(user_id, NoteCreate(title="t"))

        updated = note_service.update_note(user_id, note.id, NoteUpdate())

        assert updated.updated_at > note.updated_at

    def test_empty_content_resets_word_count(self, note_service: NoteService, user_id):
        note = note_service.create_note(user_id, NoteCreate(title="t", content="one two"))

        updated = note_service.update_note(user_id, note.id, NoteUpdate(content=""))

        assert updated.word_count == 0

    def test_move_out_of_folder(
        self, note_service: NoteService, storage: MemoryStorage, user_id,
    ):
        folder = storage.create_folder(user_id, name="Work")
        note = note_service.create_note(user_id, NoteCreate(title="t", folder_id=folder.id))

        for selector in ("none", None):
            moved = note_service.update_note(user_id, note.id, NoteUpdate(folder_id=selector))
            assert moved.folder_id is None

    def test_null_title_rejected(self, note_service: NoteService, user_id):
        note = note_service.create_note(user_id, NoteCreate(title="t"))

        with pytest.raises(ValidationError) as exc_info:
            note_service.update_note(user_id, note.id, NoteUpdate(title=None, tags=None))

        assert exc_info.value.details == {"null_fields": ["title", "tags"]}
        assert note_service.get_note(user_id, note.id) == note

    def test_move_into_other_users_folder_rejected(
        self, note_service: NoteService, storage: MemoryStorage, user_id, other_user_id,
    ):
        theirs = storage.create_folder(other_user_id, name="Theirs")
        note = note_service.create_note(user_id, NoteCreate(title="t"))

        with pytest.raises(ValidationError):
            note_service.update_note(user_id, note.id, NoteUpdate(folder_id=theirs.id))

    def test_move_into_folder_deleted_before_write_rejected(
        self, note_service: NoteService, storage: MemoryStorage, user_id, monkeypatch,
    ):
        folder = storage.create_folder(user_id, name="Doomed")
        note = note_service.create_note(user_id, NoteCreate(title="t"))
        write_note = storage.update_note

        def delete_folder_first(note_id, **changes):
            storage.delete_folder(folder.id)
            return write_note(note_id, **changes)

        monkeypatch.setattr(storage, "update_note", delete_folder_first)

        with pytest.raises(ValidationError, match="Folder does not exist"):
            note_service.update_note(user_id, note.id, NoteUpdate(folder_id=folder.id))

        assert note_service.get_note(user_id, note.id).folder_id is None

    def test_other_users_note_not_found(self, note_service: NoteService, user_id, other_user_id):
        theirs = note_service.create_note(other_user_id, NoteCreate(title="t"))

        with pytest.raises(NotFoundError):
            note_service.update_note(user_id, theirs.id, NoteUpdate(title="mine"))

        assert note_service.get_note(other_user_id, theirs.id).title == "t"


class TestNoteServiceDelete:
    """Tests for note deletion."""

    def test_delete_own_note(self, note_service: NoteService, user_id):
        note = note_service.create_note(user_id, NoteCreate(title="t"))

        note_service.delete_note(user_id, note.id)

        assert note_service.list_notes(user_id) == []

    def test_delete_other_users_note_is_noop(
        self, note_service: NoteService, user_id, other_user_id,
    ):
        theirs = note_service.create_note(other_user_id, NoteCreate(title="t"))

        note_service.delete_note(user_id, theirs.id)

        assert note_service.get_note(other_user_id, theirs.id) == theirs

    def test_delete_unknown_is_noop(self, note_service: NoteService, user_id):
        note_service.delete_note(user_id, "missing")
