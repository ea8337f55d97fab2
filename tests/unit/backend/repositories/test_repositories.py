"""
Unit Tests for the in-memory repositories.

Tests ordering, search and the per-collection invariants directly
against the repository classes.
"""

from datetime import datetime

import pytest

from notekeep.backend.core.exceptions import DuplicateUsernameError, NotFoundError
from notekeep.backend.models.folder import Folder
from notekeep.backend.models.note import Note
from notekeep.backend.models.user import User
from notekeep.backend.repositories.folder import FolderRepository
from notekeep.backend.repositories.note import NoteRepository
from notekeep.backend.repositories.user import UserRepository


def _user(id: str, username: str) -> User:
    return User(
        id=id,
        username=username,
        password_hash="hash",
        recovery_key_hash="recovery",
        encryption_key="key",
        created_at=datetime(2024, 1, 1),
    )


def _folder(id: str, parent_id: str | None = None, created_at: datetime | None = None) -> Folder:
    return Folder(
        id=id,
        user_id="u-1",
        name=id,
        parent_id=parent_id,
        created_at=created_at or datetime(2024, 1, 1),
    )


class TestUserRepository:
    """Tests for the username index."""

    def test_lookup_is_exact_and_case_sensitive(self):
        repo = UserRepository()
        repo.add(_user("u-1", "Ada"))

        assert repo.get_by_username("Ada").id == "u-1"
        assert repo.get_by_username("ada") is None

    def test_duplicate_username_rejected(self):
        repo = UserRepository()
        repo.add(_user("u-1", "ada"))

        with pytest.raises(DuplicateUsernameError):
            repo.add(_user("u-2", "ada"))
        assert repo.count() == 1

    def test_update_password_replaces_record(self):
        repo = UserRepository()
        original = repo.add(_user("u-1", "ada"))

        updated = repo.update_password("u-1", "new-hash")

        assert updated.password_hash == "new-hash"
        assert original.password_hash == "hash"
        assert repo.get_by_username("ada").password_hash == "new-hash"


class TestFolderRepository:
    """Tests for folder listing and the parent chain."""

    def test_list_by_user_oldest_first(self):
        repo = FolderRepository()
        repo.add(_folder("b", created_at=datetime(2024, 1, 2)))
        repo.add(_folder("a", created_at=datetime(2024, 1, 1)))

        assert [f.id for f in repo.list_by_user("u-1")] == ["a", "b"]
        assert repo.list_by_user("u-2") == []

    def test_ancestors_walks_to_root(self):
        repo = FolderRepository()
        repo.add(_folder("root"))
        repo.add(_folder("mid", parent_id="root"))
        repo.add(_folder("leaf", parent_id="mid"))

        assert repo.ancestors("leaf") == ["leaf", "mid", "root"]

    def test_ancestors_stops_at_missing_parent(self):
        repo = FolderRepository()
        repo.add(_folder("orphan", parent_id="deleted"))

        assert repo.ancestors("orphan") == ["orphan"]
        assert repo.ancestors(None) == []

    def test_get_by_id_raises_for_unknown(self):
        with pytest.raises(NotFoundError, match="Folder not found"):
            FolderRepository().get_by_id("nope")


class TestNoteRepository:
    """Tests for note queries and derived fields."""

    @pytest.fixture
    def repo(self) -> NoteRepository:
        return NoteRepository()

    def _add(self, repo: NoteRepository, id: str, **fields) -> Note:
        now = repo.clock.now()
        defaults = {
            "user_id": "u-1",
            "title": id,
            "content": "",
            "created_at": now,
            "updated_at": now,
        }
        defaults.update(fields)
        return repo.add(Note(id=id, **defaults))

    def test_list_by_user_most_recent_first(self, repo):
        self._add(repo, "first")
        self._add(repo, "second")
        self._add(repo, "third")

        assert [n.id for n in repo.list_by_user("u-1")] == ["third", "second", "first"]

    def test_update_moves_note_to_front(self, repo):
        self._add(repo, "first")
        self._add(repo, "second")

        repo.update("first", is_pinned=True)

        assert [n.id for n in repo.list_by_user("u-1")] == ["first", "second"]

    def test_update_recomputes_word_count(self, repo):
        self._add(repo, "n", content="one two", word_count=2)

        assert repo.update("n", content="one two three").word_count == 3
        assert repo.update("n", content="").word_count == 0

    def test_update_without_content_keeps_word_count(self, repo):
        self._add(repo, "n", content="one two", word_count=2)

        assert repo.update("n", title="renamed").word_count == 2

    def test_update_always_advances_updated_at(self, repo):
        note = self._add(repo, "n")

        updated = repo.update("n")

        assert updated.updated_at > note.updated_at
        assert updated.created_at == note.created_at

    def test_tags_stored_as_tuple(self, repo):
        self._add(repo, "n")

        assert repo.update("n", tags=["a", "b"]).tags == ("a", "b")

    def test_list_pinned(self, repo):
        self._add(repo, "plain")
        self._add(repo, "pinned", is_pinned=True)

        assert [n.id for n in repo.list_pinned("u-1")] == ["pinned"]

    def test_search_is_scoped_to_owner(self, repo):
        self._add(repo, "mine", title="Alpha")
        self._add(repo, "theirs", title="Alpha", user_id="u-2")

        assert [n.id for n in repo.search("u-1", "alpha")] == ["mine"]

    def test_list_by_folder_optionally_scoped(self, repo):
        self._add(repo, "mine", folder_id="f")
        self._add(repo, "theirs", folder_id="f", user_id="u-2")

        assert {n.id for n in repo.list_by_folder("f")} == {"mine", "theirs"}
        assert [n.id for n in repo.list_by_folder("f", user_id="u-1")] == ["mine"]

    def test_delete_by_folder_is_shallow(self, repo):
        self._add(repo, "in-folder", folder_id="f")
        self._add(repo, "in-child", folder_id="child")
        self._add(repo, "loose")

        assert repo.delete_by_folder("f") == 1
        assert {n.id for n in repo.get_all()} == {"in-child", "loose"}

    def test_update_unknown_raises(self, repo):
        with pytest.raises(NotFoundError, match="Note not found"):
            repo.update("missing", title="x")

    def test_delete_reports_presence(self, repo):
        self._add(repo, "n")

        assert repo.delete("n") is True
        assert repo.delete("n") is False
