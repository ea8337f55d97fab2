"""
User Repository.

In-memory collection of accounts with a username index.
"""

from notekeep.backend.core.exceptions import DuplicateUsernameError
from notekeep.backend.models.user import User
from notekeep.backend.repositories.base import InMemoryRepository


class UserRepository(InMemoryRepository[User]):
    """
    Repository for User records.

    Usernames are unique and compared case-sensitively.
    """

    model = User

    def __init__(self) -> None:
        super().__init__()
        self._ids_by_username: dict[str, str] = {}

    def get_by_username(self, username: str) -> User | None:
        """Exact, case-sensitive username lookup."""
        with self._lock:
            user_id = self._ids_by_username.get(username)
            return self._records.get(user_id) if user_id is not None else None

    def add(self, instance: User) -> User:
        """
        Store a new user.

        The uniqueness check and the insert happen under one lock hold,
        so two concurrent registrations of one username cannot both win.

        Raises:
            DuplicateUsernameError: If the username is already taken
        """
        with self._lock:
            if instance.username in self._ids_by_username:
                raise DuplicateUsernameError()
            self._ids_by_username[instance.username] = instance.id
            return super().add(instance)

    def update_password(self, id: str, password_hash: str) -> User:
        """Replace the stored password hash."""
        return self.update(id, password_hash=password_hash)
