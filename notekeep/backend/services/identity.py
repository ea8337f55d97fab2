"""
Identity Service.

Registration, password login, recovery-key password reset and session
lookup. Knows nothing about notes or folders; hands back the user whose
id scopes every storage call.
"""

from dataclasses import dataclass, field

from notekeep.backend.core.exceptions import (
    AuthenticationError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidRecoveryError,
    ValidationError,
)
from notekeep.backend.core.security import (
    MAX_PASSWORD_BYTES,
    burn_password_check,
    generate_recovery_key,
    generate_secret_key,
    hash_password,
    verify_password,
    verify_recovery_key,
)
from notekeep.backend.models.user import User
from notekeep.backend.repositories.storage import Storage
from notekeep.backend.services.base import BaseService
from notekeep.backend.services.session import Session, SessionStore

USERNAME_MAX_LENGTH = 64


def _password_too_long(secret: str) -> bool:
    """True when bcrypt would silently truncate secret."""
    return len(secret.encode("utf-8")) > MAX_PASSWORD_BYTES


@dataclass(frozen=True)
class Authentication:
    """Outcome of a successful login, recovery or registration."""

    user: User
    session: Session
    encryption_key: str = field(repr=False)


@dataclass(frozen=True)
class Registration(Authentication):
    """Registration outcome; the only place the recovery key is ever returned."""

    recovery_key: str = field(repr=False)


class IdentityService(BaseService):
    """
    Service for account identity and sessions.

    Session state moves Anonymous -> Authenticated on register, login or
    recover, and back on logout or expiry.
    """

    def __init__(
        self,
        storage: Storage,
        sessions: SessionStore,
        bcrypt_rounds: int = 12,
        min_password_length: int = 6,
    ) -> None:
        super().__init__(storage)
        self.sessions = sessions
        self.bcrypt_rounds = bcrypt_rounds
        self.min_password_length = min_password_length

    def _validate_username(self, username: str) -> None:
        self._validate_required({"username": username}, ["username"])
        self._validate_string_length(username, "username", max_length=USERNAME_MAX_LENGTH)

    def _validate_new_password(self, password: str, field_name: str = "password") -> None:
        self._validate_required({field_name: password}, [field_name])
        self._validate_string_length(password, field_name, min_length=self.min_password_length)
        if _password_too_long(password):
            raise ValidationError(
                f"{field_name} too long",
                details={field_name: f"Maximum length is {MAX_PASSWORD_BYTES} bytes"},
            )

    def register(self, username: str, password: str) -> Registration:
        """
        Create an account and open a session for it.

        Args:
            username: Desired username (case-sensitive, must be unused)
            password: Plaintext password

        Returns:
            Registration carrying the plaintext recovery and encryption keys

        Raises:
            ValidationError: If username or password is malformed
            DuplicateUsernameError: If the username is taken
        """
        self._validate_username(username)
        self._validate_new_password(password)
        if self.storage.get_user_by_username(username) is not None:
            raise DuplicateUsernameError()

        recovery_key, recovery_key_hash = generate_recovery_key(rounds=self.bcrypt_rounds)
        encryption_key = generate_secret_key()

        user = self.storage.create_user(
            username=username,
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
            recovery_key_hash=recovery_key_hash,
            encryption_key=encryption_key,
        )
        session = self.sessions.create(user.id)

        self._log_operation("User registered", user_id=user.id)
        return Registration(
            user=user,
            session=session,
            encryption_key=encryption_key,
            recovery_key=recovery_key,
        )

    def login(self, username: str, password: str) -> Authentication:
        """
        Verify a username/password pair and open a session.

        Every rejection pays one bcrypt comparison, so response time does
        not reveal whether the username exists.

        Raises:
            InvalidCredentialsError: For an unknown username or a wrong
                password, indistinguishably
        """
        user = self.storage.get_user_by_username(username)
        if user is None or _password_too_long(password):
            burn_password_check(password, rounds=self.bcrypt_rounds)
            raise InvalidCredentialsError()
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        session = self.sessions.create(user.id)
        self._log_operation("User logged in", user_id=user.id)
        return Authentication(user=user, session=session, encryption_key=user.encryption_key)

    def recover(self, username: str, recovery_key: str, new_password: str) -> Authentication:
        """
        Reset the password using the recovery key and open a session.

        The recovery key stays valid afterwards; it is never rotated.

        Raises:
            ValidationError: If the new password is malformed
            InvalidRecoveryError: For an unknown username or a wrong key
        """
        self._validate_new_password(new_password, field_name="new_password")

        user = self.storage.get_user_by_username(username)
        if user is None or _password_too_long(recovery_key):
            burn_password_check(recovery_key, rounds=self.bcrypt_rounds)
            raise InvalidRecoveryError()
        if not verify_recovery_key(recovery_key, user.recovery_key_hash):
            raise InvalidRecoveryError()

        self.storage.update_user_password(
            user.id, hash_password(new_password, rounds=self.bcrypt_rounds)
        )
        session = self.sessions.create(user.id)

        self._log_operation("Password reset with recovery key", user_id=user.id)
        return Authentication(user=user, session=session, encryption_key=user.encryption_key)

    def logout(self, session_id: str | None) -> None:
        """End the session, if any. Never fails."""
        if session_id:
            self.sessions.revoke(session_id)
            self._log_debug("Session ended")

    def current_user(self, session_id: str | None) -> User:
        """
        Resolve the session principal.

        Raises:
            AuthenticationError: If there is no live session for session_id
        """
        session = self.sessions.get(session_id) if session_id else None
        if session is None:
            raise AuthenticationError()

        user = self.storage.get_user(session.user_id)
        if user is None:
            self.sessions.revoke(session.id)
            raise AuthenticationError()
        return user
