"""
Security Utilities.

Password hashing, account key generation, and session token signing.
"""

import secrets
from datetime import datetime
from functools import lru_cache
from typing import Any

import bcrypt
from jose import JWTError, jwt

from notekeep.backend.core.config import get_app_config, get_settings
from notekeep.backend.core.exceptions import AuthenticationError

# bcrypt only looks at the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72

KEY_BYTES = 32


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return hash_password(secrets.token_hex(KEY_BYTES), rounds=rounds)


def burn_password_check(plain_password: str, rounds: int = 12) -> None:
    """
    Run a bcrypt comparison whose result is discarded.

    Called for unknown usernames so that a failed login costs the same
    as a wrong password.
    """
    truncated = plain_password.encode("utf-8")[:MAX_PASSWORD_BYTES]
    bcrypt.checkpw(truncated, _dummy_hash(rounds).encode("utf-8"))


def generate_secret_key() -> str:
    """Return 256 random bits as 64 lowercase hex characters."""
    return secrets.token_hex(KEY_BYTES)


def generate_recovery_key(rounds: int = 12) -> tuple[str, str]:
    """
    Generate a new account recovery key.

    Returns:
        Tuple of (full_key, hashed_key)
        - full_key: Show to user once
        - hashed_key: Store with the user record
    """
    full_key = generate_secret_key()
    return full_key, hash_password(full_key, rounds=rounds)


def verify_recovery_key(plain_key: str, hashed_key: str) -> bool:
    """Verify a recovery key against its stored hash."""
    if len(plain_key.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return verify_password(plain_key, hashed_key)


def create_session_token(session_id: str, user_id: str, expires_at: datetime) -> str:
    """
    Wrap a server-side session id in a signed token for the session cookie.

    Args:
        session_id: Identifier issued by the session store
        user_id: Session principal
        expires_at: Session expiry (naive UTC)

    Returns:
        Encoded JWT
    """
    session_config = get_app_config().security.session
    payload = {
        "sid": session_id,
        "sub": user_id,
        "exp": expires_at,
        "aud": session_config.audience,
    }
    return jwt.encode(
        payload,
        get_settings().session_secret,
        algorithm=session_config.algorithm,
    )


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a session token.

    Raises:
        AuthenticationError: If the token is malformed, forged or expired
    """
    session_config = get_app_config().security.session
    try:
        payload = jwt.decode(
            token,
            get_settings().session_secret,
            algorithms=[session_config.algorithm],
            audience=session_config.audience,
        )
    except JWTError as e:
        raise AuthenticationError("Invalid or expired session") from e

    if not payload.get("sid") or not payload.get("sub"):
        raise AuthenticationError("Invalid or expired session")
    return payload
