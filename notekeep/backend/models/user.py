"""
User Model.

Account record owned by the identity service.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class User:
    """
    Registered account.

    The password and the recovery key are stored only as bcrypt hashes.
    The encryption key is kept in the clear because it is handed back to
    its owner on every successful authentication.
    """

    id: str
    username: str
    password_hash: str = field(repr=False)
    recovery_key_hash: str = field(repr=False)
    encryption_key: str = field(repr=False)
    created_at: datetime
