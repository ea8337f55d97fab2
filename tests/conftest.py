"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Every test gets a fresh MemoryStorage and SessionStore; nothing is shared
between tests. bcrypt runs for real at its minimum cost factor so the
suite stays fast.
"""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from notekeep.backend.core.config_schema import SessionSchema
from notekeep.backend.repositories.storage import MemoryStorage
from notekeep.backend.services.folder import FolderService
from notekeep.backend.services.identity import IdentityService
from notekeep.backend.services.note import NoteService
from notekeep.backend.services.session import SessionStore

TEST_BCRYPT_ROUNDS = 4
TEST_SESSION_SECRET = "test-session-secret-that-is-long-enough-for-hs256"


# =============================================================================
# Storage and Service Fixtures
# =============================================================================


@pytest.fixture
def storage() -> MemoryStorage:
    """Empty in-memory storage."""
    return MemoryStorage()


@pytest.fixture
def sessions() -> SessionStore:
    """Empty session store with the default 24 hour lifetime."""
    return SessionStore()


@pytest.fixture
def identity(storage: MemoryStorage, sessions: SessionStore) -> IdentityService:
    """Identity service over the test storage, using cheap bcrypt hashes."""
    return IdentityService(storage, sessions, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def note_service(storage: MemoryStorage) -> NoteService:
    return NoteService(storage)


@pytest.fixture
def folder_service(storage: MemoryStorage) -> FolderService:
    return FolderService(storage)


# =============================================================================
# Config Boundary
# =============================================================================


@pytest.fixture
def session_config() -> SessionSchema:
    """Real Pydantic SessionSchema with test values."""
    return SessionSchema(
        cookie_name="notekeep_session",
        ttl_hours=24,
        secure_cookie=False,
        same_site="lax",
        algorithm="HS256",
        audience="notekeep-test",
    )


@pytest.fixture
def session_secret() -> str:
    return TEST_SESSION_SECRET


@pytest.fixture
def stub_session_secret(session_config: SessionSchema):
    """
    Stub the secrets boundary so session tokens can be signed.

    The YAML settings are real; only config/.env, which is not part of
    the repository, is replaced.
    """
    from notekeep.backend.core.config import get_app_config

    real_config = get_app_config()
    app_config = SimpleNamespace(
        application=real_config.application,
        logging=real_config.logging,
        security=SimpleNamespace(
            session=session_config,
            passwords=real_config.security.passwords,
        ),
    )
    settings = SimpleNamespace(session_secret=TEST_SESSION_SECRET)
    with (
        patch("notekeep.backend.core.security.get_settings", return_value=settings),
        patch("notekeep.backend.core.security.get_app_config", return_value=app_config),
        patch("notekeep.backend.core.dependencies.get_app_config", return_value=app_config),
        patch("notekeep.backend.api.v1.endpoints.auth.get_app_config", return_value=app_config),
    ):
        yield app_config
