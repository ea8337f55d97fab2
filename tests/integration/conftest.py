"""
Integration Test Fixtures.

Fixtures for integration tests: a real app over a fresh MemoryStorage,
driven through httpx. Each client keeps its own cookie jar, so one
client is one browser session.
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import AsyncExitStack
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from notekeep.backend.repositories.storage import MemoryStorage

PASSWORD = "lovelace"


# =============================================================================
# App and Client Fixtures
# =============================================================================


@pytest.fixture
def app(stub_session_secret, storage: MemoryStorage) -> FastAPI:
    """
    Application wired to the test storage.

    The session secret is stubbed because config/.env is not part of the
    repository.
    """
    from notekeep.backend.main import create_app

    return create_app(storage=storage, bcrypt_rounds=4)


@pytest.fixture
async def client_factory(app: FastAPI) -> AsyncGenerator[Callable[[], Any], None]:
    """
    Open additional clients against the same app.

    Usage:
        async def test_isolation(client_factory):
            alice = await client_factory()
            bob = await client_factory()
    """
    async with AsyncExitStack() as stack:

        async def _open() -> AsyncClient:
            return await stack.enter_async_context(
                AsyncClient(transport=ASGITransport(app=app), base_url="http://test"),
            )

        yield _open


@pytest.fixture
async def client(client_factory) -> AsyncClient:
    """Anonymous client."""
    return await client_factory()


async def register(client: AsyncClient, username: str, password: str = PASSWORD) -> dict:
    """Register through the API and return the response data."""
    response = await client.post(
        "/api/v1/auth/register",
        json={"username": username, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def register_user() -> Callable[..., Any]:
    """The register() helper, for tests that need more accounts."""
    return register


@pytest.fixture
async def user_client(client_factory) -> AsyncClient:
    """Client signed in as 'ada'. The registration data is on .registration."""
    client = await client_factory()
    client.registration = await register(client, "ada")
    return client


@pytest.fixture
async def other_client(client_factory) -> AsyncClient:
    """Client signed in as 'grace'."""
    client = await client_factory()
    client.registration = await register(client, "grace")
    return client


# =============================================================================
# Envelope assertions
# =============================================================================


class ApiAssertions:
    """Checks for the {success, data, error, metadata} envelope."""

    @staticmethod
    def _status(response: Any, expected: int) -> dict[str, Any]:
        assert response.status_code == expected, (
            f"{response.request.method} {response.request.url.path}: "
            f"expected {expected}, got {response.status_code}: {response.text}"
        )
        return response.json()

    @classmethod
    def assert_success(cls, response: Any, expected_status: int = 200) -> dict[str, Any]:
        """Status matches and success is true. Returns the whole body."""
        body = cls._status(response, expected_status)
        assert body["success"] is True, body
        assert body["error"] is None, body
        return body

    @classmethod
    def assert_error(
        cls,
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """Status matches, success is false and an error is present."""
        body = cls._status(response, expected_status)
        assert body["success"] is False, body
        assert body["data"] is None, body
        error = body["error"]
        assert error is not None, body
        if expected_code is not None:
            assert error["code"] == expected_code, error
        return body

    @classmethod
    def assert_validation_error(cls, response: Any, field: str | None = None) -> dict[str, Any]:
        """422 request validation failure, optionally naming ``field``."""
        body = cls.assert_error(response, 422, "VAL_REQUEST_INVALID")
        if field is not None:
            reported = [e["field"] for e in body["error"]["details"]["validation_errors"]]
            assert any(field in name for name in reported), (
                f"no validation error for {field!r}; got {reported}"
            )
        return body


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()
