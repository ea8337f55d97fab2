"""
NoteKeep ASGI application.

``create_app()`` builds a fully wired app; tests call it with their own
storage. uvicorn loads ``notekeep.backend.main:app``, which is created
on first access so importing this module never reads configuration.
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notekeep.backend.api import health
from notekeep.backend.api.v1 import router as api_v1_router
from notekeep.backend.core.config import AppConfig, get_app_config
from notekeep.backend.core.exception_handlers import register_exception_handlers
from notekeep.backend.core.logging import get_logger, setup_logging
from notekeep.backend.core.middleware import RequestContextMiddleware
from notekeep.backend.repositories.storage import MemoryStorage, Storage
from notekeep.backend.services.identity import IdentityService
from notekeep.backend.services.session import SessionStore

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    application = get_app_config().application
    logger.info(
        "NoteKeep starting",
        extra={"version": application.version, "environment": application.environment},
    )
    yield
    purged = app.state.sessions.purge_expired()
    logger.info("NoteKeep stopped", extra={"expired_sessions_purged": purged})


def _attach_state(
    app: FastAPI,
    config: AppConfig,
    storage: Storage | None,
    sessions: SessionStore | None,
    bcrypt_rounds: int | None,
) -> None:
    """Storage, session store and identity service live on app.state."""
    passwords = config.security.passwords
    if storage is None:
        storage = MemoryStorage()
    if sessions is None:
        sessions = SessionStore(ttl=timedelta(hours=config.security.session.ttl_hours))

    app.state.storage = storage
    app.state.sessions = sessions
    app.state.identity = IdentityService(
        storage,
        sessions,
        bcrypt_rounds=bcrypt_rounds or passwords.bcrypt_rounds,
        min_password_length=passwords.min_length,
    )


def create_app(
    storage: Storage | None = None,
    sessions: SessionStore | None = None,
    bcrypt_rounds: int | None = None,
) -> FastAPI:
    """
    Build the NoteKeep app.

    Args:
        storage: Backend for users, folders and notes (default: empty MemoryStorage)
        sessions: Session table (default: TTL from security.yaml)
        bcrypt_rounds: bcrypt cost override; tests pass a low value
    """
    config = get_app_config()
    application = config.application
    docs = application.docs_enabled

    app = FastAPI(
        title=application.name,
        description=application.description,
        version=application.version,
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        lifespan=lifespan,
    )
    _attach_state(app, config, storage, sessions, bcrypt_rounds)

    app.add_middleware(RequestContextMiddleware)
    if application.cors.origins:
        # Credentials are required for the session cookie.
        app.add_middleware(
            CORSMiddleware,
            allow_origins=application.cors.origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
            allow_headers=["*"],
        )
    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=application.api_prefix)
    return app


def get_app() -> FastAPI:
    """The process-wide app, created on first call."""
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name: str) -> FastAPI:
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
