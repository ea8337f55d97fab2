"""
FastAPI Dependencies.

Shared dependencies for request handling: the injected storage and
services, the session cookie, and the authenticated principal.
"""

from typing import Annotated

from fastapi import Depends, Request

from notekeep.backend.core.config import get_app_config
from notekeep.backend.core.exceptions import AuthenticationError
from notekeep.backend.core.security import decode_session_token
from notekeep.backend.models.user import User
from notekeep.backend.repositories.storage import Storage
from notekeep.backend.services.folder import FolderService
from notekeep.backend.services.identity import IdentityService
from notekeep.backend.services.note import NoteService


def get_storage(request: Request) -> Storage:
    """Storage instance attached to the app by create_app()."""
    return request.app.state.storage


def get_identity_service(request: Request) -> IdentityService:
    """Identity service attached to the app by create_app()."""
    return request.app.state.identity


StorageDep = Annotated[Storage, Depends(get_storage)]
Identity = Annotated[IdentityService, Depends(get_identity_service)]


def get_note_service(storage: StorageDep) -> NoteService:
    return NoteService(storage)


def get_folder_service(storage: StorageDep) -> FolderService:
    return FolderService(storage)


Notes = Annotated[NoteService, Depends(get_note_service)]
Folders = Annotated[FolderService, Depends(get_folder_service)]


def get_request_id(request: Request) -> str | None:
    """Request ID assigned by RequestContextMiddleware, or the client's header."""
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


RequestId = Annotated[str | None, Depends(get_request_id)]


def get_session_id(request: Request) -> str | None:
    """
    Session id carried by the session cookie.

    A missing, forged or expired cookie yields None.
    """
    cookie_name = get_app_config().security.session.cookie_name
    token = request.cookies.get(cookie_name)
    if not token:
        return None
    try:
        return decode_session_token(token)["sid"]
    except AuthenticationError:
        return None


SessionId = Annotated[str | None, Depends(get_session_id)]


def get_current_user(session_id: SessionId, identity: Identity) -> User:
    """
    Get current authenticated user.

    Raises:
        AuthenticationError: If the request carries no live session
    """
    return identity.current_user(session_id)


CurrentUser = Annotated[User, Depends(get_current_user)]
