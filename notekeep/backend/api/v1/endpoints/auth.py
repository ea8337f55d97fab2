"""
Auth API Endpoints.

Registration, login, recovery, logout and whoami. A successful
authentication sets an HTTP-only session cookie carrying a signed
session token.
"""

from fastapi import APIRouter, Response

from notekeep.backend.core.config import get_app_config
from notekeep.backend.core.dependencies import (
    CurrentUser,
    Identity,
    RequestId,
    SessionId,
)
from notekeep.backend.core.security import create_session_token
from notekeep.backend.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    RecoverRequest,
    RegisterRequest,
    RegisterResponse,
    UserSummary,
)
from notekeep.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeep.backend.services.identity import Authentication
from notekeep.backend.services.session import Session

router = APIRouter()


def _set_session_cookie(response: Response, session: Session) -> None:
    config = get_app_config().security.session
    response.set_cookie(
        key=config.cookie_name,
        value=create_session_token(session.id, session.user_id, session.expires_at),
        max_age=int((session.expires_at - session.created_at).total_seconds()),
        httponly=True,
        samesite=config.same_site,
        secure=config.secure_cookie,
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    config = get_app_config().security.session
    response.delete_cookie(
        key=config.cookie_name,
        path="/",
        httponly=True,
        samesite=config.same_site,
        secure=config.secure_cookie,
    )


def _start_session(
    response: Response,
    identity: Identity,
    previous_session_id: str | None,
    result: Authentication,
) -> AuthResponse:
    # The new session replaces whatever session the client held before.
    identity.logout(previous_session_id)
    _set_session_cookie(response, result.session)
    return AuthResponse(
        user=UserSummary.model_validate(result.user),
        encryption_key=result.encryption_key,
    )


@router.post(
    "/register",
    response_model=ApiResponse[RegisterResponse],
    status_code=201,
    summary="Register",
    description="Create an account. The recovery key is returned only in this response.",
)
def register(
    data: RegisterRequest,
    response: Response,
    identity: Identity,
    session_id: SessionId,
    request_id: RequestId,
) -> ApiResponse[RegisterResponse]:
    """Create an account and sign it in."""
    result = identity.register(data.username, data.password)
    auth = _start_session(response, identity, session_id, result)
    return ApiResponse(
        data=RegisterResponse(**auth.model_dump(), recovery_key=result.recovery_key),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    summary="Log in",
)
def login(
    data: LoginRequest,
    response: Response,
    identity: Identity,
    session_id: SessionId,
    request_id: RequestId,
) -> ApiResponse[AuthResponse]:
    """Sign in with username and password."""
    result = identity.login(data.username, data.password)
    return ApiResponse(
        data=_start_session(response, identity, session_id, result),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/recover",
    response_model=ApiResponse[AuthResponse],
    summary="Reset password",
    description="Set a new password using the recovery key issued at registration.",
)
def recover(
    data: RecoverRequest,
    response: Response,
    identity: Identity,
    session_id: SessionId,
    request_id: RequestId,
) -> ApiResponse[AuthResponse]:
    """Reset the password with the recovery key and sign in."""
    result = identity.recover(data.username, data.recovery_key, data.new_password)
    return ApiResponse(
        data=_start_session(response, identity, session_id, result),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/logout",
    response_model=ApiResponse[LogoutResponse],
    summary="Log out",
)
def logout(
    response: Response,
    identity: Identity,
    session_id: SessionId,
    request_id: RequestId,
) -> ApiResponse[LogoutResponse]:
    """End the current session. Succeeds even without one."""
    identity.logout(session_id)
    _clear_session_cookie(response)
    return ApiResponse(
        data=LogoutResponse(),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/me",
    response_model=ApiResponse[AuthResponse],
    summary="Current user",
)
def whoami(user: CurrentUser, request_id: RequestId) -> ApiResponse[AuthResponse]:
    """Return the signed-in user and their encryption key."""
    return ApiResponse(
        data=AuthResponse(
            user=UserSummary.model_validate(user),
            encryption_key=user.encryption_key,
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )
