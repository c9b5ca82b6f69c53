"""FastAPI dependency — session cookie auth and role guards."""

from typing import Optional

from fastapi import Depends, Request, Response

from staffpicks.application.services.auth_service import (
    build_session_user,
    create_session_token,
    decode_session_token,
    revalidate_session,
)
from staffpicks.config import get_settings
from staffpicks.core.exceptions import ForbiddenException, SessionRevokedException, UnauthorizedException
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.roles import UserRole
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.interfaces.deps import get_user_repository

settings = get_settings()


def set_session_cookie(response: Response, user: SessionUser) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(user),
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        path="/",
        httponly=True,
        samesite="strict",
        secure=settings.ENVIRONMENT == "production",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


def get_current_session(
    request: Request,
    users: UserRepository = Depends(get_user_repository),
) -> SessionUser:
    """Decode the session cookie and re-check the user behind it.

    The cookie's claims are only a cache: a user who has been soft-deleted or
    is no longer active loses access on their next request.
    """
    token: Optional[str] = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise UnauthorizedException()

    claims = decode_session_token(token)
    if claims is None:
        raise SessionRevokedException("Session expired or invalid")

    user = revalidate_session(users, claims)
    if user is None:
        raise SessionRevokedException()

    # Role and store come from the database, not the cookie
    fresh = build_session_user(user)
    fresh.company_name = claims.company_name
    request.state.user_id = fresh.user_id
    return fresh


def require_roles(*roles: UserRole):
    """Dependency factory: the session's role must be one of `roles`."""

    def checker(session: SessionUser = Depends(get_current_session)) -> SessionUser:
        if UserRole(session.role) not in roles:
            raise ForbiddenException("Insufficient permission")
        return session

    return checker
