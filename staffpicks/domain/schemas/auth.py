"""Pydantic schemas for authentication and the session."""

from typing import Optional

from staffpicks.domain.roles import UserRole
from staffpicks.domain.schemas.base import CamelModel


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SignupRequest(CamelModel):
    company_name: Optional[str] = None
    store_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class SessionUser(CamelModel):
    """Identity claims carried by the session cookie.

    The claims are a cache: every authenticated request re-reads the user
    record before trusting them.
    """

    user_id: str
    email: str
    name: str
    role: UserRole
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    store_id: Optional[str] = None
    is_logged_in: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_company_admin(self) -> bool:
        return self.role == UserRole.COMPANY_ADMIN

    @property
    def is_store_admin(self) -> bool:
        return self.role == UserRole.STORE_ADMIN

    @property
    def is_librarian(self) -> bool:
        return self.role == UserRole.LIBRARIAN


class AuthResponse(CamelModel):
    success: bool = True
    redirect_url: str
    user: SessionUser
