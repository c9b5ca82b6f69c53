"""Auth API routes — login, signup, logout, me."""

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from staffpicks.application.services.auth_service import check_signup_rate_limit, login, signup
from staffpicks.domain.repositories.tenant_repository import (
    CompanyRepository,
    RateLimitRepository,
    StoreRepository,
)
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.schemas.auth import AuthResponse, LoginRequest, SessionUser, SignupRequest
from staffpicks.interfaces.api.deps import (
    clear_session_cookie,
    get_client_ip,
    get_current_session,
    set_session_cookie,
)
from staffpicks.interfaces.deps import (
    get_company_repository,
    get_rate_limit_repository,
    get_store_repository,
    get_user_repository,
)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=AuthResponse, response_model_by_alias=True)
def login_route(
    body: LoginRequest,
    request: Request,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
    companies: CompanyRepository = Depends(get_company_repository),
):
    session = login(users, companies, body.email, body.password, get_client_ip(request))
    set_session_cookie(response, session)
    return AuthResponse(redirect_url="/dashboard", user=session)


@router.post(
    "/signup",
    response_model=AuthResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def signup_route(
    body: SignupRequest,
    request: Request,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
    companies: CompanyRepository = Depends(get_company_repository),
    stores: StoreRepository = Depends(get_store_repository),
    rate_limits: RateLimitRepository = Depends(get_rate_limit_repository),
):
    check_signup_rate_limit(rate_limits, get_client_ip(request))
    session = signup(users, companies, stores, body)
    set_session_cookie(response, session)
    return AuthResponse(redirect_url="/dashboard/settings/onboarding", user=session)


def _logout() -> JSONResponse:
    response = JSONResponse({"success": True})
    clear_session_cookie(response)
    return response


@router.post("/logout")
def logout():
    return _logout()


@router.get("/logout")
def logout_link():
    """Same as POST, for plain navigation links."""
    return _logout()


@router.get("/me", response_model=SessionUser, response_model_by_alias=True)
def get_me(session: SessionUser = Depends(get_current_session)):
    return session
