"""Profile API routes — the caller's own account."""

from fastapi import APIRouter, Depends, Response

from staffpicks.application.services.auth_service import build_session_user
from staffpicks.application.services.user_service import get_profile, to_read, update_profile
from staffpicks.domain.repositories.tenant_repository import StoreRepository
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.user import ProfileUpdate
from staffpicks.interfaces.api.deps import get_current_session, set_session_cookie
from staffpicks.interfaces.deps import get_store_repository, get_user_repository

router = APIRouter(prefix="/api/user/profile", tags=["Profile"])


@router.get("")
def get_profile_route(
    users: UserRepository = Depends(get_user_repository),
    stores: StoreRepository = Depends(get_store_repository),
    session: SessionUser = Depends(get_current_session),
):
    return {"user": get_profile(users, stores, session)}


@router.put("")
def update_profile_route(
    body: ProfileUpdate,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
    stores: StoreRepository = Depends(get_store_repository),
    session: SessionUser = Depends(get_current_session),
):
    doc = update_profile(users, session, body)

    # Name and email are carried in the cookie
    refreshed = build_session_user(doc)
    refreshed.company_name = session.company_name
    set_session_cookie(response, refreshed)

    return {"message": "Profile updated successfully", "user": to_read(stores, doc)}
