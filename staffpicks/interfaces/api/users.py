"""Users API routes — management under the role hierarchy."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from staffpicks.application.services.user_service import (
    change_status,
    create_user,
    deactivate_user,
    get_user,
    get_users,
    soft_delete_user,
    update_user,
)
from staffpicks.domain.models.user import UserStatus
from staffpicks.domain.repositories.tenant_repository import StoreRepository
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.roles import UserRole
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.user import StatusChange, UserCreate, UserFilter, UserUpdate
from staffpicks.interfaces.api.deps import get_current_session, require_roles
from staffpicks.interfaces.deps import get_store_repository, get_user_repository

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("")
def list_users(
    company_id: Optional[str] = Query(None, alias="companyId"),
    store_id: Optional[str] = Query(None, alias="storeId"),
    role: Optional[UserRole] = None,
    status_filter: Optional[UserStatus] = Query(None, alias="status"),
    users: UserRepository = Depends(get_user_repository),
    stores: StoreRepository = Depends(get_store_repository),
    session: SessionUser = Depends(get_current_session),
):
    filters = UserFilter(company_id=company_id, store_id=store_id, role=role, status=status_filter)
    return {"users": get_users(users, stores, session, filters)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user_route(
    body: UserCreate,
    users: UserRepository = Depends(get_user_repository),
    stores: StoreRepository = Depends(get_store_repository),
    session: SessionUser = Depends(get_current_session),
):
    user = create_user(users, stores, session, body)
    return {"message": "User created successfully", "user": user}


@router.get("/{user_id}")
def get_user_route(
    user_id: str,
    users: UserRepository = Depends(get_user_repository),
    stores: StoreRepository = Depends(get_store_repository),
    session: SessionUser = Depends(get_current_session),
):
    return {"user": get_user(users, stores, session, user_id)}


@router.put("/{user_id}")
def update_user_route(
    user_id: str,
    body: UserUpdate,
    users: UserRepository = Depends(get_user_repository),
    stores: StoreRepository = Depends(get_store_repository),
    session: SessionUser = Depends(get_current_session),
):
    user = update_user(users, stores, session, user_id, body)
    return {"message": "User updated successfully", "user": user}


@router.delete("/{user_id}")
def deactivate_user_route(
    user_id: str,
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    """Reversible: the account is set inactive, not removed."""
    deactivate_user(users, session, user_id)
    return {"message": "User deactivated successfully"}


@router.patch("/{user_id}/status")
def change_user_status(
    user_id: str,
    body: StatusChange,
    users: UserRepository = Depends(get_user_repository),
    stores: StoreRepository = Depends(get_store_repository),
    session: SessionUser = Depends(
        require_roles(UserRole.ADMIN, UserRole.COMPANY_ADMIN, UserRole.STORE_ADMIN)
    ),
):
    user = change_status(users, stores, session, user_id, body.action)
    return {"message": "User status updated", "user": user}


@router.post("/{user_id}/delete")
def soft_delete_user_route(
    user_id: str,
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(require_roles(UserRole.ADMIN, UserRole.COMPANY_ADMIN)),
):
    soft_delete_user(users, session, user_id)
    return {"message": "User deleted successfully"}
