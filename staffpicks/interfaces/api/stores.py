"""Stores API routes — sub-tenant CRUD and staff unassignment."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from staffpicks.application.services.store_service import (
    create_store,
    delete_store,
    get_store,
    get_stores,
    unassign_user,
    update_store,
)
from staffpicks.domain.repositories.tenant_repository import StoreRepository
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.roles import UserRole
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.store import StoreCreate, StoreUpdate
from staffpicks.interfaces.api.deps import get_current_session, require_roles
from staffpicks.interfaces.deps import get_store_repository, get_user_repository

router = APIRouter(prefix="/api/stores", tags=["Stores"])

tenant_admin = require_roles(UserRole.ADMIN, UserRole.COMPANY_ADMIN)


@router.get("")
def list_stores(
    company_id: Optional[str] = Query(None, alias="companyId"),
    stores: StoreRepository = Depends(get_store_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    return {"stores": get_stores(stores, users, session, company_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_store_route(
    body: StoreCreate,
    stores: StoreRepository = Depends(get_store_repository),
    session: SessionUser = Depends(tenant_admin),
):
    store = create_store(stores, session, body)
    return {"message": "Store created successfully", "store": store}


@router.get("/{store_id}")
def get_store_route(
    store_id: str,
    stores: StoreRepository = Depends(get_store_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(get_current_session),
):
    return {"store": get_store(stores, users, session, store_id)}


@router.put("/{store_id}")
def update_store_route(
    store_id: str,
    body: StoreUpdate,
    stores: StoreRepository = Depends(get_store_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(tenant_admin),
):
    store = update_store(stores, users, session, store_id, body)
    return {"message": "Store updated successfully", "store": store}


@router.delete("/{store_id}")
def delete_store_route(
    store_id: str,
    stores: StoreRepository = Depends(get_store_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(tenant_admin),
):
    delete_store(stores, users, session, store_id)
    return {"message": "Store deleted successfully"}


@router.delete("/{store_id}/users/{user_id}")
def unassign_store_user(
    store_id: str,
    user_id: str,
    stores: StoreRepository = Depends(get_store_repository),
    users: UserRepository = Depends(get_user_repository),
    session: SessionUser = Depends(tenant_admin),
):
    unassign_user(stores, users, session, store_id, user_id)
    return {"message": "User removed from store"}
