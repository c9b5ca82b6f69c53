"""Store service — sub-tenant CRUD and staff assignment."""

from typing import Optional

import structlog
from bson import ObjectId

from staffpicks.application.services.access_policy import (
    require_company_id,
    resolve_company_id,
    session_company_id,
    session_store_id,
)
from staffpicks.application.services.slugs import store_code, unique_slug
from staffpicks.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    ForbiddenException,
    ValidationException,
)
from staffpicks.domain.models.store import Store
from staffpicks.domain.repositories.tenant_repository import StoreRepository
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.roles import TENANT_ADMIN_ROLES, UserRole
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.store import AssignedUser, StoreCreate, StoreRead, StoreUpdate
from staffpicks.infrastructure.database import to_object_id

logger = structlog.get_logger(__name__)

STAFF_ROLES = [UserRole.LIBRARIAN.value, UserRole.STORE_ADMIN.value]


def _require_tenant_admin(session: SessionUser) -> None:
    if UserRole(session.role) not in TENANT_ADMIN_ROLES:
        raise ForbiddenException("Only company administrators can manage stores")


def store_scope(session: SessionUser, company_id: Optional[ObjectId] = None) -> dict:
    if session.is_admin:
        return {"companyId": company_id} if company_id is not None else {}
    query = {"companyId": session_company_id(session)}
    if not session.is_company_admin:
        query["_id"] = session_store_id(session)
    return query


def _get_scoped(stores: StoreRepository, session: SessionUser, store_id: str) -> dict:
    store = stores.get_by_id(to_object_id(store_id, "store"), store_scope(session))
    if store is None:
        raise EntityNotFoundException("Store not found")
    return store


def _staff_count(users: UserRepository, store_id: ObjectId) -> int:
    return users.count(users.active_filter({"storeId": store_id, "role": {"$in": STAFF_ROLES}}))


def _normalize_code(code: str) -> str:
    value = code.strip().upper()
    if not value:
        raise ValidationException("Store code cannot be empty")
    return value


def get_stores(stores: StoreRepository, users: UserRepository, session: SessionUser, company_id: Optional[str] = None) -> list[StoreRead]:
    query = store_scope(session, resolve_company_id(session, company_id))
    return [
        StoreRead.from_document(doc, librarian_count=_staff_count(users, doc["_id"]))
        for doc in stores.find(query, sort=[("name", 1)])
    ]


def get_store(stores: StoreRepository, users: UserRepository, session: SessionUser, store_id: str) -> StoreRead:
    store = _get_scoped(stores, session, store_id)
    assigned = users.find_active({"storeId": store["_id"]}, sort=[("lastName", 1), ("firstName", 1)])
    return StoreRead.from_document(
        store,
        librarian_count=_staff_count(users, store["_id"]),
        assigned_users=[
            AssignedUser(
                id=str(user["_id"]),
                first_name=user.get("firstName", ""),
                last_name=user.get("lastName", ""),
                email=user["email"],
                role=user["role"],
            )
            for user in assigned
        ],
    )


def create_store(stores: StoreRepository, session: SessionUser, body: StoreCreate) -> StoreRead:
    _require_tenant_admin(session)
    company_id = require_company_id(session, body.company_id)

    name = (body.name or "").strip()
    if not name:
        raise ValidationException("Store name is required")

    if body.code:
        code = _normalize_code(body.code)
        if stores.code_taken(company_id, code):
            raise ConflictException("A store with this code already exists")
    else:
        code = unique_slug(store_code(name) or "STORE", lambda candidate: stores.code_taken(company_id, candidate))

    data = body.model_dump(exclude_none=True, exclude={"company_id", "code", "name"})
    doc = stores.create(Store(company_id=company_id, code=code, name=name, **data))
    logger.info("Store created", store_id=str(doc["_id"]), code=code, company_id=str(company_id))
    return StoreRead.from_document(doc, librarian_count=0)


def update_store(stores: StoreRepository, users: UserRepository, session: SessionUser, store_id: str, body: StoreUpdate) -> StoreRead:
    _require_tenant_admin(session)
    store = _get_scoped(stores, session, store_id)

    provided = body.model_fields_set
    changes: dict = {}
    if "name" in provided:
        name = (body.name or "").strip()
        if not name:
            raise ValidationException("Store name cannot be empty")
        changes["name"] = name
    if body.code and body.code.strip().upper() != store["code"]:
        code = _normalize_code(body.code)
        if stores.code_taken(store["companyId"], code, exclude_id=store["_id"]):
            raise ConflictException("A store with this code already exists")
        changes["code"] = code
    if body.status is not None:
        changes["status"] = body.status.value
    for field, key in (
        ("description", "description"),
        ("contact_email", "contactEmail"),
        ("contact_phone", "contactPhone"),
        ("settings", "settings"),
        ("operating_hours", "operatingHours"),
    ):
        if field in provided:
            changes[key] = getattr(body, field)
    if "address" in provided:
        changes["address"] = body.address.model_dump(by_alias=True, exclude_none=True) if body.address else None

    doc = stores.update(store["_id"], changes)
    logger.info("Store updated", store_id=store_id, fields=sorted(changes))
    return StoreRead.from_document(doc, librarian_count=_staff_count(users, store["_id"]))


def delete_store(stores: StoreRepository, users: UserRepository, session: SessionUser, store_id: str) -> None:
    """Refused while any user document, deleted or not, still points at the store."""
    _require_tenant_admin(session)
    store = _get_scoped(stores, session, store_id)

    assigned = users.count({"storeId": store["_id"]})
    if assigned > 0:
        logger.info("Store deletion refused", store_id=store_id, assigned_users=assigned)
        raise ValidationException(
            f"Cannot delete store with {assigned} assigned user(s). Reassign or remove them first.",
            {"assignedUsers": assigned},
        )

    stores.delete(store["_id"])
    logger.info("Store deleted", store_id=store_id, by=session.user_id)


def unassign_user(stores: StoreRepository, users: UserRepository, session: SessionUser, store_id: str, user_id: str) -> None:
    _require_tenant_admin(session)
    store = _get_scoped(stores, session, store_id)

    user = users.get_by_id(to_object_id(user_id, "user"), {"companyId": store["companyId"]})
    if user is None:
        raise EntityNotFoundException("User not found")
    if user.get("storeId") != store["_id"]:
        raise ValidationException("User is not assigned to this store")

    users.update(user["_id"], {"storeId": None})
    logger.info("User unassigned from store", store_id=store_id, user_id=user_id)
