"""User service — user management under the role hierarchy, and the self profile."""

from typing import Optional

import structlog
from bson import ObjectId

from staffpicks.application.services.access_policy import (
    can_manage_user,
    creatable_roles,
    require_store_id,
    resolve_company_id,
    session_user_id,
    user_scope,
)
from staffpicks.application.services.auth_service import (
    hash_password,
    normalize_email,
    validate_password_policy,
    verify_password,
)
from staffpicks.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    ForbiddenException,
    ValidationException,
)
from staffpicks.domain.models.base import utcnow
from staffpicks.domain.models.user import User, UserStatus
from staffpicks.domain.repositories.tenant_repository import StoreRepository
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.roles import USER_MANAGER_ROLES, TENANT_ADMIN_ROLES, UserRole
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.domain.schemas.user import (
    ProfileUpdate,
    StatusAction,
    UserCreate,
    UserFilter,
    UserRead,
    UserUpdate,
)
from staffpicks.infrastructure.database import to_object_id

logger = structlog.get_logger(__name__)

NOT_FOUND = "User not found or insufficient permission"

# action -> (statuses it may start from, resulting status)
STATUS_TRANSITIONS = {
    StatusAction.ACTIVATE: ({UserStatus.INACTIVE, UserStatus.SUSPENDED}, UserStatus.ACTIVE),
    StatusAction.DEACTIVATE: ({UserStatus.ACTIVE}, UserStatus.INACTIVE),
    StatusAction.SUSPEND: ({UserStatus.ACTIVE, UserStatus.INACTIVE}, UserStatus.SUSPENDED),
}


def _with_stores(stores: StoreRepository, docs: list[dict]) -> list[UserRead]:
    store_ids = list({doc["storeId"] for doc in docs if doc.get("storeId")})
    by_id = {store["_id"]: store for store in stores.find({"_id": {"$in": store_ids}})} if store_ids else {}
    return [UserRead.from_document(doc, by_id.get(doc.get("storeId"))) for doc in docs]


def to_read(stores: StoreRepository, doc: dict) -> UserRead:
    return _with_stores(stores, [doc])[0]


def _require_manager(session: SessionUser, roles=USER_MANAGER_ROLES) -> None:
    if UserRole(session.role) not in roles:
        raise ForbiddenException("Insufficient permission to manage users")


def _get_target(users: UserRepository, session: SessionUser, user_id: ObjectId) -> dict:
    """A live user inside the actor's read scope, else 404."""
    target = users.get_active(user_id, user_scope(session))
    if target is None:
        raise EntityNotFoundException(NOT_FOUND)
    return target


def _get_manageable(users: UserRepository, session: SessionUser, user_id: ObjectId) -> dict:
    target = _get_target(users, session, user_id)
    if not can_manage_user(session, target):
        raise ForbiddenException("You cannot manage a user with this role")
    return target


def _check_store(stores: StoreRepository, company_id: Optional[ObjectId], store_id: ObjectId) -> None:
    if stores.get_by_id(store_id, {"companyId": company_id}) is None:
        raise ValidationException("Store not found in this company")


# ── Queries ───────────────────────────────────────────────────


def get_users(users: UserRepository, stores: StoreRepository, session: SessionUser, filters: UserFilter) -> list[UserRead]:
    _require_manager(session)

    query = user_scope(session, resolve_company_id(session, filters.company_id))
    if session.is_store_admin:
        # Store admins see their librarians unless they ask for another role
        query["role"] = filters.role.value if filters.role else UserRole.LIBRARIAN.value
    else:
        if filters.role:
            query["role"] = filters.role.value
        if filters.store_id:
            query["storeId"] = to_object_id(filters.store_id, "store")
    if filters.status:
        query["status"] = filters.status.value

    docs = users.find_active(query, sort=[("lastName", 1), ("firstName", 1)])
    return _with_stores(stores, docs)


def get_user(users: UserRepository, stores: StoreRepository, session: SessionUser, user_id: str) -> UserRead:
    target = users.get_active(to_object_id(user_id, "user"), user_scope(session))
    if target is None:
        raise EntityNotFoundException("User not found")
    return to_read(stores, target)


# ── Mutations ─────────────────────────────────────────────────


def create_user(users: UserRepository, stores: StoreRepository, session: SessionUser, body: UserCreate) -> UserRead:
    _require_manager(session)

    first_name = (body.first_name or "").strip()
    last_name = (body.last_name or "").strip()
    if not first_name or not last_name or not body.email or not body.password or not body.role:
        raise ValidationException("Missing required fields: firstName, lastName, email, password and role")

    role = UserRole(body.role)
    if role not in creatable_roles(session.role):
        raise ForbiddenException(f"You cannot create a user with role '{role.value}'")

    validate_password_policy(body.password)
    email = normalize_email(body.email)
    if users.get_by_email(email) is not None:
        raise ConflictException("A user with this email already exists")

    if role is UserRole.ADMIN:
        if body.store_id or body.company_id:
            raise ValidationException("Platform admins cannot belong to a company or store")
        company_id = store_id = None
    else:
        company_id = resolve_company_id(session, body.company_id)
        if company_id is None:
            raise ValidationException("companyId is required")
        if session.is_store_admin:
            store_id = require_store_id(session)
        elif body.store_id:
            store_id = to_object_id(body.store_id, "store")
            _check_store(stores, company_id, store_id)
        else:
            store_id = None
        if role.requires_store and store_id is None:
            raise ValidationException(f"storeId is required for role '{role.value}'")
        if role is UserRole.COMPANY_ADMIN:
            store_id = None

    doc = users.create(
        User(
            company_id=company_id,
            store_id=store_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=hash_password(body.password),
            role=role,
            sections=body.sections or [],
            avatar_url=body.avatar_url,
        )
    )
    logger.info("User created", user_id=str(doc["_id"]), role=role.value, by=session.user_id)
    return to_read(stores, doc)


def update_user(
    users: UserRepository,
    stores: StoreRepository,
    session: SessionUser,
    user_id: str,
    body: UserUpdate,
) -> UserRead:
    _require_manager(session)
    target = _get_manageable(users, session, to_object_id(user_id, "user"))

    provided = body.model_fields_set
    changes: dict = {}

    for field, key in (("first_name", "firstName"), ("last_name", "lastName")):
        if field in provided:
            value = (getattr(body, field) or "").strip()
            if not value:
                raise ValidationException(f"{key} cannot be empty")
            changes[key] = value
    if "sections" in provided:
        changes["sections"] = body.sections or []
    if "avatar_url" in provided:
        changes["avatarUrl"] = body.avatar_url

    if "email" in provided:
        email = normalize_email(body.email)
        other = users.get_by_email(email)
        if other is not None and other["_id"] != target["_id"]:
            raise ConflictException("A user with this email already exists")
        changes["email"] = email

    role = UserRole(target["role"])
    if "role" in provided and body.role is not None:
        role = UserRole(body.role)
        if role not in creatable_roles(session.role):
            raise ForbiddenException(f"You cannot assign role '{role.value}'")
        changes["role"] = role.value

    store_id = target.get("storeId")
    if "store_id" in provided:
        if session.is_store_admin:
            raise ForbiddenException("Store admins cannot move users between stores")
        store_id = to_object_id(body.store_id, "store") if body.store_id else None
        if store_id is not None:
            _check_store(stores, target.get("companyId"), store_id)
        changes["storeId"] = store_id

    # Re-check the role/store invariant on the merged result
    if role.requires_store and store_id is None:
        raise ValidationException(f"storeId is required for role '{role.value}'")
    if role is UserRole.ADMIN and (store_id is not None or target.get("companyId") is not None):
        raise ValidationException("Platform admins cannot belong to a company or store")
    if role is UserRole.COMPANY_ADMIN and store_id is not None:
        changes["storeId"] = None

    doc = users.update(target["_id"], changes)
    logger.info("User updated", user_id=user_id, by=session.user_id, fields=sorted(changes))
    return to_read(stores, doc)


def deactivate_user(users: UserRepository, session: SessionUser, user_id: str) -> None:
    """Reversible removal: status becomes inactive."""
    _require_manager(session)
    oid = to_object_id(user_id, "user")
    if oid == session_user_id(session):
        raise ValidationException("You cannot delete your own account")

    target = _get_manageable(users, session, oid)
    users.update(target["_id"], {"status": UserStatus.INACTIVE.value})
    logger.info("User deactivated", user_id=user_id, by=session.user_id)


def change_status(
    users: UserRepository,
    stores: StoreRepository,
    session: SessionUser,
    user_id: str,
    action: StatusAction,
) -> UserRead:
    _require_manager(session)
    oid = to_object_id(user_id, "user")
    if oid == session_user_id(session):
        raise ForbiddenException("You cannot change the status of your own account")

    target = _get_manageable(users, session, oid)
    current = UserStatus(target.get("status", UserStatus.ACTIVE.value))
    allowed_from, new_status = STATUS_TRANSITIONS[action]

    if current is new_status:
        return to_read(stores, target)
    if current not in allowed_from:
        raise ConflictException(f"Cannot {action.value} a user who is {current.value}")

    doc = users.update(target["_id"], {"status": new_status.value})
    logger.info(
        "User status changed",
        user_id=user_id,
        by=session.user_id,
        from_status=current.value,
        to_status=new_status.value,
    )
    return to_read(stores, doc)


def soft_delete_user(users: UserRepository, session: SessionUser, user_id: str) -> None:
    """Terminal: the user keeps its record but vanishes, and so does its content."""
    _require_manager(session, TENANT_ADMIN_ROLES)
    oid = to_object_id(user_id, "user")
    if oid == session_user_id(session):
        raise ValidationException("You cannot delete your own account")

    target = _get_manageable(users, session, oid)
    users.soft_delete(target["_id"], utcnow())
    logger.info("User soft-deleted", user_id=user_id, by=session.user_id)


# ── Profile ───────────────────────────────────────────────────


def get_profile(users: UserRepository, stores: StoreRepository, session: SessionUser) -> UserRead:
    doc = users.get_active(session_user_id(session))
    if doc is None:
        raise EntityNotFoundException("User not found")
    return to_read(stores, doc)


def update_profile(users: UserRepository, session: SessionUser, body: ProfileUpdate) -> dict:
    """Edit the caller's own record. Returns the updated user document."""
    user = users.get_active(session_user_id(session))
    if user is None:
        raise EntityNotFoundException("User not found")

    provided = body.model_fields_set
    changes: dict = {}
    for field, key in (("first_name", "firstName"), ("last_name", "lastName")):
        if field in provided:
            value = (getattr(body, field) or "").strip()
            if not value:
                raise ValidationException(f"{key} cannot be empty")
            changes[key] = value
    if "avatar_url" in provided:
        changes["avatarUrl"] = body.avatar_url

    if "email" in provided:
        email = normalize_email(body.email)
        other = users.get_by_email(email)
        if other is not None and other["_id"] != user["_id"]:
            raise ConflictException("This email is already in use")
        changes["email"] = email

    if body.new_password or body.current_password or body.confirm_password:
        if not body.current_password or not body.new_password or not body.confirm_password:
            raise ValidationException("currentPassword, newPassword and confirmPassword are required")
        if not verify_password(body.current_password, user["passwordHash"]):
            raise ValidationException("Current password is incorrect")
        if body.new_password != body.confirm_password:
            raise ValidationException("Passwords do not match")
        validate_password_policy(body.new_password)
        changes["passwordHash"] = hash_password(body.new_password)

    if not changes:
        return user

    doc = users.update(user["_id"], changes)
    logger.info(
        "Profile updated",
        user_id=session.user_id,
        fields=sorted(key for key in changes if key != "passwordHash"),
        password_changed="passwordHash" in changes,
    )
    return doc
