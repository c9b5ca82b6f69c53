"""Role-scoped query builder.

Turns a session's role/company/store claims into MongoDB filters so that
every read and write is implicitly tenant- and role-scoped.

    admin         every company, optionally narrowed by an explicit companyId
    companyAdmin  everything in their company
    storeAdmin    everything in their store
    librarian     only records whose assignedTo contains them
"""

from typing import Optional

from bson import ObjectId

from staffpicks.core.exceptions import ForbiddenException, ValidationException
from staffpicks.domain.repositories.user_repository import UserRepository
from staffpicks.domain.roles import CONTENT_EDITOR_ROLES, UserRole
from staffpicks.domain.schemas.auth import SessionUser
from staffpicks.infrastructure.database import to_object_id


def session_company_id(session: SessionUser) -> Optional[ObjectId]:
    return ObjectId(session.company_id) if session.company_id else None


def session_store_id(session: SessionUser) -> Optional[ObjectId]:
    return ObjectId(session.store_id) if session.store_id else None


def require_store_id(session: SessionUser) -> ObjectId:
    """The store of a store-scoped session; unassigned staff cannot act on store data."""
    store_id = session_store_id(session)
    if store_id is None:
        raise ForbiddenException("Your account must be assigned to a store")
    return store_id


def session_user_id(session: SessionUser) -> ObjectId:
    return ObjectId(session.user_id)


def resolve_company_id(session: SessionUser, requested: Optional[str] = None) -> Optional[ObjectId]:
    """The company a request works on. Only a platform admin may pick one."""
    if session.is_admin:
        return to_object_id(requested, "company") if requested else None
    return session_company_id(session)


def require_company_id(session: SessionUser, requested: Optional[str] = None) -> ObjectId:
    company_id = resolve_company_id(session, requested)
    if company_id is None:
        raise ValidationException("No company associated with this account")
    return company_id


def role_scope(session: SessionUser, company_id: Optional[ObjectId] = None) -> dict:
    """Visibility filter for books and lists, before the deleted-author exclusion."""
    role = UserRole(session.role)
    if role is UserRole.ADMIN:
        return {"companyId": company_id} if company_id is not None else {}

    query: dict = {"companyId": session_company_id(session)}
    if role is UserRole.STORE_ADMIN:
        query["storeId"] = require_store_id(session)
    elif role is UserRole.LIBRARIAN:
        # Assignment only: authorship alone does not grant visibility
        query["assignedTo"] = session_user_id(session)
    return query


def visibility_query(
    session: SessionUser,
    users: UserRepository,
    base: Optional[dict] = None,
    company_id: Optional[ObjectId] = None,
) -> dict:
    """Role scope plus the exclusion of content authored by soft-deleted users."""
    query = {**(base or {}), **role_scope(session, company_id)}
    deleted = users.deleted_user_ids(query.get("companyId"))
    if deleted:
        query["createdBy"] = {"$nin": deleted}
    return query


def require_content_editor(session: SessionUser, entity: str) -> None:
    if UserRole(session.role) not in CONTENT_EDITOR_ROLES:
        raise ForbiddenException(f"Your role cannot create or modify {entity}")


def write_scope(session: SessionUser) -> dict:
    """Records a store admin or librarian may modify."""
    query: dict = {
        "companyId": session_company_id(session),
        "storeId": require_store_id(session),
    }
    if session.is_librarian:
        query["assignedTo"] = session_user_id(session)
    return query


# ── Users ─────────────────────────────────────────────────────


def creatable_roles(actor: UserRole) -> frozenset:
    """Roles an actor may create, edit or promote a user to."""
    actor = UserRole(actor)
    if actor is UserRole.ADMIN:
        return frozenset(UserRole)
    return frozenset(role for role in UserRole if actor.outranks(role))


def user_scope(session: SessionUser, company_id: Optional[ObjectId] = None) -> dict:
    """Users an actor may read (soft-deleted ones are excluded separately)."""
    role = UserRole(session.role)
    if role is UserRole.ADMIN:
        return {"companyId": company_id} if company_id is not None else {}
    if role is UserRole.COMPANY_ADMIN:
        return {"companyId": session_company_id(session)}
    if role is UserRole.STORE_ADMIN:
        return {"companyId": session_company_id(session), "storeId": require_store_id(session)}
    return {"_id": session_user_id(session)}


def can_manage_user(session: SessionUser, target: dict) -> bool:
    """Whether the actor may edit, deactivate or delete `target`."""
    if UserRole(target["role"]) not in creatable_roles(session.role):
        return False
    if session.is_admin:
        return True
    if target.get("companyId") != session_company_id(session):
        return False
    if session.is_store_admin:
        store_id = session_store_id(session)
        return store_id is not None and target.get("storeId") == store_id
    return True
