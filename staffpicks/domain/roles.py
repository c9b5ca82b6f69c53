"""User roles, ordered by privilege.

Kept free of persistence and HTTP imports so any layer can depend on it.
"""

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    COMPANY_ADMIN = "companyAdmin"
    STORE_ADMIN = "storeAdmin"
    LIBRARIAN = "librarian"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def outranks(self, other: "UserRole") -> bool:
        return self.rank > UserRole(other).rank

    @property
    def requires_store(self) -> bool:
        return self in (UserRole.STORE_ADMIN, UserRole.LIBRARIAN)

    @property
    def requires_company(self) -> bool:
        return self is not UserRole.ADMIN


_RANKS = {
    UserRole.ADMIN: 4,
    UserRole.COMPANY_ADMIN: 3,
    UserRole.STORE_ADMIN: 2,
    UserRole.LIBRARIAN: 1,
}

# Roles that can create or edit books and lists; both are store-scoped
CONTENT_EDITOR_ROLES = frozenset({UserRole.STORE_ADMIN, UserRole.LIBRARIAN})

# Roles that manage stores and tenant settings
TENANT_ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.COMPANY_ADMIN})

# Roles that may list and manage other users
USER_MANAGER_ROLES = frozenset({UserRole.ADMIN, UserRole.COMPANY_ADMIN, UserRole.STORE_ADMIN})
