"""Pure helpers: slugs, roles, item ordering, ids and indexes."""

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from staffpicks.application.services.access_policy import creatable_roles
from staffpicks.application.services.slugs import generate_slug, store_code, unique_slug
from staffpicks.core.exceptions import ValidationException
from staffpicks.domain.models.book_list import densify
from staffpicks.domain.roles import UserRole
from staffpicks.infrastructure.database import ensure_indexes, to_object_id


@pytest.mark.parametrize(
    "name, expected",
    [
        ("The Reading Room!", "the-reading-room"),
        ("  Summer   Reads  2024 ", "summer-reads-2024"),
        ("Kids_&_Teens", "kids-teens"),
        ("---", ""),
    ],
)
def test_generate_slug(name, expected):
    assert generate_slug(name) == expected


def test_store_code():
    assert store_code("Geneve Balexert") == "GENEVE_BALEXERT"
    assert store_code("Main-Store #2") == "MAIN_STORE_2"


def test_unique_slug_appends_first_free_suffix():
    taken = {"picks", "picks-1", "picks-3"}

    assert unique_slug("picks", taken.__contains__) == "picks-2"
    assert unique_slug("fresh", taken.__contains__) == "fresh"


def test_role_ranks():
    assert UserRole.ADMIN.outranks(UserRole.COMPANY_ADMIN)
    assert UserRole.STORE_ADMIN.outranks("librarian")
    assert not UserRole.LIBRARIAN.outranks(UserRole.LIBRARIAN)
    assert UserRole.LIBRARIAN.requires_store
    assert not UserRole.COMPANY_ADMIN.requires_store
    assert not UserRole.ADMIN.requires_company


def test_creatable_roles():
    assert creatable_roles(UserRole.ADMIN) == frozenset(UserRole)
    assert creatable_roles(UserRole.COMPANY_ADMIN) == {UserRole.STORE_ADMIN, UserRole.LIBRARIAN}
    assert creatable_roles(UserRole.STORE_ADMIN) == {UserRole.LIBRARIAN}
    assert creatable_roles(UserRole.LIBRARIAN) == frozenset()


def test_densify_orders_and_renumbers():
    items = [{"bookId": "a", "position": 7}, {"bookId": "b", "position": -1}, {"bookId": "c", "position": 3}]

    assert densify(items) == [
        {"bookId": "b", "position": 0},
        {"bookId": "c", "position": 1},
        {"bookId": "a", "position": 2},
    ]


def test_to_object_id():
    oid = ObjectId()

    assert to_object_id(str(oid)) == oid
    assert to_object_id(oid) is oid
    with pytest.raises(ValidationException, match="Invalid store ID format"):
        to_object_id("nope", "store")
    with pytest.raises(ValidationException):
        to_object_id(None)


def test_unique_indexes(db):
    ensure_indexes(db)
    company_id = ObjectId()

    db.users.insert_one({"email": "a@acme.test"})
    with pytest.raises(DuplicateKeyError):
        db.users.insert_one({"email": "a@acme.test"})

    db.stores.insert_one({"companyId": company_id, "code": "MAIN"})
    db.stores.insert_one({"companyId": ObjectId(), "code": "MAIN"})
    with pytest.raises(DuplicateKeyError):
        db.stores.insert_one({"companyId": company_id, "code": "MAIN"})
