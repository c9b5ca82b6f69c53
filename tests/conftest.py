"""Shared fixtures: an in-memory MongoDB, a seeded tenant and logged-in clients."""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["SESSION_SECRET"] = "test-session-secret-that-is-long-enough"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["NEXT_ISBN_DB_KEY"] = "test-isbn-key"
os.environ["CLOUDINARY_CLOUD_NAME"] = "demo"
os.environ["CLOUDINARY_API_KEY"] = "123456"
os.environ["CLOUDINARY_API_SECRET"] = "cloud-secret"

from types import SimpleNamespace

import mongomock
import pytest
from fastapi.testclient import TestClient

from staffpicks.application.services.auth_service import hash_password
from staffpicks.domain.models.company import Company, CompanyStatus
from staffpicks.domain.models.store import Store
from staffpicks.domain.models.user import User
from staffpicks.domain.roles import UserRole
from staffpicks.infrastructure.database import get_db
from staffpicks.infrastructure.repositories.tenant_repository import (
    MongoCompanyRepository,
    MongoStoreRepository,
)
from staffpicks.infrastructure.repositories.user_repository import MongoUserRepository
from staffpicks.main import app as fastapi_app

PASSWORD = "Passw0rd!"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def db():
    return mongomock.MongoClient()["staffpicks_test"]


@pytest.fixture
def app(db):
    fastapi_app.dependency_overrides[get_db] = lambda: db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Anonymous client."""
    return TestClient(app)


@pytest.fixture
def make_user(db):
    users = MongoUserRepository(db)

    def _make(role, email, company=None, store=None, **fields):
        fields.setdefault("first_name", role.value.capitalize())
        fields.setdefault("last_name", "Tester")
        return users.create(
            User(
                company_id=company["_id"] if company else None,
                store_id=store["_id"] if store else None,
                email=email,
                password_hash=PASSWORD_HASH,
                role=role,
                **fields,
            )
        )

    return _make


@pytest.fixture
def tenant(db, make_user):
    """Two companies; the first has a main store and a branch, staffed at every role."""
    companies = MongoCompanyRepository(db)
    stores = MongoStoreRepository(db)

    company = companies.create(Company(name="Acme Books", slug="acme-books", status=CompanyStatus.ACTIVE))
    main = stores.create(Store(company_id=company["_id"], code="MAIN", name="Main Store"))
    branch = stores.create(Store(company_id=company["_id"], code="BRANCH", name="Branch"))

    other_company = companies.create(Company(name="Other Books", slug="other-books"))
    other_store = stores.create(Store(company_id=other_company["_id"], code="MAIN", name="Other Main"))

    return SimpleNamespace(
        company=company,
        main=main,
        branch=branch,
        other_company=other_company,
        other_store=other_store,
        admin=make_user(UserRole.ADMIN, "root@staffpicks.test"),
        company_admin=make_user(UserRole.COMPANY_ADMIN, "owner@acme.test", company),
        store_admin=make_user(UserRole.STORE_ADMIN, "manager@acme.test", company, main),
        librarian=make_user(UserRole.LIBRARIAN, "alice@acme.test", company, main, first_name="Alice"),
        librarian2=make_user(UserRole.LIBRARIAN, "bob@acme.test", company, main, first_name="Bob"),
        branch_admin=make_user(UserRole.STORE_ADMIN, "branch@acme.test", company, branch),
        other_admin=make_user(UserRole.COMPANY_ADMIN, "owner@other.test", other_company),
    )


@pytest.fixture
def login_as(app):
    """Return a TestClient holding the session cookie for `email`."""

    def _login(email, password=PASSWORD):
        session_client = TestClient(app)
        response = session_client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return session_client

    return _login


@pytest.fixture
def book_payload():
    def _payload(isbn="9780441013593", **overrides):
        payload = {
            "isbn": isbn,
            "title": "Dune",
            "authors": ["Frank Herbert"],
            "publisher": "Ace",
            "description": "Spice, sand and politics.",
            "genre": "science-fiction",
            "tone": "epic",
            "ageGroup": "adult",
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def create_book(book_payload):
    """POST a book as the given client and return the created book."""

    def _create(session_client, **overrides):
        response = session_client.post("/api/books", json=book_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()["book"]

    return _create
