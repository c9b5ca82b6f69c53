"""Tenant settings and the signup-to-settings scenario."""

from datetime import datetime

import pytest

from staffpicks.domain.models.base import utcnow


@pytest.fixture
def company_admin(tenant, login_as):
    return login_as("owner@acme.test")


def test_signup_then_company_is_on_trial(client):
    response = client.post(
        "/api/auth/signup",
        json={
            "companyName": "Acme",
            "firstName": "A",
            "lastName": "B",
            "email": "a@acme.com",
            "password": "Abcdefg1",
            "confirmPassword": "Abcdefg1",
        },
    )
    assert response.status_code == 201
    assert response.json()["redirectUrl"] == "/dashboard/settings/onboarding"

    company = client.get("/api/company").json()

    assert company["status"] == "trial"
    assert company["slug"] == "acme"
    trial_ends_at = datetime.fromisoformat(company["trialEndsAt"])
    days_left = (trial_ends_at - utcnow()).total_seconds() / 86400
    assert 29.9 < days_left <= 30


def test_get_company(company_admin):
    company = company_admin.get("/api/company").json()

    assert company["name"] == "Acme Books"
    assert company["status"] == "active"
    assert company["plan"] == "starter"


def test_store_staff_can_read_company(tenant, login_as):
    assert login_as("alice@acme.test").get("/api/company").json()["name"] == "Acme Books"


def test_admin_must_name_a_company(tenant, login_as):
    admin = login_as("root@staffpicks.test")

    assert admin.get("/api/company").status_code == 400
    response = admin.get("/api/company", params={"companyId": str(tenant.other_company["_id"])})
    assert response.json()["name"] == "Other Books"


def test_rename_regenerates_slug(company_admin):
    response = company_admin.put("/api/company", json={"name": "Acme Readers"})

    assert response.status_code == 200
    assert response.json()["company"]["slug"] == "acme-readers"


def test_rename_to_taken_slug_gets_suffix(company_admin):
    response = company_admin.put("/api/company", json={"name": "Other Books"})

    assert response.json()["company"]["slug"] == "other-books-1"


def test_same_name_keeps_slug(company_admin):
    response = company_admin.put("/api/company", json={"name": "Acme Books", "description": "Since 1990"})

    company = response.json()["company"]
    assert company["slug"] == "acme-books"
    assert company["description"] == "Since 1990"


def test_address_and_settings_are_merged(company_admin):
    company_admin.put("/api/company", json={"address": {"city": "Geneva"}, "settings": {"allowPublicLists": True}})
    response = company_admin.put(
        "/api/company",
        json={"address": {"street": "1 Rue du Rhone"}, "settings": {"maxUsersPerCompany": 10}},
    )

    company = response.json()["company"]
    assert company["address"]["city"] == "Geneva"
    assert company["address"]["street"] == "1 Rue du Rhone"
    assert company["settings"] == {"allowPublicLists": True, "maxUsersPerCompany": 10}


def test_empty_name_is_rejected(company_admin):
    assert company_admin.put("/api/company", json={"name": ""}).status_code == 400


def test_store_admin_cannot_edit_company(tenant, login_as):
    store_admin = login_as("manager@acme.test")

    assert store_admin.put("/api/company", json={"name": "Takeover"}).status_code == 403
