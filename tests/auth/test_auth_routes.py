"""
tests/auth/test_auth_routes.py

API tests for authentication endpoints backed by the in-memory database:
registration, login cookie, token-based access to /me, onboarding and the
onboarding review entry point.
"""

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from main import app
from placement_portal.core.dependencies import get_current_user
from placement_portal.database.models import User

REGISTER_BODY = {
    "name": "Kavya Nair",
    "email": "kavya.nair@a.com",
    "password": "secret123",
    "graduation_year": 2022,
    "branch": "Computer Science",
}

INITIAL_REVIEW_BODY = {
    "company_name": "Acme",
    "location": "Pune",
    "join_year": 2023,
    "salary": 900000,
    "review": "Great first job with supportive seniors, steady learning and a calm pace of delivery.",
    "work_culture": 4,
    "work_life_balance": 3,
    "career_growth": 5,
    "compensation": 4,
    "management": 4,
}


@pytest.mark.asyncio
async def test_register_then_me_with_bearer_token(
    async_client: AsyncClient, override_get_db_session: AsyncSession
) -> None:
    register = await async_client.post("/api/auth/register", json=REGISTER_BODY)

    assert register.status_code == status.HTTP_201_CREATED
    body = register.json()
    assert body["user"]["role"] == "student"
    assert body["token_type"] == "bearer"

    me = await async_client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}
    )
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["email"] == "kavya.nair@a.com"


@pytest.mark.asyncio
async def test_register_rejects_outside_email_domain(
    async_client: AsyncClient, override_get_db_session: AsyncSession
) -> None:
    response = await async_client.post(
        "/api/auth/register", json={**REGISTER_BODY, "email": "kavya@gmail.com"}
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["fields"][0]["field"] == "email"


@pytest.mark.asyncio
async def test_login_sets_http_only_cookie(
    async_client: AsyncClient, override_get_db_session: AsyncSession
) -> None:
    await async_client.post("/api/auth/register", json=REGISTER_BODY)

    response = await async_client.post(
        "/api/auth/login", json={"email": "kavya.nair@a.com", "password": "secret123"}
    )
    bad = await async_client.post(
        "/api/auth/login", json={"email": "kavya.nair@a.com", "password": "nope"}
    )

    assert response.status_code == status.HTTP_200_OK
    assert "access_token=" in response.headers["set-cookie"]
    assert "httponly" in response.headers["set-cookie"].lower()
    assert bad.status_code == status.HTTP_400_BAD_REQUEST
    assert bad.json() == {"detail": {"error": "Invalid credentials"}}


@pytest.mark.asyncio
async def test_me_without_token_is_unauthorized(
    async_client: AsyncClient, override_get_db_session: AsyncSession
) -> None:
    response = await async_client.get("/api/auth/me")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_onboarding_then_initial_review(
    async_client: AsyncClient, override_get_db_session: AsyncSession
) -> None:
    register = await async_client.post("/api/auth/register", json=REGISTER_BODY)
    headers = {"Authorization": f"Bearer {register.json()['access_token']}"}

    forbidden = await async_client.post(
        "/api/auth/create-initial-review", json=INITIAL_REVIEW_BODY, headers=headers
    )
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    onboarding = await async_client.put(
        "/api/auth/update-profile", json={"user_type": "writer"}, headers=headers
    )
    assert onboarding.status_code == status.HTTP_200_OK
    assert onboarding.json()["user_type"] == "writer"

    created = await async_client.post(
        "/api/auth/create-initial-review", json=INITIAL_REVIEW_BODY, headers=headers
    )
    assert created.status_code == status.HTTP_201_CREATED
    review = created.json()
    assert review["overall_rating"] == 4
    assert review["title"] == "Review of Acme"
    assert review["company"]["name"] == "Acme"

    company = await async_client.get(f"/api/companies/{review['company']['id']}")
    assert company.json()["average_rating"] == 4.0
    assert company.json()["total_reviews"] == 1

    duplicate = await async_client.post(
        "/api/auth/create-initial-review",
        json={**INITIAL_REVIEW_BODY, "company_name": "ACME", "location": "pune"},
        headers=headers,
    )
    assert duplicate.status_code == status.HTTP_400_BAD_REQUEST
    assert duplicate.json()["detail"]["error"] == "You have already reviewed this company"


@pytest.mark.asyncio
async def test_update_profile_route(
    async_client: AsyncClient,
    override_get_db_session: AsyncSession,
    user_factory,
) -> None:
    user: User = await user_factory(name="Before Name")
    app.dependency_overrides[get_current_user] = lambda: user
    try:
        response = await async_client.put(
            "/api/auth/profile", json={"name": "After Name", "location": ""}
        )
    finally:
        app.dependency_overrides.pop(get_current_user, None)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "After Name"
