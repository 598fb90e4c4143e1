"""
tests/review/test_review_routes.py

Test cases for company review API endpoints.
Covers public listing and lookup, alumni submission, author updates and
deletion, helpful toggling, role guards and request validation errors.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient

from placement_portal.core.exceptions import AuthorizationError, DuplicateReviewError, NotFoundError
from placement_portal.database.enums import ReviewSort
from placement_portal.database.models import Review, User
from placement_portal.review import schemas as review_schemas
from placement_portal.review import services as review_services


def _create_body(company_id) -> dict:
    return {
        "company_id": str(company_id),
        "overall_rating": 4,
        "work_culture": 4,
        "work_life_balance": 3,
        "career_growth": 5,
        "compensation": 4,
        "management": 4,
        "title": "Good place to start a career",
        "content": "Solid engineering culture with good mentoring and a clear path to promotion.",
        "pros": ["Mentoring"],
        "cons": [],
        "recommendations": "Yes",
    }


# Public Review Endpoints


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "list_reviews", new_callable=AsyncMock)
async def test_list_reviews(
    mock_list_reviews: AsyncMock,
    fake_review: Review,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    """Test listing reviews with filters and pagination."""
    mock_list_reviews.return_value = ([fake_review], 3)

    response = await async_client.get(
        f"/api/reviews/?company_id={fake_review.company_id}&sort=helpful&skip=0&limit=2"
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total_count"] == 3
    assert data["has_next_page"] is True
    assert data["items"][0]["id"] == str(fake_review.id)
    assert data["items"][0]["author"]["name"] == fake_review.author.name
    mock_list_reviews.assert_awaited_once_with(
        company_id=fake_review.company_id,
        author_id=None,
        sort=ReviewSort.HELPFUL,
        skip=0,
        limit=2,
    )


@pytest.mark.asyncio
async def test_list_reviews_rejects_oversized_page(
    async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get("/api/reviews/?limit=51")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    detail = response.json()["detail"]
    assert detail["error"] == "Validation failed"
    assert detail["fields"][0]["field"] == "limit"


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "list_company_reviews", new_callable=AsyncMock)
async def test_get_company_reviews_hides_anonymous_author(
    mock_list_company_reviews: AsyncMock,
    fake_review: Review,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    fake_review.is_anonymous = True
    mock_list_company_reviews.return_value = [fake_review]

    response = await async_client.get(f"/api/reviews/company/{fake_review.company_id}")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total"] == 1
    assert data["reviews"][0]["author"] is None
    assert data["reviews"][0]["company"]["name"] == fake_review.company.name


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "get_review", new_callable=AsyncMock)
async def test_get_review_not_found(
    mock_get_review: AsyncMock,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    mock_get_review.side_effect = NotFoundError("Review not found")

    response = await async_client.get(f"/api/reviews/{uuid4()}")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"detail": {"error": "Review not found"}}


# Authenticated Review Endpoints


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "create_review", new_callable=AsyncMock)
async def test_submit_review_success(
    mock_create_review: AsyncMock,
    fake_review: Review,
    mock_current_alumni_user: User,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    """Test an alumna submitting a review successfully."""
    mock_create_review.return_value = fake_review
    body = _create_body(fake_review.company_id)

    response = await async_client.post("/api/reviews/", json=body)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["id"] == str(fake_review.id)
    assert data["author"]["id"] == str(mock_current_alumni_user.id)
    mock_create_review.assert_awaited_once_with(
        author_id=mock_current_alumni_user.id,
        data=review_schemas.ReviewCreate(**body),
    )


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "create_review", new_callable=AsyncMock)
async def test_submit_review_duplicate(
    mock_create_review: AsyncMock,
    mock_current_alumni_user: User,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    mock_create_review.side_effect = DuplicateReviewError()

    response = await async_client.post("/api/reviews/", json=_create_body(uuid4()))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"]["error"] == "You have already reviewed this company"


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "create_review", new_callable=AsyncMock)
async def test_submit_review_forbidden_for_students(
    mock_create_review: AsyncMock,
    mock_current_student_user: User,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    response = await async_client.post("/api/reviews/", json=_create_body(uuid4()))

    assert response.status_code == status.HTTP_403_FORBIDDEN
    mock_create_review.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_review_requires_authentication(
    async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.post("/api/reviews/", json=_create_body(uuid4()))

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "create_review", new_callable=AsyncMock)
async def test_submit_review_validation_errors_list_fields(
    mock_create_review: AsyncMock,
    mock_current_alumni_user: User,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    body = {**_create_body(uuid4()), "overall_rating": 6, "title": "Bad"}

    response = await async_client.post("/api/reviews/", json=body)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    fields = {f["field"] for f in response.json()["detail"]["fields"]}
    assert fields == {"overall_rating", "title"}
    mock_create_review.assert_not_awaited()


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "update_review", new_callable=AsyncMock)
async def test_update_review_passes_only_supplied_fields(
    mock_update_review: AsyncMock,
    fake_review: Review,
    mock_current_alumni_user: User,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    fake_review.title = "Updated title here"
    mock_update_review.return_value = fake_review

    response = await async_client.put(
        f"/api/reviews/{fake_review.id}", json={"title": "Updated title here"}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == "Updated title here"
    call = mock_update_review.await_args
    assert call.kwargs["caller_id"] == mock_current_alumni_user.id
    assert call.kwargs["data"].model_dump(exclude_unset=True) == {"title": "Updated title here"}


@pytest.mark.asyncio
async def test_update_review_rejects_derived_and_null_fields(
    mock_current_alumni_user: User,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    review_id = uuid4()

    helpful = await async_client.put(f"/api/reviews/{review_id}", json={"helpful_count": 99})
    nulled = await async_client.put(f"/api/reviews/{review_id}", json={"title": None})

    assert helpful.status_code == status.HTTP_400_BAD_REQUEST
    assert nulled.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "soft_delete_review", new_callable=AsyncMock)
async def test_delete_review_by_other_user_is_forbidden(
    mock_soft_delete: AsyncMock,
    mock_current_alumni_user: User,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    mock_soft_delete.side_effect = AuthorizationError("Not authorized to modify this review")

    response = await async_client.delete(f"/api/reviews/{uuid4()}")

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"]["error"] == "Not authorized to modify this review"


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "soft_delete_review", new_callable=AsyncMock)
async def test_delete_review_success(
    mock_soft_delete: AsyncMock,
    mock_current_admin_user: User,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    review_id = uuid4()

    response = await async_client.delete(f"/api/reviews/{review_id}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"detail": "Review deleted successfully"}
    mock_soft_delete.assert_awaited_once_with(
        review_id=review_id,
        caller_id=mock_current_admin_user.id,
        caller_role=mock_current_admin_user.role,
    )


@pytest.mark.asyncio
@patch.object(review_services.ReviewService, "toggle_helpful", new_callable=AsyncMock)
async def test_toggle_helpful(
    mock_toggle_helpful: AsyncMock,
    mock_current_student_user: User,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    review_id = uuid4()
    mock_toggle_helpful.return_value = review_schemas.HelpfulToggleResponse(
        detail="Review marked as helpful", helpful_count=1, has_voted=True
    )

    response = await async_client.post(f"/api/reviews/{review_id}/helpful")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "detail": "Review marked as helpful",
        "helpful_count": 1,
        "has_voted": True,
    }
    mock_toggle_helpful.assert_awaited_once_with(
        review_id=review_id, user_id=mock_current_student_user.id
    )
