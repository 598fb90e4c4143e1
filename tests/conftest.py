"""
tests/conftest.py

Test fixtures for API integration and unit tests.
Includes async clients, an in-memory database, fake users, ORM factories
and dependency overrides.
"""

import os
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.pop("REDIS_URL", None)

# --- Imports ---
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import app
from placement_portal.core.dependencies import get_current_user
from placement_portal.database.base import Base
from placement_portal.database.enums import (
    Branch,
    Industry,
    Recommendation,
    UserRole,
    UserType,
)
from placement_portal.database.models import Company, Review, User
from placement_portal.database.session import get_db
from placement_portal.review.schemas import ReviewCreate

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

REVIEW_CONTENT = (
    "Solid engineering culture with good mentoring, reasonable deadlines and a clear "
    "path to promotion for new graduates."
)


# --- Core Test Fixtures ---


@pytest.fixture(scope="session")
def transport() -> ASGITransport:
    """Fixture for ASGI transport."""
    return ASGITransport(app=app)


@pytest_asyncio.fixture(scope="function")
async def async_client(transport: ASGITransport) -> AsyncGenerator[AsyncClient, None]:
    """Fixture for HTTP async client."""
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# --- Database Fixtures ---


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory SQLite schema per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


# --- ORM Factories ---


@pytest.fixture
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Persists a user; keyword arguments override the defaults."""

    async def _create(**overrides: Any) -> User:
        suffix = uuid4().hex[:8]
        fields: dict[str, Any] = {
            "name": f"User {suffix}",
            "email": f"user.{suffix}@a.com",
            "hashed_password": "not-a-real-hash",
            "role": UserRole.ALUMNI,
            "user_type": UserType.WRITER,
            "graduation_year": 2020,
            "branch": Branch.COMPUTER_SCIENCE,
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        await db_session.commit()
        return user

    return _create


@pytest.fixture
def company_factory(db_session: AsyncSession) -> Callable[..., Awaitable[Company]]:
    """Persists a company; keyword arguments override the defaults."""

    async def _create(**overrides: Any) -> Company:
        fields: dict[str, Any] = {
            "name": f"Company {uuid4().hex[:8]}",
            "industry": Industry.TECHNOLOGY,
            "location": "Bengaluru",
            "description": "Product engineering company",
        }
        fields.update(overrides)
        company = Company(**fields)
        db_session.add(company)
        await db_session.commit()
        return company

    return _create


@pytest.fixture
def review_payload() -> Callable[..., ReviewCreate]:
    """Builds a valid ReviewCreate for the given company."""

    def _build(company_id: Any, **overrides: Any) -> ReviewCreate:
        fields: dict[str, Any] = {
            "company_id": company_id,
            "overall_rating": 4,
            "work_culture": 4,
            "work_life_balance": 3,
            "career_growth": 5,
            "compensation": 4,
            "management": 4,
            "title": "Good place to start a career",
            "content": REVIEW_CONTENT,
            "pros": ["Mentoring", "Learning"],
            "cons": ["Long hours"],
            "recommendations": Recommendation.YES,
        }
        fields.update(overrides)
        return ReviewCreate(**fields)

    return _build


# --- Fake User Fixtures ---


def _fake_user(role: UserRole, user_type: UserType, local_part: str) -> User:
    return User(
        id=uuid4(),
        name=f"{local_part.title()} Test",
        email=f"{local_part}.test@a.com",
        hashed_password="fakehashedpassword",
        role=role,
        user_type=user_type,
        graduation_year=2020,
        branch=Branch.COMPUTER_SCIENCE,
        is_verified=True,
        is_active=True,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def fake_admin_user() -> User:
    """Fixture for a fake admin user."""
    return _fake_user(UserRole.ADMIN, UserType.WRITER, "admin")


@pytest.fixture
def fake_alumni_user() -> User:
    """Fixture for a fake alumni user."""
    return _fake_user(UserRole.ALUMNI, UserType.WRITER, "alumni")


@pytest.fixture
def fake_student_user() -> User:
    """Fixture for a fake student (reader) user."""
    return _fake_user(UserRole.STUDENT, UserType.READER, "student")


@pytest.fixture
def fake_company() -> Company:
    now = datetime.now(timezone.utc)
    return Company(
        id=uuid4(),
        name="Acme",
        industry=Industry.TECHNOLOGY,
        description="Widgets",
        website=None,
        logo=None,
        location="Pune",
        company_size=None,
        founded_year=None,
        tags=[],
        average_rating=4.0,
        total_reviews=1,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def fake_review(fake_alumni_user: User, fake_company: Company) -> Review:
    """Transient review with author and company attached, as a service would return it."""
    now = datetime.now(timezone.utc)
    return Review(
        id=uuid4(),
        author_id=fake_alumni_user.id,
        author=fake_alumni_user,
        company_id=fake_company.id,
        company=fake_company,
        overall_rating=4,
        work_culture=4,
        work_life_balance=3,
        career_growth=5,
        compensation=4,
        management=4,
        title="Good place to start a career",
        content=REVIEW_CONTENT,
        pros=["Mentoring"],
        cons=["Long hours"],
        recommendations=Recommendation.YES,
        is_anonymous=False,
        linkedin_profile=None,
        is_verified=False,
        helpful_count=0,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


# --- Dependency Override Fixtures ---


@pytest_asyncio.fixture
async def override_get_db() -> AsyncGenerator[None, None]:
    """Override for the database dependency."""

    async def _override() -> AsyncGenerator[AsyncMock, None]:
        yield AsyncMock()

    app.dependency_overrides[get_db] = _override
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def override_get_db_session(db_session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """Routes share the test's in-memory session."""

    async def _override() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = _override
    yield db_session
    app.dependency_overrides.pop(get_db, None)


def _override_current_user(user: User) -> Generator[User, None, None]:
    app.dependency_overrides[get_current_user] = lambda: user
    yield user
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def mock_current_admin_user(fake_admin_user: User) -> Generator[User, None, None]:
    """Mock the current user as an admin."""
    yield from _override_current_user(fake_admin_user)


@pytest.fixture
def mock_current_alumni_user(fake_alumni_user: User) -> Generator[User, None, None]:
    """Mock the current user as an alumna."""
    yield from _override_current_user(fake_alumni_user)


@pytest.fixture
def mock_current_student_user(fake_student_user: User) -> Generator[User, None, None]:
    """Mock the current user as a student reader."""
    yield from _override_current_user(fake_student_user)
