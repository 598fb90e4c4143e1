"""
[seed] database/seed.py

Populates the database with sample data for local development:
- Creates an admin and two verified alumni
- Creates a few companies
- Adds reviews through ReviewService so company ratings are aggregated

Existing rows with the same emails or company names are left in place.

Usage:
    python -m placement_portal.database.seed
"""

import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.core.config import settings
from placement_portal.core.exceptions import DuplicateReviewError
from placement_portal.core.logging import init_logging
from placement_portal.core.security import get_password_hash
from placement_portal.database.enums import Branch, CompanySize, Industry, Recommendation, UserRole
from placement_portal.database.init_db import init_db
from placement_portal.database.models import Company, User
from placement_portal.database.session import AsyncSessionLocal
from placement_portal.review.schemas import ReviewCreate
from placement_portal.review.services import ReviewService

logger = logging.getLogger(__name__)

SEED_PASSWORD = "password123"

SAMPLE_USERS = [
    {"name": "Portal Admin", "local_part": "admin", "role": UserRole.ADMIN, "graduation_year": 2015},
    {
        "name": "Priya Sharma",
        "local_part": "priya.sharma",
        "role": UserRole.ALUMNI,
        "graduation_year": 2020,
        "current_company": "Google",
        "designation": "Software Engineer",
    },
    {
        "name": "Ananya Rao",
        "local_part": "ananya.rao",
        "role": UserRole.ALUMNI,
        "graduation_year": 2019,
        "current_company": "Microsoft",
        "designation": "Tech Lead",
    },
]

SAMPLE_COMPANIES = [
    {
        "name": "Google",
        "industry": Industry.TECHNOLOGY,
        "location": "Mountain View, CA",
        "description": "Multinational technology company specializing in Internet-related services and products.",
        "website": "https://google.com",
        "company_size": CompanySize.ENTERPRISE,
        "founded_year": 1998,
        "tags": ["AI", "Search", "Cloud"],
    },
    {
        "name": "Microsoft",
        "industry": Industry.TECHNOLOGY,
        "location": "Redmond, WA",
        "description": "American multinational technology company.",
        "website": "https://microsoft.com",
        "company_size": CompanySize.ENTERPRISE,
        "founded_year": 1975,
        "tags": ["Software", "Cloud", "Gaming"],
    },
    {
        "name": "Amazon",
        "industry": Industry.TECHNOLOGY,
        "location": "Seattle, WA",
        "description": "American multinational technology company focusing on e-commerce.",
        "website": "https://amazon.com",
        "company_size": CompanySize.ENTERPRISE,
        "founded_year": 1994,
        "tags": ["E-commerce", "Cloud", "AI"],
    },
]

SAMPLE_REVIEWS = [
    {
        "title": "Great work culture and benefits",
        "content": (
            "I had an amazing experience working here. The culture is supportive, the benefits "
            "are excellent and the team is collaborative with many opportunities for growth."
        ),
        "overall_rating": 5,
        "work_culture": 5,
        "work_life_balance": 4,
        "career_growth": 5,
        "compensation": 5,
        "management": 4,
        "pros": ["Great benefits", "Supportive culture", "Career growth opportunities"],
        "cons": ["Sometimes long hours", "High expectations"],
        "recommendations": Recommendation.YES,
    },
    {
        "title": "Challenging but rewarding",
        "content": (
            "The work is challenging but very rewarding. I learned a lot, the compensation is "
            "competitive and there are clear career paths with good learning opportunities."
        ),
        "overall_rating": 4,
        "work_culture": 4,
        "work_life_balance": 3,
        "career_growth": 5,
        "compensation": 4,
        "management": 4,
        "pros": ["Competitive salary", "Learning opportunities", "Clear career path"],
        "cons": ["Work-life balance could be better"],
        "recommendations": Recommendation.YES,
    },
]


class Seeder:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_or_create_user(self, data: dict) -> User:
        email = f"{data['local_part']}@{settings.ALLOWED_EMAIL_DOMAIN}"
        user = (await self.db.execute(select(User).filter(User.email == email))).scalar_one_or_none()
        if user:
            return user
        user = User(
            name=data["name"],
            email=email,
            hashed_password=get_password_hash(SEED_PASSWORD),
            role=data["role"],
            graduation_year=data["graduation_year"],
            branch=Branch.COMPUTER_SCIENCE,
            current_company=data.get("current_company"),
            designation=data.get("designation"),
            is_verified=True,
        )
        self.db.add(user)
        await self.db.commit()
        logger.info(f"[SEED] Created user {email} ({data['role'].value})")
        return user

    async def get_or_create_company(self, data: dict) -> Company:
        stmt = select(Company).filter(func.lower(Company.name) == data["name"].lower())
        company = (await self.db.execute(stmt)).scalar_one_or_none()
        if company:
            return company
        company = Company(**data)
        self.db.add(company)
        await self.db.commit()
        logger.info(f"[SEED] Created company {company.name}")
        return company

    async def run(self) -> None:
        users = [await self.get_or_create_user(data) for data in SAMPLE_USERS]
        alumni = [u for u in users if u.role == UserRole.ALUMNI]
        companies = [await self.get_or_create_company(data) for data in SAMPLE_COMPANIES]

        service = ReviewService(self.db)
        for company in companies:
            for author, review in zip(alumni, SAMPLE_REVIEWS):
                try:
                    await service.create_review(
                        author.id, ReviewCreate(company_id=company.id, **review)
                    )
                except DuplicateReviewError:
                    logger.info(f"[SEED] {author.email} already reviewed {company.name}, skipping")


async def seed() -> None:
    await init_db()
    async with AsyncSessionLocal() as db:
        await Seeder(db).run()
    logger.info("[SEED] Seeding completed")


if __name__ == "__main__":
    init_logging()
    asyncio.run(seed())
