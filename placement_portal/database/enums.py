"""
placement_portal/database/enums.py

Enumerations

Defines the closed value sets used across the platform:
- UserRole / UserType: access control and onboarding choice
- Branch: academic branch of a user
- Industry / CompanySize: company classification
- Recommendation: review verdict
- ReviewSort: supported review list orderings
"""

from enum import Enum

# ---------------------------------------------------
# User Enumerations
# ---------------------------------------------------


class UserRole(str, Enum):
    """
    Enum representing user roles for access control.

    Values:
    - student (default at registration)
    - alumni (may author reviews)
    - admin
    """

    STUDENT = "student"
    ALUMNI = "alumni"
    ADMIN = "admin"


class UserType(str, Enum):
    """Onboarding choice: browse reviews (reader) or write them (writer)."""

    READER = "reader"
    WRITER = "writer"


class Branch(str, Enum):
    COMPUTER_SCIENCE = "Computer Science"
    INFORMATION_TECHNOLOGY = "Information Technology"
    ELECTRONICS = "Electronics"
    MECHANICAL = "Mechanical"
    CIVIL = "Civil"
    CHEMICAL = "Chemical"
    OTHER = "Other"


# ---------------------------------------------------
# Company Enumerations
# ---------------------------------------------------


class Industry(str, Enum):
    TECHNOLOGY = "Technology"
    FINANCE = "Finance"
    HEALTHCARE = "Healthcare"
    MANUFACTURING = "Manufacturing"
    CONSULTING = "Consulting"
    RETAIL = "Retail"
    EDUCATION = "Education"
    OTHER = "Other"


class CompanySize(str, Enum):
    TINY = "1-50"
    SMALL = "51-200"
    MEDIUM = "201-500"
    LARGE = "501-1000"
    XLARGE = "1001-5000"
    ENTERPRISE = "5000+"


# ---------------------------------------------------
# Review Enumerations
# ---------------------------------------------------


class Recommendation(str, Enum):
    """Whether the author would recommend the company."""

    YES = "Yes"
    NO = "No"
    MAYBE = "Maybe"


class ReviewSort(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    RATING = "rating"
    HELPFUL = "helpful"
