"""
core/exceptions.py

Description:
Defines a standard error response format for the API and the domain
errors raised by the service layer. Every error is an HTTPException, so
FastAPI turns it into a structured rejection at the request boundary.
"""

from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError


class APIError(HTTPException):
    """Custom exception with standardized error response."""

    def __init__(
        self,
        status_code: int,
        message: str,
        headers: dict[str, str] | None = None,
        **extra: Any,
    ):
        self.message = message
        super().__init__(status_code=status_code, detail={"error": message, **extra}, headers=headers)


class FieldValidationError(APIError):
    """One or more fields failed their declared constraint."""

    def __init__(self, fields: list[dict[str, str]], message: str = "Validation failed"):
        self.fields = fields
        super().__init__(status.HTTP_400_BAD_REQUEST, message, fields=fields)

    @classmethod
    def from_errors(cls, errors: list[Any]) -> "FieldValidationError":
        """Builds the error from pydantic / FastAPI error dicts."""
        fields = []
        for error in errors:
            loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
            fields.append({"field": ".".join(loc) or "__root__", "message": error.get("msg", "")})
        return cls(fields)

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "FieldValidationError":
        return cls.from_errors(exc.errors())


class DuplicateReviewError(APIError):
    def __init__(self, message: str = "You have already reviewed this company"):
        super().__init__(status.HTTP_400_BAD_REQUEST, message)


class AuthorizationError(APIError):
    def __init__(self, message: str = "Not authorized to perform this action"):
        super().__init__(status.HTTP_403_FORBIDDEN, message)


class NotFoundError(APIError):
    def __init__(self, message: str = "Not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, message)
