"""
main.py

Application entrypoint for the Placement Portal API.
- Initializes structured logging
- Sets up FastAPI application and middlewares
- Registers all API routers
- Integrates rate limiting via SlowAPI
- Adds common security headers
- Configures CORS
- Converts request validation failures into the API's 400 error shape
"""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from placement_portal.auth.routes import router as auth_router
from placement_portal.company.routes import router as company_router
from placement_portal.core.config import settings
from placement_portal.core.exceptions import FieldValidationError
from placement_portal.core.limiter import limiter
from placement_portal.core.logging import init_logging
from placement_portal.review.routes import router as review_router
from placement_portal.users.routes import router as users_router

# -----------------------------
# FastAPI App Initialization
# -----------------------------
init_logging()
app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

# -----------------------------
# Rate Limiting
# -----------------------------
app.state.limiter = limiter


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> Response:
    return _rate_limit_exceeded_handler(request, exc)  # type: ignore[arg-type]


app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


# -----------------------------
# Validation Error Handler
# -----------------------------
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = FieldValidationError.from_errors(list(exc.errors()))
    return JSONResponse(
        status_code=error.status_code,
        content=jsonable_encoder({"detail": error.detail}),
    )


app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]


# -----------------------------
# Security Headers Middleware
# -----------------------------
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add common security headers to responses.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response


app.add_middleware(SecurityHeadersMiddleware)

# -----------------------------
# CORSMiddleware Configuration
# -----------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------
# API Router Registration
# -----------------------------
app.include_router(auth_router)
app.include_router(company_router)
app.include_router(review_router)
app.include_router(users_router)


# -----------------------------
# Health Endpoint
# -----------------------------
@app.get("/api/health", tags=["Health"])
async def health() -> dict[str, str]:
    return {"status": "OK", "message": f"{settings.APP_NAME} is running"}
