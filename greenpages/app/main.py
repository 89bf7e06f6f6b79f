"""
FastAPI Application Entry Point.

This is the main application file for the Green Pages Finance Backend.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from greenpages.app.core.config import settings
from greenpages.app.api.v1.router import router as api_v1_router
from greenpages.app.core.dependencies import get_current_user
from greenpages.app.core.jwt import create_access_token
from greenpages.app.core.observability import ObservabilityMiddleware, configure_logging
from greenpages.app.db.session import engine, Base
from greenpages.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from greenpages.app.models.enums import UserRole

# Import models to ensure they are registered with Base
import greenpages.app.models.registry  # noqa: F401

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables on startup.
    2. Disposes the connection pool on shutdown.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Agent debt and settlement ledger for the Green Pages directory",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to Green Pages Finance API",
        "docs": "/docs",
        "health": "/health",
    }


# Development token endpoints (disabled unless debug)
@app.post("/auth/test-token", tags=["Authentication"])
async def generate_test_token(user_id: str, role: UserRole = UserRole.AGENT, username: str = "test_user"):
    """
    Generate a test JWT token.

    Development only; the identity service issues real tokens.
    """
    if not settings.debug:
        raise HTTPException(status_code=404, detail="Not Found")

    token = create_access_token(data={"sub": username, "user_id": user_id, "role": role.value})
    return {
        "access_token": token,
        "token_type": "bearer",
        "user_id": user_id,
        "role": role.value,
    }


@app.get("/auth/protected", tags=["Authentication"])
async def protected_route(current_user: dict = Depends(get_current_user)):
    """
    Protected route that requires valid JWT authentication.

    Returns 401 if token is missing or invalid.
    Returns 200 with user info if authentication succeeds.
    """
    return {
        "message": "Access granted to protected resource",
        "authenticated_user": current_user,
    }
