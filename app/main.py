# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the BrandSync API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    BrandSyncException,
    brandsync_exception_handler,
    validation_exception_handler,
)
from app.routers import admin, applications, health, payments, setup, tasks, verification, withdrawals
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the environment on startup and warns early when the payment
    gateway isn't configured.
    """
    logger.info(f"Starting BrandSync API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    missing = [
        name for name in ("PAYHERE_MERCHANT_ID", "PAYHERE_MERCHANT_SECRET", "PAYHERE_URL", "APP_BASE_URL")
        if not getattr(settings, name)
    ]
    if missing:
        logger.warning(f"Payment gateway not configured, missing: {', '.join(missing)}")

    yield

    logger.info("Shutting down BrandSync API")


# Create FastAPI application
app = FastAPI(
    title="BrandSync API",
    description="""
## Influencer Marketing Marketplace API

Brands post tasks with view targets per platform; influencers apply,
deliver and get paid.

### How It Works

1. **Create a Task** - Pick platforms, target views and a deadline
2. **Calculate Cost** - Rates per 1000 views, a deadline multiplier and a 10% service fee
3. **Pay** - PayHere checkout or a bank transfer slip
4. **Apply** - Influencers promise views and submit proofs
5. **Withdraw** - Influencers cash out their balance
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Current user info from the Supabase JWT"},
        {"name": "Tasks", "description": "Create tasks and calculate their cost"},
        {"name": "Payments", "description": "PayHere checkout, notifications and bank transfers"},
        {"name": "Applications", "description": "Influencer applications and proofs"},
        {"name": "Withdrawals", "description": "Influencer payouts"},
        {"name": "Verification", "description": "Mobile number and platform ownership verification"},
        {"name": "Setup", "description": "Account setup wizard"},
        {"name": "Admin", "description": "Accounting and payment review"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(BrandSyncException)
async def handle_brandsync_exception(request: Request, exc: BrandSyncException):
    """Handle custom BrandSync exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message}")
    return await brandsync_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, prefix="/api/auth", tags=["Auth"])

app.include_router(health.router, prefix="/api", tags=["Health"])

app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])

app.include_router(payments.router, prefix="/api/payment", tags=["Payments"])

app.include_router(applications.router, prefix="/api/task-applications", tags=["Applications"])

app.include_router(withdrawals.router, prefix="/api/withdrawals", tags=["Withdrawals"])

app.include_router(verification.router, prefix="/api/verification", tags=["Verification"])

app.include_router(setup.router, prefix="/api/setup", tags=["Setup"])

app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "BrandSync API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }
