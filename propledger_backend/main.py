"""PropLedger Property Management Backend - Main Application Entry Point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core.exceptions import PropLedgerException
from .core.logging import (
    RequestIdMiddleware,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from .database import AsyncSessionLocal

# Import routers
from .modules.auth import router as auth_router
from .modules.auth.services import seed_from_settings
from .modules.billing import payments_router
from .modules.billing import router as invoices_router
from .modules.correspondence import router as correspondence_router
from .modules.distributions import router as distributions_router
from .modules.expenses import router as expenses_router
from .modules.lease_management import router as leases_router
from .modules.maintenance import router as maintenance_router
from .modules.owners import property_owners_router
from .modules.owners import router as owners_router
from .modules.property_management import router as properties_router
from .modules.property_management import units_router
from .modules.reports import router as reports_router
from .modules.tax import router as tax_router
from .modules.tenant_management import portal_router
from .modules.tenant_management import router as tenants_router

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging()
    logger.info("Starting PropLedger application...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Debug mode: {settings.app_debug}")
    async with AsyncSessionLocal() as db:
        await seed_from_settings(db)
    yield
    # Shutdown
    logger.info("Shutting down PropLedger application...")
    shutdown_logging()


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description="Property management and owner income distribution",
    version=settings.api_version,
    docs_url="/api/docs" if settings.app_debug else None,
    redoc_url="/api/redoc" if settings.app_debug else None,
    openapi_url="/api/openapi.json" if settings.app_debug else None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request ID middleware for request tracing
app.add_middleware(RequestIdMiddleware)


# Global exception handler
@app.exception_handler(PropLedgerException)
async def propledger_exception_handler(request: Request, exc: PropLedgerException):
    """Handle PropLedger-specific exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.message,
            "error": exc.message,
            "data": None,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "error": str(exc) if settings.app_debug else "Internal server error",
            "data": None,
        },
    )


# Health check endpoint
@app.get(f"{settings.api_prefix}/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.api_version,
        "env": settings.app_env,
    }


# Register routers with /api prefix
API_PREFIX = settings.api_prefix

app.include_router(auth_router, prefix=API_PREFIX)

# Portfolio
app.include_router(properties_router, prefix=API_PREFIX)
app.include_router(units_router, prefix=API_PREFIX)
app.include_router(owners_router, prefix=API_PREFIX)
app.include_router(property_owners_router, prefix=API_PREFIX)

# Tenants and leasing
app.include_router(tenants_router, prefix=API_PREFIX)
app.include_router(portal_router, prefix=API_PREFIX)
app.include_router(leases_router, prefix=API_PREFIX)
app.include_router(correspondence_router, prefix=API_PREFIX)

# Money in and out
app.include_router(invoices_router, prefix=API_PREFIX)
app.include_router(payments_router, prefix=API_PREFIX)
app.include_router(expenses_router, prefix=API_PREFIX)
app.include_router(maintenance_router, prefix=API_PREFIX)

# Owner income and tax
app.include_router(distributions_router, prefix=API_PREFIX)
app.include_router(tax_router, prefix=API_PREFIX)
app.include_router(reports_router, prefix=API_PREFIX)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "propledger_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.app_debug,
    )
