from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import logging

from app.core.config import settings
from app.common.exceptions import AppError
from app.common.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from app.database.database import create_tables
from app.dependencies.storageDependencies import get_storage

# Import routers
from app.modules.auth.router import auth_router
from app.modules.clients.router import router as clients_router
from app.modules.invoices.router import router as invoices_router
from app.modules.payment_gateways.router import router as payment_gateways_router
from app.modules.email_templates.router import router as email_templates_router
from app.modules.reminders.router import router as reminders_router
from app.modules.expenses.router import router as expenses_router
from app.modules.dashboard.router import router as dashboard_router
from app.modules.email.router import router as email_router

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title="Invoice Builder API",
    description="Invoicing, expenses, payment gateways and payment reminders for small businesses",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL] if settings.ENVIRONMENT == "production" else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Errores de dominio -> JSON para la notificación del frontend"""
    if exc.status_code >= 500:
        logger.error(f"{exc.error} on {request.method} {request.url.path}: {exc.detail}")
    else:
        logger.info(f"{exc.error} on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.error}
    )


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(clients_router)
app.include_router(invoices_router)
app.include_router(payment_gateways_router)
app.include_router(email_templates_router)
app.include_router(reminders_router)
app.include_router(expenses_router)
app.include_router(dashboard_router)
app.include_router(email_router)


@app.get("/")
async def read_root():
    return {
        "message": "Invoice Builder API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "storage": get_storage().backend
    }


@app.on_event("startup")
async def startup_event():
    logger.info("Invoice Builder API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    storage = get_storage()
    logger.info(f"Storage backend: {storage.backend}")

    # Create database tables (only for development - use migrate.py in production)
    if storage.backend == "sql" and settings.ENVIRONMENT == "development":
        create_tables()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Invoice Builder API shutting down...")
