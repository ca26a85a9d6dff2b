"""FastAPI application: main entry point."""

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from storefront.config import get_settings
from storefront.infrastructure.database import engine, Base, SessionLocal
from storefront.core.logging import configure_logging
from storefront.core.middleware import setup_middleware
from storefront.core.exceptions import register_exception_handlers

# Import all models so SQLAlchemy knows about them
from storefront.domain.models.user import User  # noqa: F401
from storefront.domain.models.category import Category  # noqa: F401
from storefront.domain.models.location import Location  # noqa: F401
from storefront.domain.models.product import Product  # noqa: F401
from storefront.domain.models.product_image import ProductImage  # noqa: F401
from storefront.domain.models.configuration import Configuration  # noqa: F401

from storefront.interfaces.api.auth import router as auth_router
from storefront.interfaces.api.products import router as products_router
from storefront.interfaces.api.categories import router as categories_router
from storefront.interfaces.api.locations import router as locations_router
from storefront.interfaces.api.configurations import router as configurations_router
from storefront.interfaces.api.dashboard import router as dashboard_router

settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)


def seed_default_admin() -> None:
    from storefront.application.services.auth_service import create_user, get_user_by_email

    db = SessionLocal()
    try:
        if not get_user_by_email(db, settings.DEFAULT_ADMIN_EMAIL):
            create_user(
                db,
                email=settings.DEFAULT_ADMIN_EMAIL,
                password=settings.DEFAULT_ADMIN_PASSWORD,
                is_admin=True,
                is_super_admin=True,
                name="Super Admin",
            )
            logger.info("Default super admin created", email=settings.DEFAULT_ADMIN_EMAIL)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting Storefront API", env=settings.ENVIRONMENT)

    # Create DB tables (use migrations for real deployments)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    seed_default_admin()

    yield

    logger.info("Storefront API stopped")


app = FastAPI(
    title="Storefront API",
    description="Product catalog, stores and back-office API",
    version="1.0.0",
    lifespan=lifespan,
)

setup_middleware(app)
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(products_router)
app.include_router(categories_router)
app.include_router(locations_router)
app.include_router(configurations_router)
app.include_router(dashboard_router)

# Uploaded product images
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/")
def root():
    return {
        "name": "Storefront API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
