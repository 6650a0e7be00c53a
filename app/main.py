"""
FastAPI Application Entry Point - Shop backend
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from app.config import settings
from app.database import init_db
from app.logging_config import configure_logging
from app.api import admin, cart, health, orders, payments, products

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Shop Backend",
    description="Catalog, cart, orders and payments",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(products.router)
app.include_router(cart.router)
app.include_router(orders.router)
app.include_router(payments.router)
app.include_router(admin.router)

# Prometheus metrics
Instrumentator().instrument(app).expose(app)


@app.on_event("startup")
def startup_event():
    """Configure logging and initialize database on startup"""
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting %s (%s)...", settings.SERVICE_NAME, settings.ENVIRONMENT)
    init_db()
    logger.info("Database initialized")
    logger.info("Discount model: %s", settings.DISCOUNT_MODEL)
    if settings.ENABLE_TEST_PAYMENTS and not settings.is_production:
        logger.warning("Test payments are enabled")
    logger.info("%s is running on port %s", settings.SERVICE_NAME, settings.SERVICE_PORT)


@app.on_event("shutdown")
def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down %s...", settings.SERVICE_NAME)
