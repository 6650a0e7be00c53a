"""
Health check endpoint
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.order import Order, OrderStatus

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Database connectivity, the active pricing setup and the number of
    orders still waiting for payment
    """
    pending_orders = None
    try:
        db.execute(text("SELECT 1"))
        pending_orders = db.query(func.count(Order.id)).filter(
            Order.order_status == OrderStatus.PENDING.value
        ).scalar()
        db_status = "healthy"
    except SQLAlchemyError as e:
        db_status = f"unhealthy: {e}"

    return {
        "service": settings.SERVICE_NAME,
        "status": "healthy" if db_status == "healthy" else "unhealthy",
        "database": db_status,
        "pending_orders": pending_orders,
        "pricing": {
            "discount_model": settings.DISCOUNT_MODEL,
            "bulk_threshold": settings.BULK_DISCOUNT_THRESHOLD,
            "currency": settings.CURRENCY
        },
        "test_payments_enabled": settings.ENABLE_TEST_PAYMENTS and not settings.is_production,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/")
def root():
    return {
        "service": settings.SERVICE_NAME,
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
        "docs": "/docs"
    }
