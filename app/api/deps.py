"""
Shared API dependencies: auth context, service factories, error mapping
"""
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.exceptions import (
    ShopError,
    ValidationError,
    NotFoundError,
    ConflictError,
    UnauthorizedError,
    ExternalServiceError
)
from app.services.order_service import OrderService
from app.services.payment_client import PaymentProviderClient
from app.services.payment_service import PaymentService

security = HTTPBearer()

ERROR_STATUS_CODES = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
    ExternalServiceError: status.HTTP_502_BAD_GATEWAY,
}


def http_error(exc: ShopError) -> HTTPException:
    """Translate a service exception into an HTTP error"""
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def get_token_payload(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    return decode_token(credentials.credentials)


def get_current_user_id(payload: dict = Depends(get_token_payload)) -> str:
    """Authenticated user id from the bearer token (``sub`` or ``id`` claim)"""
    user_id = payload.get("sub") or payload.get("id")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    return str(user_id)


def require_admin(payload: dict = Depends(get_token_payload)) -> str:
    if payload.get("role") != "admin" and not payload.get("is_admin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return str(payload.get("sub") or payload.get("id") or "")


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency to get OrderService instance"""
    return OrderService(db)


def get_payment_client() -> PaymentProviderClient:
    return PaymentProviderClient()


def get_payment_service(
    db: Session = Depends(get_db),
    payment_client: PaymentProviderClient = Depends(get_payment_client)
) -> PaymentService:
    """Dependency to get PaymentService instance"""
    return PaymentService(db, payment_client=payment_client)
