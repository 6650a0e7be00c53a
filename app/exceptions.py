"""
Domain exceptions raised by the service layer
"""


class ShopError(Exception):
    """Base exception for shop errors"""
    pass


class ValidationError(ShopError):
    """Missing or invalid input"""
    pass


class NotFoundError(ShopError):
    """Product, order, cart item or payment not found"""
    pass


class ConflictError(ShopError):
    """Operation not allowed in the current state"""
    pass


class UnauthorizedError(ShopError):
    """Caller is not allowed to access the resource"""
    pass


class ExternalServiceError(ShopError):
    """Payment provider call failed or timed out"""
    pass
