"""
Custom column types
"""
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

CENTS = Decimal("0.01")


class FixedPointText(TypeDecorator):
    """Stores a Decimal as fixed-point text ("357.50") and reads it back as Decimal"""
    
    impl = String(32)
    cache_ok = True
    
    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP))
    
    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)
