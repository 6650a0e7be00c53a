"""
Pricing Engine - bulk discount computation

Two discount models exist; exactly one is active per process, selected by
``settings.DISCOUNT_MODEL``:

- ``percentage``: 28.5% off the order when quantity >= threshold
- ``flat``: a fixed amount off every unit when quantity >= threshold

All arithmetic is done with Decimal and amounts are quantized to 2 places.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from app.config import settings
from app.exceptions import ValidationError

CENTS = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

Number = Union[int, float, str, Decimal]


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without binary float noise"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PriceBreakdown:
    """Result of a price computation"""
    original_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    has_discount: bool
    discount_percentage: Decimal
    discount_per_unit: Decimal

    def to_dict(self) -> dict:
        return {
            "original_amount": self.original_amount,
            "discount_amount": self.discount_amount,
            "final_amount": self.final_amount,
            "has_discount": self.has_discount,
            "discount_percentage": self.discount_percentage,
            "discount_per_unit": self.discount_per_unit
        }


class PercentageDiscount:
    """Percentage off the whole order"""

    name = "percentage"

    def __init__(self, percentage: Number):
        self.percentage = to_decimal(percentage)
        if not ZERO <= self.percentage <= HUNDRED:
            raise ValueError(f"Discount percentage must be within 0..100, got {percentage}")

    def apply(self, quantity: int, original: Decimal) -> PriceBreakdown:
        discount = quantize(original * self.percentage / HUNDRED)
        return PriceBreakdown(
            original_amount=original,
            discount_amount=discount,
            final_amount=original - discount,
            has_discount=True,
            discount_percentage=self.percentage,
            discount_per_unit=ZERO
        )


class FlatPerUnitDiscount:
    """Fixed amount off each unit"""

    name = "flat"

    def __init__(self, per_unit: Number):
        self.per_unit = to_decimal(per_unit)
        if self.per_unit < 0:
            raise ValueError(f"Flat discount must be non-negative, got {per_unit}")

    def apply(self, quantity: int, original: Decimal) -> PriceBreakdown:
        # Capped so that final = original - discount holds when the floor kicks in
        discount = min(quantize(self.per_unit * quantity), original)
        if original > 0:
            percentage = quantize(discount / original * HUNDRED)
        else:
            percentage = ZERO
        return PriceBreakdown(
            original_amount=original,
            discount_amount=discount,
            final_amount=max(ZERO, original - discount),
            has_discount=True,
            discount_percentage=percentage,
            discount_per_unit=self.per_unit
        )


def discount_model_from_settings(name: Optional[str] = None):
    """Build the configured discount model"""
    name = (name or settings.DISCOUNT_MODEL).strip().lower()
    if name == PercentageDiscount.name:
        return PercentageDiscount(settings.BULK_DISCOUNT_PERCENTAGE)
    if name == FlatPerUnitDiscount.name:
        return FlatPerUnitDiscount(settings.FLAT_DISCOUNT_PER_UNIT)
    raise ValueError(f"Unknown discount model: {name}")


def compute_price(
    quantity: int,
    unit_price: Number,
    model=None,
    threshold: Optional[int] = None
) -> PriceBreakdown:
    """
    Compute the order amount with the bulk discount applied

    Args:
        quantity: Number of units (positive)
        unit_price: Price per unit (non-negative)
        model: Discount model; defaults to the configured one
        threshold: Minimum quantity for the bulk discount

    Returns:
        PriceBreakdown

    Raises:
        ValidationError: If quantity or unit price is invalid
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(f"Quantity must be a positive integer, got {quantity!r}")

    price = to_decimal(unit_price)
    if not price.is_finite() or price < 0:
        raise ValidationError(f"Unit price must be non-negative, got {unit_price!r}")

    if threshold is None:
        threshold = settings.BULK_DISCOUNT_THRESHOLD

    original = quantize(price * quantity)

    if quantity < threshold:
        return PriceBreakdown(
            original_amount=original,
            discount_amount=quantize(ZERO),
            final_amount=original,
            has_discount=False,
            discount_percentage=ZERO,
            discount_per_unit=ZERO
        )

    if model is None:
        model = discount_model_from_settings()
    return model.apply(quantity, original)
