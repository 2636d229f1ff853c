"""
Reseller pricing rules.

Two steps turn a catalog product into the amount a reseller pays:

1. group pricing: resellers in group 1 or 2 pay that group's price, anyone
   else pays the base price;
2. pro-rata discount: a product bought part-way through the billing month
   is discounted in proportion to the part of the month already gone.

Everything here is pure; callers pass "today" explicitly.
"""
import calendar
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from app.core.config import CURRENCY, CURRENCY_QUANTUM, MAX_PRO_RATA_DISCOUNT
from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_HUNDRED = Decimal(100)


@dataclass(frozen=True)
class ProRataPrice:
    discount_percentage: int
    final_price: Decimal


@dataclass(frozen=True)
class PriceQuote:
    original_price: Decimal
    discount_percentage: int
    final_price: Decimal
    currency: str = CURRENCY


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 19.99 do not carry binary noise
    return Decimal(str(value))


def pro_rata_discount_percentage(reference_date: date, max_discount: int = MAX_PRO_RATA_DISCOUNT) -> int:
    """
    Share of the billing month already elapsed on reference_date, as a whole percentage.

    Day d of an n-day month gives round(100 * d / n), capped at max_discount so the
    last days of a month still leave something to pay.
    """
    days_in_month = calendar.monthrange(reference_date.year, reference_date.month)[1]
    elapsed = Decimal(reference_date.day) / Decimal(days_in_month)
    percentage = int((elapsed * _HUNDRED).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return max(0, min(percentage, max_discount))


def calculate_pro_rata_price(base_price, reference_date: date, *, max_discount: int = MAX_PRO_RATA_DISCOUNT) -> ProRataPrice:
    """
    Apply the pro-rata discount for reference_date to base_price.

    final_price = base_price * (1 - discount/100), rounded half-up to cents.
    """
    price = _to_decimal(base_price)
    if price < 0:
        raise ValidationError(f"Base price must not be negative, got {price}")

    discount = pro_rata_discount_percentage(reference_date, max_discount=max_discount)
    final_price = (price * (_HUNDRED - discount) / _HUNDRED).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)
    return ProRataPrice(discount_percentage=discount, final_price=final_price)


def get_price_by_reseller_group(product, reseller_group: Optional[int]) -> Decimal:
    if reseller_group == 1:
        return _to_decimal(product.group1_price)
    if reseller_group == 2:
        return _to_decimal(product.group2_price)
    return _to_decimal(product.base_price)


def quote_product(product, reseller_group: Optional[int], reference_date: date) -> PriceQuote:
    original_price = get_price_by_reseller_group(product, reseller_group)
    pro_rata = calculate_pro_rata_price(original_price, reference_date)
    logger.debug(
        f"Quoted product ID: {product.id} for group {reseller_group} on {reference_date}: "
        f"{original_price} -> {pro_rata.final_price} ({pro_rata.discount_percentage}% off)"
    )
    return PriceQuote(
        original_price=original_price.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP),
        discount_percentage=pro_rata.discount_percentage,
        final_price=pro_rata.final_price,
    )
