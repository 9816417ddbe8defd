"""
Core utility functions for the Property Calculators service.

Contains Decimal coercion and rounding helpers shared by every calculator.
All financial calculations use Python's Decimal for precision.
"""

import logging
from decimal import (
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from functools import wraps

from django.conf import settings

from apps.core.exceptions import InvalidInputError, OutOfRangeError

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')
HUNDRED = Decimal('100')


def to_decimal(value, field: str) -> Decimal:
    """
    Coerce an int, float, str or Decimal to a finite Decimal.

    Args:
        value: Raw numeric value.
        field: Field name used in the error message.

    Returns:
        The value as a Decimal.

    Raises:
        InvalidInputError: If the value is missing, non-numeric or NaN.
        OutOfRangeError: If the value is infinite.
    """
    if value is None or isinstance(value, bool):
        raise InvalidInputError(detail=f"{field} must be a number.")
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInputError(detail=f"{field} must be a number.")
    if result.is_nan():
        raise InvalidInputError(detail=f"{field} must be a number.")
    if result.is_infinite():
        raise OutOfRangeError(detail=f"{field} must be finite.")
    return result


def to_months(value, field: str = 'tenureMonths') -> int:
    """Coerce a tenure to a whole number of months."""
    months = to_decimal(value, field)
    if months != months.to_integral_value():
        raise InvalidInputError(detail=f"{field} must be a whole number.")
    return int(months)


def quantize_amount(amount: Decimal, quantum: Decimal = TWO_PLACES) -> Decimal:
    """Round an amount to the currency's minor unit (ROUND_HALF_UP)."""
    return amount.quantize(quantum, rounding=ROUND_HALF_UP)


def currency_quantum() -> Decimal:
    """The configured minor currency unit, e.g. Decimal('0.01') for paise."""
    return Decimal(str(settings.CALCULATORS['CURRENCY_QUANTUM']))


def percent(ratio: Decimal) -> Decimal:
    """Convert a ratio (0.07) to a percentage rounded to 2 places (7.00)."""
    return quantize_amount(ratio * HUNDRED, TWO_PLACES)


def guard_decimal(func):
    """
    Run a calculator in a 28-digit context and report decimal overflow
    as OutOfRange instead of letting it surface as a server error.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            with localcontext(Context(prec=28)):
                return func(*args, **kwargs)
        except (Overflow, InvalidOperation, DivisionByZero) as exc:
            logger.warning("Decimal overflow in %s: %r", func.__qualname__, exc)
            raise OutOfRangeError(
                detail="Inputs produce figures too large to represent."
            ) from exc
    return wrapper
