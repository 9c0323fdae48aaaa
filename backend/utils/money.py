# backend/utils/money.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from utils.errors import ValidationError

CENT = Decimal("0.01")


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        # str() first so floats keep their printed value (0.1 -> 0.1, not 0.1000000000000000055...)
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def round_money(value: Any) -> Decimal:
    """Round any numeric value half-up to cents."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_price(value: Any, field: str) -> Decimal:
    """Parse a required non-negative price, raising ValidationError otherwise."""
    result = _to_decimal(value)
    if result is None or result < 0:
        raise ValidationError(f"{field} must be a non-negative number.")
    return round_money(result)


def parse_price_or_none(value: Any) -> Optional[Decimal]:
    """Lenient variant: missing, malformed or negative input yields None."""
    result = _to_decimal(value)
    if result is None or result < 0:
        return None
    return round_money(result)


def parse_quantity(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a non-negative integer.")
    if isinstance(value, int):
        result = value
    else:
        number = _to_decimal(value)
        if number is None or number != number.to_integral_value():
            raise ValidationError(f"{field} must be a non-negative integer.")
        result = int(number)
    if result < 0:
        raise ValidationError(f"{field} must be a non-negative integer.")
    return result


def whole_number(value: Any) -> Optional[Decimal]:
    """'5', '5.0' and '5e2' are whole numbers; anything else yields None."""
    number = _to_decimal(value)
    if number is None or number != number.to_integral_value():
        return None
    return number
