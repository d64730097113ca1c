"""
Money Utilities - Decimal handling for prices.

Prices are kept as Decimal in memory and written as JSON numbers.
"""
from decimal import Decimal, InvalidOperation
from typing import Union


def to_decimal(value: Union[str, int, float, Decimal]) -> Decimal:
    """
    Convert a price to Decimal.

    Floats go through their string representation so 9.99 stays 9.99.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a price: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        except (InvalidOperation, TypeError) as e:
            raise ValueError(f"Not a price: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a price: {value!r}")
    return result


def to_json_number(value: Decimal) -> Union[int, float]:
    """Convert Decimal to an int or float for JSON serialization."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)
