"""
Numeric input coercion.

Accepts both "." and "," as the decimal separator so "3,5" and "3.5"
mean the same quantity.
"""

import math
from typing import Union

from .errors import ValidationError

QuantityInput = Union[str, int, float]


def coerce_quantity(value: QuantityInput, field: str = "value") -> float:
    """Convert user input into a float quantity.
    
    Args:
        value: Text typed by the user, or an already numeric value
        field: Field name used in error messages
        
    Returns:
        The parsed quantity (may still be negative, see validate_quantity)
        
    Raises:
        ValidationError: If the input is not a finite number
    """
    if isinstance(value, bool):
        raise ValidationError(f"'{field}' must be a number", {"value": value})
    
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise ValidationError(f"'{field}' is too large", {"value": value})
    else:
        text = str(value).strip().replace(",", ".", 1)
        if not text:
            raise ValidationError(f"'{field}' is required")
        # float() also accepts digit separators such as "1_000"
        if "_" in text:
            raise ValidationError(f"'{field}' must be a number", {"value": value})
        try:
            number = float(text)
        except ValueError:
            raise ValidationError(f"'{field}' must be a number", {"value": value})
    
    if not math.isfinite(number):
        raise ValidationError(f"'{field}' must be a finite number", {"value": value})
    return number


def validate_quantity(number: float, field: str = "value") -> float:
    """Reject negative quantities."""
    if number < 0:
        raise ValidationError(
            "No value can be negative. Please correct it.",
            {"field": field, "value": number}
        )
    return number
