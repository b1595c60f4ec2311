"""Reusable validation utilities for input sanitization."""

import re
from datetime import date
from decimal import Decimal, InvalidOperation

from barstock.utils.datetime import today_local


def validate_price(
    value: Decimal | float | str, max_value: Decimal = Decimal("9999999999.99")
) -> Decimal:
    """
    Validate a selling price or other currency input.

    Args:
        value: Currency value to validate
        max_value: Maximum allowed value (matches NUMERIC(12, 2))

    Returns:
        Validated Decimal quantized to 2 decimal places

    Raises:
        ValueError: If value is negative, exceeds max, or has >2 decimals
    """
    try:
        decimal_value = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid currency format: {value}") from e

    if not decimal_value.is_finite():
        raise ValueError(f"Invalid currency format: {value}")

    if decimal_value < 0:
        raise ValueError("Price cannot be negative")

    if decimal_value > max_value:
        raise ValueError(f"Price exceeds maximum allowed: {max_value}")

    if decimal_value.as_tuple().exponent < -2:
        raise ValueError("Price cannot have more than 2 decimal places")

    return decimal_value.quantize(Decimal("0.01"))


def validate_product_name(value: str, field_name: str = "Product name", max_length: int = 120) -> str:
    """
    Validate a catalog name (letters, digits, spaces and basic punctuation).

    Drinks carry names like "Tusker Lager 500ml" or "Jack Daniel's (tot)".
    """
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    cleaned = " ".join(value.split())

    if len(cleaned) > max_length:
        raise ValueError(f"{field_name} cannot exceed {max_length} characters")

    if not re.match(r"^[\w\s.,'&()/%+\-]+$", cleaned):
        raise ValueError(f"{field_name} contains unsupported characters")

    return cleaned


def validate_no_future_date(value: date, field_name: str = "Date") -> date:
    """
    Ensure date is not in the future.

    Raises:
        ValueError: If date is after today's business date
    """
    if value > today_local():
        raise ValueError(f"{field_name} cannot be in the future")
    return value


def sanitize_html(value: str | None) -> str | None:
    """
    Strip HTML tags from free text.

    The remaining text is stored as typed, unescaped.

    Returns:
        Sanitized text or None if empty
    """
    if not value:
        return None

    cleaned = re.sub(r"<[^>]+>", "", value)

    return cleaned.strip() if cleaned.strip() else None


def validate_email(value: str) -> str:
    """
    Basic email format validation.

    Returns:
        Lowercase, stripped email

    Raises:
        ValueError: If format is invalid
    """
    cleaned = value.strip().lower()

    pattern = r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$"
    if not re.match(pattern, cleaned):
        raise ValueError("Invalid email format")

    return cleaned


def normalize_email(value: str) -> str:
    """Lowercase and strip an email without rejecting it (allow-list lookups)."""
    return value.strip().lower()
