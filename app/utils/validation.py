"""
Validation utilities

Used by the request schemas (field validators) before any use case runs.
All helpers raise ValueError so pydantic reports them as field errors.
"""
import re
from decimal import Decimal, InvalidOperation

from app.config import get_settings
from app.domain.transaction import MIN_AMOUNT, MAX_AMOUNT


def normalize_decimal_input(value: str) -> str:
    """
    Нормализовать ввод суммы: заменить запятую на точку

    Example:
        >>> normalize_decimal_input("100,50")
        "100.50"
    """
    return value.replace(",", ".").strip()


def validate_decimal_amount(value: str, max_decimal_places: int = 2) -> tuple[bool, str | None]:
    """
    Валидация денежной суммы

    Returns:
        (is_valid, error_message)

    Example:
        >>> validate_decimal_amount("100.50")
        (True, None)
        >>> validate_decimal_amount("100.505")
        (False, "Amount must have at most 2 decimal places")
    """
    normalized = normalize_decimal_input(value)

    try:
        Decimal(normalized)
    except (InvalidOperation, ValueError):
        return False, "Amount must be a number"

    if not re.match(r"^-?\d+(\.\d+)?$", normalized):
        return False, "Amount must be a plain decimal number"

    pattern = rf"^-?\d+(\.\d{{1,{max_decimal_places}}})?$"
    if not re.match(pattern, normalized):
        return False, f"Amount must have at most {max_decimal_places} decimal places"

    return True, None


def parse_money(
    value,
    minimum: Decimal = MIN_AMOUNT,
    maximum: Decimal = MAX_AMOUNT,
    max_decimal_places: int = 2,
) -> Decimal:
    """
    Parse a client-supplied amount into an exact Decimal.

    Accepts str / int / float / Decimal. Floats go through their shortest repr
    so that JSON 0.1 becomes Decimal("0.1"), and 1e16 becomes "10000000000000000".

    Raises:
        ValueError: not a number, too many decimals, below minimum or above maximum
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    if isinstance(value, float):
        value = format(Decimal(repr(value)), "f")
    is_valid, error = validate_decimal_amount(str(value), max_decimal_places)
    if not is_valid:
        raise ValueError(error)

    amount = Decimal(normalize_decimal_input(str(value)))
    if amount < minimum:
        raise ValueError(f"Amount must be at least {minimum}")
    if amount > maximum:
        raise ValueError(f"Amount must be at most {maximum}")
    return amount


def validate_password(value: str) -> str:
    min_length = get_settings().PASSWORD_MIN_LENGTH
    if not value or not value.strip():
        raise ValueError("Password is required")
    if len(value) < min_length:
        raise ValueError(f"Password must be at least {min_length} characters")
    return value


def validate_month(value: int) -> int:
    if not 1 <= value <= 12:
        raise ValueError("Month must be between 1 and 12")
    return value


def validate_year(value: int) -> int:
    settings = get_settings()
    if not settings.YEAR_MIN <= value <= settings.YEAR_MAX:
        raise ValueError(f"Year must be between {settings.YEAR_MIN} and {settings.YEAR_MAX}")
    return value
