"""Shared validation utilities"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union


def to_calendar_date(value: Optional[Union[date, datetime, str]]) -> Optional[date]:
    """
    Normalize a date-like value to calendar-day precision.

    Args:
        value: date, datetime (time-of-day is dropped) or ISO string
            ("2025-03-01" or "2025-03-01T10:30:00")

    Returns:
        The calendar date, or None when value is empty

    Raises:
        ValueError: If the string is not an ISO date/datetime
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise ValueError(f"Invalid date format: {value!r}")

    raise ValueError(f"Unsupported date value: {value!r}")


def validate_percentage(value: Optional[Decimal]) -> Decimal:
    """
    Validate a discount percentage (0-100).

    Missing values count as 0 so an unset promotion means "no discount".
    """
    if value is None:
        return Decimal("0")

    if value < 0 or value > 100:
        raise ValueError("Percentage must be between 0 and 100")

    return value


def validate_non_negative(value: Optional[Decimal], field_name: str = "value") -> Optional[Decimal]:
    """Reject negative amounts and capacities"""
    if value is not None and value < 0:
        raise ValueError(f"{field_name} must not be negative")
    return value


def parse_decimal(raw: Any) -> Optional[Decimal]:
    """Parse an admin setting value ("1500", "12.5") into a Decimal, None if unparsable"""
    if raw is None:
        return None
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value
