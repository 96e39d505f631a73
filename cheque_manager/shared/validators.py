"""Shared validation utilities"""

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Trimmed email address

    Raises:
        ValueError: If email is blank or malformed
    """
    if email is None:
        return email

    email = email.strip()
    if not email:
        raise ValueError("Email is required")
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")
    return email


def parse_month(value: str) -> tuple[int, int]:
    """
    Parse a YYYY-MM string into (year, month).

    Raises:
        ValueError: If the value is not a real calendar month
    """
    if not value or not MONTH_PATTERN.match(value):
        raise ValueError("Invalid month format. Use YYYY-MM format")
    year, month = (int(part) for part in value.split("-"))
    if not 1 <= month <= 12:
        raise ValueError("Invalid month format. Use YYYY-MM format")
    return year, month
