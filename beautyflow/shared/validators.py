"""Shared validation utilities"""

import re
from typing import Optional


def validate_br_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a Brazilian phone number to digits only.

    Args:
        phone: Phone number in any format ("(11) 98765-4321", "+55 11 ...")

    Returns:
        Digits-only number with area code (10 or 11 digits), country code dropped

    Raises:
        ValueError: If the number doesn't have 10 or 11 digits after cleanup
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", str(phone))

    # Handle +55 prefix
    if digits.startswith("55") and len(digits) in (12, 13):
        digits = digits[2:]

    if len(digits) not in (10, 11):
        raise ValueError("Phone number must have 10 or 11 digits including area code")

    return digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_hhmm(value: Optional[str]) -> Optional[str]:
    """Validate a "HH:MM" time of day"""
    if not value:
        return value
    if not re.match(r"^([01]\d|2[0-3]):[0-5]\d$", value.strip()):
        raise ValueError("Time must use the HH:MM format")
    return value.strip()
