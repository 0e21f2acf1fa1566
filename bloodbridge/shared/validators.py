"""Shared validation utilities"""

import re
from typing import Any, Optional

BLOOD_GROUPS = ("O+", "O-", "A+", "A-", "B+", "B-", "AB+", "AB-")


def clean_text(value: Any) -> Any:
    """
    Trim a string value, turning blank strings into None.

    Non-string values are returned unchanged, so applying this twice is a no-op.
    """
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize an Indian mobile number to its 10-digit form.

    Args:
        phone: Phone number string in various formats (+91 98480 22338, 098480-22338, ...)

    Returns:
        The 10 national digits, or None for blank input

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone or not phone.strip():
        return None

    # Remove all non-digit characters
    digits = re.sub(r"\D", "", phone)

    # Handle +91 / 0 prefixes
    if digits.startswith("91") and len(digits) == 12:
        digits = digits[2:]
    elif digits.startswith("0") and len(digits) == 11:
        digits = digits[1:]

    if len(digits) != 10:
        raise ValueError("Phone number must be 10 digits")

    return digits


def normalize_blood_group(value: Optional[str]) -> Optional[str]:
    """
    Canonicalize a blood group ("o+", " AB - ", "B POS") to one of BLOOD_GROUPS.

    Raises:
        ValueError: If the value is not a known group
    """
    if value is None or not str(value).strip():
        return None
    s = re.sub(r"\s+", "", str(value).upper())
    s = s.replace("+VE", "+").replace("-VE", "-").replace("POS", "+").replace("NEG", "-")
    if s not in BLOOD_GROUPS:
        raise ValueError(f"Blood group must be one of {', '.join(BLOOD_GROUPS)}")
    return s
