"""Shared validation utilities"""

import re
from datetime import date
from typing import Optional

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def validate_hhmm(value: Optional[str]) -> Optional[str]:
    """
    Validate a 24h "HH:MM" time string.

    Raises:
        ValueError: If the value is not a valid time of day
    """
    if value is None:
        return value
    value = value.strip()
    if not TIME_PATTERN.match(value):
        raise ValueError("La hora debe tener formato HH:MM")
    return value


def hhmm_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_hhmm(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse YYYY-MM-DD (a trailing time component is ignored)"""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def to_e164(phone: Optional[str], default_country_code: str = "1") -> Optional[str]:
    """
    Normalize a phone number to E.164 for SMS delivery.

    Numbers already starting with + keep their country code; bare 10-digit
    numbers get the default country code. Returns None when the input
    cannot be a valid number.
    """
    if not phone:
        return None

    digits = re.sub(r"\D", "", phone)
    if phone.strip().startswith("+"):
        return f"+{digits}" if 8 <= len(digits) <= 15 else None

    if len(digits) == 10:
        return f"+{default_country_code}{digits}"
    if len(digits) == 11 and digits.startswith(default_country_code):
        return f"+{digits}"
    return None
