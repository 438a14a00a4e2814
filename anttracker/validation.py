"""Field checks shared by entry forms, editors and search menus."""
from __future__ import annotations

import re

DESCRIPTION_MAX = 30
PRODUCT_NAME_MAX = 30
RELEASE_ID_MAX = 8
CONTACT_NAME_MAX = 30
EMAIL_MIN, EMAIL_MAX = 5, 24
DEPARTMENT_MAX = 12
PRIORITIES = tuple(str(n) for n in range(1, 6))

_DIGITS = re.compile(r"^\d+$")


def _length_between(value: str, low: int, high: int) -> bool:
    return low <= len(value) <= high


def is_description(value: str) -> bool:
    return _length_between(value, 1, DESCRIPTION_MAX)


def is_product_name(value: str) -> bool:
    return _length_between(value, 1, PRODUCT_NAME_MAX)


def is_release_id(value: str) -> bool:
    return _length_between(value, 1, RELEASE_ID_MAX)


def is_contact_name(value: str) -> bool:
    return _length_between(value, 1, CONTACT_NAME_MAX)


def is_email(value: str) -> bool:
    return "@" in value and _length_between(value, EMAIL_MIN, EMAIL_MAX)


def is_phone(value: str) -> bool:
    """10 digits, or 11 digits with a leading 1."""
    if not _DIGITS.match(value):
        return False
    return len(value) == 10 or (len(value) == 11 and value.startswith("1"))


def is_department(value: str) -> bool:
    return _length_between(value, 1, DEPARTMENT_MAX)


def parse_days(value: str) -> int | None:
    """Non-negative whole number of days, or None."""
    if not _DIGITS.match(value or ""):
        return None
    return int(value)
