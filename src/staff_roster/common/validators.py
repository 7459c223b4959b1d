from __future__ import annotations

import re
from datetime import date, datetime, time
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError
from .datetime_utils import parse_hhmm, parse_iso_date, parse_iso_datetime

E = TypeVar("E", bound=Enum)

_HHMM = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_email(value, field_name: str = "email") -> str:
    email = require_non_empty(value, field_name).lower()
    if not _EMAIL.match(email):
        raise ValidationError(f"{field_name} must be a valid email address")
    return email


def require_hhmm(value: str, field_name: str) -> time:
    if not isinstance(value, str) or not _HHMM.match(value.strip()):
        raise ValidationError(f"{field_name} must be HH:MM")
    return parse_hhmm(value.strip().zfill(5))


def require_date(value: str, field_name: str) -> date:
    try:
        return parse_iso_date(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def require_datetime(value: str, field_name: str) -> datetime:
    try:
        return parse_iso_datetime(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an ISO-8601 timestamp")


def require_positive_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive integer")
    if number < 1 or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be a positive integer")
    return number


def require_enum(value, enum_cls: Type[E], field_name: str) -> E:
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def optional_enum(value, enum_cls: Type[E], field_name: str) -> Optional[E]:
    if value is None or value == "":
        return None
    return require_enum(value, enum_cls, field_name)


def optional_bool(value, field_name: str) -> Optional[bool]:
    """Accept JSON booleans, or "true"/"false" (any case) from query strings."""

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"true", "1"}:
        return True
    if text in {"false", "0"}:
        return False
    raise ValidationError(f"{field_name} must be true or false")
