"""Field rules shared by create payloads and patches."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .dates import parse_month_year
from .errors import (
    EmptyPatch,
    InvalidDateRange,
    InvalidPrice,
    InvalidServiceName,
    InvalidUserID,
    MissingField,
)
from .models import UNSET, SubscriptionPatch, SubscriptionPayload

USER_ID_LENGTH = 36

# Largest value a SQLite INTEGER column holds.
MAX_INTEGER = 2**63 - 1

_REQUIRED_FIELDS = ("service_name", "price", "user_id", "start_date")


def validate_payload(payload: SubscriptionPayload) -> None:
    """Check a full create payload; every required field must be present."""
    for name in _REQUIRED_FIELDS:
        if getattr(payload, name) is None:
            raise MissingField(f"{name} is required")
    _check_fields(
        service_name=payload.service_name,
        price=payload.price,
        user_id=payload.user_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )


def validate_patch(patch: SubscriptionPatch) -> None:
    """Check the fields a patch supplies. Absent fields are not inspected."""
    if patch.is_empty():
        raise EmptyPatch("no data to update")
    _check_fields(
        service_name=patch.service_name,
        price=patch.price,
        user_id=patch.user_id,
        start_date=patch.start_date,
        end_date=patch.end_date,
    )


def check_date_range(start: datetime, end: Optional[datetime]) -> None:
    if end is not None and start > end:
        raise InvalidDateRange("end_date must not be earlier than start_date")


def _check_fields(*, service_name, price, user_id, start_date, end_date) -> None:
    if _present(price):
        if isinstance(price, bool) or not isinstance(price, int) or not 0 <= price <= MAX_INTEGER:
            raise InvalidPrice(f"price must be an integer between 0 and {MAX_INTEGER}")
    if _present(service_name):
        if not isinstance(service_name, str) or not service_name.strip():
            raise InvalidServiceName("service name is empty")
    if _present(user_id):
        if not isinstance(user_id, str) or len(user_id) != USER_ID_LENGTH:
            raise InvalidUserID(f"user_id must be {USER_ID_LENGTH} characters long")

    start = parse_month_year(start_date) if _present(start_date) else None
    end = parse_month_year(end_date) if _present(end_date) else None
    if start is not None:
        check_date_range(start, end)


def _present(value: object) -> bool:
    return value is not UNSET and value is not None
