"""Subscription domain models: persisted records, create payloads and patches."""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from datetime import datetime
from typing import List, Optional, Union


class _Unset(enum.Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset.UNSET
"""Marker for a patch field that was not supplied at all."""


@dataclass(slots=True)
class SubscriptionRecord:
    """
    Persisted subscription entry.

    Attributes:
        id: Store-assigned identifier, never reused after deletion
        service_name: Name of the subscribed service
        price: Monthly price in the smallest currency unit
        user_id: Owning user identifier (UUID string)
        start_date: First month of the subscription, first instant in UTC
        end_date: Last month of the subscription, or None when still active
    """

    id: int
    service_name: str
    price: int
    user_id: str
    start_date: datetime
    end_date: Optional[datetime] = None

    def is_open_ended(self) -> bool:
        return self.end_date is None

    def __repr__(self) -> str:
        return f"<SubscriptionRecord id={self.id} user_id={self.user_id} service={self.service_name!r}>"


@dataclass(slots=True)
class SubscriptionPayload:
    """Full create input with periods still in MM-YYYY form."""

    service_name: Optional[str]
    price: Optional[int]
    user_id: Optional[str]
    start_date: Optional[str]
    end_date: Optional[str] = None


@dataclass(slots=True)
class SubscriptionPatch:
    """Partial update input.

    Every field is either ``UNSET`` (absent, keep the stored value) or a new
    value. ``end_date=None`` is an explicit request to clear the end date;
    ``None`` on any other field counts as absent.
    """

    CLEARABLE_FIELDS = ("end_date",)

    service_name: Union[str, None, _Unset] = UNSET
    price: Union[int, None, _Unset] = UNSET
    user_id: Union[str, None, _Unset] = UNSET
    start_date: Union[str, None, _Unset] = UNSET
    end_date: Union[str, None, _Unset] = UNSET

    def provided_fields(self) -> List[str]:
        provided = []
        for item in fields(self):
            value = getattr(self, item.name)
            if value is UNSET:
                continue
            if value is None and item.name not in self.CLEARABLE_FIELDS:
                continue
            provided.append(item.name)
        return provided

    def is_empty(self) -> bool:
        return not self.provided_fields()
