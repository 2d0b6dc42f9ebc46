from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .subscription import SubscriptionRecord

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps (page - 1) * MAX_LIMIT inside a signed 64-bit offset.
MAX_PAGE = (2**63 - 1) // MAX_LIMIT + 1


@dataclass(slots=True)
class PaginationParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    def normalized(self) -> "PaginationParams":
        """Return a copy with page and limit clamped into the accepted range."""
        page = self.page if self.page >= 1 else DEFAULT_PAGE
        page = min(page, MAX_PAGE)
        if self.limit < 1:
            limit = DEFAULT_LIMIT
        elif self.limit > MAX_LIMIT:
            limit = MAX_LIMIT
        else:
            limit = self.limit
        return PaginationParams(page=page, limit=limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True)
class PaginationMeta:
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, params: PaginationParams, total: int) -> "PaginationMeta":
        total_pages = 0
        if total > 0:
            total_pages = (total + params.limit - 1) // params.limit
        return cls(page=params.page, limit=params.limit, total=total, total_pages=total_pages)


@dataclass(slots=True)
class SubscriptionPage:
    items: List[SubscriptionRecord] = field(default_factory=list)
    pagination: PaginationMeta = field(
        default_factory=lambda: PaginationMeta(DEFAULT_PAGE, DEFAULT_LIMIT, 0, 0)
    )
