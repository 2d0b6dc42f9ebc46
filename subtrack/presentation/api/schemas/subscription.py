"""Pydantic schemas for subscription API endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, StrictInt

from ....domain.models import SubscriptionPatch, SubscriptionPayload


class SubscriptionCreatePayload(BaseModel):
    """Request schema for creating a subscription record."""

    service_name: str
    price: StrictInt
    user_id: str
    start_date: str = Field(..., description="First month, MM-YYYY")
    end_date: Optional[str] = Field(default=None, description="Last month, MM-YYYY; omit while active")

    def to_domain(self) -> SubscriptionPayload:
        return SubscriptionPayload(
            service_name=self.service_name,
            price=self.price,
            user_id=self.user_id,
            start_date=self.start_date,
            end_date=self.end_date,
        )


class SubscriptionPatchPayload(BaseModel):
    """Request schema for a partial update; only keys sent in the body are applied."""

    service_name: Optional[str] = None
    price: Optional[StrictInt] = None
    user_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = Field(default=None, description="MM-YYYY, or null to reopen")

    def to_domain(self) -> SubscriptionPatch:
        return SubscriptionPatch(**{name: getattr(self, name) for name in self.model_fields_set})


class SubscriptionResponse(BaseModel):
    """Response schema for a stored subscription record."""

    id: int
    service_name: str
    price: int
    user_id: str
    start_date: str
    end_date: Optional[str]
    is_active: bool


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class SubscriptionListResponse(BaseModel):
    items: List[SubscriptionResponse]
    pagination: PaginationResponse


class TotalPriceResponse(BaseModel):
    total: int
