"""API router for subscription records."""

from __future__ import annotations

import logging
import re

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ....application.services.subscription_service import SubscriptionService
from ....core.dependencies import get_subscription_service
from ....domain.dates import format_month_year
from ....domain.errors import ConflictError, NotFoundError, ValidationError
from ....domain.models import SubscriptionPage, SubscriptionRecord
from ....domain.models.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, MAX_PAGE
from ..schemas.subscription import (
    PaginationResponse,
    SubscriptionCreatePayload,
    SubscriptionListResponse,
    SubscriptionPatchPayload,
    SubscriptionResponse,
    TotalPriceResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/subscriptions", tags=["Subscriptions"])

_UUID_RE = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}")

MAX_BODY_BYTES = 1 << 20


async def limit_body_size(request: Request) -> None:
    body = await request.body()
    if len(body) > MAX_BODY_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"request body exceeds {MAX_BODY_BYTES} bytes",
        )


@router.post(
    "",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(limit_body_size)],
)
async def create_subscription(
    payload: SubscriptionCreatePayload,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    try:
        record = service.create_subscription(payload.to_domain())
    except Exception as exc:
        raise _to_http_error(exc) from exc
    return _serialize_subscription(record)


@router.get("", response_model=SubscriptionListResponse)
async def list_subscriptions(
    user_id: str = Query(...),
    page: int = Query(default=DEFAULT_PAGE, ge=1, le=MAX_PAGE),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionListResponse:
    _require_uuid(user_id)
    try:
        result = service.list_subscriptions(user_id, page=page, limit=limit)
    except Exception as exc:
        raise _to_http_error(exc) from exc
    return _serialize_page(result)


@router.get("/total", response_model=TotalPriceResponse)
async def total_price_by_period(
    user_id: str = Query(...),
    service_name: str = Query(..., alias="service"),
    date_from: str = Query(..., description="MM-YYYY"),
    date_to: str = Query(..., description="MM-YYYY"),
    service: SubscriptionService = Depends(get_subscription_service),
) -> TotalPriceResponse:
    _require_uuid(user_id)
    try:
        total = service.total_price(user_id, service_name, date_from, date_to)
    except Exception as exc:
        raise _to_http_error(exc) from exc
    return TotalPriceResponse(total=total)


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
async def get_subscription(
    subscription_id: int,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    try:
        record = service.get_subscription(subscription_id)
    except Exception as exc:
        raise _to_http_error(exc) from exc
    return _serialize_subscription(record)


@router.patch(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    dependencies=[Depends(limit_body_size)],
)
async def patch_subscription(
    subscription_id: int,
    payload: SubscriptionPatchPayload,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    try:
        record = service.patch_subscription(subscription_id, payload.to_domain())
    except Exception as exc:
        raise _to_http_error(exc) from exc
    return _serialize_subscription(record)


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription(
    subscription_id: int,
    service: SubscriptionService = Depends(get_subscription_service),
) -> None:
    try:
        service.delete_subscription(subscription_id)
    except Exception as exc:
        raise _to_http_error(exc) from exc


def _require_uuid(user_id: str) -> None:
    if not _UUID_RE.fullmatch(user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="invalid user_id format: must be a valid UUID",
        )


def _to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    logger.exception("Unhandled error in subscription endpoint", exc_info=exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="internal error")


def _serialize_subscription(record: SubscriptionRecord) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=record.id,
        service_name=record.service_name,
        price=record.price,
        user_id=record.user_id,
        start_date=format_month_year(record.start_date),
        end_date=format_month_year(record.end_date) if record.end_date else None,
        is_active=record.is_open_ended(),
    )


def _serialize_page(result: SubscriptionPage) -> SubscriptionListResponse:
    meta = result.pagination
    return SubscriptionListResponse(
        items=[_serialize_subscription(item) for item in result.items],
        pagination=PaginationResponse(
            page=meta.page,
            limit=meta.limit,
            total=meta.total,
            total_pages=meta.total_pages,
        ),
    )
