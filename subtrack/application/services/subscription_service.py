from __future__ import annotations

import logging

from ...domain.dates import parse_month_year
from ...domain.errors import (
    InternalError,
    InvalidIdentifier,
    NotFoundError,
    SubscriptionError,
    ValidationError,
)
from ...domain.models import (
    UNSET,
    PaginationMeta,
    PaginationParams,
    SubscriptionPage,
    SubscriptionPatch,
    SubscriptionPayload,
    SubscriptionRecord,
)
from ...domain.ports.persistence import PersistenceGateway
from ...domain.validation import MAX_INTEGER, check_date_range, validate_patch, validate_payload

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Coordinates validation, period normalization and storage of subscription records.

    The service keeps no state of its own; the persistence gateway is the only
    shared resource. Patching reads and then writes without a transaction, so
    two concurrent patches of the same record may overwrite each other.
    """

    def __init__(self, persistence: PersistenceGateway) -> None:
        self._persistence = persistence

    # CRUD operations ------------------------------------------------------
    def create_subscription(self, payload: SubscriptionPayload) -> SubscriptionRecord:
        validate_payload(payload)
        start_date = parse_month_year(payload.start_date)
        end_date = parse_month_year(payload.end_date) if payload.end_date is not None else None

        record = self._call_store(
            self._persistence.create_subscription,
            service_name=payload.service_name,
            price=payload.price,
            user_id=payload.user_id,
            start_date=start_date,
            end_date=end_date,
        )
        logger.info(
            "Subscription %s (%s) created for user %s", record.id, record.service_name, record.user_id
        )
        return record

    def get_subscription(self, subscription_id: int) -> SubscriptionRecord:
        self._require_identifier(subscription_id)
        record = self._call_store(self._persistence.get_subscription, subscription_id)
        if record is None:
            raise NotFoundError(f"Subscription {subscription_id} not found.")
        return record

    def patch_subscription(self, subscription_id: int, patch: SubscriptionPatch) -> SubscriptionRecord:
        validate_patch(patch)
        self._require_identifier(subscription_id)

        current = self.get_subscription(subscription_id)
        merged = self._merge(current, patch)
        check_date_range(merged.start_date, merged.end_date)

        updated = self._call_store(
            self._persistence.update_subscription,
            subscription_id,
            service_name=merged.service_name,
            price=merged.price,
            user_id=merged.user_id,
            start_date=merged.start_date,
            end_date=merged.end_date,
        )
        if not updated:
            raise NotFoundError(f"Subscription {subscription_id} not found.")
        logger.info("Subscription %s patched (%s)", subscription_id, ", ".join(patch.provided_fields()))
        return merged

    def delete_subscription(self, subscription_id: int) -> None:
        self._require_identifier(subscription_id)
        deleted = self._call_store(self._persistence.delete_subscription, subscription_id)
        if not deleted:
            raise NotFoundError(f"Subscription {subscription_id} not found.")
        logger.info("Subscription %s deleted", subscription_id)

    # Queries --------------------------------------------------------------
    def total_price(self, user_id: str, service_name: str, date_from: str, date_to: str) -> int:
        """Sum prices of a user's records for a service that lie inside the period.

        A record matches when it starts on or after ``date_from`` and either
        ends on or before ``date_to`` or has no end date.
        """
        if not (user_id or "").strip() or not (service_name or "").strip():
            raise ValidationError("user_id and service are required")
        period_start = parse_month_year(date_from)
        period_end = parse_month_year(date_to)
        if period_start > period_end:
            raise ValidationError("date_from must not be later than date_to")

        total = self._call_store(
            self._persistence.sum_subscription_prices,
            user_id,
            service_name,
            period_start,
            period_end,
        )
        return total or 0

    def list_subscriptions(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
    ) -> SubscriptionPage:
        if not (user_id or "").strip():
            raise ValidationError("user_id is required")
        params = PaginationParams(page=page, limit=limit).normalized()

        items = self._call_store(
            self._persistence.list_subscriptions, user_id, params.limit, params.offset
        )
        total = self._call_store(self._persistence.count_subscriptions, user_id)
        return SubscriptionPage(items=items, pagination=PaginationMeta.build(params, total))

    # Internal helpers -----------------------------------------------------
    @staticmethod
    def _require_identifier(subscription_id: int) -> None:
        if (
            isinstance(subscription_id, bool)
            or not isinstance(subscription_id, int)
            or not 0 < subscription_id <= MAX_INTEGER
        ):
            raise InvalidIdentifier(f"id must be an integer between 1 and {MAX_INTEGER}")

    @staticmethod
    def _merge(current: SubscriptionRecord, patch: SubscriptionPatch) -> SubscriptionRecord:
        start_date = current.start_date
        if _pick(patch.start_date, None) is not None:
            start_date = parse_month_year(patch.start_date)

        end_date = current.end_date
        if patch.end_date is None:
            end_date = None
        elif patch.end_date is not UNSET:
            end_date = parse_month_year(patch.end_date)

        return SubscriptionRecord(
            id=current.id,
            service_name=_pick(patch.service_name, current.service_name),
            price=_pick(patch.price, current.price),
            user_id=_pick(patch.user_id, current.user_id),
            start_date=start_date,
            end_date=end_date,
        )

    @staticmethod
    def _call_store(operation, *args, **kwargs):
        try:
            return operation(*args, **kwargs)
        except SubscriptionError:
            raise
        except Exception as exc:
            logger.exception("Store call %s failed", getattr(operation, "__name__", operation))
            raise InternalError("storage failure") from exc


def _pick(supplied, current):
    # Only end_date can be cleared; None on any other field keeps the stored value.
    if supplied is UNSET or supplied is None:
        return current
    return supplied
