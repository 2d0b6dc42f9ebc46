"""Tests for the subscription use cases."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from conftest import OTHER_USER_ID, USER_ID
from subtrack.application.services.subscription_service import SubscriptionService
from subtrack.domain.errors import (
    EmptyPatch,
    InternalError,
    InvalidDateRange,
    InvalidIdentifier,
    InvalidUserID,
    NotFoundError,
    ValidationError,
)
from subtrack.domain.models import SubscriptionPatch


def month(year: int, value: int) -> datetime:
    return datetime(year, value, 1, tzinfo=timezone.utc)


class FailingStore:
    """Store double whose every call fails like a lost database connection."""

    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise ConnectionError("database unreachable")

        return _fail


class TestCreate:
    def test_create_normalizes_dates(self, service, make_payload) -> None:
        record = service.create_subscription(make_payload(start_date="03-2024", end_date="08-2024"))

        assert record.id > 0
        assert record.start_date == month(2024, 3)
        assert record.end_date == month(2024, 8)

    def test_create_open_ended(self, service, make_payload) -> None:
        record = service.create_subscription(make_payload())
        assert record.end_date is None
        assert record.is_open_ended()

    def test_negative_price_fails_and_zero_succeeds(self, service, make_payload) -> None:
        with pytest.raises(ValidationError):
            service.create_subscription(make_payload(price=-1))

        record = service.create_subscription(make_payload(price=0))
        assert record.price == 0

    def test_start_after_end_fails(self, service, make_payload) -> None:
        with pytest.raises(InvalidDateRange):
            service.create_subscription(make_payload(start_date="05-2024", end_date="04-2024"))

    def test_store_failure_is_internal_error(self, make_payload) -> None:
        service = SubscriptionService(FailingStore())

        with pytest.raises(InternalError) as exc_info:
            service.create_subscription(make_payload())

        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestReadAndDelete:
    @pytest.mark.parametrize("bad_id", [0, -1, 2**63, 10**20])
    def test_non_positive_id_is_rejected(self, service, bad_id: int) -> None:
        with pytest.raises(InvalidIdentifier):
            service.get_subscription(bad_id)
        with pytest.raises(InvalidIdentifier):
            service.delete_subscription(bad_id)

    def test_read_returns_record(self, service, make_payload) -> None:
        created = service.create_subscription(make_payload())
        assert service.get_subscription(created.id) == created

    def test_delete_then_read_and_delete_are_not_found(self, service, make_payload) -> None:
        created = service.create_subscription(make_payload())

        service.delete_subscription(created.id)

        with pytest.raises(NotFoundError):
            service.get_subscription(created.id)
        with pytest.raises(NotFoundError):
            service.delete_subscription(created.id)

    def test_delete_nonexistent_is_not_found(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.delete_subscription(4242)


class TestPatch:
    def test_empty_patch_fails_regardless_of_identifier(self, service) -> None:
        for subscription_id in (1, 0, -7, 999):
            with pytest.raises(EmptyPatch):
                service.patch_subscription(subscription_id, SubscriptionPatch())

    def test_price_only_patch_keeps_other_fields(self, service, make_payload) -> None:
        created = service.create_subscription(make_payload(start_date="02-2024", end_date="10-2024"))

        updated = service.patch_subscription(created.id, SubscriptionPatch(price=999))

        stored = service.get_subscription(created.id)
        assert updated == stored
        assert stored.price == 999
        assert stored.service_name == created.service_name
        assert stored.user_id == created.user_id
        assert stored.start_date == created.start_date
        assert stored.end_date == created.end_date

    def test_absent_end_date_is_retained(self, service, make_payload) -> None:
        created = service.create_subscription(make_payload(end_date="06-2024"))

        service.patch_subscription(created.id, SubscriptionPatch(service_name="Netflix Premium"))

        assert service.get_subscription(created.id).end_date == month(2024, 6)

    def test_explicit_null_end_date_clears_it(self, service, make_payload) -> None:
        created = service.create_subscription(make_payload(end_date="06-2024"))

        service.patch_subscription(created.id, SubscriptionPatch(end_date=None))

        assert service.get_subscription(created.id).end_date is None

    def test_null_required_field_keeps_stored_value(self, service, make_payload) -> None:
        created = service.create_subscription(make_payload())

        service.patch_subscription(created.id, SubscriptionPatch(service_name=None, price=1))

        stored = service.get_subscription(created.id)
        assert stored.service_name == "Netflix"
        assert stored.price == 1

    def test_merged_range_is_checked(self, service, make_payload) -> None:
        created = service.create_subscription(make_payload(start_date="03-2024", end_date="06-2024"))

        with pytest.raises(InvalidDateRange):
            service.patch_subscription(created.id, SubscriptionPatch(start_date="09-2024"))
        with pytest.raises(InvalidDateRange):
            service.patch_subscription(created.id, SubscriptionPatch(end_date="01-2024"))

    def test_invalid_field_is_rejected_before_lookup(self, service) -> None:
        with pytest.raises(InvalidUserID):
            service.patch_subscription(999, SubscriptionPatch(user_id="nope"))

    def test_invalid_identifier(self, service) -> None:
        with pytest.raises(InvalidIdentifier):
            service.patch_subscription(0, SubscriptionPatch(price=1))

    def test_missing_record_is_not_found(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.patch_subscription(999, SubscriptionPatch(price=1))

    def test_row_removed_between_read_and_write_is_not_found(self, service, persistence, make_payload, monkeypatch) -> None:
        created = service.create_subscription(make_payload())
        monkeypatch.setattr(persistence, "update_subscription", lambda *args, **kwargs: False)

        with pytest.raises(NotFoundError):
            service.patch_subscription(created.id, SubscriptionPatch(price=5))


class TestTotalPrice:
    def test_sums_matching_records(self, service, make_payload) -> None:
        service.create_subscription(make_payload(price=100, start_date="01-2024", end_date="03-2024"))
        service.create_subscription(make_payload(price=200, start_date="06-2024"))
        service.create_subscription(make_payload(price=400, start_date="12-2023"))
        service.create_subscription(make_payload(price=800, service_name="Spotify", start_date="02-2024"))
        service.create_subscription(make_payload(price=1600, user_id=OTHER_USER_ID, start_date="02-2024"))

        assert service.total_price(USER_ID, "Netflix", "01-2024", "12-2024") == 300

    def test_no_matches_is_zero(self, service) -> None:
        assert service.total_price(USER_ID, "Netflix", "01-2024", "12-2024") == 0

    def test_from_after_to_fails(self, service) -> None:
        with pytest.raises(ValidationError):
            service.total_price(USER_ID, "Netflix", "06-2024", "01-2024")

    @pytest.mark.parametrize(("user_id", "service_name"), [("", "Netflix"), (USER_ID, ""), (USER_ID, "  ")])
    def test_user_and_service_required(self, service, user_id: str, service_name: str) -> None:
        with pytest.raises(ValidationError):
            service.total_price(user_id, service_name, "01-2024", "12-2024")

    def test_bad_period_format(self, service) -> None:
        with pytest.raises(ValidationError):
            service.total_price(USER_ID, "Netflix", "2024-01", "12-2024")


class TestList:
    def test_pages_through_records(self, service, make_payload) -> None:
        for index in range(25):
            year, value = divmod(index, 12)
            service.create_subscription(make_payload(start_date=f"{value + 1:02d}-{2020 + year}"))

        first = service.list_subscriptions(USER_ID, page=1, limit=10)
        last = service.list_subscriptions(USER_ID, page=3, limit=10)

        assert len(first.items) == 10
        assert first.pagination.total == 25
        assert first.pagination.total_pages == 3
        assert first.items[0].start_date == month(2022, 1)
        assert len(last.items) == 5
        assert last.items[-1].start_date == month(2020, 1)

    def test_empty_listing(self, service) -> None:
        page = service.list_subscriptions(USER_ID)

        assert page.items == []
        assert page.pagination.total == 0
        assert page.pagination.total_pages == 0

    def test_parameters_are_clamped(self, service, make_payload) -> None:
        service.create_subscription(make_payload())

        page = service.list_subscriptions(USER_ID, page=0, limit=1000)

        assert page.pagination.page == 1
        assert page.pagination.limit == 100
        assert len(page.items) == 1

    def test_user_required(self, service) -> None:
        with pytest.raises(ValidationError):
            service.list_subscriptions("")


def test_out_of_range_identifier_patch_is_rejected(service) -> None:
    with pytest.raises(InvalidIdentifier):
        service.patch_subscription(2**63, SubscriptionPatch(price=1))


def test_huge_page_lists_nothing_instead_of_failing(service, make_payload) -> None:
    service.create_subscription(make_payload())

    page = service.list_subscriptions(USER_ID, page=10**18, limit=10)

    assert page.items == []
    assert page.pagination.total == 1
