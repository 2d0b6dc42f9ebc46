from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from ..models import SubscriptionRecord


class SubscriptionRepository(Protocol):
    """Abstract storage for subscription records."""

    def create_subscription(
        self,
        service_name: str,
        price: int,
        user_id: str,
        start_date: datetime,
        end_date: Optional[datetime],
    ) -> SubscriptionRecord:
        ...

    def get_subscription(self, subscription_id: int) -> Optional[SubscriptionRecord]:
        ...

    def update_subscription(
        self,
        subscription_id: int,
        service_name: str,
        price: int,
        user_id: str,
        start_date: datetime,
        end_date: Optional[datetime],
    ) -> bool:
        """Overwrite every column of the row; False when no row matched."""
        ...

    def delete_subscription(self, subscription_id: int) -> bool:
        """Remove the row; False when no row matched."""
        ...


class SubscriptionQueryRepository(Protocol):
    """Per-user read queries over subscription records."""

    def sum_subscription_prices(
        self,
        user_id: str,
        service_name: str,
        date_from: datetime,
        date_to: datetime,
    ) -> int:
        ...

    def list_subscriptions(self, user_id: str, limit: int, offset: int) -> List[SubscriptionRecord]:
        ...

    def count_subscriptions(self, user_id: str) -> int:
        ...


class PersistenceGateway(
    SubscriptionRepository,
    SubscriptionQueryRepository,
    Protocol,
):
    """Composite gateway combining every persistence concern used by the app."""

    def close(self) -> None:
        ...
