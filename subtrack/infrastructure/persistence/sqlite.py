import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ...domain.errors import InternalError
from ...domain.models import SubscriptionRecord
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway."""

    def __init__(self, path: Union[Path, str]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise InternalError(f"Unable to open database {path}") from exc
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        with self._guard("initialize schema"), self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS subscriptions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    service_name TEXT NOT NULL,
                    price INTEGER NOT NULL CHECK (price >= 0),
                    user_id TEXT NOT NULL,
                    start_date TEXT NOT NULL,
                    end_date TEXT
                );

                CREATE INDEX IF NOT EXISTS idx_subscriptions_user_start
                    ON subscriptions(user_id, start_date DESC);

                CREATE INDEX IF NOT EXISTS idx_subscriptions_user_service
                    ON subscriptions(user_id, service_name);
                """
            )

    def close(self) -> None:
        self._conn.close()

    # SubscriptionRepository API --------------------------------------------
    def create_subscription(
        self,
        service_name: str,
        price: int,
        user_id: str,
        start_date: datetime,
        end_date: Optional[datetime],
    ) -> SubscriptionRecord:
        with self._guard("create subscription"), self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO subscriptions (service_name, price, user_id, start_date, end_date)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    service_name,
                    price,
                    user_id,
                    self._format_datetime(start_date),
                    self._format_datetime(end_date) if end_date else None,
                ),
            )
            subscription_id = cur.lastrowid
            cur = self._conn.execute("SELECT * FROM subscriptions WHERE id = ?", (subscription_id,))
            row = cur.fetchone()
        if not row:
            raise InternalError("Failed to persist subscription.")
        return self._row_to_subscription(row)

    def get_subscription(self, subscription_id: int) -> Optional[SubscriptionRecord]:
        with self._guard("read subscription"), self._lock:
            cur = self._conn.execute("SELECT * FROM subscriptions WHERE id = ?", (subscription_id,))
            row = cur.fetchone()
        return self._row_to_subscription(row) if row else None

    def update_subscription(
        self,
        subscription_id: int,
        service_name: str,
        price: int,
        user_id: str,
        start_date: datetime,
        end_date: Optional[datetime],
    ) -> bool:
        with self._guard("update subscription"), self._lock, self._conn:
            cur = self._conn.execute(
                """
                UPDATE subscriptions
                SET service_name = ?, price = ?, user_id = ?, start_date = ?, end_date = ?
                WHERE id = ?
                """,
                (
                    service_name,
                    price,
                    user_id,
                    self._format_datetime(start_date),
                    self._format_datetime(end_date) if end_date else None,
                    subscription_id,
                ),
            )
            return cur.rowcount > 0

    def delete_subscription(self, subscription_id: int) -> bool:
        with self._guard("delete subscription"), self._lock, self._conn:
            cur = self._conn.execute("DELETE FROM subscriptions WHERE id = ?", (subscription_id,))
            return cur.rowcount > 0

    # SubscriptionQueryRepository API ---------------------------------------
    def sum_subscription_prices(
        self,
        user_id: str,
        service_name: str,
        date_from: datetime,
        date_to: datetime,
    ) -> int:
        with self._guard("sum subscription prices"), self._lock:
            cur = self._conn.execute(
                """
                SELECT COALESCE(SUM(price), 0) AS total FROM subscriptions
                WHERE user_id = ? AND service_name = ? AND start_date >= ?
                    AND (end_date IS NULL OR end_date <= ?)
                """,
                (
                    user_id,
                    service_name,
                    self._format_datetime(date_from),
                    self._format_datetime(date_to),
                ),
            )
            row = cur.fetchone()
        return int(row["total"]) if row else 0

    def list_subscriptions(self, user_id: str, limit: int, offset: int) -> List[SubscriptionRecord]:
        with self._guard("list subscriptions"), self._lock:
            cur = self._conn.execute(
                """
                SELECT * FROM subscriptions
                WHERE user_id = ?
                ORDER BY start_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (user_id, limit, offset),
            )
            rows = cur.fetchall()
        return [self._row_to_subscription(row) for row in rows]

    def count_subscriptions(self, user_id: str) -> int:
        with self._guard("count subscriptions"), self._lock:
            cur = self._conn.execute(
                "SELECT COUNT(*) AS total FROM subscriptions WHERE user_id = ?", (user_id,)
            )
            row = cur.fetchone()
        return int(row["total"]) if row else 0

    # Helpers ----------------------------------------------------------------
    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as exc:
            logger.exception("SQLite failure during %s", operation)
            raise InternalError(f"Failed to {operation}.") from exc

    @staticmethod
    def _format_datetime(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_subscription(self, row: sqlite3.Row) -> SubscriptionRecord:
        return SubscriptionRecord(
            id=row["id"],
            service_name=row["service_name"],
            price=row["price"],
            user_id=row["user_id"],
            start_date=self._parse_datetime(row["start_date"]),
            end_date=self._parse_datetime(row["end_date"]) if row["end_date"] else None,
        )
