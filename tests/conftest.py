from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from subtrack.application.services.subscription_service import SubscriptionService
from subtrack.core.app_factory import create_application
from subtrack.core.config import Settings
from subtrack.domain.models import SubscriptionPayload
from subtrack.infrastructure.persistence.sqlite import SQLitePersistence

USER_ID = "70601fee-2bf1-4721-ae6f-7636e79a0cbb"
OTHER_USER_ID = "0b8f7b3e-52a4-4d1c-9a0e-3f5c2d8e1a77"


@pytest.fixture
def persistence(tmp_path):
    store = SQLitePersistence(tmp_path / "subscriptions.db")
    yield store
    store.close()


@pytest.fixture
def service(persistence):
    return SubscriptionService(persistence)


@pytest.fixture
def make_payload():
    def _make(**overrides) -> SubscriptionPayload:
        values = {
            "service_name": "Netflix",
            "price": 400,
            "user_id": USER_ID,
            "start_date": "01-2024",
            "end_date": None,
        }
        values.update(overrides)
        return SubscriptionPayload(**values)

    return _make


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("LOG_LEVEL", "warn")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
    return Settings()


@pytest.fixture
def client(settings):
    app = create_application(settings)
    with TestClient(app) as test_client:
        yield test_client
