from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..application.services.subscription_service import SubscriptionService
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.routers import subscriptions as subscriptions_router
from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Subscription Tracker", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(subscriptions_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        persistence = SQLitePersistence(settings.database_path)
        subscription_service = SubscriptionService(persistence)

        container = ApplicationContainer(
            settings=settings,
            persistence=persistence,
            subscription_service=subscription_service,
        )

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Subscription store ready at %s", settings.database_path)

        try:
            yield
        finally:
            persistence.close()

    return lifespan
