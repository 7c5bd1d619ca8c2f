"""
Application entry point.
Run with:  uvicorn marketplace.main:app --reload

⚠️  DEVELOPMENT NOTE:
    The store lives in memory and is re-seeded with demo data on every start
    (see marketplace/db/seeder.py). Set SEED_SAMPLE_DATA=false to start empty.
"""
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.core.logging_config import configure_logging
from marketplace.core.config import settings
from marketplace.api.endpoints import health
from marketplace.api.router import build_graphql_router
from marketplace.db.seeder import seed_sample_data
from marketplace.db.store import DataStore
from marketplace.services.event_bus import EventBus

configure_logging()


def create_app(store: Optional[DataStore] = None, event_bus: Optional[EventBus] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Without an explicit *store* a fresh one is created and, unless disabled,
    seeded with demo data.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting FastAPI application setup")
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="GraphQL API for a marketplace of users, listings and orders.",
        debug=settings.DEBUG,
    )

    # ── State ───────────────────────────────────────────────────────────────
    if store is None:
        store = DataStore()
        if settings.SEED_SAMPLE_DATA:
            seed_sample_data(store)
    app.state.store = store
    app.state.event_bus = event_bus or EventBus()

    # ── Middleware ──────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ─────────────────────────────────────────────────────────────
    app.include_router(build_graphql_router(), prefix=settings.GRAPHQL_PATH)
    app.include_router(health.router)

    logger.info("GraphQL endpoint ready at %s", settings.GRAPHQL_PATH)
    return app


app = create_app()
