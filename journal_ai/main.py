from __future__ import annotations

import logging

from fastapi import FastAPI

from journal_ai.config import Settings, get_settings
from journal_ai.core.gateway import GenerationProvider
from journal_ai.dependencies import (
    build_generation_service,
    build_provider,
    register_exception_handlers,
)
from journal_ai.internal import admin
from journal_ai.routers import ai
from journal_ai.store import ContentStore, InMemoryContentStore


def create_app(
    settings: Settings | None = None,
    provider: GenerationProvider | None = None,
    store: ContentStore | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="journal-ai",
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
    )

    app.state.generation_service = build_generation_service(
        provider or build_provider(settings),
        settings,
    )
    app.state.content_store = store or InMemoryContentStore()

    register_exception_handlers(app)

    app.include_router(ai.router)
    app.include_router(admin.router)

    return app


app = create_app()
