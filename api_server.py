from __future__ import annotations  # FastAPI server for the interview service

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.auth import router as auth_router
from api.context import router as context_router
from api.reports import router as reports_router
from api.routes import router as sessions_router
from api.speech import router as speech_router
from app_context.context import AppContext
from config import settings
from storage.migrate import migrate

logger = logging.getLogger(__name__)

ContextFactory = Callable[[], AppContext]


def _default_context() -> AppContext:
    return AppContext.from_settings(settings)


def create_app(context_factory: Optional[ContextFactory] = None) -> FastAPI:
    """Build the API; the application context lives for the lifespan of the app."""

    factory = context_factory or _default_context

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        migrate(settings.DB_PATH)
        context = factory()
        app.state.context = context
        logger.info("Application context ready")
        try:
            yield
        finally:
            context.close()

    app = FastAPI(title="FairHire Interview API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(auth_router)
    app.include_router(sessions_router)
    app.include_router(speech_router)
    app.include_router(reports_router)
    app.include_router(context_router)

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
