from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from datastore.latest_store import build_default_store
from logging_config import configure_logging
from services.ingestion import build_default_service
from settings import get_settings


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    build_default_service()
    try:
        yield
    finally:
        build_default_service.cache_clear()
        build_default_store.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()
    app = FastAPI(
        title="Energy Meter Telemetry",
        description="Latest-reading store for energy meter devices polled by dashboards.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app

app = create_app()
