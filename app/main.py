from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from services.weather import build_default_weather_service
from settings import get_settings


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    service = build_default_weather_service()
    try:
        yield
    finally:
        await service.aclose()
        build_default_weather_service.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Ecowitt Weather Proxy",
        description="Proxies Ecowitt station data and keeps a rolling 48-hour trend history.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()


def run() -> None:
    """Serve the proxy with uvicorn on ``SERVER_HOST``/``SERVER_PORT``."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
