from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api import router
from app.web import router as web_router
from logging_config import configure_logging
from services.monitor import build_default_engine
from services.scheduler import PeriodicTicker
from settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    engine = build_default_engine()
    ticker = PeriodicTicker(engine.tick, get_settings().tick_interval)
    app.state.ticker = ticker
    ticker.start()
    logger.info("Simulator started", extra={"count": engine.history.capacity})
    try:
        yield
    finally:
        await ticker.stop()
        build_default_engine.cache_clear()
        logger.info("Simulator stopped")


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Aqualiv Salinity Monitor",
        description="Simulated river salinity feed with species advisories and alert settings.",
        version="0.1.0",
        lifespan=lifespan,
    )
    static_dir = Path(__file__).resolve().parent.parent / "static"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
