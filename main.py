from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from api.router import router as monitor_router
from logging_config import configure_logging
from services.monitoring_service import build_default_service


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    try:
        yield
    finally:
        if build_default_service.cache_info().currsize:
            build_default_service().shutdown()
        build_default_service.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Coffee Processing Monitor",
        description="Decision support for bean drying and roasting.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(monitor_router)
    return app


app = create_app()
