"""
FastAPI Application

create_app() builds the HTTP service around one UserRepository:
- lifespan startup opens the repository (scan + attach existing partitions)
- lifespan shutdown closes it
- /users routes read it from app.state
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from monthmesh import __version__
from monthmesh.api.handlers import router
from monthmesh.api.middleware import RequestLoggingMiddleware
from monthmesh.core.config import MonthMeshConfig
from monthmesh.storage.repositories import Clock, UserRepository

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[MonthMeshConfig] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Usage:
        app = create_app(config)
        uvicorn.run(app, host=config.server.host, port=config.server.port)
    """
    config = config or MonthMeshConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        result = await UserRepository.open(config, clock)
        if result.is_err():
            logger.error("Startup failed", extra=result.error.to_dict())
            raise result.error

        app.state.repository = result.unwrap()
        try:
            yield
        finally:
            await app.state.repository.close()
            logger.info("Repository closed")

    app = FastAPI(
        title="MonthMesh",
        description="Users stored in monthly DuckDB partitions",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(router)
    return app
