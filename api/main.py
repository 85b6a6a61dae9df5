"""
api/main.py — punkt wejścia FastAPI.

Lifespan:
  - Tworzy BackwardChainer z budżetem z konfiguracji
  - Aplikacja nie trzyma bazy: program przychodzi w każdym żądaniu
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from adapters.program_parser.recursive_descent import RecursiveDescentParser
from adapters.reasoner.backward_chainer import BackwardChainer
from api.routers import program, query
from api.schemas import HealthResponse
from config import Settings

logger = logging.getLogger("hornlog")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # Adaptery bezstanowe — tworzone raz
    app.state.program_parser = RecursiveDescentParser()
    app.state.reasoner = BackwardChainer.from_settings(settings)

    logger.info(
        "Hornlog API ready (max_depth=%d, max_nodes=%d, timeout_ms=%d).",
        settings.max_depth, settings.max_nodes, settings.timeout_ms,
    )
    yield

    logger.info("Shutting down.")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Routers
    app.include_router(query.router)
    app.include_router(program.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse(status="ok", version=settings.app_version)

    return app


app = create_app()
