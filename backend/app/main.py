"""Tarefas API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TarefasError → structured JSON responses
    - OpenAPI document and Swagger UI exist only in the development environment
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - create_app(settings) factory + module-level `app`: uvicorn imports `app.main:app`,
      tests build apps with their own Settings
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import auth, health, tasks
from app.config import Settings, get_settings
from app.infrastructure.database import close_db, init_db
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

API_TITLE = "Minimal API Sample"
API_DESCRIPTION = "Developed by WSM - Sistemas"
API_CONTACT = {"name": "WSM Sistemas", "email": "contato@wsm-sistemas.net.br"}
API_LICENSE = {"name": "MIT", "url": "https://opensource.org/licenses/MIT"}


def _build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        logger.info("Tarefas API started")
        yield
        await close_db()
        logger.info("Tarefas API shutting down")

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application: docs, middleware, routes, error handlers."""
    settings = settings or get_settings()
    dev = settings.is_development

    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version="v1",
        contact=API_CONTACT,
        license_info=API_LICENSE,
        lifespan=_build_lifespan(settings),
        docs_url="/swagger" if dev else None,
        redoc_url=None,
        openapi_url="/swagger/v1/swagger.json" if dev else None,
    )

    if settings.https_redirect:
        app.add_middleware(HTTPSRedirectMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes: explicit registration
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(tasks.router)

    register_error_handlers(app)
    return app


app = create_app()
