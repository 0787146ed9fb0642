"""Task Organizer API — FastAPI entry point.

Registers middleware, exception handlers, routers, and lifecycle hooks.
Interactive docs are served outside production only.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware

from api.errors import register_exception_handlers
from api.middleware import RequestLoggingMiddleware
from core.config import Settings, settings
from core.database import build_engine, build_session_factory, close_db, init_db
from core.logging_setup import setup_logging
from verticals.tasks.router import RESOURCE_ROOT, router as tasks_router

logger = logging.getLogger(__name__)

APP_NAME = "Gerenciador de Tarefas API"


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown hooks."""
    config: Settings = app.state.settings
    if config.auto_create_tables:
        await init_db(app.state.engine)

    logger.info("%s started (%s)", APP_NAME, config.environment)
    yield
    logger.info("%s shutting down", APP_NAME)
    await close_db(app.state.engine)


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

def create_app(config: Settings | None = None) -> FastAPI:
    """Build the application for the given settings (process settings by default).

    The database engine and session factory are created from the same
    settings, so every part of the app talks to `config.database_url`.
    """
    config = config or settings
    setup_logging(config.log_level)

    docs_enabled = not config.is_production
    app = FastAPI(
        title=APP_NAME,
        description="Uma API simples para gerenciar tarefas.",
        version=config.version,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.settings = config
    app.state.engine = build_engine(config)
    app.state.session_factory = build_session_factory(app.state.engine)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)

    if config.https_redirect:
        app.add_middleware(HTTPSRedirectMiddleware)

    register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------

    app.include_router(tasks_router)

    # -----------------------------------------------------------------------
    # Health & root
    # -----------------------------------------------------------------------

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": config.version}

    @app.get("/")
    async def root():
        return {
            "name": APP_NAME,
            "version": config.version,
            "docs": app.docs_url,
            "resources": [RESOURCE_ROOT],
        }

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("api.main:app", host=settings.host, port=settings.port)
