"""Main module for the X-Track trading statistics API."""
import logging
import subprocess
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from xtrack.config import Settings, get_settings
from xtrack.db.sessions import create_db_engine, init_db, session_scope
from xtrack.middleware import RequestLoggingMiddleware, configure_logging
from xtrack.routers import (accounts_router, auth_router, ingest_router,
                            statistics_router, users_router)
from xtrack.security import PasswordHasher
from xtrack.services import UserService, register_exception_handlers

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Open the database, create tables and the bootstrap admin; dispose on shutdown."""
    settings: Settings = fastapi_app.state.settings
    configure_logging(settings.LOG_LEVEL)

    owns_engine = fastapi_app.state.engine is None
    if owns_engine:
        fastapi_app.state.engine = create_db_engine(settings.database_url, echo=settings.SQL_ECHO)
    engine: Engine = fastapi_app.state.engine
    logger.info("Database connection established")

    if settings.AUTO_CREATE_TABLES:
        init_db(engine)

    try:
        with session_scope(engine) as session:
            admin = UserService(session, fastapi_app.state.password_hasher).ensure_admin_exists(
                settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD
            )
            if admin is not None:
                logger.info("Created bootstrap admin user %s", admin.username)
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Failed to ensure admin user exists: %s", exc)

    logger.info("X-Track API ready (mode=%s)", settings.RUN_MODE)
    yield

    if owns_engine:
        engine.dispose()


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Overrides the environment-derived settings.
        engine: Pre-built engine (tests); otherwise one is created at startup
            and disposed on shutdown.
    """
    settings = settings or get_settings()
    docs = not settings.is_release

    fastapi_app = FastAPI(
        title="X-Track API",
        description="Trading statistics tracking: users, accounts, ingestion and summaries",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        openapi_url="/openapi.json" if docs else None,
    )
    fastapi_app.state.settings = settings
    fastapi_app.state.engine = engine
    fastapi_app.state.password_hasher = PasswordHasher(settings.PASSWORD_HASH_ROUNDS)

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Authorization", "X-API-Token", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    fastapi_app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(fastapi_app)

    fastapi_app.include_router(auth_router, prefix=API_PREFIX)
    fastapi_app.include_router(users_router, prefix=API_PREFIX)
    fastapi_app.include_router(accounts_router, prefix=API_PREFIX)
    fastapi_app.include_router(ingest_router, prefix=API_PREFIX)
    fastapi_app.include_router(statistics_router, prefix=API_PREFIX)

    @fastapi_app.get("/health", tags=["health"])
    def health():
        """Return health check status."""
        return {"status": "healthy", "message": "X-Track API is running"}

    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn). Use for `xtrack-start`; reloads on change outside release mode."""
    settings = get_settings()
    uvicorn.run("xtrack.main:app", host=settings.HOST, port=settings.PORT, reload=not settings.is_release)


def run_dev():
    """Run the development server with Postgres running via Docker."""
    project_root = Path(__file__).resolve().parent.parent.parent
    try:
        subprocess.run(
            ["docker", "compose", "up", "-d", "postgres"],
            cwd=project_root,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        print("Failed to start Postgres:", e.stderr or e.stdout, file=sys.stderr)
        sys.exit(1)
    settings = get_settings()
    uvicorn.run("xtrack.main:app", host=settings.HOST, port=settings.PORT, reload=True)
