# src/client_sqlite/api/app.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from client_sqlite.config import load_settings
from client_sqlite.logging import configure_logging, get_logger
from client_sqlite.procedures import ProcedureRegistry, register_sqlite_procedures

from .routes import router

_LOG = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Responsible for:
    - loading settings
    - configuring logging
    - building the procedure registry and registering the SQLite procedures
    """
    settings = load_settings()
    configure_logging(settings.log_level)

    registry = ProcedureRegistry()
    register_sqlite_procedures(
        registry,
        default_db_path=settings.db_path,
        timeout_s=settings.timeout_s,
    )

    # Store on app.state for DI
    app.state.settings = settings
    app.state.registry = registry

    _LOG.info("Startup complete (default db: %s).", settings.db_path)
    try:
        yield
    finally:
        _LOG.info("Shutdown complete.")


app = FastAPI(
    title="client-sqlite",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(router)
