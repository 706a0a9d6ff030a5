from __future__ import annotations

from client_sqlite.config import load_settings
from client_sqlite.logging import configure_logging, get_logger


def main() -> int:
    """
    Programmatic entrypoint (also the `client-sqlite` console script).

    Dev alternative:
      uvicorn client_sqlite.api.app:app --reload
    """
    settings = load_settings()
    configure_logging(settings.log_level)
    log = get_logger(__name__)

    log.info("Starting client-sqlite on %s:%d (default db: %s)", settings.host, settings.port, settings.db_path)

    import uvicorn

    uvicorn.run(
        "client_sqlite.api.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level if settings.log_level != "warn" else "warning",
        reload=False,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
