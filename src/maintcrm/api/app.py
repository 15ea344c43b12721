"""FastAPI application initialization and configuration."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from maintcrm.config import Config, PathResolver
from maintcrm.core.logging_config import get_logger, setup_logging
from maintcrm.services.backup import BackupManager
from maintcrm.store import Database
from maintcrm.api.routers import (
    status_router,
    stats_router,
    customers_router,
    service_records_router,
    reminders_router,
    export_router,
    backup_router,
)
from maintcrm.config.constants import (
    APP_VERSION,
    DEFAULT_HOST,
    PORT_SCAN_RANGE,
    ENV_PORT,
    ENV_HOST,
    ERROR_INVALID_PORT,
    ERROR_PORT_IN_USE,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup and shutdown lifecycle."""
    # --- startup ---
    config: Config = app.state.config
    setup_logging(config.logging)
    _logger = get_logger(__name__)
    _logger.info(f"maintcrm {APP_VERSION} using {app.state.database!r}")

    yield

    # --- shutdown ---
    if app.state.owns_database:
        app.state.database.dispose()


def create_app(
    *,
    database: Database | None = None,
    config: Config | None = None,
    backup_manager: BackupManager | None = None,
) -> FastAPI:
    """
    Build the API application around one store.

    Args:
        database: Store to serve. Opened from the configured path when omitted
            and disposed on shutdown.
        config: Loaded configuration. ``Config.load()`` when omitted.
        backup_manager: Backup manager for ``database``. Built from ``config``
            when omitted.

    Returns:
        Configured FastAPI application
    """
    config = config or Config.load()
    owns_database = database is None
    if database is None:
        database = Database(PathResolver.get_database_path(config), echo=config.database.echo)
    if backup_manager is None:
        backup_manager = BackupManager.from_config(database, config)

    app = FastAPI(
        title="maintcrm API",
        description="Customer, service history and reminder records for maintenance contractors",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.database = database
    app.state.backup_manager = backup_manager
    app.state.owns_database = owns_database

    # CORS middleware - origins from config, defaults to localhost-only
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(status_router, prefix="/api", tags=["status"])
    app.include_router(stats_router, prefix="/api", tags=["statistics"])
    app.include_router(customers_router, prefix="/api", tags=["customers"])
    app.include_router(service_records_router, prefix="/api", tags=["service-records"])
    app.include_router(reminders_router, prefix="/api", tags=["reminders"])
    app.include_router(export_router, prefix="/api", tags=["export"])
    app.include_router(backup_router, prefix="/api/backup", tags=["backup"])

    return app


def main():
    """Run the server with configurable host and port."""
    import uvicorn
    import socket
    import sys

    prog = Path(sys.argv[0]).name
    argv = set(sys.argv[1:])
    if prog.startswith("maintcrm-web"):
        if "--version" in argv:
            from maintcrm import __version__

            print(__version__)
            return
        if "-h" in argv or "--help" in argv:
            print("Usage: maintcrm-web")
            print()
            print("Environment variables:")
            print(f"  {ENV_HOST}=<host>   (default: {DEFAULT_HOST})")
            print(f"  {ENV_PORT}=<port>   (default: auto-scan {PORT_SCAN_RANGE[0]}-{PORT_SCAN_RANGE[1]})")
            print()
            return

    # Get host from environment or use default
    host = os.getenv(ENV_HOST, DEFAULT_HOST)

    # Get port from environment or scan for available port
    env_port = os.getenv(ENV_PORT)
    if env_port:
        try:
            port = int(env_port)
            if not (1 <= port <= 65535):
                print(ERROR_INVALID_PORT.format(port=port))
                return
        except ValueError:
            print(ERROR_INVALID_PORT.format(port=env_port))
            return
    else:
        # Scan for available port in range
        port, max_port = PORT_SCAN_RANGE

        while port <= max_port:
            try:
                with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                    s.bind((host, port))
                break
            except OSError:
                port += 1

        if port > max_port:
            print(ERROR_PORT_IN_USE.format(
                start=PORT_SCAN_RANGE[0],
                end=PORT_SCAN_RANGE[1],
            ))
            return

    print("Starting maintcrm server...")
    print(f"  URL: http://localhost:{port}")
    print(f"  Host: {host}")
    print(f"  Port: {port}")
    print()
    print("Press Ctrl+C to stop")

    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()
