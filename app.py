#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: requests are served with async I/O (FastAPI + asyncpg connection
pool). WORKERS > 1 starts that many uvicorn processes through the
create_application factory; code uniqueness and owner-scoped deletes are
enforced by PostgreSQL, so workers share no state.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - PostgreSQL connection URL
    CREATE_TABLES - Set to 'true' to create tables on startup
    STORAGE_BACKEND - 'postgres' (default) or 'memory'
    JWT_SECRET - Secret used to sign bearer tokens
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import DEFAULT_JWT_SECRET, Config, load_config
from shortener.database import InMemoryShortenerDB, PostgresShortenerDB
from shortener.identity import IdentityService
from shortener.security import TokenService
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import setup_logging
from web_app import create_app
from web_app.app_factory import attach_services


def build_database(config: Config, logger):
    if config.storage_backend == "memory":
        logger.warning("Using in-memory storage; data is lost on restart")
        return InMemoryShortenerDB(logger=logger)

    logger.info(f"Connecting to PostgreSQL at {config.database_url.rsplit('@', 1)[-1]}")
    return PostgresShortenerDB(
        db_config=config.database_url,
        pool_max_size=config.db_pool_max_size,
        logger=logger,
    )


def build_services(config: Config, db, logger):
    """Wire the code registry and identity services over one storage instance."""
    generator = ShortCodeGenerator(default_length=config.short_code_length)
    service = URLShortenerService(
        db=db,
        short_code_generator=generator,
        logger=logger,
        max_collision_retries=config.max_collision_retries,
    )
    tokens = TokenService(
        secret=config.jwt_secret,
        algorithm=config.jwt_algorithm,
        ttl_minutes=config.token_ttl_minutes,
        logger=logger,
    )
    identity = IdentityService(db=db, tokens=tokens, logger=logger)
    return service, identity


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener service...")

    db = build_database(config, logger)
    if config.create_tables:
        await db.ensure_tables()

    service, identity = build_services(config, db, logger)
    attach_services(app, service, identity)

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")
    await service.close()
    logger.info("Service stopped")


def build_app(config: Config, logger) -> FastAPI:
    """Create the FastAPI app; services are wired in by the lifespan."""
    app = create_app(
        service_instance=None,  # Set in lifespan
        identity_instance=None,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan
    return app


def create_application() -> FastAPI:
    """App factory used by each uvicorn worker process when WORKERS > 1."""
    config = load_config()
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )
    return build_app(config, logger)


def check_settings(config: Config, logger) -> bool:
    """Log unsafe settings; returns False when the service must not start."""
    if config.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is the built-in development key; tokens can be forged. Set JWT_SECRET.")

    if config.workers > 1 and config.storage_backend == "memory":
        logger.error("In-memory storage cannot be shared between workers; set WORKERS=1")
        return False

    return True


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.safe_dump()}")

    if not check_settings(config, logger):
        sys.exit(1)

    if config.workers > 1:
        # uvicorn needs an import string to spawn worker processes
        logger.info(f"Starting {config.workers} workers on {config.host}:{config.port}")
        uvicorn.run(
            "app:create_application",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
            access_log=True,
        )
        return

    app = build_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
