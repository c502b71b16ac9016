#!/usr/bin/env python3
"""
Main entry point for the shortlinks service.

Concurrency: The server handles multiple connections simultaneously via async I/O
(FastAPI + asyncpg connection pool). Set WORKERS > 1 for multi-process scaling
across CPU cores (each worker has its own DB pool; set REDIS_URL so rate limit
buckets are shared between workers).

Usage:
    python app.py

Environment variables:
    DATABASE_URL - PostgreSQL connection URL
    DATABASE_CREATE_TABLES - Set to 1 to create the table on startup
    STORAGE_BACKEND - 'postgres' (default) or 'memory'
    REDIS_URL - Redis connection URL for rate limit buckets (optional)
    BASE_URL - Base URL for short links
    DEFAULT_EXPIRY_DAYS - Lifetime of new short links
    CLEANUP_INTERVAL_MINUTES - Minutes between expired link cleanups (0 disables)
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortlinks.common.logging_config import setup_logging
from shortlinks.scheduler import CleanupScheduler
from shortlinks.wiring import build_facade, build_rate_limiter, build_service, build_store
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting shortlinks service...")

    store = build_store(config, logger)
    if config.database_create_tables:
        await store.create_tables()

    service = build_service(config, store, logger)
    app.state.facade = build_facade(config, service, logger)
    app.state.rate_limiter = build_rate_limiter(config, logger)

    cleanup_scheduler = None
    if config.cleanup_interval_minutes > 0:
        cleanup_scheduler = CleanupScheduler(
            service,
            interval_minutes=config.cleanup_interval_minutes,
            logger=logger,
        )
        cleanup_scheduler.start()
    else:
        logger.info("Scheduled cleanup disabled")

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down shortlinks service...")

    if cleanup_scheduler:
        cleanup_scheduler.shutdown()
    if app.state.rate_limiter:
        await app.state.rate_limiter.close()
    await service.close()

    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Shortlinks Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    app = create_app(
        facade_instance=None,  # Will be set in lifespan
        rate_limiter_instance=None,
        config=config,
    )

    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
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
