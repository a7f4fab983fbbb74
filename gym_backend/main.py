"""
Main FastAPI application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gym_backend.config import settings
from gym_backend.database.connection import dispose_database, get_engine, init_database
from gym_backend.database.schema import create_schema
from gym_backend.errors import register_error_handlers
from gym_backend.logging_config import RequestLogMiddleware, configure_logging
from gym_backend.routes import backup, clients, health, measurements

logger = logging.getLogger("gym_backend")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if init_database() and settings.DB_AUTO_CREATE:
        await create_schema(get_engine())
        logger.info("Database schema ensured")
    yield
    await dispose_database()


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Gym Backend API",
        description="Multi-tenant gym management: clients, body measurements, PDF reports and backups",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    app.add_middleware(RequestLogMiddleware)

    register_error_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(clients.router, tags=["Clients"])
    app.include_router(measurements.router, tags=["Measurements"])
    app.include_router(backup.router, tags=["Backup"])
    return app


app = create_app()
