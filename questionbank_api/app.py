# questionbank_api/app.py
"""
FastAPI application for the question aggregation engine.

Run with:
    uvicorn questionbank_api.app:app --reload
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from questionbank.config import load_config
from questionbank.logging_config import get_logger, log_section, setup_logging
from questionbank.settings import get_settings
from questionbank_api.factories import ServiceContainer, ServiceFactory
from questionbank_api.middleware import setup_middleware
from questionbank_api.repositories import MemoryPersistenceGateway
from questionbank_api.routes import documents_router, health_router

logger = get_logger("api")


def build_services() -> ServiceContainer:
    """Construct the process-wide gateway and services from settings."""
    config = load_config(get_settings())
    return ServiceFactory(config).create_services(MemoryPersistenceGateway())


def create_app(services: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        services: Pre-wired services (tests inject fakes here). If None,
            services are built from environment settings.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)

    if services is None:
        services = build_services()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_section(logger, f"{services.config.app_title} API v{services.config.app_version}")
        yield
        logger.info("Shutting down analysis orchestrator")
        services.orchestrator.shutdown(wait=False)

    app = FastAPI(
        title=f"{services.config.app_title} API",
        version=services.config.app_version,
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_middleware(app)

    app.include_router(health_router, prefix="/api")
    app.include_router(documents_router, prefix="/api")

    return app


app = create_app()
