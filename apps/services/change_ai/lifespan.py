"""
Application Lifespan Handler

Startup: configure logging, verify the OpenRouter key, build the services.
A missing key raises ConfigurationError here and the server never starts.

Shutdown: close the outbound HTTP client.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from libs.core.config import get_settings
from libs.core.logging_config import setup_logging
from apps.services.change_ai.dependencies import initialize_all, shutdown_all

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        log_to_file=settings.log_to_file,
        service_name="change_ai",
    )

    try:
        initialize_all()
    except Exception as e:
        logger.error(f"Failed to initialize dependencies: {e}")
        raise

    logger.info(f"Server started on port {settings.port}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"OpenRouter model: {settings.openrouter_model}")

    yield

    logger.info("Shutting down gracefully")
    await shutdown_all()
