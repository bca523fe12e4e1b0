"""
FastAPI Application - changedetection.io AI wrapper

Structure:
    - lifespan.py: startup/shutdown (logging, API key check, client close)
    - dependencies.py: per-process service instances
    - schemas.py: request bodies
    - services/: price extraction, change validation, product matching, selector repair
    - routers/: HTTP endpoints
    - utils/: HTML parsing, request checks, timestamps

Error responses are always {"error": ..., "message"?: ...}:
    400 missing/invalid fields, 404 unknown path, 500 anything unhandled.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from libs.core.config import get_settings
from libs.core.exceptions import MissingFieldsError
from apps.services.change_ai.lifespan import lifespan
from apps.services.change_ai.routers import (
    health_router,
    extract_router,
    validate_router,
    repair_router,
    match_router,
    webhook_router,
)
from apps.services.change_ai.routers.health import SERVICE_NAME

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

ENDPOINTS = {
    "POST /extract-price": "Extract price from HTML using AI",
    "POST /validate-change": "Validate if a change is meaningful",
    "POST /repair-selector": "Generate new selector when old one breaks",
    "POST /match-product": "Match products across URL/ID changes",
    "POST /webhook/changedetection": "Webhook for changedetection.io integration",
    "POST /webhook/price-check": "Simple price check endpoint",
    "GET /health": "Health check endpoint",
}


def create_app() -> FastAPI:
    app = FastAPI(
        title="ChangeDetector AI Wrapper",
        description="AI judgment for changedetection.io: price extraction, change validation, "
                    "selector repair and product matching",
        version=VERSION,
        lifespan=lifespan,
    )

    # =========================================================================
    # Middleware
    # =========================================================================

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(f"Unhandled error: {e!r}")
            message = str(e) if get_settings().is_development else "An error occurred"
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "message": message},
            )

    # Sees every request, including ones that end in a 500
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    # Outermost, so 500s built above still get CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(MissingFieldsError)
    async def missing_fields_handler(request: Request, exc: MissingFieldsError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any(err.get("type") == "json_invalid" for err in errors):
            return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body') or 'body'}: {err.get('msg')}"
            for err in errors
        )
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "message": details},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={"error": "Not found", "path": request.url.path},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(extract_router)
    app.include_router(validate_router)
    app.include_router(repair_router)
    app.include_router(match_router)
    app.include_router(webhook_router)
    app.include_router(health_router)

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Service metadata and endpoint directory."""
        return {
            "service": SERVICE_NAME,
            "version": VERSION,
            "endpoints": ENDPOINTS,
            "docs": "https://github.com/new-usemame/ChangeDetector-With-AI",
        }

    return app


app = create_app()
