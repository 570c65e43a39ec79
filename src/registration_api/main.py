#!/usr/bin/env python3
"""Registration API - registration management web service"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from registration_api.config import config
from registration_api.errors import RegistrationError
from registration_api.logging_config import get_logger, setup_logging
from registration_api.models.database import RecordStore
from registration_api.routers.health import health
from registration_api.routers.registration import router as registration_router
from registration_api.services.query_builder import SearchMode

# Configure logging (INFO -> stdout, WARNING/ERROR -> stderr)
setup_logging()
logger = get_logger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return "Invalid request: " + "; ".join(parts)


def register_exception_handlers(app: FastAPI):
    """Map errors to JSON bodies that always carry a ``message`` key"""

    @app.exception_handler(RegistrationError)
    async def registration_error_handler(request: Request, exc: RegistrationError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": message, "detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(store: Optional[RecordStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        store: Record store to serve from. When omitted one is created from
            ``DATABASE_URL`` at startup.

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        record_store = store or RecordStore(
            config["database_url"], echo=config["database_echo"]
        )
        record_store.init()
        app.state.store = record_store
        try:
            yield
        finally:
            record_store.close()

    app = FastAPI(
        title="Registration API",
        description="Accepts registrations and lists, filters, exports and deletes them",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.search_mode = SearchMode.parse(config["filter_search_mode"])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config["cors_origins"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health)
    app.include_router(registration_router)

    return app


app = create_app()


if __name__ == "__main__":
    port = config["port"]
    logger.info(f"Starting Registration API on 0.0.0.0:{port}")
    logger.info("Registration endpoints available at /api")
    logger.info("Health check available at /health")

    try:
        uvicorn.run(app, host="0.0.0.0", port=port, log_level=config["log_level"].lower())
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise
