"""
Application factory.

``create_app`` wires an explicit document store and rate limiter into a
FastAPI instance. Importing this module has no side effects; the served
instance lives in ``patient_api.main``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from patient_api.api.middleware import add_body_limit, add_rate_limit, add_security_headers
from patient_api.api.routes import router
from patient_api.config import Settings, settings
from patient_api.models.store import DocumentStore
from patient_api.services.errors import PatientAPIError
from patient_api.services.rate_limit import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PatientAPIError)
    async def patient_api_error(request: Request, exc: PatientAPIError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def malformed_body(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400, content={"error": "Request body must be a JSON object"}
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    config: Settings = settings,
    store: DocumentStore | None = None,
    limiter: SlidingWindowRateLimiter | None = None,
) -> FastAPI:
    """Build the application around an explicit store and rate limiter."""
    if store is None:
        store = DocumentStore.from_url(config.DATABASE_URL)
    if limiter is None:
        limiter = SlidingWindowRateLimiter(
            config.RATE_LIMIT_REQUESTS, config.RATE_LIMIT_WINDOW_SECONDS
        )

    app = FastAPI(
        title="FHIR Patient API",
        description="Create and read simplified FHIR R4 Patient resources.",
        version="1.0.0",
    )
    app.state.store = store

    # Last added runs first: headers wrap rate limiting, which wraps the body check.
    add_body_limit(app, config.MAX_BODY_BYTES)
    add_rate_limit(app, limiter)
    add_security_headers(app)
    register_exception_handlers(app)

    app.include_router(router)

    @app.on_event("startup")
    def on_startup():
        store.create_all()
        logger.info("Patient API started (%s)", config.ENVIRONMENT)

    @app.on_event("shutdown")
    def on_shutdown():
        store.dispose()

    return app
