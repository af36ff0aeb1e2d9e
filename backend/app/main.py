"""
Contacts API - FastAPI application.
CORS, API versioning (/api/v1), health check, error handling.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest

from app.api.v1.routes import api_router
from app.core.config import get_settings
from app.services.contact_store import get_contact_store

# Load settings once at import so CORS list and log level are available to middleware
_settings = get_settings()

# Route app logs (including request logs) to stdout
_log_handler = logging.StreamHandler(sys.stdout)
_log_handler.setLevel(_settings.LOG_LEVEL.upper())
_log_handler.setFormatter(logging.Formatter("%(levelname)s:     %(message)s"))
_app_logger = logging.getLogger("app")
_app_logger.setLevel(_settings.LOG_LEVEL.upper())
if not _app_logger.handlers:
    _app_logger.addHandler(_log_handler)
_app_logger.propagate = True

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request (method + path + status)."""

    async def dispatch(self, request: StarletteRequest, call_next: Callable) -> Response:
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Builds the contact store so a bad snapshot fails startup."""
    logger.info("Starting Contacts API (%s)", _settings.ENVIRONMENT)
    logger.info("CORS_ORIGINS=%s", _settings.cors_origins)
    if _settings.ENVIRONMENT == "production":
        _settings.validate_for_production()
    store = get_contact_store()
    logger.info(
        "Contact store ready: %d contact(s), data file=%s",
        len(store),
        _settings.contacts_data_file or "(memory only)",
    )
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Contacts API",
    version="1.0.0",
    description="Contacts with name search, favorites, edit and delete.",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
# CORSMiddleware answers preflight requests itself; disallowed origins get 400
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


# Error handling middleware
@app.middleware("http")
async def catch_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Root and health (outside versioning)
@app.get("/")
def root():
    return {
        "message": "Contacts API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "contacts": "/api/v1/contacts",
            "contact": "/api/v1/contacts/{contact_id}",
            "edit": "/api/v1/contacts/{contact_id}/edit",
            "favorite": "/api/v1/contacts/{contact_id}/favorite",
            "destroy": "/api/v1/contacts/{contact_id}/destroy",
        },
    }


@app.get("/health")
def health():
    return {"status": "healthy"}


# API v1
app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8080"))
    uvicorn.run("app.main:app", host="0.0.0.0", port=port)
