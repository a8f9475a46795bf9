"""CORS configuration for the browser client."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todo_api.config import Settings

logger = logging.getLogger(__name__)

# Origins always allowed while developing locally
DEV_ORIGINS = [
    "http://localhost:4200",
    "http://127.0.0.1:4200",
]

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization", "X-Requested-With"]
PREFLIGHT_MAX_AGE = 86400


def allowed_origins(settings: Settings) -> list:
    origins = list(settings.allowed_origins)
    if not settings.is_production:
        origins.extend(origin for origin in DEV_ORIGINS if origin not in origins)
    return origins


def add_cors_middleware(app: FastAPI, settings: Settings) -> None:
    """Add CORS middleware to the FastAPI application."""
    origins = allowed_origins(settings)
    logger.info(f"CORS environment: {settings.environment}, allowed origins: {origins}")

    if "*" in origins:
        # Credentials cannot be combined with a literal wildcard origin
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r".*",
            allow_credentials=True,
            allow_methods=ALLOWED_METHODS,
            allow_headers=ALLOWED_HEADERS,
            max_age=PREFLIGHT_MAX_AGE,
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=ALLOWED_METHODS,
            allow_headers=ALLOWED_HEADERS,
            max_age=PREFLIGHT_MAX_AGE,
        )
