"""Application configuration loaded from environment variables."""
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List
import logging
import os

from dotenv import load_dotenv

# Load .env for local development; real environment variables win
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_ORIGINS = ["http://localhost:4200"]
REQUIRED_ENV_VARS = ["JWT_SECRET", "DATABASE_URL"]


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    """Runtime settings for the todo API."""

    environment: str = "development"
    port: int = 8080
    database_url: str = "sqlite:///./todo_app.db"
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60 * 24
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        origins = os.environ.get("ALLOWED_ORIGINS")
        return cls(
            environment=os.environ.get("ENVIRONMENT", "development"),
            # Serverless platforms inject PORT, local runs use SERVER_PORT
            port=int(os.environ.get("PORT") or os.environ.get("SERVER_PORT") or 8080),
            database_url=os.environ.get("DATABASE_URL", "sqlite:///./todo_app.db"),
            jwt_secret=os.environ.get("JWT_SECRET", "dev-secret-change-me"),
            jwt_algorithm=os.environ.get("JWT_ALGORITHM", "HS256"),
            jwt_expires_minutes=int(os.environ.get("JWT_EXPIRES_MINUTES", 60 * 24)),
            allowed_origins=_split_origins(origins) if origins else list(DEFAULT_ALLOWED_ORIGINS),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings.from_env()


def validate_config() -> List[str]:
    """
    Check that the required environment variables are set.

    Missing variables are logged as a warning outside production and
    returned to the caller; this never raises so the health endpoints
    stay reachable on a half-configured deployment.
    """
    missing = [name for name in REQUIRED_ENV_VARS if not os.environ.get(name)]
    if missing and not get_settings().is_production:
        logger.warning(f"Missing environment variables: {', '.join(missing)}")
        logger.warning("The app may not work correctly. Please check your .env file.")
    return missing
