from functools import lru_cache
import logging
import sys
from urllib.parse import urlparse

from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or invalid."""
    pass


class Settings(BaseSettings):
    """Application configuration pulled from environment variables or .env file."""

    # Page root that breadcrumb and subcontainer links are built under
    containers_page: str = "/containers/"

    # Number of samples requested per container page
    num_stats: int = 60

    # Monitoring agent REST API
    cadvisor_url: str = "http://localhost:8080"
    request_timeout: float = 10.0

    # Machine info rarely changes, so it is cached between page renders
    cache_ttl_seconds: int = 60

    # Serve a built-in demo hierarchy instead of talking to the agent
    enable_mock_data: bool = False

    log_level: str = "INFO"

    # API server bind address
    host: str = "127.0.0.1"
    port: int = 8000

    # CORS settings
    # Comma-separated list of allowed origins, or "*" for all (not recommended)
    cors_allowed_origins: str = "http://localhost:5173,http://localhost:3000"

    # Environment (development, staging, production)
    environment: str = "development"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="allow")

    def validate_required(self) -> list[str]:
        """Validate required configuration settings.

        Returns a list of error messages for invalid settings.
        """
        errors: list[str] = []
        warnings: list[str] = []

        if not self.containers_page.startswith("/") or not self.containers_page.endswith("/"):
            errors.append("CONTAINERS_PAGE must start and end with '/'")

        if self.num_stats <= 0:
            errors.append("NUM_STATS must be a positive integer")

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {', '.join(sorted(LOG_LEVELS))}")

        if not self.enable_mock_data:
            parsed = urlparse(self.cadvisor_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(f"CADVISOR_URL is not a valid http(s) URL: {self.cadvisor_url!r}")

        if self.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be greater than zero")

        is_production = self.environment.lower() == "production"
        if is_production:
            if self.cors_allowed_origins == "*":
                errors.append(
                    "CORS_ALLOWED_ORIGINS is set to '*' (allow all) in production. "
                    "Set specific allowed origins."
                )
            if self.enable_mock_data:
                warnings.append("ENABLE_MOCK_DATA is True in production, pages show demo data")

        for warning in warnings:
            logger.warning(f"Config warning: {warning}")

        return errors


def validate_config_on_startup(settings: Settings) -> None:
    """Validate configuration and exit if critical settings are missing."""
    errors = settings.validate_required()

    if errors:
        logger.error("Configuration validation failed:")
        for error in errors:
            logger.error(f"  - {error}")
        print("\nConfiguration Error:", file=sys.stderr)
        print("The following required settings are missing or invalid:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)
        print("\nPlease check your .env file or environment variables.", file=sys.stderr)
        raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

    logger.info("Configuration validated successfully")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
