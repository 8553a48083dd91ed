import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _split_languages(raw: str) -> tuple[str, ...]:
    return tuple(code.strip() for code in raw.split(",") if code.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Backend
    api_url: str = os.getenv("API_URL", "http://localhost:3001")
    content_api_url: str | None = os.getenv("CONTENT_API_URL")
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "10"))

    # Content cache
    use_real_content_data: bool = os.getenv("USE_REAL_CONTENT_DATA", "false").lower() == "true"
    content_cache_ttl_ms: int = int(os.getenv("CONTENT_CACHE_TTL", "300000"))  # 5 minutes default

    # Languages
    primary_language: str = os.getenv("PRIMARY_LANGUAGE", "ru")
    content_languages: tuple[str, ...] = field(
        default_factory=lambda: _split_languages(os.getenv("CONTENT_LANGUAGES", "ru,he,en"))
    )

    # Operator API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    log_level: str = os.getenv("LOG_LEVEL", "info")

    @property
    def content_base_url(self) -> str:
        """Base URL for /api/content endpoints.

        Returns:
            CONTENT_API_URL when set, otherwise API_URL
        """
        return (self.content_api_url or self.api_url).rstrip("/")

    @property
    def base_url(self) -> str:
        """Primary backend base URL without a trailing slash."""
        return self.api_url.rstrip("/")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.content_cache_ttl_ms <= 0:
            raise ValueError("CONTENT_CACHE_TTL must be a positive number of milliseconds")

        if self.request_timeout <= 0:
            raise ValueError("REQUEST_TIMEOUT must be positive")

        if not self.content_languages:
            raise ValueError("CONTENT_LANGUAGES must list at least one language code")

        if self.primary_language not in self.content_languages:
            raise ValueError(
                f"PRIMARY_LANGUAGE must be one of {list(self.content_languages)}, "
                f"got {self.primary_language!r}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the operator API process."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
    )
