"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables so that the service can be configured without
any extra settings library.  Defaults are provided for all fields.  In
a production deployment you should override these via environment
variables or a dedicated configuration service.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple


# Version assumed when a client does not send the ``api-version`` header.
# Kept as a named constant so it can be overridden through
# ``DEFAULT_API_VERSION`` and tested on its own.
DEFAULT_API_VERSION = "1.0"

SUPPORTED_API_VERSIONS = "1.0,1.1,2.0"

# Retirement date announced for the deprecated version (RFC 7231 date).
DEFAULT_SUNSET = "Sat, 31 Dec 2023 23:59:59 GMT"

DEFAULT_SUCCESSOR_LINK = '</api/v2>; rel="successor-version"'


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return float(value)


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Resource API")
    api_version: str = os.getenv("API_VERSION", "2.0")
    debug: bool = _env_bool("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Version negotiation.  ``supported_api_versions`` is a comma‑separated
    # list; the oldest entry is announced as deprecated.
    default_api_version: str = os.getenv("DEFAULT_API_VERSION", DEFAULT_API_VERSION)
    supported_api_versions: str = os.getenv("SUPPORTED_API_VERSIONS", SUPPORTED_API_VERSIONS)
    api_sunset: str = os.getenv("API_SUNSET", DEFAULT_SUNSET)
    api_successor_link: str = os.getenv("API_SUCCESSOR_LINK", DEFAULT_SUCCESSOR_LINK)

    # Page cache.  When ``cache_check_period`` is not set, the sweep runs
    # every 20% of the default TTL.
    cache_ttl_seconds: float = float(os.getenv("CACHE_TTL_SECONDS", "60"))
    cache_check_period: Optional[float] = _env_optional_float("CACHE_CHECK_PERIOD")

    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))

    # 100 requests per client every 15 minutes, as limits strings understand it.
    rate_limit: str = os.getenv("RATE_LIMIT", "100/15minutes")
    rate_limit_enabled: bool = _env_bool("RATE_LIMIT_ENABLED", "true")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    @property
    def supported_versions(self) -> Tuple[str, ...]:
        """Supported API versions as a tuple, in configured order."""
        return tuple(v.strip() for v in self.supported_api_versions.split(",") if v.strip())

    @property
    def sweep_interval(self) -> float:
        if self.cache_check_period is not None:
            return self.cache_check_period
        return self.cache_ttl_seconds * 0.2

    @property
    def allowed_origins(self) -> list:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables should
# be set before importing this module.
settings = Settings()
