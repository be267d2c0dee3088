import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Google Places
    google_places_api_key: str | None = os.getenv("GOOGLE_PLACES_API_KEY")
    places_base_url: str = os.getenv("PLACES_BASE_URL", "https://maps.googleapis.com/maps/api")
    places_timeout: float = float(os.getenv("PLACES_TIMEOUT", "10"))
    places_autocomplete_components: str = os.getenv("PLACES_AUTOCOMPLETE_COMPONENTS", "country:in")

    # Cache
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "200"))
    cache_ttl: int = int(os.getenv("CACHE_TTL", "300"))  # 5 minutes default
    cache_ttl_nearby: int = int(os.getenv("CACHE_TTL_NEARBY", "300"))
    cache_ttl_autocomplete: int = int(os.getenv("CACHE_TTL_AUTOCOMPLETE", "120"))
    cache_ttl_geocode: int = int(os.getenv("CACHE_TTL_GEOCODE", "1800"))
    cache_ttl_details: int = int(os.getenv("CACHE_TTL_DETAILS", "3600"))

    # Rate limiting (per client IP)
    rate_limit: str = os.getenv("RATE_LIMIT", "100/minute")
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def has_places_api_key(self) -> bool:
        """Check whether a usable Google Places API key is configured.

        Returns:
            True if a key is set and is not the template placeholder
        """
        key = self.google_places_api_key
        return bool(key) and key != "your_google_places_api_key_here"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_max_entries < 1:
            raise ValueError("CACHE_MAX_ENTRIES must be at least 1")

        ttls = (
            self.cache_ttl,
            self.cache_ttl_nearby,
            self.cache_ttl_autocomplete,
            self.cache_ttl_geocode,
            self.cache_ttl_details,
        )
        if any(ttl <= 0 for ttl in ttls):
            raise ValueError("Cache TTLs must be positive numbers of seconds")

        if self.places_timeout <= 0:
            raise ValueError("PLACES_TIMEOUT must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
