from functools import lru_cache
from typing import List, Optional
import logging
import os

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Storefront Service"
    DEBUG: bool = False

    # CORS settings, comma separated
    CORS_ORIGINS: str = "*"

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    # Upstream timeouts in seconds
    HTTP_TIMEOUT: float = 8.0
    SOURCE_DEADLINE: float = 15.0

    # Cache settings
    CACHE_TTL: int = 3600  # Matches the storefront's hourly revalidation

    # Fourthwall (merchandise)
    FOURTHWALL_API_URL: Optional[str] = None
    FOURTHWALL_STOREFRONT_TOKEN: Optional[str] = None
    FOURTHWALL_COLLECTION_SLUG: Optional[str] = None
    FOURTHWALL_MAX_PAGES: int = 10

    # Gumroad (digital products)
    GUMROAD_API_URL: str = "https://api.gumroad.com/v2"
    GUMROAD_ACCESS_TOKEN: Optional[str] = None

    # Lemon Squeezy (digital products)
    LEMONSQUEEZY_API_URL: str = "https://api.lemonsqueezy.com/v1"
    LEMONSQUEEZY_API_KEY: Optional[str] = None
    LEMONSQUEEZY_STORE_ID: Optional[str] = None

    # Patreon (membership tiers)
    PATREON_API_URL: str = "https://www.patreon.com/api/oauth2/v2"
    PATREON_CAMPAIGN_ID: Optional[str] = None
    PATREON_CREATOR_ACCESS_TOKEN: Optional[str] = None
    PATREON_CREATOR_URL: str = "https://www.patreon.com"
    PATREON_CURRENCY: str = "USD"

    # Brand assets
    BRAND_DEV_API_URL: str = "https://api.brand.dev/v1"
    BRAND_DEV_API_KEY: Optional[str] = None
    BRAND_DATA_FILE: str = "public/brand-data/brands.json"

    # Tour dates
    BANDSINTOWN_API_URL: str = "https://rest.bandsintown.com"
    BANDSINTOWN_ARTIST_NAME: Optional[str] = None
    BANDSINTOWN_APP_ID: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator(
        "FOURTHWALL_API_URL",
        "FOURTHWALL_STOREFRONT_TOKEN",
        "FOURTHWALL_COLLECTION_SLUG",
        "GUMROAD_ACCESS_TOKEN",
        "LEMONSQUEEZY_API_KEY",
        "LEMONSQUEEZY_STORE_ID",
        "PATREON_CAMPAIGN_ID",
        "PATREON_CREATOR_ACCESS_TOKEN",
        "BRAND_DEV_API_KEY",
        "BANDSINTOWN_ARTIST_NAME",
        "BANDSINTOWN_APP_ID",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty or whitespace-only values as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from the comma separated setting."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)
    else:
        logging.getLogger(__name__).debug(f"Environment file {env_path} not found")


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
